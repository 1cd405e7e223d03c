"""
Oriented-bounding-box text parsers.

Two line layouts are supported, both one file per image:

- YOLOv5 OBB / DOTA: ``x1 y1 x2 y2 x3 y3 x4 y4 class [difficulty]``
  in pixels, class by name, difficulty 0 or 1.
- YOLOv8 OBB: ``class_id x1 y1 x2 y2 x3 y3 x4 y4`` normalized to 0-1,
  class by index.
"""

from ..core.constants import CLASS_FIRST_OBB_TOKENS, OBB_MAX_TOKENS, OBB_MIN_TOKENS
from ..core.errors import WrongFormatError
from ..models import Annotation, ClassRepresentation
from .base import TextDirectoryParser, parse_class_index, parse_float


class Yolo5ObbParser(TextDirectoryParser):
    """Reads ``x1 y1 x2 y2 x3 y3 x4 y4 class [difficulty]`` lines."""

    def parse_tokens(self, tokens: list[str], line: str) -> Annotation:
        if len(tokens) < OBB_MIN_TOKENS:
            raise WrongFormatError(
                f"Expected at least {OBB_MIN_TOKENS} elements in line '{line}', got {len(tokens)}"
            )
        if len(tokens) > OBB_MAX_TOKENS:
            raise WrongFormatError(
                f"Expected at most {OBB_MAX_TOKENS} elements in line '{line}', got {len(tokens)}"
            )

        coordinates = [parse_float(token, line) for token in tokens[:8]]

        difficulty = False
        if len(tokens) == OBB_MAX_TOKENS:
            if tokens[9] not in ('0', '1'):
                raise WrongFormatError(
                    f"Difficulty must be 0 or 1, got '{tokens[9]}' in line '{line}'"
                )
            difficulty = tokens[9] == '1'

        return Annotation.from_corners(
            coordinates,
            label=ClassRepresentation.from_name(tokens[8]),
            difficulty=difficulty,
        )


class Yolo8ObbParser(TextDirectoryParser):
    """Reads ``class_id x1 y1 x2 y2 x3 y3 x4 y4`` lines."""

    def parse_tokens(self, tokens: list[str], line: str) -> Annotation:
        if len(tokens) != CLASS_FIRST_OBB_TOKENS:
            raise WrongFormatError(
                f"Expected {CLASS_FIRST_OBB_TOKENS} elements in line '{line}', got {len(tokens)}"
            )

        class_index = parse_class_index(tokens[0], line)
        coordinates = [parse_float(token, line) for token in tokens[1:]]

        return Annotation.from_corners(
            coordinates,
            label=ClassRepresentation.from_id(class_index),
        )
