"""
Center-format text parsers.

YOLO TXT: one file per image, each line ``class_id x_center y_center width
height`` normalized to 0-1. The Darknet variant adds a ``darknet.labels``
sidecar whose line ``i`` is the name of class ``i``.
"""

from pathlib import Path

from ..core.constants import CENTER_FORMAT_TOKENS, DARKNET_LABELS_FILE
from ..core.errors import ParserIOError, WrongFormatError
from ..models import Annotation, ClassRepresentation
from .base import TextDirectoryParser, parse_class_index, parse_float, require_directory


class Yolo5TxtParser(TextDirectoryParser):
    """Reads ``class_id cx cy w h`` lines; classes come out as ids."""

    def parse_tokens(self, tokens: list[str], line: str) -> Annotation:
        if len(tokens) != CENTER_FORMAT_TOKENS:
            raise WrongFormatError(
                f"Expected {CENTER_FORMAT_TOKENS} elements in line '{line}', got {len(tokens)}"
            )

        class_index = parse_class_index(tokens[0], line)
        center_x, center_y, width, height = (parse_float(token, line) for token in tokens[1:])

        return Annotation.from_centers(
            center_x, center_y, width, height,
            label=self.class_for(class_index, line),
        )

    def class_for(self, class_index: int, line: str) -> ClassRepresentation:
        return ClassRepresentation.from_id(class_index)


def load_darknet_labels(directory: Path) -> list[str]:
    """
    Read ``darknet.labels`` from a dataset directory.

    Trailing blank lines are dropped; blank lines in between keep their
    index so the numbering of later classes is preserved, and referencing
    one is an error when the label is read.

    Raises:
        WrongFormatError: If the labels file is missing or empty
        ParserIOError: If it cannot be read
    """
    labels_path = directory / DARKNET_LABELS_FILE
    if not labels_path.is_file():
        raise WrongFormatError(f"{DARKNET_LABELS_FILE} was not found in {directory}")

    try:
        with open(labels_path, 'r', encoding='utf-8') as f:
            names = [line.strip() for line in f]
    except (OSError, UnicodeDecodeError) as e:
        raise ParserIOError(f"Could not read {labels_path}: {e}") from e

    while names and not names[-1]:
        names.pop()
    if not names:
        raise WrongFormatError(f"{labels_path} does not list any class")
    return names


class YoloDarknetParser(Yolo5TxtParser):
    """Reads ``class_id cx cy w h`` lines and names them from ``darknet.labels``."""

    def __init__(self):
        super().__init__()
        self.class_names: list[str] = []

    def init(self, path) -> None:
        directory = require_directory(path)
        self.class_names = load_darknet_labels(directory)
        super().init(directory)
        self.logger.debug(f"Loaded {len(self.class_names)} darknet classes")

    def class_for(self, class_index: int, line: str) -> ClassRepresentation:
        if class_index >= len(self.class_names):
            raise WrongFormatError(
                f"Class id {class_index} does not have a corresponding class name "
                f"in {DARKNET_LABELS_FILE}"
            )
        name = self.class_names[class_index]
        if not name:
            raise WrongFormatError(
                f"Class id {class_index} has no name in {DARKNET_LABELS_FILE}"
            )
        return ClassRepresentation.both(name, class_index)
