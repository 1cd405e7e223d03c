"""
COCO JSON parser.

COCO keeps a whole dataset in one document:

    {
        "categories": [{"id": 2, "name": "helmet"}, ...],
        "images": [{"id": 1, "file_name": "0001.jpg", "width": 640, ...}, ...],
        "annotations": [{"category_id": 2, "image_id": 1, "bbox": [x, y, w, h]}, ...]
    }

The document is loaded once in ``init``; annotations are then handed out in
file order from a queue, resolving category and image ids on the way.
"""

import json
from collections import deque
from pathlib import Path
from typing import Any, Optional

from ..core.constants import COCO_BBOX_LENGTH, JSON_EXTENSION
from ..core.errors import OutOfElementsError, ParserIOError, WrongFormatError
from ..models import Annotation, ClassRepresentation, Image
from .base import FormatParser, require_file


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _required_array(document: dict, key: str) -> list:
    if key not in document:
        raise WrongFormatError(f"Expected a top-level '{key}' array")
    value = document[key]
    if not isinstance(value, list):
        raise WrongFormatError(f"Expected '{key}' to be an array")
    return value


def parse_category_table(categories: list) -> dict[int, str]:
    """Map category id -> name."""
    table = {}
    for category in categories:
        if not isinstance(category, dict):
            raise WrongFormatError("Expected every category to be an object")
        if not _is_integer(category.get('id')):
            raise WrongFormatError(f"Expected category id to be an integer in {category}")
        if not isinstance(category.get('name'), str):
            raise WrongFormatError(f"Expected category name to be a string in {category}")
        table[category['id']] = category['name']
    return table


def parse_image_table(images: list) -> dict[int, Image]:
    """Map image id -> Image with file name and, when present, dimensions."""
    table = {}
    for image in images:
        if not isinstance(image, dict):
            raise WrongFormatError("Expected every image to be an object")
        if not _is_integer(image.get('id')):
            raise WrongFormatError(f"Expected image id to be an integer in {image}")
        if not isinstance(image.get('file_name'), str):
            raise WrongFormatError(f"Expected image file_name to be a string in {image}")

        width = image.get('width')
        height = image.get('height')
        table[image['id']] = Image(
            width=width if _is_integer(width) else None,
            height=height if _is_integer(height) else None,
            path=Path(image['file_name']),
            id=image['id'],
        )
    return table


def parse_bbox(bbox: Any) -> tuple[float, float, float, float]:
    if not isinstance(bbox, list):
        raise WrongFormatError("Expected bbox to be an array")
    values = [float(value) for value in bbox if _is_number(value)]
    if len(bbox) != COCO_BBOX_LENGTH or len(values) != COCO_BBOX_LENGTH:
        raise WrongFormatError(
            f"Expected {COCO_BBOX_LENGTH} numbers in bbox array, got {bbox}"
        )
    x, y, width, height = values
    return x, y, width, height


class CocoJsonParser(FormatParser):
    """Reads a COCO JSON file; every annotation carries both class name and id."""

    def __init__(self):
        self.source_file: Optional[Path] = None
        self.category_table: dict[int, str] = {}
        self.image_table: dict[int, Image] = {}
        self._queue: deque = deque()

    def init(self, path) -> None:
        self.source_file = require_file(path, JSON_EXTENSION)

        try:
            with open(self.source_file, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise WrongFormatError(f"{self.source_file} is not valid JSON: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ParserIOError(f"Could not read {self.source_file}: {e}") from e

        if not isinstance(document, dict):
            raise WrongFormatError("Expected the COCO document to be an object")

        annotations = _required_array(document, 'annotations')
        self.category_table = parse_category_table(_required_array(document, 'categories'))
        self.image_table = parse_image_table(_required_array(document, 'images'))
        self._queue = deque(annotations)

        self.logger.debug(
            f"Loaded {len(annotations)} annotations, {len(self.category_table)} categories, "
            f"{len(self.image_table)} images from {self.source_file}"
        )

    def has_next(self) -> bool:
        return bool(self._queue)

    def get_next(self) -> Annotation:
        if not self._queue:
            raise OutOfElementsError()
        record = self._queue.popleft()

        if not isinstance(record, dict):
            raise WrongFormatError("Expected every annotation to be an object")

        category_id = record.get('category_id')
        if not _is_integer(category_id):
            raise WrongFormatError(f"Expected an integer category_id in annotation {record}")
        if category_id not in self.category_table:
            raise WrongFormatError(f"Category id {category_id} not found in categories")

        image_id = record.get('image_id')
        if not _is_integer(image_id):
            raise WrongFormatError(f"Expected an integer image_id in annotation {record}")
        if image_id not in self.image_table:
            raise WrongFormatError(f"Image id {image_id} not found in images")

        if 'bbox' not in record:
            raise WrongFormatError(f"Expected a bbox in annotation {record}")
        x, y, width, height = parse_bbox(record['bbox'])

        image = self.image_table[image_id]
        return Annotation.from_top_left_corner(
            x, y, width, height,
            label=ClassRepresentation.both(self.category_table[category_id], category_id),
            source_file=self.source_file,
            image=Image(width=image.width, height=image.height, path=image.path, id=image.id),
        )

    def close(self) -> None:
        self._queue.clear()
