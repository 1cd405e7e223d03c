"""
COCO JSON writer.

Categories, images, and annotations are collected in memory and written as
one pretty-printed document in ``finish``.
"""

import json
from datetime import datetime
from typing import Any

from ..core.constants import (
    COCO_INFO_CONTRIBUTOR,
    COCO_INFO_DESCRIPTION,
    COCO_INFO_VERSION,
    JSON_EXTENSION,
)
from ..core.errors import (
    MissingClassIdError,
    MissingImagePathError,
    SerializerIOError,
    WrongClassRepresentationError,
)
from ..models import Annotation
from .base import FormatSerializer, prepare_destination_file


def create_coco_root(now: datetime) -> dict[str, Any]:
    """Document skeleton with the info block."""
    return {
        "info": {
            "description": COCO_INFO_DESCRIPTION,
            "url": "",
            "version": COCO_INFO_VERSION,
            "year": now.year,
            "contributor": COCO_INFO_CONTRIBUTOR,
            "date_created": now.strftime("%Y-%m-%d %H:%M:%S")
        },
        "licenses": [{"url": "", "id": 1, "name": "Unknown"}],
    }


class CocoJsonSerializer(FormatSerializer):
    """
    Requires both class name and numeric id, and an image path.

    Categories and images are de-duplicated by id and the first occurrence
    wins. Images without an id get one per distinct file name, numbered after
    the largest id seen so far. Width and height are written when known.
    """

    def __init__(self):
        super().__init__()
        self.root: dict[str, Any] = {}
        self.categories: dict[int, dict[str, Any]] = {}
        self.images: dict[int, dict[str, Any]] = {}
        self.annotations: list[dict[str, Any]] = []
        self._image_ids_by_name: dict[str, int] = {}

    def init(self, destination) -> None:
        self.destination = prepare_destination_file(destination, JSON_EXTENSION)
        self.root = create_coco_root(datetime.now())

    def _category_id(self, annotation: Annotation) -> int:
        label = annotation.label
        if not (label.has_name and label.has_id):
            raise WrongClassRepresentationError(
                expected="both class name and id", found=label.kind.value
            )
        try:
            return int(label.id)
        except ValueError:
            raise MissingClassIdError(f"Class id '{label.id}' is not an integer") from None

    def _image_id(self, annotation: Annotation) -> int:
        image = annotation.image
        file_name = image.path.name

        if image.id is not None:
            image_id = int(image.id)
        elif file_name in self._image_ids_by_name:
            image_id = self._image_ids_by_name[file_name]
        else:
            image_id = max(self.images, default=-1) + 1

        self._image_ids_by_name.setdefault(file_name, image_id)
        if image_id not in self.images:
            entry = {"id": image_id, "file_name": file_name}
            if image.width is not None:
                entry["width"] = image.width
            if image.height is not None:
                entry["height"] = image.height
            self.images[image_id] = entry
        return image_id

    def push(self, annotation: Annotation) -> None:
        self._check_open()

        category_id = self._category_id(annotation)
        if annotation.image.path is None:
            raise MissingImagePathError()

        if category_id not in self.categories:
            self.categories[category_id] = {
                "id": category_id,
                "name": annotation.label.name,
                "supercategory": "none",
            }
        image_id = self._image_id(annotation)

        x, y, width, height = annotation.to_top_left()
        self.annotations.append({
            "id": len(self.annotations),
            "image_id": image_id,
            "category_id": category_id,
            "bbox": [x, y, width, height],
            "area": width * height,
            "iscrowd": 0,
            "segmentation": [],
        })

    def finish(self) -> None:
        self._check_open()
        self._closed = True

        self.root["categories"] = [self.categories[key] for key in sorted(self.categories)]
        self.root["images"] = [self.images[key] for key in sorted(self.images)]
        self.root["annotations"] = self.annotations

        try:
            with open(self.destination, 'w', encoding='utf-8') as f:
                json.dump(self.root, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise SerializerIOError(f"Could not write {self.destination}: {e}") from e

        self.logger.info(
            f"Wrote {self.destination}: {len(self.images)} images, "
            f"{len(self.annotations)} annotations, {len(self.categories)} categories"
        )
