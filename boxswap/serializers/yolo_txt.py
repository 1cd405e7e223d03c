"""
YOLO format annotation writer.

This module handles:
- YOLO TXT label files (one ``.txt`` per image)
- The Darknet variant, which also writes ``darknet.labels``

YOLO bbox format: ``class_id x_center y_center width height`` (normalized 0-1)
"""

from ..core.constants import DARKNET_LABELS_FILE, NORMALIZED_PRECISION
from ..core.errors import SerializerIOError, WrongClassRepresentationError
from ..models import Annotation
from .base import GroupedTextSerializer
from .obb_text import require_class_index


def to_yolo_line(class_id: int, annotation: Annotation) -> str:
    """
    Render an annotation as a YOLO bbox line.

    The enclosing axis-aligned box of the four corners is written, so
    oriented boxes lose their rotation.
    """
    x_center, y_center, width, height = annotation.to_centers()
    return (
        f"{class_id} {x_center:.{NORMALIZED_PRECISION}f} {y_center:.{NORMALIZED_PRECISION}f} "
        f"{width:.{NORMALIZED_PRECISION}f} {height:.{NORMALIZED_PRECISION}f}"
    )


class Yolo5TxtSerializer(GroupedTextSerializer):
    """Requires a numeric class id."""

    def format_line(self, annotation: Annotation) -> str:
        return to_yolo_line(require_class_index(annotation), annotation)


class YoloDarknetSerializer(Yolo5TxtSerializer):
    """
    YOLO TXT plus the ``darknet.labels`` class table.

    Requires both class name and id; line ``i`` of the labels file is the
    name of class ``i``. Ids never seen in the data are written as
    ``class_<i>`` to keep the numbering intact.
    """

    def __init__(self):
        super().__init__()
        self.class_names: dict[int, str] = {}

    def format_line(self, annotation: Annotation) -> str:
        if not annotation.label.has_name:
            raise WrongClassRepresentationError(
                expected="both class name and id", found=annotation.label.kind.value
            )
        class_id = require_class_index(annotation)

        known = self.class_names.setdefault(class_id, annotation.label.name)
        if known != annotation.label.name:
            raise WrongClassRepresentationError(
                expected=f"class {class_id} to be named '{known}'",
                found=f"'{annotation.label.name}'",
            )
        return to_yolo_line(class_id, annotation)

    def finish(self) -> None:
        destination = self.destination
        super().finish()
        self.write_labels(destination)

    def write_labels(self, destination) -> None:
        labels_path = destination / DARKNET_LABELS_FILE
        size = max(self.class_names) + 1 if self.class_names else 0
        missing = [index for index in range(size) if index not in self.class_names]
        if missing:
            self.logger.warning(
                f"No annotation names class id(s) {missing}; writing placeholders "
                f"to {DARKNET_LABELS_FILE}"
            )

        try:
            with open(labels_path, 'w', encoding='utf-8') as f:
                for index in range(size):
                    f.write(f"{self.class_names.get(index, f'class_{index}')}\n")
        except OSError as e:
            raise SerializerIOError(f"Could not write {labels_path}: {e}") from e

        self.logger.info(f"Created darknet labels file: {labels_path} ({size} classes)")
