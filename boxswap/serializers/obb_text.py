"""
Oriented-bounding-box text writers.

- YOLOv5 OBB / DOTA: ``x1 y1 x2 y2 x3 y3 x4 y4 class difficulty``
  (pixels, class by name)
- YOLOv8 OBB: ``class_id x1 y1 x2 y2 x3 y3 x4 y4`` (normalized, class by index)
"""

from ..core.constants import NORMALIZED_PRECISION
from ..core.errors import WrongClassRepresentationError
from ..models import Annotation
from .base import GroupedTextSerializer, format_number


class Yolo5ObbSerializer(GroupedTextSerializer):
    """
    Requires a class name; an id-only class can't be written.

    Whitespace inside a name is written as ``-`` (``traffic light`` becomes
    ``traffic-light``, the DOTA spelling) so every line keeps ten fields.
    """

    def format_line(self, annotation: Annotation) -> str:
        if not annotation.label.has_name:
            raise WrongClassRepresentationError(
                expected="a class name", found=annotation.label.kind.value
            )

        coordinates = ' '.join(format_number(value) for value in annotation.coordinates())
        difficulty = 1 if annotation.difficulty else 0
        name = '-'.join(annotation.label.name.split())
        return f"{coordinates} {name} {difficulty}"


class Yolo8ObbSerializer(GroupedTextSerializer):
    """Requires a numeric class id."""

    def format_line(self, annotation: Annotation) -> str:
        class_id = require_class_index(annotation)
        coordinates = ' '.join(
            f"{value:.{NORMALIZED_PRECISION}f}" for value in annotation.coordinates()
        )
        return f"{class_id} {coordinates}"


def require_class_index(annotation: Annotation) -> int:
    """
    Class id of an annotation as a non-negative integer.

    Raises:
        WrongClassRepresentationError: If there is no id or it isn't an index
    """
    label = annotation.label
    if not label.has_id:
        raise WrongClassRepresentationError(expected="a class id", found=label.kind.value)
    try:
        class_id = int(label.id)
    except ValueError:
        raise WrongClassRepresentationError(
            expected="a numeric class id", found=f"'{label.id}'"
        ) from None
    if class_id < 0:
        raise WrongClassRepresentationError(
            expected="a non-negative class id", found=str(class_id)
        )
    return class_id
