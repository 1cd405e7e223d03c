"""
Class name <-> id promotion through a caller-supplied table.
"""

from typing import Optional

from ..core.constants import TransformKind
from ..core.errors import TransformError
from ..models import Annotation, ClassKind, ClassMap, ClassRepresentation, Format
from .base import Transform


class ClassMapping(Transform):
    """
    Promote a name-only or id-only class to one carrying both.

    ``kind`` records which direction the pipeline asked for, but the lookup
    always follows what the annotation actually holds. A ``Both`` class is
    left untouched. Without a placeholder, a class missing from the table
    fails; with one, the missing slot is filled with the placeholder.

    Args:
        class_map: Name <-> id table
        kind: MAP_TO_ID or MAP_TO_NAME
        placeholder: Value for classes the table doesn't know
    """

    def __init__(self, class_map: ClassMap, kind: TransformKind = TransformKind.MAP_TO_ID,
                 placeholder: Optional[str] = None):
        if kind not in (TransformKind.MAP_TO_ID, TransformKind.MAP_TO_NAME):
            raise ValueError(f"ClassMapping can't act as {kind.value}")
        self.class_map = class_map
        self.kind = kind
        self.placeholder = placeholder
        self._unmapped: set[str] = set()

    def apply(self, annotation: Annotation, source_format: Format, target_format: Format) -> None:
        label = annotation.label
        label_kind = label.kind

        if label_kind == ClassKind.BOTH:
            return
        if label_kind == ClassKind.NONE:
            raise TransformError(
                "Annotation has no class to map", source_file=annotation.source_file
            )

        if label_kind == ClassKind.NAME:
            class_id = self.class_map.id_for(label.name)
            if class_id is not None:
                annotation.label = ClassRepresentation.both(label.name, class_id)
                return
            missing = f"name '{label.name}'"
        else:
            name = self.class_map.name_for(label.id)
            if name is not None:
                annotation.label = ClassRepresentation.both(name, label.id)
                return
            missing = f"id {label.id}"

        if self.placeholder is None:
            raise TransformError(
                f"Class {missing} is not in the class mapping", source_file=annotation.source_file
            )

        if missing not in self._unmapped:
            self._unmapped.add(missing)
            self.logger.warning(f"Class {missing} is not in the class mapping, using '{self.placeholder}'")
        annotation.label = label.to_both(self.placeholder)

    def __repr__(self) -> str:
        return f"ClassMapping({self.kind.value}, {len(self.class_map)} classes)"
