"""
Format descriptors and the compatibility matrix.

A :class:`Format` describes the structural properties of an encoding, not
how to read it. Comparing two descriptors yields the set of transforms a
conversion between them needs.
"""

from dataclasses import dataclass
from typing import Optional

from ..core.constants import (
    ClassFormat,
    ClassMappingSupport,
    ImagePathSupport,
    SourceType,
    TransformKind,
)


# (source class format, target class format) -> transform. Pairs not listed
# (same format, or a BOTH source) need no class transform.
_CLASS_TRANSFORMS: dict[tuple[ClassFormat, ClassFormat], TransformKind] = {
    (ClassFormat.NAME, ClassFormat.ID): TransformKind.MAP_TO_ID,
    (ClassFormat.NAME, ClassFormat.BOTH): TransformKind.MAP_TO_ID,
    (ClassFormat.ID, ClassFormat.NAME): TransformKind.MAP_TO_NAME,
    (ClassFormat.ID, ClassFormat.BOTH): TransformKind.MAP_TO_NAME,
}


@dataclass(frozen=True)
class Format:
    """Immutable description of an annotation encoding."""
    id: str
    name: str
    is_normalized: bool
    image_path: ImagePathSupport
    class_mapping: ClassMappingSupport
    class_format: ClassFormat
    source_type: SourceType
    file_extension: Optional[str] = None

    def check_compatibility(self, target: 'Format') -> set[TransformKind]:
        """Transforms needed to convert from this format into ``target``."""
        return compatibility(self, target)

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


def compatibility(source: Format, target: Format) -> set[TransformKind]:
    """
    Compute the transforms required to bridge two formats.

    The three rules are independent:

    1. Coordinates: normalized -> pixel needs DENORMALIZE, pixel ->
       normalized needs NORMALIZE.
    2. Classes: only when the source carries no name <-> id table of its own,
       a name source needs MAP_TO_ID for id/both targets and an id source
       needs MAP_TO_NAME for name/both targets.
    3. Images: a source without image references feeding a target that
       stores them needs LOOKUP_IMAGE.

    Args:
        source: Format the annotations are read from
        target: Format the annotations are written to

    Returns:
        Set of required transform kinds (empty when the formats agree)
    """
    required: set[TransformKind] = set()

    if source.is_normalized and not target.is_normalized:
        required.add(TransformKind.DENORMALIZE)
    elif not source.is_normalized and target.is_normalized:
        required.add(TransformKind.NORMALIZE)

    if source.class_mapping == ClassMappingSupport.NO_MAPPING:
        class_transform = _CLASS_TRANSFORMS.get((source.class_format, target.class_format))
        if class_transform is not None:
            required.add(class_transform)

    if (source.image_path == ImagePathSupport.NO_PATH
            and target.image_path == ImagePathSupport.CONTAINS_PATH):
        required.add(TransformKind.LOOKUP_IMAGE)

    return required
