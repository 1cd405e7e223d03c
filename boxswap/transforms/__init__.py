"""
Annotation transforms.

Each transform mutates one annotation in place to bridge a structural
difference between the source and target formats:
- normalize: Normalize / Denormalize coordinate scaling
- lookup_image: LookupImage image resolution
- class_mapping: ClassMapping name <-> id promotion
"""

from .base import Transform
from .normalize import Normalize, Denormalize
from .lookup_image import LookupImage
from .class_mapping import ClassMapping

__all__ = [
    'Transform',
    'Normalize',
    'Denormalize',
    'LookupImage',
    'ClassMapping',
]
