"""
Data models for the annotation converter.

This package contains dataclasses and type definitions for annotations,
image metadata, format descriptors, and class tables.
"""

from .annotations import Annotation, ClassKind, ClassRepresentation
from .class_map import ClassMap
from .format import Format, compatibility
from .image_info import Image

__all__ = [
    "Annotation",
    "ClassKind",
    "ClassRepresentation",
    "ClassMap",
    "Format",
    "compatibility",
    "Image",
]
