"""
boxswap - annotation dataset format converter.

Converts object-detection annotations between oriented-box text, YOLO,
COCO JSON, and TensorFlow CSV encodings, bridging pixel/normalized
coordinates, class names/ids, and image references along the way.

Module Structure:
    core/          - Constants, errors, configuration, logging
    models/        - Annotation, Image, Format and ClassMap data models
    parsers/       - Streaming readers, one per format
    serializers/   - Writers, one per format
    transforms/    - Normalize, Denormalize, LookupImage, ClassMapping
    registry.py    - Format descriptors and parser/serializer lookup
    pipeline.py    - Conversion orchestration
"""

__version__ = "1.0.0"

from .models import Annotation, ClassMap, ClassRepresentation, Format, Image, compatibility
from .registry import (
    FORMATS,
    create_parser,
    create_serializer,
    get_format,
    list_formats,
    lookup_format,
)
from .pipeline import ConversionPipeline, ConversionSummary

__all__ = [
    "__version__",
    "Annotation",
    "ClassMap",
    "ClassRepresentation",
    "Format",
    "Image",
    "compatibility",
    "FORMATS",
    "create_parser",
    "create_serializer",
    "get_format",
    "list_formats",
    "lookup_format",
    "ConversionPipeline",
    "ConversionSummary",
]
