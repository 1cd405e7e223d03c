"""
Format registry.

The closed table of supported encodings: their descriptors and the parser
and serializer classes that read and write them.
"""

from typing import Optional

from .core.constants import (
    ClassFormat,
    ClassMappingSupport,
    ImagePathSupport,
    SourceType,
    CSV_EXTENSION,
    JSON_EXTENSION,
)
from .core.errors import UnknownFormatError, UnsupportedFormatError
from .models import Format
from .parsers import (
    CocoJsonParser,
    FormatParser,
    TfObjectDetectionParser,
    Yolo5ObbParser,
    Yolo5TxtParser,
    Yolo8ObbParser,
    YoloDarknetParser,
)
from .serializers import (
    CocoJsonSerializer,
    FormatSerializer,
    TfObjectDetectionSerializer,
    Yolo5ObbSerializer,
    Yolo5TxtSerializer,
    Yolo8ObbSerializer,
    YoloDarknetSerializer,
)


FORMATS: dict[str, Format] = {
    fmt.id: fmt for fmt in (
        Format(
            id="yolo5obb",
            name="YOLO v5 Oriented Bounding Boxes",
            is_normalized=False,
            image_path=ImagePathSupport.NO_PATH,
            class_mapping=ClassMappingSupport.NO_MAPPING,
            class_format=ClassFormat.NAME,
            source_type=SourceType.MULTIPLE_FILES,
        ),
        Format(
            id="yolo8obb",
            name="YOLO v8 Oriented Bounding Boxes",
            is_normalized=True,
            image_path=ImagePathSupport.NO_PATH,
            class_mapping=ClassMappingSupport.NO_MAPPING,
            class_format=ClassFormat.ID,
            source_type=SourceType.MULTIPLE_FILES,
        ),
        Format(
            id="yolo5txt",
            name="YOLO v5 TXT",
            is_normalized=True,
            image_path=ImagePathSupport.NO_PATH,
            class_mapping=ClassMappingSupport.NO_MAPPING,
            class_format=ClassFormat.ID,
            source_type=SourceType.MULTIPLE_FILES,
        ),
        Format(
            id="yolodarknet",
            name="YOLO Darknet TXT",
            is_normalized=True,
            image_path=ImagePathSupport.NO_PATH,
            class_mapping=ClassMappingSupport.CONTAINS_MAPPING,
            class_format=ClassFormat.BOTH,
            source_type=SourceType.MULTIPLE_FILES,
        ),
        Format(
            id="cocojson",
            name="COCO JSON",
            is_normalized=False,
            image_path=ImagePathSupport.CONTAINS_PATH,
            class_mapping=ClassMappingSupport.CONTAINS_MAPPING,
            class_format=ClassFormat.BOTH,
            source_type=SourceType.SINGLE_FILE,
            file_extension=JSON_EXTENSION,
        ),
        Format(
            id="tfcsv",
            name="Tensorflow Object Detection CSV",
            is_normalized=False,
            image_path=ImagePathSupport.CONTAINS_PATH,
            class_mapping=ClassMappingSupport.NO_MAPPING,
            class_format=ClassFormat.NAME,
            source_type=SourceType.SINGLE_FILE,
            file_extension=CSV_EXTENSION,
        ),
    )
}

PARSERS: dict[str, type] = {
    "yolo5obb": Yolo5ObbParser,
    "yolo8obb": Yolo8ObbParser,
    "yolo5txt": Yolo5TxtParser,
    "yolodarknet": YoloDarknetParser,
    "cocojson": CocoJsonParser,
    "tfcsv": TfObjectDetectionParser,
}

SERIALIZERS: dict[str, type] = {
    "yolo5obb": Yolo5ObbSerializer,
    "yolo8obb": Yolo8ObbSerializer,
    "yolo5txt": Yolo5TxtSerializer,
    "yolodarknet": YoloDarknetSerializer,
    "cocojson": CocoJsonSerializer,
    "tfcsv": TfObjectDetectionSerializer,
}


def lookup_format(format_id: str) -> Optional[Format]:
    """Descriptor for ``format_id``, or None when it isn't registered."""
    return FORMATS.get(format_id)


def get_format(format_id: str) -> Format:
    """
    Descriptor for ``format_id``.

    Raises:
        UnknownFormatError: If the id isn't registered
    """
    fmt = lookup_format(format_id)
    if fmt is None:
        raise UnknownFormatError(format_id, known=sorted(FORMATS))
    return fmt


def list_formats() -> list[Format]:
    """All descriptors, ordered by id."""
    return [FORMATS[key] for key in sorted(FORMATS)]


def create_parser(format_id: str) -> FormatParser:
    """
    Fresh parser for ``format_id``.

    Raises:
        UnknownFormatError: If the id isn't registered
        UnsupportedFormatError: If the format can't be read
    """
    get_format(format_id)
    parser_class = PARSERS.get(format_id)
    if parser_class is None:
        raise UnsupportedFormatError(f"Reading {format_id} is not supported")
    return parser_class()


def create_serializer(format_id: str) -> FormatSerializer:
    """
    Fresh serializer for ``format_id``.

    Raises:
        UnknownFormatError: If the id isn't registered
        UnsupportedFormatError: If the format can't be written
    """
    get_format(format_id)
    serializer_class = SERIALIZERS.get(format_id)
    if serializer_class is None:
        raise UnsupportedFormatError(f"Writing {format_id} is not supported")
    return serializer_class()
