"""
Constants and enumerations for the annotation converter.

This module contains the magic strings, numbers, and enums used throughout
the application to ensure consistency across parsers and serializers.
"""

from enum import Enum
from typing import Final


# ============================================================================
# Enumerations
# ============================================================================

class ClassFormat(str, Enum):
    """How an encoding refers to the class of an annotation."""
    NAME = "name"
    ID = "id"
    BOTH = "both"


class SourceType(str, Enum):
    """Whether an encoding lives in one file or in a directory of files."""
    SINGLE_FILE = "single_file"
    MULTIPLE_FILES = "multiple_files"


class ClassMappingSupport(str, Enum):
    """Whether an encoding carries its own name <-> id table."""
    CONTAINS_MAPPING = "contains_mapping"
    NO_MAPPING = "no_mapping"


class ImagePathSupport(str, Enum):
    """Whether an encoding stores a reference to the annotated image."""
    CONTAINS_PATH = "contains_path"
    NO_PATH = "no_path"


class TransformKind(str, Enum):
    """Transforms that bridge structural differences between two formats."""
    NORMALIZE = "normalize"
    DENORMALIZE = "denormalize"
    LOOKUP_IMAGE = "lookup_image"
    MAP_TO_ID = "map_to_id"
    MAP_TO_NAME = "map_to_name"


# ============================================================================
# File and Path Constants
# ============================================================================

DEFAULT_CONFIG_PATH: Final[str] = "configs/convert.yaml"

TEXT_EXTENSION: Final[str] = ".txt"
JSON_EXTENSION: Final[str] = ".json"
CSV_EXTENSION: Final[str] = ".csv"

# Darknet sidecar: one class name per line, index = line number
DARKNET_LABELS_FILE: Final[str] = "darknet.labels"

SUPPORTED_IMAGE_FORMATS: Final[tuple] = (
    '.png', '.jpg', '.jpeg', '.bmp', '.tif', '.tiff', '.gif', '.webp'
)


# ============================================================================
# Encoding Constants
# ============================================================================

TF_CSV_HEADER: Final[tuple] = (
    'filename', 'width', 'height', 'class', 'xmin', 'ymin', 'xmax', 'ymax'
)

OBB_MIN_TOKENS: Final[int] = 9
OBB_MAX_TOKENS: Final[int] = 10
CLASS_FIRST_OBB_TOKENS: Final[int] = 9
CENTER_FORMAT_TOKENS: Final[int] = 5
COCO_BBOX_LENGTH: Final[int] = 4

# Decimal places for normalized (0-1) coordinates
NORMALIZED_PRECISION: Final[int] = 6

COCO_INFO_DESCRIPTION: Final[str] = "Dataset converted with boxswap"
COCO_INFO_CONTRIBUTOR: Final[str] = "boxswap"
COCO_INFO_VERSION: Final[str] = "1.0"


# ============================================================================
# Error Messages
# ============================================================================

class ErrorMessages:
    """Standard error message templates."""
    FILE_NOT_FOUND = "File not found: {path}"
    DIRECTORY_NOT_FOUND = "Directory not found: {path}"
    NOT_A_DIRECTORY = "Expected {path} to be a directory"
    MISSING_IMAGE_DIRECTORY = "Transform '{kind}' requires an image directory"
    MISSING_CLASS_MAP = "Transform '{kind}' requires a class mapping table"
    MISSING_REQUIRED_KEY = "Required configuration key missing: {key}"
    INVALID_LOG_LEVEL = "Invalid log level: {level}"


# ============================================================================
# Logging Configuration
# ============================================================================

LOGGER_NAME: Final[str] = "boxswap"
LOG_FORMAT: Final[str] = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT: Final[str] = '%Y-%m-%d %H:%M:%S'
DEFAULT_LOG_LEVEL: Final[str] = 'INFO'
LOG_LEVELS: Final[tuple] = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
