"""
Core utilities for the annotation converter.

This package contains fundamental components like constants, errors,
configuration, and logging that are used throughout the application.
"""

from .constants import (
    ClassFormat,
    SourceType,
    ClassMappingSupport,
    ImagePathSupport,
    TransformKind,
    DEFAULT_CONFIG_PATH,
    DARKNET_LABELS_FILE,
    SUPPORTED_IMAGE_FORMATS,
    TF_CSV_HEADER,
)
from .errors import (
    BoxswapError,
    ParserError,
    SerializerError,
    TransformError,
    ConfigurationError,
    UnknownFormatError,
    UnsupportedFormatError,
)
from .logger import setup_logger, get_logger, LoggerMixin
from .config import Config, ConversionConfig, LoggingConfig, load_config, load_class_map

__all__ = [
    # Enums
    "ClassFormat",
    "SourceType",
    "ClassMappingSupport",
    "ImagePathSupport",
    "TransformKind",
    # Constants
    "DEFAULT_CONFIG_PATH",
    "DARKNET_LABELS_FILE",
    "SUPPORTED_IMAGE_FORMATS",
    "TF_CSV_HEADER",
    # Errors
    "BoxswapError",
    "ParserError",
    "SerializerError",
    "TransformError",
    "ConfigurationError",
    "UnknownFormatError",
    "UnsupportedFormatError",
    # Logging
    "setup_logger",
    "get_logger",
    "LoggerMixin",
    # Config
    "Config",
    "ConversionConfig",
    "LoggingConfig",
    "load_config",
    "load_class_map",
]
