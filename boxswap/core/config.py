"""
Configuration management with validation.

Loads and validates YAML configuration files, providing type-safe access
to conversion parameters, and loads the class mapping tables used by the
class-mapping transform.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .constants import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_LOG_LEVEL,
    LOG_LEVELS,
    ErrorMessages,
)
from .errors import ConfigurationError
from .logger import get_logger
from ..models.class_map import ClassMap

logger = get_logger(__name__)


def _optional_path(value: Any) -> Optional[Path]:
    if value is None or value == "":
        return None
    return Path(value)


@dataclass
class ConversionConfig:
    """What to convert and where."""
    source_format: Optional[str] = None
    target_format: Optional[str] = None
    source: Optional[Path] = None
    target: Optional[Path] = None
    image_directory: Optional[Path] = None
    class_mapping: Optional[Path] = None
    missing_class_placeholder: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ConversionConfig':
        """Create from dictionary."""
        placeholder = data.get('missing_class_placeholder')
        return cls(
            source_format=data.get('source_format'),
            target_format=data.get('target_format'),
            source=_optional_path(data.get('source')),
            target=_optional_path(data.get('target')),
            image_directory=_optional_path(data.get('image_directory')),
            class_mapping=_optional_path(data.get('class_mapping')),
            missing_class_placeholder=None if placeholder is None else str(placeholder),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'LoggingConfig':
        """Create from dictionary."""
        return cls(
            level=str(data.get('level', DEFAULT_LOG_LEVEL)).upper(),
            log_file=_optional_path(data.get('log_file')),
        )


@dataclass
class Config:
    """Main configuration class."""
    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    show_progress: bool = True

    def validate(self) -> None:
        """
        Validate configuration.

        Raises:
            ConfigurationError: If a required key is missing or a path is unusable
        """
        conversion = self.conversion
        for key in ('source_format', 'target_format', 'source', 'target'):
            if getattr(conversion, key) is None:
                raise ConfigurationError(ErrorMessages.MISSING_REQUIRED_KEY.format(key=key))

        if not conversion.source.exists():
            raise ConfigurationError(ErrorMessages.FILE_NOT_FOUND.format(path=conversion.source))

        if conversion.image_directory is not None and not conversion.image_directory.is_dir():
            raise ConfigurationError(
                ErrorMessages.DIRECTORY_NOT_FOUND.format(path=conversion.image_directory)
            )

        if conversion.class_mapping is not None and not conversion.class_mapping.is_file():
            raise ConfigurationError(
                ErrorMessages.FILE_NOT_FOUND.format(path=conversion.class_mapping)
            )

        if self.logging.level not in LOG_LEVELS:
            raise ConfigurationError(ErrorMessages.INVALID_LOG_LEVEL.format(level=self.logging.level))

        logger.debug("Configuration validated successfully")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Config':
        """Create Config from dictionary. Validation is left to the caller."""
        return cls(
            conversion=ConversionConfig.from_dict(data.get('conversion') or {}),
            logging=LoggingConfig.from_dict(data.get('logging') or {}),
            show_progress=bool(data.get('show_progress', True)),
        )


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Config:
    """
    Load configuration from YAML file.

    The result is not validated, because command-line options may still
    fill in missing keys; call :meth:`Config.validate` once they are merged.

    Args:
        config_path: Path to configuration file

    Returns:
        Config object

    Raises:
        ConfigurationError: If the file doesn't exist or is not a YAML mapping
    """
    path = Path(config_path)

    if not path.is_file():
        raise ConfigurationError(ErrorMessages.FILE_NOT_FOUND.format(path=config_path))

    logger.info(f"Loading configuration from: {config_path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {config_path}")

    return Config.from_dict(data)


def load_class_map(mapping_path) -> ClassMap:
    """
    Load a class mapping table.

    The file is YAML (JSON is accepted too, being a YAML subset) holding
    either a ``{name: id}`` mapping or a list of names whose position is the
    id. A plain ``classes.txt`` with one name per line parses as a YAML
    block only when it has list markers, so text files are read line by line
    instead.

    Args:
        mapping_path: Path to the mapping file

    Returns:
        ClassMap instance

    Raises:
        ConfigurationError: If the file is missing or has the wrong shape
    """
    path = Path(mapping_path)
    if not path.is_file():
        raise ConfigurationError(ErrorMessages.FILE_NOT_FOUND.format(path=mapping_path))

    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix.lower() in ('.txt', '.names', '.labels'):
            data = [line.strip() for line in f if line.strip()]
        else:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid class mapping file {mapping_path}: {e}") from e

    try:
        if isinstance(data, dict):
            class_map = ClassMap(data)
        elif isinstance(data, list):
            class_map = ClassMap.from_names(str(name) for name in data)
        else:
            raise ConfigurationError(
                f"Class mapping {mapping_path} must be a name -> id mapping or a list of names"
            )
    except ValueError as e:
        raise ConfigurationError(f"Invalid class mapping {mapping_path}: {e}") from e

    logger.info(f"Loaded {len(class_map)} classes from {mapping_path}")
    return class_map
