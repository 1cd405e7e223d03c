"""
Transform interface.

A transform bridges one structural difference between two formats by
mutating an annotation in place.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from ..core.constants import ErrorMessages, TransformKind
from ..core.errors import ConfigurationError
from ..core.logger import LoggerMixin
from ..models import Annotation, Format


class Transform(ABC, LoggerMixin):
    """One stage of the conversion chain."""

    kind: TransformKind

    @abstractmethod
    def apply(self, annotation: Annotation, source_format: Format, target_format: Format) -> None:
        """
        Mutate ``annotation`` in place.

        Raises:
            TransformError: If the annotation can't be transformed
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


def require_image_directory(image_directory, kind: TransformKind) -> Path:
    """
    Check the image directory a transform was given.

    Raises:
        ConfigurationError: If it is missing or not a directory
    """
    if image_directory is None:
        raise ConfigurationError(ErrorMessages.MISSING_IMAGE_DIRECTORY.format(kind=kind.value))
    image_directory = Path(image_directory)
    if not image_directory.is_dir():
        raise ConfigurationError(ErrorMessages.NOT_A_DIRECTORY.format(path=image_directory))
    return image_directory
