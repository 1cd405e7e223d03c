"""
Coordinate scaling between pixels and fractions of the image size.
"""

from pathlib import Path

import numpy as np
from PIL import UnidentifiedImageError

from ..core.constants import TransformKind
from ..core.errors import TransformError
from ..models import Annotation, Format
from .base import Transform, require_image_directory


class _ImageScale(Transform):
    """
    Shared dimension lookup for Normalize and Denormalize.

    Dimensions come from the annotation's image when it already carries
    them, otherwise from the image file header. Results are cached per
    resolved image path for the life of the transform.
    """

    def __init__(self, image_directory):
        self.image_directory = require_image_directory(image_directory, self.kind)
        self._dimensions: dict[Path, tuple[int, int]] = {}

    def image_size(self, annotation: Annotation) -> np.ndarray:
        image = annotation.image
        if not image.has_dimensions:
            if image.path is None:
                raise TransformError(
                    f"Cannot {self.kind.value} annotation without an image path",
                    source_file=annotation.source_file,
                )

            key = image.resolve(self.image_directory)
            if key in self._dimensions:
                image.width, image.height = self._dimensions[key]
            else:
                try:
                    self._dimensions[key] = image.load_dimensions(self.image_directory)
                except (OSError, UnidentifiedImageError) as e:
                    raise TransformError(
                        f"Could not read dimensions of {key}: {e}",
                        source_file=annotation.source_file,
                    ) from e
                self.logger.debug(f"{key.name}: {image.width}x{image.height}")

        if image.width <= 0 or image.height <= 0:
            raise TransformError(
                f"Image {image.path} has invalid size {image.width}x{image.height}",
                source_file=annotation.source_file,
            )
        return np.array([image.width, image.height], dtype=np.float64)


class Normalize(_ImageScale):
    """Pixels -> fractions: divides x by width and y by height."""

    kind = TransformKind.NORMALIZE

    def apply(self, annotation: Annotation, source_format: Format, target_format: Format) -> None:
        annotation.set_corners(annotation.corners() / self.image_size(annotation))


class Denormalize(_ImageScale):
    """Fractions -> pixels: multiplies x by width and y by height."""

    kind = TransformKind.DENORMALIZE

    def apply(self, annotation: Annotation, source_format: Format, target_format: Format) -> None:
        annotation.set_corners(annotation.corners() * self.image_size(annotation))
