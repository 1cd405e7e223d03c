"""
Resolve the image an annotation belongs to from its source file name.

Text formats name their label file after the image (``0001.txt`` for
``0001.jpg``) but never store the image name itself.
"""

from pathlib import Path
from typing import Optional

from PIL import UnidentifiedImageError

from ..core.constants import SUPPORTED_IMAGE_FORMATS, TransformKind
from ..core.errors import TransformError
from ..models import Annotation, Format, Image
from .base import Transform, require_image_directory


class LookupImage(Transform):
    """
    Fill ``image.path`` by matching the source file stem in the image directory.

    An image whose stem equals the source stem wins over one whose name
    starts with it followed by a separator (``0001_rgb.jpg``); ``10.jpg`` is
    never taken for ``1.txt``. Hits and misses are both cached, so each distinct
    source file costs at most one directory scan.

    Args:
        image_directory: Directory to search
        read_dimensions: Also fill ``width``/``height`` from the image header,
            for targets that store them
    """

    kind = TransformKind.LOOKUP_IMAGE

    def __init__(self, image_directory, read_dimensions: bool = False):
        self.image_directory = require_image_directory(image_directory, self.kind)
        self.read_dimensions = read_dimensions
        self._found: dict[str, Image] = {}
        self._missing: set[str] = set()

    def apply(self, annotation: Annotation, source_format: Format, target_format: Format) -> None:
        if annotation.source_file is None:
            raise TransformError("Cannot look up an image for an annotation without a source file")

        stem = annotation.source_file.stem
        if stem in self._missing:
            raise TransformError(
                f"No image for {annotation.source_file} in {self.image_directory}",
                source_file=annotation.source_file,
            )

        if stem not in self._found:
            file_name = self._scan(stem)
            if file_name is None:
                self._missing.add(stem)
                self.logger.warning(f"No image found for {annotation.source_file.name}")
                raise TransformError(
                    f"No image for {annotation.source_file} in {self.image_directory}",
                    source_file=annotation.source_file,
                )
            self._found[stem] = self._describe(file_name, annotation)

        found = self._found[stem]
        annotation.image.path = found.path
        if found.has_dimensions and not annotation.image.has_dimensions:
            annotation.image.width = found.width
            annotation.image.height = found.height

    def _describe(self, file_name: Path, annotation: Annotation) -> Image:
        image = Image(path=file_name)
        if self.read_dimensions:
            try:
                image.load_dimensions(self.image_directory)
            except (OSError, UnidentifiedImageError) as e:
                raise TransformError(
                    f"Could not read dimensions of {file_name}: {e}",
                    source_file=annotation.source_file,
                ) from e
        return image

    def _scan(self, stem: str) -> Optional[Path]:
        try:
            candidates = sorted(
                entry for entry in self.image_directory.iterdir()
                if entry.is_file() and entry.suffix.lower() in SUPPORTED_IMAGE_FORMATS
            )
        except OSError as e:
            raise TransformError(f"Could not list {self.image_directory}: {e}") from e

        prefix_match = None
        for entry in candidates:
            if entry.stem == stem:
                return Path(entry.name)
            if prefix_match is None and is_prefixed_by(entry.name, stem):
                prefix_match = Path(entry.name)
        if prefix_match is not None:
            self.logger.debug(f"Matched {stem} to {prefix_match} by prefix")
        return prefix_match


def is_prefixed_by(file_name: str, stem: str) -> bool:
    """True for ``0001_rgb.jpg`` and ``0001.jpg`` given ``0001``, false for ``00010.jpg``."""
    return file_name.startswith(stem) and not file_name[len(stem)].isalnum()
