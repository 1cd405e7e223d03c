"""
Image metadata models.

Data classes for representing the image an annotation belongs to.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from PIL import Image as PILImage


@dataclass
class Image:
    """
    Image reference attached to an annotation.

    Every field starts unset and is filled lazily: parsers fill what their
    encoding stores, ``LookupImage`` fills ``path`` and the normalization
    transforms fill ``width``/``height`` on first use.
    """
    width: Optional[int] = None
    height: Optional[int] = None
    path: Optional[Path] = None
    id: Optional[int] = None

    def __post_init__(self):
        if self.path is not None and not isinstance(self.path, Path):
            self.path = Path(self.path)

    @property
    def has_dimensions(self) -> bool:
        return self.width is not None and self.height is not None

    def resolve(self, image_directory: Union[str, Path]) -> Path:
        """
        Resolve the image path against a directory.

        Absolute paths are returned unchanged.

        Raises:
            ValueError: If the image has no path
        """
        if self.path is None:
            raise ValueError("Image has no path to resolve")
        if self.path.is_absolute():
            return self.path
        return Path(image_directory) / self.path

    def load_dimensions(self, image_directory: Union[str, Path]) -> tuple[int, int]:
        """
        Read width and height from the image file header.

        Pillow opens images lazily, so only the header is decoded. The
        dimensions are cached on this instance.

        Args:
            image_directory: Directory the image path is relative to

        Returns:
            (width, height) in pixels

        Raises:
            ValueError: If the image has no path
            FileNotFoundError: If the image file doesn't exist
            PIL.UnidentifiedImageError: If the file is not a readable image
        """
        file_path = self.resolve(image_directory)
        if not file_path.is_file():
            raise FileNotFoundError(f"Image file not found: {file_path}")

        with PILImage.open(file_path) as img:
            width, height = img.size

        self.width = width
        self.height = height
        return width, height
