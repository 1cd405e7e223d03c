"""
Annotation data models.

Data classes shared by every parser, transform, and serializer: the class
representation of an object and the oriented bounding box itself.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

import numpy as np

from .image_info import Image


class ClassKind(str, Enum):
    """Which slots of a class representation are filled."""
    NONE = "none"
    NAME = "name"
    ID = "id"
    BOTH = "both"


@dataclass(frozen=True)
class ClassRepresentation:
    """
    Class of an annotated object, by name, by id, or both.

    Parsers never emit an empty representation; only the ``ClassMapping``
    transform promotes a single-slot representation to both slots.
    """
    name: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def none(cls) -> 'ClassRepresentation':
        return cls()

    @classmethod
    def from_name(cls, name: str) -> 'ClassRepresentation':
        return cls(name=name)

    @classmethod
    def from_id(cls, class_id) -> 'ClassRepresentation':
        return cls(id=str(class_id))

    @classmethod
    def both(cls, name: str, class_id) -> 'ClassRepresentation':
        return cls(name=name, id=str(class_id))

    @property
    def kind(self) -> ClassKind:
        if self.name is not None and self.id is not None:
            return ClassKind.BOTH
        if self.name is not None:
            return ClassKind.NAME
        if self.id is not None:
            return ClassKind.ID
        return ClassKind.NONE

    @property
    def has_name(self) -> bool:
        return self.name is not None

    @property
    def has_id(self) -> bool:
        return self.id is not None

    def to_both(self, placeholder: str) -> 'ClassRepresentation':
        """
        Promote to a representation with both slots.

        The missing slot is filled with ``placeholder``. An empty
        representation gets the placeholder in both slots.
        """
        return ClassRepresentation(
            name=self.name if self.name is not None else placeholder,
            id=self.id if self.id is not None else placeholder,
        )

    def __str__(self) -> str:
        if self.kind == ClassKind.BOTH:
            return f"{self.name} ({self.id})"
        if self.kind == ClassKind.NAME:
            return self.name
        if self.kind == ClassKind.ID:
            return f"#{self.id}"
        return "<no class>"


@dataclass
class Annotation:
    """
    One labeled oriented bounding box.

    Corners are stored in a fixed winding: (x1, y1) top-left, (x2, y2)
    top-right, (x3, y3) bottom-right, (x4, y4) bottom-left. Every
    constructor below produces that order.
    """
    x1: float
    y1: float
    x2: float
    y2: float
    x3: float
    y3: float
    x4: float
    y4: float
    label: ClassRepresentation = field(default_factory=ClassRepresentation)
    source_file: Optional[Path] = None
    difficulty: bool = False
    image: Image = field(default_factory=Image)

    def __post_init__(self):
        if self.source_file is not None and not isinstance(self.source_file, Path):
            self.source_file = Path(self.source_file)

    @classmethod
    def from_min_max(cls, x_min: float, x_max: float, y_min: float, y_max: float,
                     **kwargs) -> 'Annotation':
        """Axis-aligned box from its extents."""
        return cls(
            x1=x_min, y1=y_min,
            x2=x_max, y2=y_min,
            x3=x_max, y3=y_max,
            x4=x_min, y4=y_max,
            **kwargs
        )

    @classmethod
    def from_centers(cls, center_x: float, center_y: float, width: float, height: float,
                     **kwargs) -> 'Annotation':
        """
        Axis-aligned box from its center and size.

        This is the YOLO convention: ``cx cy w h``.
        """
        half_width = width / 2
        half_height = height / 2
        return cls.from_min_max(
            center_x - half_width,
            center_x + half_width,
            center_y - half_height,
            center_y + half_height,
            **kwargs
        )

    @classmethod
    def from_top_left_corner(cls, x: float, y: float, width: float, height: float,
                             **kwargs) -> 'Annotation':
        """Axis-aligned box in COCO convention: ``[x, y, w, h]`` with origin top-left."""
        return cls.from_min_max(x, x + width, y, y + height, **kwargs)

    @classmethod
    def from_corners(cls, coordinates, **kwargs) -> 'Annotation':
        """Box from eight values ``x1 y1 x2 y2 x3 y3 x4 y4``."""
        values = [float(value) for value in coordinates]
        if len(values) != 8:
            raise ValueError(f"Expected 8 coordinates, got {len(values)}")
        x1, y1, x2, y2, x3, y3, x4, y4 = values
        return cls(x1=x1, y1=y1, x2=x2, y2=y2, x3=x3, y3=y3, x4=x4, y4=y4, **kwargs)

    def corners(self) -> np.ndarray:
        """Corners as a (4, 2) array of ``[x, y]`` rows in winding order."""
        return np.array([
            [self.x1, self.y1],
            [self.x2, self.y2],
            [self.x3, self.y3],
            [self.x4, self.y4],
        ], dtype=np.float64)

    def set_corners(self, corners) -> None:
        """Overwrite the corners from a (4, 2) array."""
        corners = np.asarray(corners, dtype=np.float64).reshape(4, 2)
        (self.x1, self.y1), (self.x2, self.y2), (self.x3, self.y3), (self.x4, self.y4) = (
            (float(x), float(y)) for x, y in corners
        )

    def coordinates(self) -> list[float]:
        """Flat ``[x1, y1, x2, y2, x3, y3, x4, y4]`` list."""
        return [self.x1, self.y1, self.x2, self.y2, self.x3, self.y3, self.x4, self.y4]

    @property
    def xmin(self) -> float:
        return min(self.x1, self.x2, self.x3, self.x4)

    @property
    def xmax(self) -> float:
        return max(self.x1, self.x2, self.x3, self.x4)

    @property
    def ymin(self) -> float:
        return min(self.y1, self.y2, self.y3, self.y4)

    @property
    def ymax(self) -> float:
        return max(self.y1, self.y2, self.y3, self.y4)

    def to_centers(self) -> tuple[float, float, float, float]:
        """Enclosing axis-aligned box as ``(cx, cy, w, h)``."""
        return (
            (self.xmin + self.xmax) / 2,
            (self.ymin + self.ymax) / 2,
            self.xmax - self.xmin,
            self.ymax - self.ymin,
        )

    def to_top_left(self) -> tuple[float, float, float, float]:
        """Enclosing axis-aligned box as ``(x, y, w, h)``."""
        return (
            self.xmin,
            self.ymin,
            self.xmax - self.xmin,
            self.ymax - self.ymin,
        )

    @property
    def area(self) -> float:
        """Area of the enclosing axis-aligned box."""
        return (self.xmax - self.xmin) * (self.ymax - self.ymin)
