"""
Shared fixtures for the boxswap test suite.

Datasets are tiny and written to ``tmp_path``; images are real Pillow files
so the header reads exercised by the transforms behave as in production.
"""

import json
from pathlib import Path

import pytest
from PIL import Image as PILImage

from boxswap.models import Annotation, ClassMap, ClassRepresentation, Image


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def write_text(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_image(path: Path, width: int, height: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    PILImage.new("RGB", (width, height), color=(40, 80, 120)).save(path)
    return path


def read_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


def make_annotation(x_min=10, x_max=30, y_min=20, y_max=60, label=None, **kwargs) -> Annotation:
    return Annotation.from_min_max(
        x_min, x_max, y_min, y_max,
        label=label if label is not None else ClassRepresentation.from_name("plane"),
        **kwargs
    )


# ---------------------------------------------------------------------------
# Datasets
# ---------------------------------------------------------------------------

@pytest.fixture
def image_dir(tmp_path):
    """Two images: 0001.jpg (200x100) and 0002.png (400x200)."""
    directory = tmp_path / "images"
    write_image(directory / "0001.jpg", 200, 100)
    write_image(directory / "0002.png", 400, 200)
    return directory


@pytest.fixture
def obb_dir(tmp_path):
    """YOLOv5 OBB dataset in pixels, matching the images in ``image_dir``."""
    directory = tmp_path / "obb"
    write_text(
        directory / "0001.txt",
        "20 10 60 10 60 50 20 50 plane 0\n"
        "100 40 140 40 140 80 100 80 ship 1\n"
    )
    write_text(directory / "0002.txt", "\n0 0 200 0 200 100 0 100 plane\n\n")
    return directory


@pytest.fixture
def yolo_dir(tmp_path):
    """YOLO TXT dataset, normalized."""
    directory = tmp_path / "yolo"
    write_text(directory / "0001.txt", "0 0.5 0.5 0.2 0.4\n1 0.25 0.75 0.1 0.1\n")
    write_text(directory / "0002.txt", "1 0.5 0.5 1 1\n")
    return directory


@pytest.fixture
def darknet_dir(yolo_dir):
    write_text(yolo_dir / "darknet.labels", "plane\nship\n")
    return yolo_dir


@pytest.fixture
def coco_document():
    return {
        "info": {"description": "test"},
        "categories": [
            {"id": 2, "name": "helmet", "supercategory": "none"},
            {"id": 3, "name": "vest", "supercategory": "none"},
        ],
        "images": [
            {"id": 1, "file_name": "0001.jpg", "width": 200, "height": 100},
            {"id": 7, "file_name": "0002.png"},
        ],
        "annotations": [
            {"id": 0, "category_id": 2, "image_id": 1, "bbox": [45, 2, 85, 85]},
            {"id": 1, "category_id": 3, "image_id": 7, "bbox": [10.5, 20, 30, 40.25]},
        ],
    }


@pytest.fixture
def coco_file(tmp_path, coco_document):
    path = tmp_path / "annotations.json"
    write_text(path, json.dumps(coco_document))
    return path


@pytest.fixture
def csv_file(tmp_path):
    return write_text(
        tmp_path / "annotations.csv",
        "filename,width,height,class,xmin,ymin,xmax,ymax\n"
        "0001.jpg,200,100,plane,20,10,60,50\n"
        "0001.jpg,200,100,ship,100,40,140,80\n"
        "0002.png,400,200,plane,0,0,200,100\n"
    )


@pytest.fixture
def class_map():
    return ClassMap({"plane": 0, "ship": 1})


@pytest.fixture
def image_info():
    return Image(width=200, height=100, path=Path("0001.jpg"), id=1)
