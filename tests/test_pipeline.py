"""Tests for transform planning and end-to-end conversions."""

import csv
import json

import pytest

from boxswap.core.constants import TransformKind
from boxswap.core.errors import (
    ConfigurationError,
    MissingImageDimensionsError,
    TransformError,
    WrongFormatError,
)
from boxswap.models import ClassMap
from boxswap.pipeline import ConversionPipeline, ConversionSummary
from boxswap.registry import get_format
from boxswap.transforms import ClassMapping, LookupImage, Normalize

from conftest import read_lines, write_text


def make_pipeline(source_id, target_id, source, target, **kwargs):
    return ConversionPipeline(get_format(source_id), get_format(target_id), source, target, **kwargs)


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------

def test_lookup_runs_before_scaling_and_mapping(tmp_path):
    pipeline = make_pipeline("yolo5obb", "yolo5txt", tmp_path, tmp_path / "out")
    assert pipeline.plan_transforms() == [
        TransformKind.LOOKUP_IMAGE, TransformKind.NORMALIZE, TransformKind.MAP_TO_ID
    ]


def test_no_lookup_when_source_has_image_paths(tmp_path):
    pipeline = make_pipeline("cocojson", "yolo5txt", tmp_path / "a.json", tmp_path / "out")
    assert pipeline.plan_transforms() == [TransformKind.NORMALIZE]


def test_same_format_needs_nothing(tmp_path):
    pipeline = make_pipeline("yolo5obb", "yolo5obb", tmp_path, tmp_path / "out")
    assert pipeline.plan_transforms() == []
    assert pipeline.configure() == []


def test_configure_builds_ordered_chain(tmp_path, image_dir, class_map):
    pipeline = make_pipeline("yolo5obb", "yolo5txt", tmp_path, tmp_path / "out",
                             image_directory=image_dir, class_map=class_map)
    transforms = pipeline.configure()

    assert [type(t) for t in transforms] == [LookupImage, Normalize, ClassMapping]
    assert transforms[2].kind == TransformKind.MAP_TO_ID


def test_configure_requires_image_directory(tmp_path, class_map):
    pipeline = make_pipeline("yolo5obb", "cocojson", tmp_path, tmp_path / "out.json",
                             class_map=class_map)
    with pytest.raises(ConfigurationError, match="lookup_image"):
        pipeline.configure()


def test_configure_requires_class_map(tmp_path, image_dir):
    pipeline = make_pipeline("yolo5obb", "cocojson", tmp_path, tmp_path / "out.json",
                             image_directory=image_dir)
    with pytest.raises(ConfigurationError, match="map_to_id"):
        pipeline.configure()


def test_configuration_error_before_any_output(obb_dir, tmp_path):
    pipeline = make_pipeline("yolo5obb", "cocojson", obb_dir, tmp_path / "out" / "a.json")
    with pytest.raises(ConfigurationError):
        pipeline.convert()
    assert not (tmp_path / "out").exists()


def test_configure_returns_fresh_transforms(tmp_path, image_dir):
    pipeline = make_pipeline("cocojson", "yolo5txt", tmp_path / "a.json", tmp_path / "out",
                             image_directory=image_dir)
    assert pipeline.configure()[0] is not pipeline.configure()[0]


# ---------------------------------------------------------------------------
# End to end
# ---------------------------------------------------------------------------

def test_obb_to_coco(obb_dir, image_dir, class_map, tmp_path):
    target = tmp_path / "out" / "coco.json"
    summary = make_pipeline("yolo5obb", "cocojson", obb_dir, target,
                            image_directory=image_dir, class_map=class_map).convert()

    assert summary == ConversionSummary(
        annotations=3, source_files=2,
        transforms=[TransformKind.LOOKUP_IMAGE, TransformKind.MAP_TO_ID],
    )

    document = json.loads(target.read_text(encoding="utf-8"))
    assert [c["name"] for c in document["categories"]] == ["plane", "ship"]
    assert document["images"] == [
        {"id": 0, "file_name": "0001.jpg", "width": 200, "height": 100},
        {"id": 1, "file_name": "0002.png", "width": 400, "height": 200},
    ]
    assert [a["bbox"] for a in document["annotations"]] == [
        [20, 10, 40, 40], [100, 40, 40, 40], [0, 0, 200, 100]
    ]
    assert [a["category_id"] for a in document["annotations"]] == [0, 1, 0]


def test_obb_to_yolo_normalizes(obb_dir, image_dir, class_map, tmp_path):
    make_pipeline("yolo5obb", "yolo5txt", obb_dir, tmp_path / "out",
                  image_directory=image_dir, class_map=class_map).convert()

    assert read_lines(tmp_path / "out" / "0001.txt") == [
        "0 0.200000 0.300000 0.200000 0.400000",
        "1 0.600000 0.600000 0.200000 0.400000",
    ]
    assert read_lines(tmp_path / "out" / "0002.txt") == ["0 0.250000 0.250000 0.500000 0.500000"]


def test_coco_to_yolo_darknet(coco_file, image_dir, tmp_path):
    summary = make_pipeline("cocojson", "yolodarknet", coco_file, tmp_path / "out",
                            image_directory=image_dir).convert()

    assert summary.annotations == 2
    assert summary.source_files == 1
    assert read_lines(tmp_path / "out" / "darknet.labels") == ["class_0", "class_1", "helmet", "vest"]
    assert read_lines(tmp_path / "out" / "0001.txt") == ["2 0.437500 0.445000 0.425000 0.850000"]


def test_yolo_to_csv(yolo_dir, image_dir, class_map, tmp_path):
    make_pipeline("yolo5txt", "tfcsv", yolo_dir, tmp_path / "out.csv",
                  image_directory=image_dir, class_map=class_map).convert()

    with open(tmp_path / "out.csv", newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [row["filename"] for row in rows] == ["0001.jpg", "0001.jpg", "0002.png"]
    first = rows[0]
    assert (first["width"], first["height"], first["class"]) == ("200", "100", "plane")
    assert [float(first[key]) for key in ("xmin", "ymin", "xmax", "ymax")] == pytest.approx(
        [80, 30, 120, 70]
    )
    assert rows[2]["class"] == "ship"


def test_csv_to_obb(csv_file, tmp_path):
    summary = make_pipeline("tfcsv", "yolo5obb", csv_file, tmp_path / "out").convert()

    assert summary.transforms == []
    assert read_lines(tmp_path / "out" / "0001.txt") == [
        "20 10 60 10 60 50 20 50 plane 0",
        "100 40 140 40 140 80 100 80 ship 0",
    ]


def test_missing_image_aborts(obb_dir, image_dir, class_map, tmp_path):
    write_text(obb_dir / "0003.txt", "0 0 1 0 1 1 0 1 plane\n")
    pipeline = make_pipeline("yolo5obb", "cocojson", obb_dir, tmp_path / "out.json",
                             image_directory=image_dir, class_map=class_map)
    with pytest.raises(TransformError, match="0003.txt"):
        pipeline.convert()
    assert not (tmp_path / "out.json").exists()


def test_unmapped_class_aborts(obb_dir, image_dir, tmp_path):
    pipeline = make_pipeline("yolo5obb", "cocojson", obb_dir, tmp_path / "out.json",
                             image_directory=image_dir, class_map=ClassMap({"plane": 0}))
    with pytest.raises(TransformError, match="ship"):
        pipeline.convert()


def test_placeholder_keeps_going(obb_dir, image_dir, tmp_path):
    summary = make_pipeline("yolo5obb", "cocojson", obb_dir, tmp_path / "out.json",
                            image_directory=image_dir, class_map=ClassMap({"plane": 0}),
                            missing_class_placeholder="99").convert()
    assert summary.annotations == 3


def test_parse_error_aborts(obb_dir, tmp_path):
    write_text(obb_dir / "0003.txt", "broken line\n")
    with pytest.raises(WrongFormatError):
        make_pipeline("yolo5obb", "yolo5obb", obb_dir, tmp_path / "out").convert()


def test_serializer_error_aborts(coco_file, tmp_path):
    # image 7 carries no size and nothing fills it in on the way to CSV
    pipeline = make_pipeline("cocojson", "tfcsv", coco_file, tmp_path / "out.csv")
    with pytest.raises(MissingImageDimensionsError):
        pipeline.convert()
