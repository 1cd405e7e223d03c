"""Tests for the serializers."""

import csv
import json
from pathlib import Path

import pytest

from boxswap.core.errors import (
    MissingClassIdError,
    MissingClassNameError,
    MissingImageDimensionsError,
    MissingImagePathError,
    MissingSourceFileError,
    StreamClosedError,
    WrongClassRepresentationError,
    WrongDestinationError,
    WrongExtensionError,
)
from boxswap.models import ClassRepresentation, Image
from boxswap.parsers import Yolo5ObbParser, YoloDarknetParser
from boxswap.serializers import (
    CocoJsonSerializer,
    TfObjectDetectionSerializer,
    Yolo5ObbSerializer,
    Yolo5TxtSerializer,
    Yolo8ObbSerializer,
    YoloDarknetSerializer,
    format_number,
)

from conftest import make_annotation, read_lines, write_text


def test_format_number():
    assert format_number(45.0) == "45"
    assert format_number(7) == "7"
    assert format_number(0.408) == "0.408"
    assert format_number(-2.5) == "-2.5"


# ---------------------------------------------------------------------------
# Oriented-box text
# ---------------------------------------------------------------------------

def test_yolo5obb_groups_by_source_file(tmp_path):
    serializer = Yolo5ObbSerializer()
    serializer.init(tmp_path / "out")
    serializer.push(make_annotation(source_file="labels/a.txt"))
    serializer.push(make_annotation(0, 1.5, 0, 2, ClassRepresentation.both("ship", 1),
                                    source_file="labels/b.txt", difficulty=True))
    serializer.push(make_annotation(source_file="labels/a.txt"))
    serializer.finish()

    assert sorted(p.name for p in (tmp_path / "out").iterdir()) == ["a.txt", "b.txt"]
    assert read_lines(tmp_path / "out" / "a.txt") == [
        "10 20 30 20 30 60 10 60 plane 0",
        "10 20 30 20 30 60 10 60 plane 0",
    ]
    assert read_lines(tmp_path / "out" / "b.txt") == ["0 0 1.5 0 1.5 2 0 2 ship 1"]


def test_yolo5obb_rejects_id_only_class(tmp_path):
    serializer = Yolo5ObbSerializer()
    serializer.init(tmp_path / "out")
    with pytest.raises(WrongClassRepresentationError):
        serializer.push(make_annotation(label=ClassRepresentation.from_id("3"),
                                        source_file="a.txt"))


def test_yolo5obb_rejects_missing_class(tmp_path):
    serializer = Yolo5ObbSerializer()
    serializer.init(tmp_path / "out")
    with pytest.raises(WrongClassRepresentationError):
        serializer.push(make_annotation(label=ClassRepresentation.none(), source_file="a.txt"))


def test_yolo5obb_joins_multi_word_names(tmp_path):
    serializer = Yolo5ObbSerializer()
    serializer.init(tmp_path / "out")
    serializer.push(make_annotation(1, 4, 2, 6, ClassRepresentation.both("traffic light", 10),
                                    source_file="0001.txt"))
    serializer.finish()

    assert read_lines(tmp_path / "out" / "0001.txt") == ["1 2 4 2 4 6 1 6 traffic-light 0"]

    parser = Yolo5ObbParser()
    parser.init(tmp_path / "out")
    assert [a.label for a in parser] == [ClassRepresentation.from_name("traffic-light")]


def test_yolo5obb_round_trip(obb_dir, tmp_path):
    parser = Yolo5ObbParser()
    parser.init(obb_dir)
    serializer = Yolo5ObbSerializer()
    serializer.init(tmp_path / "out")
    for annotation in parser:
        serializer.push(annotation)
    serializer.finish()

    assert read_lines(tmp_path / "out" / "0001.txt") == read_lines(obb_dir / "0001.txt")
    assert read_lines(tmp_path / "out" / "0002.txt") == ["0 0 200 0 200 100 0 100 plane 0"]


def test_text_output_named_after_image(tmp_path):
    serializer = Yolo5ObbSerializer()
    serializer.init(tmp_path / "out")
    serializer.push(make_annotation(source_file="all.json", image=Image(path="img/0007.jpg")))
    serializer.finish()
    assert (tmp_path / "out" / "0007.txt").is_file()


def test_text_output_needs_a_name(tmp_path):
    serializer = Yolo5ObbSerializer()
    serializer.init(tmp_path / "out")
    with pytest.raises(MissingSourceFileError):
        serializer.push(make_annotation())


def test_text_destination_must_be_a_directory(tmp_path):
    path = write_text(tmp_path / "file.txt", "")
    with pytest.raises(WrongDestinationError):
        Yolo5ObbSerializer().init(path)


def test_push_after_finish_fails(tmp_path):
    serializer = Yolo5ObbSerializer()
    serializer.init(tmp_path / "out")
    serializer.finish()
    with pytest.raises(StreamClosedError):
        serializer.push(make_annotation(source_file="a.txt"))
    with pytest.raises(StreamClosedError):
        serializer.finish()


def test_push_before_init_fails():
    with pytest.raises(StreamClosedError):
        Yolo5ObbSerializer().push(make_annotation(source_file="a.txt"))


def test_close_discards_buffered_output(tmp_path):
    serializer = Yolo5ObbSerializer()
    serializer.init(tmp_path / "out")
    serializer.push(make_annotation(source_file="a.txt"))
    serializer.close()
    assert list((tmp_path / "out").iterdir()) == []


def test_yolo8obb_writes_class_first(tmp_path):
    serializer = Yolo8ObbSerializer()
    serializer.init(tmp_path / "out")
    serializer.push(make_annotation(0.1, 0.3, 0.2, 0.4, ClassRepresentation.both("ship", 1),
                                    source_file="a.txt"))
    serializer.finish()
    assert read_lines(tmp_path / "out" / "a.txt") == [
        "1 0.100000 0.200000 0.300000 0.200000 0.300000 0.400000 0.100000 0.400000"
    ]


def test_yolo8obb_rejects_name_only(tmp_path):
    serializer = Yolo8ObbSerializer()
    serializer.init(tmp_path / "out")
    with pytest.raises(WrongClassRepresentationError):
        serializer.push(make_annotation(source_file="a.txt"))


# ---------------------------------------------------------------------------
# YOLO TXT / Darknet
# ---------------------------------------------------------------------------

def test_yolo5txt_writes_centers(tmp_path):
    serializer = Yolo5TxtSerializer()
    serializer.init(tmp_path / "out")
    serializer.push(make_annotation(0.4, 0.6, 0.3, 0.7, ClassRepresentation.from_id(2),
                                    source_file="a.txt"))
    serializer.finish()
    assert read_lines(tmp_path / "out" / "a.txt") == ["2 0.500000 0.500000 0.200000 0.400000"]


def test_yolo5txt_rejects_non_numeric_id(tmp_path):
    serializer = Yolo5TxtSerializer()
    serializer.init(tmp_path / "out")
    with pytest.raises(WrongClassRepresentationError):
        serializer.push(make_annotation(label=ClassRepresentation.from_id("plane"),
                                        source_file="a.txt"))


def test_darknet_writes_labels_with_placeholders(tmp_path):
    serializer = YoloDarknetSerializer()
    serializer.init(tmp_path / "out")
    serializer.push(make_annotation(label=ClassRepresentation.both("ship", 2), source_file="a.txt"))
    serializer.push(make_annotation(label=ClassRepresentation.both("plane", 0), source_file="b.txt"))
    serializer.finish()

    assert read_lines(tmp_path / "out" / "darknet.labels") == ["plane", "class_1", "ship"]


def test_darknet_rejects_conflicting_names(tmp_path):
    serializer = YoloDarknetSerializer()
    serializer.init(tmp_path / "out")
    serializer.push(make_annotation(label=ClassRepresentation.both("ship", 1), source_file="a.txt"))
    with pytest.raises(WrongClassRepresentationError):
        serializer.push(make_annotation(label=ClassRepresentation.both("boat", 1),
                                        source_file="a.txt"))


def test_darknet_requires_both(tmp_path):
    serializer = YoloDarknetSerializer()
    serializer.init(tmp_path / "out")
    with pytest.raises(WrongClassRepresentationError):
        serializer.push(make_annotation(label=ClassRepresentation.from_id(1), source_file="a.txt"))


def test_darknet_output_reads_back(darknet_dir, tmp_path):
    parser = YoloDarknetParser()
    parser.init(darknet_dir)
    serializer = YoloDarknetSerializer()
    serializer.init(tmp_path / "out")
    for annotation in parser:
        serializer.push(annotation)
    serializer.finish()

    assert read_lines(tmp_path / "out" / "darknet.labels") == ["plane", "ship"]
    assert read_lines(tmp_path / "out" / "0002.txt") == ["1 0.500000 0.500000 1.000000 1.000000"]


# ---------------------------------------------------------------------------
# TensorFlow CSV
# ---------------------------------------------------------------------------

def test_tf_csv_writes_header_and_rows(tmp_path):
    serializer = TfObjectDetectionSerializer()
    serializer.init(tmp_path / "out" / "data")
    serializer.push(make_annotation(
        10, 30.5, 20, 60, image=Image(width=200, height=100, path="images/0001.jpg")
    ))
    serializer.finish()

    with open(tmp_path / "out" / "data.csv", newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows == [
        ["filename", "width", "height", "class", "xmin", "ymin", "xmax", "ymax"],
        ["0001.jpg", "200", "100", "plane", "10", "20", "30.5", "60"],
    ]


def test_tf_csv_rejects_other_extensions(tmp_path):
    with pytest.raises(WrongExtensionError):
        TfObjectDetectionSerializer().init(tmp_path / "out.json")


def test_tf_csv_rejects_directory(tmp_path):
    with pytest.raises(WrongDestinationError):
        TfObjectDetectionSerializer().init(tmp_path)


@pytest.mark.parametrize("image, label, error", [
    (Image(width=1, height=1), ClassRepresentation.from_name("a"), MissingImagePathError),
    (Image(width=1, height=1, path="a.jpg"), ClassRepresentation.from_id(1), MissingClassNameError),
    (Image(height=1, path="a.jpg"), ClassRepresentation.from_name("a"), MissingImageDimensionsError),
    (Image(width=1, path="a.jpg"), ClassRepresentation.from_name("a"), MissingImageDimensionsError),
])
def test_tf_csv_missing_data(tmp_path, image, label, error):
    serializer = TfObjectDetectionSerializer()
    serializer.init(tmp_path / "out.csv")
    try:
        with pytest.raises(error):
            serializer.push(make_annotation(label=label, image=image))
    finally:
        serializer.close()


def test_tf_csv_closed_after_finish(tmp_path):
    serializer = TfObjectDetectionSerializer()
    serializer.init(tmp_path / "out.csv")
    serializer.finish()
    with pytest.raises(StreamClosedError):
        serializer.push(make_annotation(image=Image(width=1, height=1, path="a.jpg")))


# ---------------------------------------------------------------------------
# COCO JSON
# ---------------------------------------------------------------------------

def coco_annotation(name="helmet", class_id=2, **image):
    return make_annotation(45, 130, 2, 87, ClassRepresentation.both(name, class_id),
                           image=Image(**image))


def test_coco_document(tmp_path):
    serializer = CocoJsonSerializer()
    serializer.init(tmp_path / "coco")
    serializer.push(coco_annotation(path="0001.jpg", id=5, width=200, height=100))
    serializer.push(coco_annotation("vest", 3, path="0001.jpg", id=5))
    serializer.push(coco_annotation("helmet", 2, path="0002.jpg", id=6))
    serializer.finish()

    document = json.loads((tmp_path / "coco.json").read_text(encoding="utf-8"))

    assert set(document) >= {"info", "licenses", "categories", "images", "annotations"}
    assert "date_created" in document["info"]
    assert document["categories"] == [
        {"id": 2, "name": "helmet", "supercategory": "none"},
        {"id": 3, "name": "vest", "supercategory": "none"},
    ]
    assert document["images"] == [
        {"id": 5, "file_name": "0001.jpg", "width": 200, "height": 100},
        {"id": 6, "file_name": "0002.jpg"},
    ]
    assert [a["id"] for a in document["annotations"]] == [0, 1, 2]
    first = document["annotations"][0]
    assert first["bbox"] == [45, 2, 85, 85]
    assert first["area"] == 85 * 85
    assert first["iscrowd"] == 0
    assert first["segmentation"] == []
    assert (first["image_id"], first["category_id"]) == (5, 2)


def test_coco_first_category_name_wins(tmp_path):
    serializer = CocoJsonSerializer()
    serializer.init(tmp_path / "coco.json")
    serializer.push(coco_annotation("helmet", 2, path="a.jpg"))
    serializer.push(coco_annotation("hat", 2, path="a.jpg"))
    serializer.finish()

    document = json.loads((tmp_path / "coco.json").read_text(encoding="utf-8"))
    assert document["categories"] == [{"id": 2, "name": "helmet", "supercategory": "none"}]


def test_coco_assigns_image_ids_by_file_name(tmp_path):
    serializer = CocoJsonSerializer()
    serializer.init(tmp_path / "coco.json")
    serializer.push(coco_annotation(path="a.jpg"))
    serializer.push(coco_annotation(path="b.jpg"))
    serializer.push(coco_annotation(path="a.jpg"))
    serializer.finish()

    document = json.loads((tmp_path / "coco.json").read_text(encoding="utf-8"))
    assert [image["file_name"] for image in document["images"]] == ["a.jpg", "b.jpg"]
    assert [a["image_id"] for a in document["annotations"]] == [0, 1, 0]


@pytest.mark.parametrize("label", [
    ClassRepresentation.from_name("helmet"),
    ClassRepresentation.from_id(2),
    ClassRepresentation.none(),
])
def test_coco_requires_both(tmp_path, label):
    serializer = CocoJsonSerializer()
    serializer.init(tmp_path / "coco.json")
    with pytest.raises(WrongClassRepresentationError):
        serializer.push(make_annotation(label=label, image=Image(path="a.jpg")))


def test_coco_requires_integer_class_id(tmp_path):
    serializer = CocoJsonSerializer()
    serializer.init(tmp_path / "coco.json")
    with pytest.raises(MissingClassIdError):
        serializer.push(coco_annotation("helmet", "x", path="a.jpg"))


def test_coco_requires_image_path(tmp_path):
    serializer = CocoJsonSerializer()
    serializer.init(tmp_path / "coco.json")
    with pytest.raises(MissingImagePathError):
        serializer.push(coco_annotation())


def test_coco_wrong_extension(tmp_path):
    with pytest.raises(WrongExtensionError):
        CocoJsonSerializer().init(tmp_path / "coco.csv")


def test_coco_nothing_written_before_finish(tmp_path):
    serializer = CocoJsonSerializer()
    serializer.init(tmp_path / "coco.json")
    serializer.push(coco_annotation(path="a.jpg"))
    assert not Path(tmp_path / "coco.json").exists()
