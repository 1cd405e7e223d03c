"""
Format serializers.

This package contains format-specific writers for exporting annotations:
- obb_text: YOLOv5 OBB / DOTA and YOLOv8 OBB text directories
- yolo_txt: YOLO TXT and YOLO Darknet text directories
- coco_json: COCO JSON documents
- tf_csv: TensorFlow Object Detection CSV files
"""

from .base import FormatSerializer, GroupedTextSerializer, format_number, output_file_name
from .obb_text import Yolo5ObbSerializer, Yolo8ObbSerializer
from .yolo_txt import Yolo5TxtSerializer, YoloDarknetSerializer
from .coco_json import CocoJsonSerializer
from .tf_csv import TfObjectDetectionSerializer

__all__ = [
    'FormatSerializer',
    'GroupedTextSerializer',
    'format_number',
    'output_file_name',
    'Yolo5ObbSerializer',
    'Yolo8ObbSerializer',
    'Yolo5TxtSerializer',
    'YoloDarknetSerializer',
    'CocoJsonSerializer',
    'TfObjectDetectionSerializer',
]
