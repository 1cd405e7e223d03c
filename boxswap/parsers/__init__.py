"""
Format parsers.

One streaming parser per supported encoding:
- obb_text: YOLOv5 OBB / DOTA and YOLOv8 OBB text directories
- yolo_txt: YOLO TXT and YOLO Darknet text directories
- coco_json: COCO JSON documents
- tf_csv: TensorFlow Object Detection CSV files
"""

from .base import FormatParser, TextDirectoryParser
from .obb_text import Yolo5ObbParser, Yolo8ObbParser
from .yolo_txt import Yolo5TxtParser, YoloDarknetParser, load_darknet_labels
from .coco_json import CocoJsonParser
from .tf_csv import TfObjectDetectionParser

__all__ = [
    'FormatParser',
    'TextDirectoryParser',
    'Yolo5ObbParser',
    'Yolo8ObbParser',
    'Yolo5TxtParser',
    'YoloDarknetParser',
    'load_darknet_labels',
    'CocoJsonParser',
    'TfObjectDetectionParser',
]
