"""
TensorFlow Object Detection CSV writer.

Rows are written as they arrive; the header goes out in ``init``.
"""

import csv

from ..core.constants import CSV_EXTENSION, TF_CSV_HEADER
from ..core.errors import (
    MissingClassNameError,
    MissingImageDimensionsError,
    MissingImagePathError,
    SerializerIOError,
)
from ..models import Annotation
from .base import FormatSerializer, format_number, prepare_destination_file


class TfObjectDetectionSerializer(FormatSerializer):
    """Requires image path, width, height, and a class name on every annotation."""

    def __init__(self):
        super().__init__()
        self._stream = None
        self._writer = None
        self.rows_written = 0

    def init(self, destination) -> None:
        self.destination = prepare_destination_file(destination, CSV_EXTENSION)
        try:
            self._stream = open(self.destination, 'w', encoding='utf-8', newline='')
            self._writer = csv.writer(self._stream)
            self._writer.writerow(TF_CSV_HEADER)
        except (OSError, csv.Error) as e:
            self.close()
            raise SerializerIOError(f"Could not write {self.destination}: {e}") from e
        self.logger.debug(f"Writing CSV rows to {self.destination}")

    def push(self, annotation: Annotation) -> None:
        self._check_open()

        image = annotation.image
        if image.path is None:
            raise MissingImagePathError()
        if not annotation.label.has_name:
            raise MissingClassNameError()
        if image.width is None:
            raise MissingImageDimensionsError("width")
        if image.height is None:
            raise MissingImageDimensionsError("height")

        row = [
            image.path.name,
            image.width,
            image.height,
            annotation.label.name,
            format_number(annotation.xmin),
            format_number(annotation.ymin),
            format_number(annotation.xmax),
            format_number(annotation.ymax),
        ]
        try:
            self._writer.writerow(row)
        except (OSError, csv.Error) as e:
            raise SerializerIOError(f"Could not write {self.destination}: {e}") from e
        self.rows_written += 1

    def finish(self) -> None:
        self._check_open()
        try:
            self._stream.flush()
        except OSError as e:
            raise SerializerIOError(f"Could not write {self.destination}: {e}") from e
        finally:
            self.close()
        self.logger.info(f"Wrote {self.rows_written} rows to {self.destination}")

    def close(self) -> None:
        super().close()
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        self._writer = None
