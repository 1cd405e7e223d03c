"""
TensorFlow Object Detection CSV parser.

One row per box, self-contained for image metadata:

    filename,width,height,class,xmin,ymin,xmax,ymax
    000001.jpg,500,375,helmet,111,144,134,174
"""

import csv
from pathlib import Path
from typing import Optional

from ..core.constants import CSV_EXTENSION, TF_CSV_HEADER
from ..core.errors import OutOfElementsError, ParserIOError, WrongFormatError
from ..models import Annotation, ClassRepresentation, Image
from .base import FormatParser, require_file


def _parse_dimension(value: str, column: str, row_number: int) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise WrongFormatError(f"Row {row_number}: {column} '{value}' is not a number") from None
    if not number.is_integer() or number <= 0:
        raise WrongFormatError(f"Row {row_number}: {column} '{value}' is not a positive integer")
    return int(number)


def _parse_coordinate(value: str, column: str, row_number: int) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise WrongFormatError(f"Row {row_number}: {column} '{value}' is not a number") from None


class TfObjectDetectionParser(FormatParser):
    """Reads a TensorFlow Object Detection CSV file; classes come out as names."""

    def __init__(self):
        self.source_file: Optional[Path] = None
        self._stream = None
        self._reader: Optional[csv.DictReader] = None
        self._row: Optional[dict] = None

    def init(self, path) -> None:
        self.source_file = require_file(path)

        try:
            self._stream = open(self.source_file, 'r', encoding='utf-8', newline='')
            self._reader = csv.DictReader(self._stream)
            columns = self._reader.fieldnames
        except (OSError, UnicodeDecodeError) as e:
            self.close()
            raise ParserIOError(f"Could not read {self.source_file}: {e}") from e
        except csv.Error as e:
            self.close()
            raise WrongFormatError(f"{self.source_file} is malformed: {e}") from e

        missing = [column for column in TF_CSV_HEADER if column not in (columns or [])]
        if missing:
            self.close()
            raise WrongFormatError(
                f"{self.source_file} is missing column(s): {', '.join(missing)}"
            )
        self.logger.debug(f"Reading rows from {self.source_file}")

    def has_next(self) -> bool:
        if self._row is not None:
            return True
        if self._reader is None:
            return False

        try:
            self._row = next(self._reader)
        except StopIteration:
            self.close()
            return False
        except (OSError, UnicodeDecodeError) as e:
            raise ParserIOError(f"Could not read {self.source_file}: {e}") from e
        except csv.Error as e:
            raise WrongFormatError(f"{self.source_file} is malformed: {e}") from e
        return True

    def get_next(self) -> Annotation:
        if self._row is None:
            raise OutOfElementsError()
        row, self._row = self._row, None
        # header is line 1
        row_number = self._reader.line_num if self._reader is not None else -1

        if None in row or any(row.get(column) is None for column in TF_CSV_HEADER):
            raise WrongFormatError(
                f"Row {row_number}: expected {len(TF_CSV_HEADER)} columns"
            )
        if not row['filename'] or not row['class']:
            raise WrongFormatError(f"Row {row_number}: filename and class must not be empty")

        width = _parse_dimension(row['width'], 'width', row_number)
        height = _parse_dimension(row['height'], 'height', row_number)
        xmin, ymin, xmax, ymax = (
            _parse_coordinate(row[column], column, row_number)
            for column in ('xmin', 'ymin', 'xmax', 'ymax')
        )

        return Annotation.from_min_max(
            xmin, xmax, ymin, ymax,
            label=ClassRepresentation.from_name(row['class']),
            source_file=self.source_file,
            image=Image(width=width, height=height, path=Path(row['filename'])),
        )

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        self._reader = None
