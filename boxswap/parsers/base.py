"""
Streaming parser interface and the shared directory walk.

Parsers follow a pull protocol:

    parser.init(path)
    while parser.has_next():
        annotation = parser.get_next()

``has_next`` is not a pure peek. It may open the next file or advance a
directory cursor, and it buffers exactly one record for the following
``get_next``. Calling ``get_next`` without a preceding ``has_next`` that
returned True is a caller error and raises ``OutOfElementsError``.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator, Optional

from ..core.constants import SourceType, TEXT_EXTENSION
from ..core.errors import (
    OutOfElementsError,
    ParserIOError,
    WrongFileTypeError,
    WrongFormatError,
    WrongSourceError,
)
from ..core.logger import LoggerMixin
from ..models import Annotation


class FormatParser(ABC, LoggerMixin):
    """Reads one encoding as a lazy sequence of annotations."""

    @abstractmethod
    def init(self, path) -> None:
        """
        Open the source.

        Raises:
            ParserError: If the path doesn't fit the encoding
        """

    @abstractmethod
    def has_next(self) -> bool:
        """Buffer the next record and report whether there is one."""

    @abstractmethod
    def get_next(self) -> Annotation:
        """
        Consume the buffered record.

        Raises:
            OutOfElementsError: If no record is buffered
            ParserError: If the record is malformed
        """

    def close(self) -> None:
        """Release open handles. Safe to call more than once."""

    def __iter__(self) -> Iterator[Annotation]:
        while self.has_next():
            yield self.get_next()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def require_file(path, extension: Optional[str] = None) -> Path:
    """
    Check that a single-file source exists and has the expected extension.

    Raises:
        ParserIOError: If the path doesn't exist
        WrongSourceError: If the path is a directory
        WrongFileTypeError: If the extension doesn't match
    """
    path = Path(path)
    if not path.exists():
        raise ParserIOError(f"File not found: {path}")
    if not path.is_file():
        raise WrongSourceError(expected=SourceType.SINGLE_FILE, found=SourceType.MULTIPLE_FILES)
    if extension is not None and path.suffix.lower() != extension:
        raise WrongFileTypeError(expected=extension, found=path.suffix or "no extension")
    return path


def require_directory(path) -> Path:
    """
    Check that a multi-file source is an existing directory.

    Raises:
        ParserIOError: If the path doesn't exist
        WrongSourceError: If the path is a regular file
    """
    path = Path(path)
    if not path.exists():
        raise ParserIOError(f"Directory not found: {path}")
    if not path.is_dir():
        raise WrongSourceError(expected=SourceType.MULTIPLE_FILES, found=SourceType.SINGLE_FILE)
    return path


def parse_float(token: str, line: str) -> float:
    try:
        return float(token)
    except ValueError:
        raise WrongFormatError(f"'{token}' is not a number in line '{line}'") from None


def parse_class_index(token: str, line: str) -> int:
    try:
        index = int(token)
    except ValueError:
        raise WrongFormatError(f"Class id '{token}' is not an integer in line '{line}'") from None
    if index < 0:
        raise WrongFormatError(f"Class id {index} is negative in line '{line}'")
    return index


class TextDirectoryParser(FormatParser):
    """
    Walks a directory of per-image text files, one annotation per line.

    Files are visited in sorted name order and only files with the expected
    extension are opened. Blank lines are not records and are skipped.
    Subclasses turn the whitespace-separated tokens of one line into an
    annotation in :meth:`parse_tokens`.
    """

    extension = TEXT_EXTENSION

    def __init__(self):
        self.source_directory: Optional[Path] = None
        self._entries: Optional[Iterator[Path]] = None
        self._current_file: Optional[Path] = None
        self._reader = None
        self._line: Optional[str] = None
        self._line_number = 0

    def init(self, path) -> None:
        self.source_directory = require_directory(path)
        try:
            entries = sorted(self.source_directory.iterdir())
        except OSError as e:
            raise ParserIOError(f"Could not list {self.source_directory}: {e}") from e
        self._entries = iter(entries)
        self.logger.debug(f"Reading {self.__class__.__name__} annotations from {self.source_directory}")

    def _accepts(self, entry: Path) -> bool:
        return entry.is_file() and entry.suffix.lower() == self.extension

    def _open_next_file(self) -> bool:
        self._close_reader()
        for entry in self._entries:
            if not self._accepts(entry):
                continue
            try:
                self._reader = open(entry, 'r', encoding='utf-8')
            except OSError as e:
                raise ParserIOError(f"Could not open {entry}: {e}") from e
            self._current_file = entry
            self._line_number = 0
            self.logger.debug(f"Opened {entry}")
            return True
        return False

    def _close_reader(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None

    def has_next(self) -> bool:
        if self._entries is None:
            return False
        if self._line is not None:
            return True

        while True:
            if self._reader is not None:
                try:
                    for raw_line in self._reader:
                        self._line_number += 1
                        line = raw_line.strip()
                        if line:
                            self._line = line
                            return True
                except (OSError, UnicodeDecodeError) as e:
                    raise ParserIOError(f"Could not read {self._current_file}: {e}") from e
            if not self._open_next_file():
                self._current_file = None
                return False

    def get_next(self) -> Annotation:
        if self._line is None:
            raise OutOfElementsError()
        line, self._line = self._line, None

        try:
            annotation = self.parse_tokens(line.split(), line)
        except WrongFormatError as e:
            raise WrongFormatError(
                f"{self._current_file.name}:{self._line_number}: {e.description}"
            ) from None
        annotation.source_file = self._current_file
        return annotation

    @abstractmethod
    def parse_tokens(self, tokens: list[str], line: str) -> Annotation:
        """
        Build an annotation from one line.

        Raises:
            WrongFormatError: If the line doesn't follow the encoding
        """

    def close(self) -> None:
        self._close_reader()
        self._entries = None
        self._line = None
