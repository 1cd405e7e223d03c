"""
Serializer interface and shared helpers.

Serializers follow a push protocol:

    serializer.init(destination)
    for annotation in annotations:
        serializer.push(annotation)
    serializer.finish()

``finish`` is called exactly once. Formats that group output by file only
touch disk there; streaming formats write on every ``push``.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from pathlib import Path
from typing import Optional

from ..core.constants import SourceType, TEXT_EXTENSION
from ..core.errors import (
    MissingSourceFileError,
    SerializerIOError,
    StreamClosedError,
    WrongDestinationError,
    WrongExtensionError,
)
from ..core.logger import LoggerMixin
from ..models import Annotation


def format_number(value: float) -> str:
    """Shortest text for a coordinate: ``45.0`` -> ``45``, ``0.408`` -> ``0.408``."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def prepare_destination_file(path, extension: str) -> Path:
    """
    Check a single-file destination and create its parent directory.

    A missing extension is added; any other extension is rejected.

    Raises:
        WrongDestinationError: If the path is a directory
        WrongExtensionError: If the extension doesn't match
        SerializerIOError: If the parent directory cannot be created
    """
    path = Path(path)
    if path.is_dir():
        raise WrongDestinationError(expected=SourceType.SINGLE_FILE, found=SourceType.MULTIPLE_FILES)

    if not path.suffix:
        path = path.with_suffix(extension)
    elif path.suffix.lower() != extension:
        raise WrongExtensionError(expected=extension, found=path.suffix)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SerializerIOError(f"Could not create {path.parent}: {e}") from e
    return path


def prepare_destination_directory(path) -> Path:
    """
    Check a multi-file destination, creating it when missing.

    Raises:
        WrongDestinationError: If the path is a regular file
        SerializerIOError: If the directory cannot be created
    """
    path = Path(path)
    if path.exists() and not path.is_dir():
        raise WrongDestinationError(expected=SourceType.MULTIPLE_FILES, found=SourceType.SINGLE_FILE)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SerializerIOError(f"Could not create {path}: {e}") from e
    return path


class FormatSerializer(ABC, LoggerMixin):
    """Writes a stream of annotations in one encoding."""

    def __init__(self):
        self.destination: Optional[Path] = None
        self._closed = False

    @abstractmethod
    def init(self, destination) -> None:
        """
        Prepare the destination.

        Raises:
            SerializerError: If the destination doesn't fit the encoding
        """

    @abstractmethod
    def push(self, annotation: Annotation) -> None:
        """
        Add one annotation.

        Raises:
            StreamClosedError: After ``finish`` or ``close``
            SerializerError: If the annotation lacks data this encoding needs
        """

    @abstractmethod
    def finish(self) -> None:
        """
        Flush buffered state and release the destination.

        Raises:
            StreamClosedError: If already finished
        """

    def close(self) -> None:
        """Release handles without committing buffered output."""
        self._closed = True

    def _check_open(self) -> None:
        if self._closed or self.destination is None:
            raise StreamClosedError()


def output_file_name(annotation: Annotation) -> str:
    """
    Name of the per-image text file an annotation belongs in.

    Text sources keep their file name. Records read from a single-file
    container (JSON, CSV) are named after their image instead.

    Raises:
        MissingSourceFileError: If neither a text source nor an image path is known
    """
    source = annotation.source_file
    if source is not None and source.suffix.lower() == TEXT_EXTENSION:
        return source.name
    if annotation.image.path is not None:
        return Path(annotation.image.path).stem + TEXT_EXTENSION
    raise MissingSourceFileError(
        "Annotation has no source text file or image path to name its output file"
    )


class GroupedTextSerializer(FormatSerializer):
    """
    Writes one text file per image, one line per annotation.

    Lines are rendered at ``push`` time, so an annotation this encoding can't
    represent fails immediately, and grouped per output file until
    ``finish`` writes them all.
    """

    def __init__(self):
        super().__init__()
        self._lines: defaultdict[str, list[str]] = defaultdict(list)

    def init(self, destination) -> None:
        self.destination = prepare_destination_directory(destination)
        self.logger.debug(f"Writing {self.__class__.__name__} output to {self.destination}")

    def push(self, annotation: Annotation) -> None:
        self._check_open()
        line = self.format_line(annotation)
        self._lines[output_file_name(annotation)].append(line)

    @abstractmethod
    def format_line(self, annotation: Annotation) -> str:
        """Render one annotation, raising a SerializerError if it can't be."""

    def finish(self) -> None:
        self._check_open()
        self._closed = True

        for file_name, lines in self._lines.items():
            annotation_path = self.destination / file_name
            try:
                with open(annotation_path, 'w', encoding='utf-8') as f:
                    for line in lines:
                        f.write(f"{line}\n")
            except OSError as e:
                raise SerializerIOError(f"Could not write {annotation_path}: {e}") from e

        self.logger.info(f"Wrote {len(self._lines)} annotation files to {self.destination}")
        self._lines.clear()

    def close(self) -> None:
        super().close()
        self._lines.clear()
