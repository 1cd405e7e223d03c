"""
Exception taxonomy for parsing, serializing, and converting annotations.

Every error raised by the package derives from :class:`BoxswapError`, so a
caller can catch one type to learn that a conversion failed. The parse-side
and serialize-side families are closed sets; the base class of each family
doubles as its catch-all.
"""

from typing import Optional


class BoxswapError(Exception):
    """Base class for all conversion errors."""


# ============================================================================
# Parse-side errors
# ============================================================================

class ParserError(BoxswapError):
    """A source dataset could not be read."""


class WrongFileTypeError(ParserError):
    """The source path has the wrong file type or extension."""

    def __init__(self, expected: str, found: str):
        self.expected = expected
        self.found = found
        super().__init__(f"Wrong file type: expected {expected}, found {found}")


class WrongSourceError(ParserError):
    """A single-file format was given a directory, or the other way around."""

    def __init__(self, expected, found):
        self.expected = expected
        self.found = found
        super().__init__(
            f"Wrong source: expected {getattr(expected, 'value', expected)}, "
            f"but got {getattr(found, 'value', found)}"
        )


class WrongFormatError(ParserError):
    """The source content does not follow the encoding."""

    def __init__(self, description: str):
        self.description = description
        super().__init__(f"Wrong format: {description}")


class ParserIOError(ParserError):
    """The underlying file system operation failed while reading."""


class OutOfElementsError(ParserError):
    """``get_next`` was called without a preceding successful ``has_next``."""

    def __init__(self, message: str = "No more elements to parse"):
        super().__init__(message)


# ============================================================================
# Serialize-side errors
# ============================================================================

class SerializerError(BoxswapError):
    """A target dataset could not be written."""


class WrongClassRepresentationError(SerializerError):
    """The annotation's class representation cannot be written by this encoding."""

    def __init__(self, expected: str, found: str):
        self.expected = expected
        self.found = found
        super().__init__(
            f"Unsupported class representation: expected {expected}, found {found}"
        )


class WrongDestinationError(SerializerError):
    """A single-file encoding was pointed at a directory, or the other way around."""

    def __init__(self, expected, found):
        self.expected = expected
        self.found = found
        super().__init__(
            f"Wrong destination: expected {getattr(expected, 'value', expected)}, "
            f"but got {getattr(found, 'value', found)}"
        )


class MissingSourceFileError(SerializerError):
    def __init__(self, message: str = "Annotation has no source file"):
        super().__init__(message)


class MissingImagePathError(SerializerError):
    def __init__(self, message: str = "Annotation has no image path"):
        super().__init__(message)


class MissingClassNameError(SerializerError):
    def __init__(self, message: str = "Annotation has no class name"):
        super().__init__(message)


class MissingClassIdError(SerializerError):
    def __init__(self, message: str = "Annotation has no usable class id"):
        super().__init__(message)


class MissingImageDimensionsError(SerializerError):
    def __init__(self, dimension: str):
        self.dimension = dimension
        super().__init__(f"Annotation image is missing its {dimension}")


class WrongExtensionError(SerializerError):
    def __init__(self, expected: str, found: str):
        self.expected = expected
        self.found = found
        super().__init__(f"Wrong file extension: expected {expected}, found {found}")


class StreamClosedError(SerializerError):
    def __init__(self, message: str = "The stream is closed"):
        super().__init__(message)


class SerializerIOError(SerializerError):
    """The underlying file system operation failed while writing."""


# ============================================================================
# Pipeline errors
# ============================================================================

class TransformError(BoxswapError):
    """A transform could not be applied to an annotation."""

    def __init__(self, message: str, source_file: Optional[str] = None):
        self.source_file = source_file
        super().__init__(message)


class ConfigurationError(BoxswapError):
    """A conversion is missing external configuration it needs."""


class UnknownFormatError(BoxswapError):
    """A format id does not exist in the registry."""

    def __init__(self, format_id: str, known: Optional[list] = None):
        self.format_id = format_id
        options = ", ".join(known) if known else "none"
        super().__init__(f"Unknown format id: {format_id}. Known formats: {options}")


class UnsupportedFormatError(BoxswapError):
    """A known format has no reader or no writer."""
