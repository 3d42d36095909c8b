from enum import Enum


class ErrorKind(Enum):
    """Category of a user-facing failure."""

    FILE_NOT_FOUND = "file_not_found"
    UNREADABLE = "unreadable"
    UNSUPPORTED_FORMAT = "unsupported_format"
    DIMENSION_MISMATCH = "dimension_mismatch"
    INVALID_INPUT = "invalid_input"
    INVALID_ENUM = "invalid_enum"
    INVALID_EXTENSION = "invalid_extension"
    WRITE_FAILED = "write_failed"


class WatermarkError(Exception):
    """A run cannot continue. The message is shown to the user as is."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ImageNotFoundError(WatermarkError):
    kind = ErrorKind.FILE_NOT_FOUND


class UnreadableImageError(WatermarkError):
    kind = ErrorKind.UNREADABLE


class UnsupportedFormatError(WatermarkError):
    kind = ErrorKind.UNSUPPORTED_FORMAT


class DimensionMismatchError(WatermarkError):
    kind = ErrorKind.DIMENSION_MISMATCH


class InvalidInputError(WatermarkError):
    kind = ErrorKind.INVALID_INPUT


class InvalidPlacementError(WatermarkError):
    kind = ErrorKind.INVALID_ENUM


class InvalidExtensionError(WatermarkError):
    kind = ErrorKind.INVALID_EXTENSION


class OutputWriteError(WatermarkError):
    kind = ErrorKind.WRITE_FAILED


class CompositionError(RuntimeError):
    """Placement mapped a base pixel outside the watermark. Never a user error."""
