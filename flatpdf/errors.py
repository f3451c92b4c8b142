from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    FORMAT = "format"
    IO = "io"
    USAGE = "usage"


class FlatPdfError(Exception):
    """Base class for every error raised by flatpdf; ``kind`` tells the category."""

    kind: ErrorKind = ErrorKind.USAGE

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class ImageFormatError(FlatPdfError, ValueError):
    """Raised for malformed JPEG bytes (bad signature, truncated or missing frame)."""

    kind = ErrorKind.FORMAT


class ImageReadError(FlatPdfError, OSError):
    """Raised when image bytes cannot be fetched from a path or a storage object."""

    kind = ErrorKind.IO

    def __init__(self, path: str, detail: str = ""):
        message = f"Cannot read image at path: {path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.path = path


class StorageCapabilityError(FlatPdfError, TypeError):
    kind = ErrorKind.USAGE


class DocumentFinalizedError(FlatPdfError, RuntimeError):
    kind = ErrorKind.USAGE
