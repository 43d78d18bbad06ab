"""
Storage-specific errors.
"""

from typing import Iterable

from ..errors import ValidationError, StorageIOError


class InvalidFileTypeError(ValidationError):
    """Raised when an uploaded file's extension is not on the allow-list."""

    def __init__(self, filename: str, allowed: Iterable[str]):
        self.filename = filename
        self.allowed = list(allowed)
        formats = ", ".join(ext.lstrip(".") for ext in self.allowed)
        super().__init__(
            f"File {filename} has an unsupported format. Allowed formats are: {formats}."
        )


class NoFilesProvidedError(ValidationError):
    """Raised when a multipart request carries no video files."""

    def __init__(self, field: str = "videos"):
        self.field = field
        super().__init__(f"Please upload at least one video in the '{field}' form field.")


class FileWriteError(StorageIOError):
    """Raised when an upload cannot be persisted to the storage directory."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        super().__init__(
            f"An error occurred while saving the file: {filename}",
            details=reason,
        )
