"""
Service error taxonomy.

Every failure surfaced to a client derives from MovieEditError. Each class
carries the HTTP status and the machine-readable category used in error
responses; subpackages define their specific errors on top of these.
"""

from typing import Optional


class MovieEditError(Exception):
    """Base exception for all movie-edit failures."""

    status_code: int = 500
    category: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        body = {"error": self.category, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(MovieEditError):
    """Bad input shape, disallowed extension or missing required field."""

    status_code = 400
    category = "validation_error"


class NotFoundError(MovieEditError):
    """Unknown identifier or unresolvable download target."""

    status_code = 404
    category = "not_found"


class ExternalToolError(MovieEditError):
    """The external media tool failed or produced unusable output."""

    status_code = 500
    category = "external_tool_error"


class StorageIOError(MovieEditError):
    """A file could not be read, written or inspected."""

    status_code = 500
    category = "io_error"
