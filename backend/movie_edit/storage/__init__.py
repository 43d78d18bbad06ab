"""
Identifier and storage layer.

Generates identifiers for uploaded media, derives every on-disk path the
service uses and validates file-type admissibility.
"""

from .errors import InvalidFileTypeError, NoFilesProvidedError, FileWriteError
from .models import UploadedAsset
from .uploads import UploadStore, is_allowed_file_type, ensure_allowed_file_type

__all__ = [
    # Errors
    "InvalidFileTypeError",
    "NoFilesProvidedError",
    "FileWriteError",
    # Models
    "UploadedAsset",
    # Store
    "UploadStore",
    "is_allowed_file_type",
    "ensure_allowed_file_type",
]
