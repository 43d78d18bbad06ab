"""
Upload admission and streamed storage.

Uploaded files are copied to the storage directory in bounded chunks and
named after a freshly generated UUIDv4, never after the client's filename.
"""

import logging
import os
import shutil
import uuid
from typing import BinaryIO, Iterable, List

from .errors import InvalidFileTypeError, FileWriteError
from .models import UploadedAsset
from .paths import upload_path

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024


def is_allowed_file_type(filename: str, allowed_extensions: Iterable[str]) -> bool:
    """Case-sensitive extension check against the allow-list."""
    ext = os.path.splitext(filename)[1]
    return ext in set(allowed_extensions)


def ensure_allowed_file_type(filename: str, allowed_extensions: Iterable[str]) -> None:
    allowed = list(allowed_extensions)
    if not is_allowed_file_type(filename, allowed):
        raise InvalidFileTypeError(filename, allowed)


class UploadStore:
    """
    Writes uploaded media into the flat storage directory.

    Stateless apart from its configuration; record keeping is the caller's
    job (see EditingService.upload).
    """

    def __init__(
        self,
        upload_dir: str,
        allowed_extensions: Iterable[str],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.upload_dir = upload_dir
        self.allowed_extensions: List[str] = list(allowed_extensions)
        self.chunk_size = chunk_size

    def ensure_directory(self) -> None:
        os.makedirs(self.upload_dir, exist_ok=True)

    def admit(self, filename: str) -> None:
        """
        Validate a filename before anything is written.

        Raises:
            InvalidFileTypeError: If the extension is not allowed
        """
        ensure_allowed_file_type(filename, self.allowed_extensions)

    def store(self, stream: BinaryIO, filename: str) -> UploadedAsset:
        """
        Persist an upload under a new identifier.

        The content is copied chunk by chunk so the whole file is never held
        in memory. A partially written file is removed before the error is
        raised.

        Args:
            stream: Readable binary stream with the file content
            filename: Client-supplied filename (only its extension is used)

        Returns:
            The stored asset

        Raises:
            InvalidFileTypeError: If the extension is not allowed
            FileWriteError: If the destination cannot be created or written
        """
        self.admit(filename)
        try:
            self.ensure_directory()
        except OSError as e:
            raise FileWriteError(filename, str(e)) from e

        asset_id = str(uuid.uuid4())
        destination = upload_path(self.upload_dir, asset_id, filename)

        try:
            with open(destination, "wb") as out:
                shutil.copyfileobj(stream, out, self.chunk_size)
        except OSError as e:
            logger.error(f"[Upload] Failed to write {filename} to {destination}: {e}")
            try:
                os.remove(destination)
            except FileNotFoundError:
                pass
            raise FileWriteError(filename, str(e)) from e

        logger.info(f"[Upload] Stored {filename} as {destination}")
        return UploadedAsset(id=asset_id, file_path=destination)
