"""
Video record store, task result ledger and concat job registry.

All state is in memory and owned by the running process.
"""

from .errors import (
    VideoNotFoundError,
    NoVideosError,
    ConcatJobNotFoundError,
    FinalVideoNotFoundError,
    StoredFileMissingError,
)
from .models import (
    CutOperation,
    ConcatOperation,
    VideoRecord,
    LedgerKind,
    LedgerEntry,
    ConcatJobStatus,
    ConcatJob,
)
from .registry import VideoRecordStore
from .ledger import TaskResultLedger
from .jobs import ConcatJobRegistry

__all__ = [
    # Errors
    "VideoNotFoundError",
    "NoVideosError",
    "ConcatJobNotFoundError",
    "FinalVideoNotFoundError",
    "StoredFileMissingError",
    # Models
    "CutOperation",
    "ConcatOperation",
    "VideoRecord",
    "LedgerKind",
    "LedgerEntry",
    "ConcatJobStatus",
    "ConcatJob",
    # Stores
    "VideoRecordStore",
    "TaskResultLedger",
    "ConcatJobRegistry",
]
