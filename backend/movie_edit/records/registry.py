"""
In-memory video record store.

The store provides:
- Record creation and lazy creation by identifier
- Append-only cut and concat histories
- final_path updates
- Listing all records

One lock guards the whole store. Reads hand out deep copies so callers can
never mutate stored state behind the lock's back.
"""

import threading
from typing import Dict, List, Optional

from .errors import VideoNotFoundError
from .models import VideoRecord, CutOperation, ConcatOperation


class VideoRecordStore:
    """
    Thread-safe registry of VideoRecords keyed by video id.

    Lives for the process lifetime; nothing is persisted.
    """

    def __init__(self):
        # video_id -> VideoRecord
        self._records: Dict[str, VideoRecord] = {}
        self._lock = threading.RLock()

    def create(self, video_id: str, original_path: str) -> VideoRecord:
        """
        Register a freshly uploaded video.

        Raises:
            ValueError: If a record with the same id already exists
        """
        with self._lock:
            if video_id in self._records:
                raise ValueError(f"Video with ID '{video_id}' already exists")
            record = VideoRecord(id=video_id, original_path=original_path)
            self._records[video_id] = record
            return record.model_copy(deep=True)

    def get_or_create(self, video_id: str, original_path: str = "") -> VideoRecord:
        """Return the record for video_id, creating an empty one if absent."""
        with self._lock:
            record = self._records.get(video_id)
            if record is None:
                record = VideoRecord(id=video_id, original_path=original_path)
                self._records[video_id] = record
            return record.model_copy(deep=True)

    def get(self, video_id: str) -> Optional[VideoRecord]:
        with self._lock:
            record = self._records.get(video_id)
            return record.model_copy(deep=True) if record else None

    def get_or_raise(self, video_id: str) -> VideoRecord:
        """
        Raises:
            VideoNotFoundError: If the video does not exist
        """
        record = self.get(video_id)
        if record is None:
            raise VideoNotFoundError(video_id)
        return record

    def exists(self, video_id: str) -> bool:
        with self._lock:
            return video_id in self._records

    def append_cut(self, video_id: str, operation: CutOperation) -> VideoRecord:
        """
        Append a trim to the video's history.

        A missing record is created with the operation's output as its
        original path, since its true origin is unknown.
        """
        with self._lock:
            record = self._get_or_create_locked(video_id, operation.output_path)
            record.cut_history.append(operation)
            return record.model_copy(deep=True)

    def append_concat(self, video_id: str, operation: ConcatOperation) -> VideoRecord:
        """Append a concat to the video's history (same fallback as append_cut)."""
        with self._lock:
            record = self._get_or_create_locked(video_id, operation.output_path)
            record.concat_history.append(operation)
            return record.model_copy(deep=True)

    def set_final(self, video_id: str, path: str) -> VideoRecord:
        """
        Overwrite final_path unconditionally.

        A missing record is created with path as its original path.
        """
        with self._lock:
            record = self._get_or_create_locked(video_id, path)
            record.final_path = path
            return record.model_copy(deep=True)

    def list_all(self) -> List[VideoRecord]:
        """All records in no guaranteed order."""
        with self._lock:
            return [record.model_copy(deep=True) for record in self._records.values()]

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def _get_or_create_locked(self, video_id: str, original_path: str) -> VideoRecord:
        record = self._records.get(video_id)
        if record is None:
            record = VideoRecord(id=video_id, original_path=original_path)
            self._records[video_id] = record
        return record
