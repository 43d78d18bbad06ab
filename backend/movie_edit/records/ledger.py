"""
Task result ledger.

Process-wide, append-only log of every cut and concat output produced,
independent of the video records. Re-execution iterates it; download
resolution falls back to it.

Each entry is tagged with the identifier it belongs to, so lookups go
through an explicit id -> path mapping instead of searching filenames for
the id text (which gives false positives when one id contains another).
"""

import threading
from typing import List, Optional

from .models import LedgerEntry, LedgerKind


class TaskResultLedger:
    """Append-only record of produced outputs, guarded by one lock."""

    def __init__(self):
        self._cut_entries: List[LedgerEntry] = []
        self._concat_entries: List[LedgerEntry] = []
        self._lock = threading.Lock()

    def record_cut_output(self, owner_id: str, path: str) -> LedgerEntry:
        entry = LedgerEntry(kind=LedgerKind.CUT, owner_id=owner_id, path=path)
        with self._lock:
            self._cut_entries.append(entry)
        return entry

    def record_concat_output(self, owner_id: str, path: str) -> LedgerEntry:
        entry = LedgerEntry(kind=LedgerKind.CONCAT, owner_id=owner_id, path=path)
        with self._lock:
            self._concat_entries.append(entry)
        return entry

    def cut_entries(self) -> List[LedgerEntry]:
        """Snapshot of cut entries in recording order."""
        with self._lock:
            return list(self._cut_entries)

    def concat_entries(self) -> List[LedgerEntry]:
        """Snapshot of concat entries in recording order."""
        with self._lock:
            return list(self._concat_entries)

    def cut_outputs(self) -> List[str]:
        return [entry.path for entry in self.cut_entries()]

    def concat_outputs(self) -> List[str]:
        return [entry.path for entry in self.concat_entries()]

    def find_cut_output(self, owner_id: str) -> Optional[str]:
        """First cut output recorded for owner_id, if any."""
        return self._find(self.cut_entries(), owner_id)

    def find_concat_output(self, owner_id: str) -> Optional[str]:
        """First concat output recorded for owner_id, if any."""
        return self._find(self.concat_entries(), owner_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cut_entries) + len(self._concat_entries)

    @staticmethod
    def _find(entries: List[LedgerEntry], owner_id: str) -> Optional[str]:
        for entry in entries:
            if entry.owner_id == owner_id:
                return entry.path
        return None
