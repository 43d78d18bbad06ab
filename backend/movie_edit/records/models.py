"""
Video record and ledger models.

All models use Pydantic. Histories only ever grow; nothing here is deleted
for the lifetime of the process.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CutOperation(BaseModel):
    """A successful trim applied to a video."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    start_time: str
    end_time: str
    output_path: str


class ConcatOperation(BaseModel):
    """A successful concat a video took part in."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    input_video_ids: List[str]
    output_path: str


class VideoRecord(BaseModel):
    """
    Everything known about one video identifier.

    Created on upload, or lazily the first time an identifier is referenced
    (e.g. download resolution of a concat job id). final_path is the current
    representative output and may be overwritten; the histories are
    append-only.
    """

    model_config = ConfigDict(extra="forbid")

    id: str
    original_path: str
    cut_history: List[CutOperation] = Field(default_factory=list)
    concat_history: List[ConcatOperation] = Field(default_factory=list)
    final_path: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)


class LedgerKind(str, Enum):
    CUT = "cut"
    CONCAT = "concat"


class LedgerEntry(BaseModel):
    """
    One produced output in the task result ledger.

    owner_id is the identifier the output is looked up by: the filename stem
    for cut outputs (cut_<id>_<start>), the concat job id for concat outputs.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: LedgerKind
    owner_id: str
    path: str
    recorded_at: datetime = Field(default_factory=datetime.now)


class ConcatJobStatus(str, Enum):
    """
    Background concat job status.

    QUEUED -> RUNNING -> COMPLETED | FAILED
    """

    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ConcatJob(BaseModel):
    """A concat request handed off to the background worker."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    input_video_ids: List[str]
    input_paths: List[str]
    status: ConcatJobStatus = ConcatJobStatus.QUEUED
    output_path: Optional[str] = None
    failure_reason: Optional[str] = None
    details: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def is_terminal(self) -> bool:
        return self.status in (ConcatJobStatus.COMPLETED, ConcatJobStatus.FAILED)
