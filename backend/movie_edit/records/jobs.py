"""
Concat job registry.

Keeps the status of every concat job handed to the background worker so
clients can poll for the outcome instead of reading server logs.
"""

import threading
from datetime import datetime
from typing import Dict, List, Optional

from .errors import ConcatJobNotFoundError
from .models import ConcatJob, ConcatJobStatus


class ConcatJobRegistry:
    """Thread-safe job_id -> ConcatJob map."""

    def __init__(self):
        self._jobs: Dict[str, ConcatJob] = {}
        self._lock = threading.Lock()

    def add(self, job: ConcatJob) -> None:
        with self._lock:
            if job.id in self._jobs:
                raise ValueError(f"Concat job with ID '{job.id}' already exists")
            self._jobs[job.id] = job.model_copy(deep=True)

    def get(self, job_id: str) -> Optional[ConcatJob]:
        with self._lock:
            job = self._jobs.get(job_id)
            return job.model_copy(deep=True) if job else None

    def get_or_raise(self, job_id: str) -> ConcatJob:
        job = self.get(job_id)
        if job is None:
            raise ConcatJobNotFoundError(job_id)
        return job

    def list_jobs(self) -> List[ConcatJob]:
        """All jobs, newest first."""
        with self._lock:
            jobs = [job.model_copy(deep=True) for job in self._jobs.values()]
        jobs.sort(key=lambda j: j.created_at, reverse=True)
        return jobs

    def mark_running(self, job_id: str) -> None:
        with self._lock:
            job = self._require(job_id)
            job.status = ConcatJobStatus.RUNNING
            job.started_at = datetime.now()

    def mark_completed(self, job_id: str, output_path: str) -> None:
        with self._lock:
            job = self._require(job_id)
            job.status = ConcatJobStatus.COMPLETED
            job.output_path = output_path
            job.completed_at = datetime.now()

    def mark_failed(self, job_id: str, reason: str, details: Optional[str] = None) -> None:
        with self._lock:
            job = self._require(job_id)
            job.status = ConcatJobStatus.FAILED
            job.failure_reason = reason
            job.details = details
            job.completed_at = datetime.now()

    def _require(self, job_id: str) -> ConcatJob:
        job = self._jobs.get(job_id)
        if job is None:
            raise ConcatJobNotFoundError(job_id)
        return job
