"""
Background concat worker.

Single daemon thread consuming a FIFO queue of concat jobs.

Design rules:
- submit() never blocks on FFmpeg; the request returns immediately
- Jobs run one at a time, in submission order
- A failing job is logged and recorded, and never stops the worker
- Outcomes reach clients only through the job registry and logs
"""

import logging
import queue
import threading
from typing import Callable, Optional

from ..records.models import ConcatJob

logger = logging.getLogger(__name__)

_STOP = object()


class ConcatWorker:
    """
    FIFO executor for concat jobs.

    The handler does the actual work (run FFmpeg, update ledger and job
    registry). The worker only owns ordering and the thread.
    """

    def __init__(self, handler: Callable[[ConcatJob], None], name: str = "concat-worker"):
        self._handler = handler
        self._name = name
        self._queue: "queue.Queue" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._pending = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def pending_count(self) -> int:
        """Jobs submitted but not yet finished (queued + running)."""
        with self._lock:
            return self._pending

    def start(self) -> None:
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()
        logger.info("[ConcatWorker] Started")

    def stop(self, timeout: Optional[float] = None) -> None:
        """Finish queued jobs, then stop the thread."""
        thread = self._thread
        if thread is None or not thread.is_alive():
            return
        self._queue.put(_STOP)
        thread.join(timeout)
        logger.info("[ConcatWorker] Stopped")

    def submit(self, job: ConcatJob) -> int:
        """
        Queue a job, starting the worker thread if needed.

        Returns:
            Number of jobs ahead of and including this one
        """
        self.start()
        with self._lock:
            self._pending += 1
            position = self._pending
        self._queue.put(job)
        logger.info(f"[ConcatWorker] Job {job.id} enqueued at position {position}")
        return position

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every submitted job has finished.

        Returns:
            True if idle, False if the timeout expired first
        """
        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                break
            try:
                self._handler(item)
            except Exception:
                logger.exception(f"[ConcatWorker] Unhandled error in job {item.id}")
            finally:
                with self._idle:
                    self._pending -= 1
                    self._idle.notify_all()
