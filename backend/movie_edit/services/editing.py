"""
EditingService: sequencing and bookkeeping over FFmpeg.

Every HTTP operation goes through this service:

1. upload            -> store files, register records
2. trim              -> FFmpeg trim, append cut history, record ledger entry
3. submit_concat     -> store files, queue a background concat job
4. perform_all       -> re-run every recorded cut, then re-concat all concat outputs
5. resolve_download  -> record -> cut ledger -> concat ledger, first match wins
6. video info        -> read records

The service owns no globals. Stores, runner and worker are passed in (or
built from Settings) and the instance lives on app.state.
"""

import logging
import os
import time
import uuid
from dataclasses import dataclass, field
from typing import BinaryIO, List, Optional, Sequence, Tuple, TYPE_CHECKING

from ..errors import MovieEditError, StorageIOError, ValidationError
from ..execution.ffmpeg import FFmpegRunner
from ..execution.worker import ConcatWorker
from ..records.errors import (
    NoVideosError,
    FinalVideoNotFoundError,
    StoredFileMissingError,
)
from ..records.jobs import ConcatJobRegistry
from ..records.ledger import TaskResultLedger
from ..records.models import (
    ConcatJob,
    ConcatOperation,
    CutOperation,
    VideoRecord,
)
from ..records.registry import VideoRecordStore
from ..storage import paths
from ..storage.errors import NoFilesProvidedError
from ..storage.models import UploadedAsset
from ..storage.uploads import UploadStore

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)

# (client filename, readable stream)
IncomingFile = Tuple[str, BinaryIO]


@dataclass
class PerformAllResult:
    """Outcome of re-executing every recorded task."""

    cut_outputs: List[str] = field(default_factory=list)
    output_file: Optional[str] = None
    concat_job_id: Optional[str] = None


class EditingService:
    """
    Orchestrates storage, FFmpeg jobs, the record store and the ledger.

    Thread-safe: request threads and the concat worker share one instance.
    Each store guards itself; FFmpeg always runs outside any lock.
    """

    def __init__(
        self,
        upload_store: UploadStore,
        runner: FFmpegRunner,
        records: Optional[VideoRecordStore] = None,
        ledger: Optional[TaskResultLedger] = None,
        concat_jobs: Optional[ConcatJobRegistry] = None,
        worker: Optional[ConcatWorker] = None,
    ):
        self.upload_store = upload_store
        self.runner = runner
        self.records = records or VideoRecordStore()
        self.ledger = ledger or TaskResultLedger()
        self.concat_jobs = concat_jobs or ConcatJobRegistry()
        self.worker = worker or ConcatWorker(self.run_concat_job)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "EditingService":
        upload_store = UploadStore(
            upload_dir=settings.upload_dir,
            allowed_extensions=settings.allowed_extensions,
            chunk_size=settings.copy_chunk_size,
        )
        runner = FFmpegRunner(
            ffmpeg_path=settings.ffmpeg_path,
            timeout=settings.ffmpeg_timeout_seconds,
        )
        return cls(upload_store=upload_store, runner=runner)

    @property
    def upload_dir(self) -> str:
        return self.upload_store.upload_dir

    def start(self) -> None:
        self.upload_store.ensure_directory()
        self.worker.start()

    def shutdown(self, timeout: Optional[float] = None) -> None:
        self.worker.stop(timeout)

    # =========================================================================
    # Upload
    # =========================================================================

    def upload(self, files: Sequence[IncomingFile]) -> List[UploadedAsset]:
        """
        Store uploaded files and register an empty record for each.

        Every filename is validated before anything is written, so a request
        with one bad extension stores nothing and creates no record.

        Raises:
            NoFilesProvidedError: Empty request
            InvalidFileTypeError: Disallowed extension
            FileWriteError: Storage failure
        """
        assets = self._store_all(files)
        logger.info(f"[Upload] Stored {len(assets)} file(s)")
        return assets

    def _store_all(self, files: Sequence[IncomingFile]) -> List[UploadedAsset]:
        if not files:
            raise NoFilesProvidedError()

        for filename, _ in files:
            self.upload_store.admit(filename)

        assets = []
        for filename, stream in files:
            asset = self.upload_store.store(stream, filename)
            self.records.create(asset.id, asset.file_path)
            assets.append(asset)
        return assets

    # =========================================================================
    # Trim
    # =========================================================================

    def trim(self, video_id: str, start_time: str, end_time: str) -> str:
        """
        Cut [start_time, end_time] out of a known video.

        Returns:
            Path of the verified cut output

        Raises:
            VideoNotFoundError: Unknown id (nothing is run or written)
            ExternalToolError: FFmpeg failure, timeout, or empty/missing output
        """
        record = self.records.get_or_raise(video_id)
        output_path = paths.cut_output_path(self.upload_dir, video_id, start_time, record.original_path)

        logger.info(f"[Trim] {video_id}: {start_time} -> {end_time}")
        self.runner.trim(record.original_path, start_time, end_time, output_path)

        operation = CutOperation(start_time=start_time, end_time=end_time, output_path=output_path)
        self.records.append_cut(video_id, operation)
        self.records.set_final(video_id, output_path)
        self.ledger.record_cut_output(paths.artifact_id(output_path), output_path)

        logger.info(f"[Trim] {video_id} completed: {output_path}")
        return output_path

    # =========================================================================
    # Concat
    # =========================================================================

    def submit_concat(self, files: Sequence[IncomingFile]) -> ConcatJob:
        """
        Store the inputs and hand a concat job to the background worker.

        Returns immediately with the queued job; the outcome is available
        through get_concat_job() and the logs.
        """
        assets = self._store_all(files)

        job = ConcatJob(
            input_video_ids=[asset.id for asset in assets],
            input_paths=[os.path.abspath(asset.file_path) for asset in assets],
        )
        self.concat_jobs.add(job)
        self.worker.submit(job)
        return job

    def run_concat_job(self, job: ConcatJob) -> None:
        """
        Execute one queued concat job. Called on the worker thread.

        Failures are recorded on the job and logged, never raised.
        """
        self.concat_jobs.mark_running(job.id)
        output_path = paths.concat_output_path(self.upload_dir)
        manifest = paths.manifest_path(self.upload_dir, job.id)

        try:
            self.runner.concat(job.input_paths, output_path, manifest)
        except MovieEditError as e:
            logger.error(f"[ConcatWorker] Job {job.id} failed: {e.message}\n{e.details or ''}")
            self.concat_jobs.mark_failed(job.id, e.message, e.details)
            return
        except Exception as e:
            logger.exception(f"[ConcatWorker] Job {job.id} failed unexpectedly")
            self.concat_jobs.mark_failed(job.id, "Concat job failed unexpectedly", str(e))
            return

        self.ledger.record_concat_output(job.id, output_path)
        operation = ConcatOperation(input_video_ids=list(job.input_video_ids), output_path=output_path)
        for video_id in job.input_video_ids:
            self.records.append_concat(video_id, operation)
        self.concat_jobs.mark_completed(job.id, output_path)

        logger.info(f"[ConcatWorker] Concat completed: {output_path}")

    def get_concat_job(self, job_id: str) -> ConcatJob:
        return self.concat_jobs.get_or_raise(job_id)

    # =========================================================================
    # Re-execute all
    # =========================================================================

    def perform_all(self) -> PerformAllResult:
        """
        Re-run every recorded task.

        Phase 1 stream-copies each cut output to a re_cut_ sibling. Phase 2
        concatenates every concat output into one re_concat_ file. All files
        written by one call carry the same pass stamp, so nothing recorded
        earlier is overwritten.

        Both phases work on a snapshot taken when the phase starts: outputs
        appended during this call are only re-processed by a later call.
        The first failure aborts the call; files and ledger entries already
        produced stay where they are. Phase 2 is skipped when no concat
        output has been recorded.

        Raises:
            ExternalToolError: Any FFmpeg failure
            ManifestWriteError: Manifest could not be written
        """
        result = PerformAllResult()
        stamp = time.time_ns()

        cut_snapshot = self.ledger.cut_outputs()
        logger.info(f"[PerformAll] Re-running {len(cut_snapshot)} cut output(s)")
        for path in cut_snapshot:
            output_path = paths.rerun_output_path(path, stamp)
            self.runner.remux(path, output_path)
            self.ledger.record_cut_output(paths.artifact_id(output_path), output_path)
            result.cut_outputs.append(output_path)

        concat_snapshot = self.ledger.concat_outputs()
        if not concat_snapshot:
            logger.info("[PerformAll] No concat outputs recorded, skipping re-concat")
            return result

        job_id = str(uuid.uuid4())
        output_path = paths.concat_output_path(self.upload_dir, rerun=True, stamp=stamp)
        manifest = paths.manifest_path(self.upload_dir, job_id)

        logger.info(f"[PerformAll] Re-concatenating {len(concat_snapshot)} concat output(s)")
        self.runner.concat(concat_snapshot, output_path, manifest)
        self.ledger.record_concat_output(job_id, output_path)

        result.output_file = output_path
        result.concat_job_id = job_id
        return result

    # =========================================================================
    # Lookup & download
    # =========================================================================

    def resolve_download(self, video_id: str) -> str:
        """
        Resolve an identifier to an existing file.

        Order, first match wins:
        1. the video record's original path
        2. the cut output whose identifier (filename stem) is the id
        3. the concat output of the job with that id

        On success the record's final_path is set (creating the record if
        needed).

        Raises:
            ValidationError: Empty id
            FinalVideoNotFoundError: Nothing matches
            StoredFileMissingError: Match is gone from disk
            StorageIOError: The file could not be inspected
        """
        if not video_id:
            raise ValidationError(
                "No video ID provided",
                details="Please provide a valid video ID to download the final video.",
            )

        path = None
        record = self.records.get(video_id)
        if record is not None:
            path = record.original_path
        if path is None:
            path = self.ledger.find_cut_output(video_id)
        if path is None:
            path = self.ledger.find_concat_output(video_id)
        if path is None:
            raise FinalVideoNotFoundError(video_id)

        try:
            os.stat(path)
        except FileNotFoundError:
            raise StoredFileMissingError(video_id, path)
        except OSError as e:
            raise StorageIOError(f"Failed to check file existence for video ID {video_id}", details=str(e)) from e

        self.records.set_final(video_id, path)
        logger.info(f"[Download] {video_id} resolved to {path}")
        return path

    def download_url(self, video_id: str, base_url: str, static_prefix: str) -> str:
        path = self.resolve_download(video_id)
        return paths.build_download_url(base_url, static_prefix, path, self.upload_dir)

    # =========================================================================
    # Info
    # =========================================================================

    def get_video_info(self, video_id: str) -> VideoRecord:
        return self.records.get_or_raise(video_id)

    def list_video_info(self) -> List[VideoRecord]:
        """
        Raises:
            NoVideosError: If no record exists yet
        """
        records = self.records.list_all()
        if not records:
            raise NoVideosError()
        return records
