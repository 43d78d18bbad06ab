"""
FFmpeg invoker.

Builds and runs exactly one external command per call:

- trim:   -i <in> -ss <start> -to <end> -c copy <out>
- remux:  -i <in> -c copy <out>            (stream-copy pass-through)
- concat: -f concat -safe 0 -i <manifest> -c copy <out>

Design rules:
- One subprocess per call, no automatic retry
- stdout and stderr captured together for diagnostics
- Non-zero exit code = failure
- Output must exist and be non-empty, even when FFmpeg exits 0
- Optional timeout: SIGTERM, then SIGKILL if the process lingers
- Timestamps are passed through untouched; FFmpeg rejects bad ones
"""

import logging
import os
import shutil
import subprocess
from datetime import datetime
from typing import List, Optional, Sequence

from .errors import (
    ToolNotAvailableError,
    ToolLaunchError,
    ToolExecutionError,
    ToolTimeoutError,
    OutputVerificationError,
    ManifestWriteError,
)
from .results import ExecutionResult
from ..storage.paths import render_manifest

logger = logging.getLogger(__name__)


COMMON_FFMPEG_PATHS = [
    "/usr/local/bin/ffmpeg",
    "/usr/bin/ffmpeg",
    "/opt/homebrew/bin/ffmpeg",
]

# Seconds to wait after SIGTERM before escalating to SIGKILL
TERMINATE_GRACE_SECONDS = 5


class FFmpegRunner:
    """
    Runs stream-copy trim, remux and concat jobs through FFmpeg.

    The runner holds no per-job state and is safe to share between request
    threads and the background concat worker.
    """

    def __init__(self, ffmpeg_path: Optional[str] = None, timeout: Optional[float] = None):
        """
        Args:
            ffmpeg_path: Explicit binary; discovered on PATH when omitted
            timeout: Seconds before a running job is terminated (None = wait forever)
        """
        self._configured_path = ffmpeg_path
        self._ffmpeg_path: Optional[str] = None
        self.timeout = timeout

    @property
    def available(self) -> bool:
        return self._find_ffmpeg() is not None

    def _find_ffmpeg(self) -> Optional[str]:
        if self._ffmpeg_path:
            return self._ffmpeg_path

        if self._configured_path:
            resolved = shutil.which(self._configured_path)
            if resolved:
                self._ffmpeg_path = resolved
            return resolved

        ffmpeg_path = shutil.which("ffmpeg")
        if ffmpeg_path:
            self._ffmpeg_path = ffmpeg_path
            return ffmpeg_path

        for path in COMMON_FFMPEG_PATHS:
            if os.path.isfile(path) and os.access(path, os.X_OK):
                self._ffmpeg_path = path
                return path

        return None

    def _require_ffmpeg(self) -> str:
        ffmpeg_path = self._find_ffmpeg()
        if not ffmpeg_path:
            searched = [self._configured_path] if self._configured_path else ["PATH"] + COMMON_FFMPEG_PATHS
            raise ToolNotAvailableError(searched)
        return ffmpeg_path

    # =========================================================================
    # Command builders
    # =========================================================================

    def build_trim_command(self, input_path: str, start_time: str, end_time: str, output_path: str) -> List[str]:
        return [
            self._require_ffmpeg(), "-y",
            "-i", input_path,
            "-ss", start_time,
            "-to", end_time,
            "-c", "copy",
            output_path,
        ]

    def build_remux_command(self, input_path: str, output_path: str) -> List[str]:
        return [
            self._require_ffmpeg(), "-y",
            "-i", input_path,
            "-c", "copy",
            output_path,
        ]

    def build_concat_command(self, manifest_path: str, output_path: str) -> List[str]:
        return [
            self._require_ffmpeg(), "-y",
            "-f", "concat",
            "-safe", "0",
            "-i", manifest_path,
            "-c", "copy",
            output_path,
        ]

    # =========================================================================
    # Jobs
    # =========================================================================

    def trim(self, input_path: str, start_time: str, end_time: str, output_path: str) -> ExecutionResult:
        """
        Cut [start_time, end_time] out of input_path without re-encoding.

        Raises:
            ToolNotAvailableError: FFmpeg not found
            ToolLaunchError: FFmpeg process could not be started
            ToolExecutionError: Non-zero exit
            ToolTimeoutError: Timeout exceeded
            OutputVerificationError: Output missing or zero bytes
        """
        cmd = self.build_trim_command(input_path, start_time, end_time, output_path)
        return self._run("trim", cmd, output_path)

    def remux(self, input_path: str, output_path: str) -> ExecutionResult:
        """Stream-copy input_path to output_path unchanged."""
        cmd = self.build_remux_command(input_path, output_path)
        return self._run("remux", cmd, output_path)

    def concat(self, input_paths: Sequence[str], output_path: str, manifest_path: str) -> ExecutionResult:
        """
        Join input_paths, in order, into output_path.

        The manifest is written to manifest_path (which must be unique to this
        job) and removed once FFmpeg exits, whatever the outcome.

        Raises:
            ManifestWriteError: Manifest could not be written
            plus everything trim() raises
        """
        cmd = self.build_concat_command(manifest_path, output_path)

        try:
            with open(manifest_path, "w", encoding="utf-8") as manifest:
                manifest.write(render_manifest(input_paths))
        except OSError as e:
            raise ManifestWriteError(manifest_path, str(e)) from e

        try:
            return self._run("concat", cmd, output_path)
        finally:
            try:
                os.remove(manifest_path)
            except FileNotFoundError:
                pass

    # =========================================================================
    # Subprocess handling
    # =========================================================================

    def _run(self, job: str, cmd: List[str], output_path: str) -> ExecutionResult:
        started_at = datetime.now()
        logger.info(f"[FFmpeg] Executing {job}: {' '.join(cmd)}")

        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                errors="replace",
            )
        except OSError as e:
            # Forget the cached binary so the next call searches again
            self._ffmpeg_path = None
            logger.error(f"[FFmpeg] Could not start {job}: {e}")
            raise ToolLaunchError(job, cmd[0], str(e)) from e
        logger.info(f"[FFmpeg] Started PID {process.pid} for {job}")

        try:
            output, _ = process.communicate(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            output = self._terminate(process)
            logger.error(f"[FFmpeg] PID {process.pid} timed out after {self.timeout}s")
            raise ToolTimeoutError(job, self.timeout, output)

        exit_code = process.returncode
        output = output or ""
        logger.info(f"[FFmpeg] PID {process.pid} exited with code {exit_code}")

        if exit_code != 0:
            logger.error(f"[FFmpeg] {job} failed: {output.strip()}")
            raise ToolExecutionError(job, exit_code, output)

        verify_output(output_path, output)

        result = ExecutionResult(
            job=job,
            command=cmd,
            output_path=output_path,
            exit_code=exit_code,
            tool_output=output,
            started_at=started_at,
            completed_at=datetime.now(),
        )
        logger.info(f"[FFmpeg] Completed {result.summary()}")
        return result

    def _terminate(self, process: subprocess.Popen) -> str:
        """SIGTERM the process, escalate to SIGKILL, return whatever it printed."""
        logger.info(f"[FFmpeg] Sending SIGTERM to PID {process.pid}")
        process.terminate()
        try:
            output, _ = process.communicate(timeout=TERMINATE_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            logger.warning(f"[FFmpeg] PID {process.pid} did not terminate, sending SIGKILL")
            process.kill()
            output, _ = process.communicate()
        return output or ""


def verify_output(output_path: str, tool_output: str = "") -> int:
    """
    Check that FFmpeg actually produced something.

    Returns:
        Output size in bytes

    Raises:
        OutputVerificationError: If the file is missing or empty
    """
    try:
        size = os.path.getsize(output_path)
    except OSError:
        raise OutputVerificationError(output_path, "output file was not created", tool_output)

    if size == 0:
        raise OutputVerificationError(output_path, "output file is empty", tool_output)

    return size
