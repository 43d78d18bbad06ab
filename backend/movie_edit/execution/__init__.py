"""
Media job invoker.

Runs FFmpeg for stream-copy trim, remux and concat jobs, verifies outputs
and executes concat jobs on a background worker.
"""

from .errors import (
    ToolNotAvailableError,
    ToolLaunchError,
    ToolExecutionError,
    ToolTimeoutError,
    OutputVerificationError,
    ManifestWriteError,
)
from .results import ExecutionResult
from .ffmpeg import FFmpegRunner, verify_output
from .worker import ConcatWorker

__all__ = [
    # Errors
    "ToolNotAvailableError",
    "ToolLaunchError",
    "ToolExecutionError",
    "ToolTimeoutError",
    "OutputVerificationError",
    "ManifestWriteError",
    # Results
    "ExecutionResult",
    # Runner
    "FFmpegRunner",
    "verify_output",
    # Worker
    "ConcatWorker",
]
