"""
Execution-specific errors.

All of these are terminal for the request that triggered them. Nothing in
the execution layer retries; callers decide.
"""

from typing import List, Optional

from ..errors import ExternalToolError, StorageIOError


class ToolNotAvailableError(ExternalToolError):
    """
    FFmpeg could not be located.

    Raised before any subprocess is started.
    """

    def __init__(self, searched: Optional[List[str]] = None):
        self.searched = searched or []
        details = f"Searched: {', '.join(self.searched)}" if self.searched else None
        super().__init__("FFmpeg is not installed or not in PATH", details=details)


class ToolLaunchError(ExternalToolError):
    """
    The FFmpeg process could not be started.

    Raised when the binary vanished after discovery or is not executable.
    """

    def __init__(self, job: str, executable: str, reason: str):
        self.job = job
        self.executable = executable
        super().__init__(f"Failed to start FFmpeg {job} command: {executable}", details=reason)


class ToolExecutionError(ExternalToolError):
    """
    FFmpeg exited with a non-zero code.

    The combined stdout/stderr text is kept in details for diagnostics.
    """

    def __init__(self, job: str, exit_code: int, output: str):
        self.job = job
        self.exit_code = exit_code
        self.output = output
        super().__init__(
            f"Failed to execute FFmpeg {job} command (exit code: {exit_code})",
            details=output,
        )


class ToolTimeoutError(ExternalToolError):
    """FFmpeg ran past the configured timeout and was terminated."""

    def __init__(self, job: str, timeout: float, output: str = ""):
        self.job = job
        self.timeout = timeout
        self.output = output
        super().__init__(
            f"FFmpeg {job} command timed out after {timeout:g}s",
            details=output or None,
        )


class OutputVerificationError(ExternalToolError):
    """
    FFmpeg reported success but the output is unusable.

    Raised when the output file is missing or zero bytes.
    """

    def __init__(self, output_path: str, reason: str, output: str = ""):
        self.output_path = output_path
        self.reason = reason
        super().__init__(
            f"FFmpeg generated an invalid or empty file: {output_path} ({reason})",
            details=output or None,
        )


class ManifestWriteError(StorageIOError):
    """The concat manifest could not be written."""

    def __init__(self, manifest: str, reason: str):
        self.manifest = manifest
        super().__init__(f"Failed to write concat manifest: {manifest}", details=reason)
