"""
Execution result model.

Structured record of one FFmpeg invocation, returned by FFmpegRunner and
summarised in its completion log line.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExecutionResult(BaseModel):
    """
    Result of a single successful FFmpeg invocation.

    Failures are raised as ExternalToolError subclasses rather than returned,
    so a result always describes a verified output.
    """

    model_config = ConfigDict(extra="forbid")

    job: str
    """Job kind: trim, concat or remux."""

    command: List[str]
    """Full argument vector passed to the subprocess."""

    output_path: str
    """Verified output file."""

    exit_code: int = 0

    tool_output: str = ""
    """Combined stdout/stderr captured from the tool."""

    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    def duration_seconds(self) -> Optional[float]:
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()

    def summary(self) -> str:
        duration = self.duration_seconds()
        duration_str = f" ({duration:.1f}s)" if duration is not None else ""
        return f"{self.job.upper()}{duration_str}: {self.output_path}"
