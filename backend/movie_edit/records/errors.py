"""
Record-specific error types.
"""

from ..errors import NotFoundError


class VideoNotFoundError(NotFoundError):
    """Raised when a video identifier has no record."""

    def __init__(self, video_id: str):
        self.video_id = video_id
        super().__init__(f"No video found with ID: {video_id}")


class NoVideosError(NotFoundError):
    """Raised when listing records while none exist."""

    def __init__(self):
        super().__init__(
            "No video information found",
            details="There are no videos uploaded or processed yet.",
        )


class ConcatJobNotFoundError(NotFoundError):
    """Raised when a concat job id is unknown."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Concat job not found: {job_id}")


class FinalVideoNotFoundError(NotFoundError):
    """Raised when no record or ledger entry matches a download request."""

    def __init__(self, video_id: str):
        self.video_id = video_id
        super().__init__(f"No video found for the provided ID: {video_id}")


class StoredFileMissingError(NotFoundError):
    """Raised when an identifier resolves to a path that is gone from disk."""

    def __init__(self, video_id: str, path: str):
        self.video_id = video_id
        self.path = path
        super().__init__(f"The file for video ID {video_id} does not exist.", details=path)
