"""
movie-edit backend service.

HTTP API for uploading videos and running stream-copy trim and concat jobs
through an external FFmpeg binary.
"""

__version__ = "0.1.0"
