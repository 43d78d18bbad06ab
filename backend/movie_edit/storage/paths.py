"""
Path derivation for the flat storage directory.

Every file the service writes lives directly in the upload directory:

    <id><ext>                 original upload
    cut_<id>_<start><ext>     trim output
    re_cut_..._<ns><ext>      re-executed trim output, one per pass
    concat_<ns>.mp4           concat output
    re_concat_<ns>.mp4        re-executed concat output
    filelist_<job_id>.txt     transient concat manifest

Names are pure functions of their inputs so they can be tested without
touching the filesystem.
"""

import os
import re
import time
from pathlib import Path
from typing import Iterable, Optional


CUT_PREFIX = "cut_"
RERUN_PREFIX = "re_"
CONCAT_EXTENSION = ".mp4"


def _sanitize_filename(name: str) -> str:
    """
    Make a timestamp or other user-supplied text safe for use in a filename.

    Colons become dashes (00:00:01 -> 00-00-01); any other character that is
    invalid on common filesystems becomes an underscore.
    """
    sanitized = name.replace(":", "-")
    sanitized = re.sub(r'[<>"/\\|?*\x00-\x1f]', "_", sanitized)
    sanitized = sanitized.strip(". ")

    if not sanitized:
        sanitized = "start"

    return sanitized


def upload_path(upload_dir: str, asset_id: str, original_filename: str) -> str:
    """Storage path for an upload: <upload_dir>/<id><original extension>."""
    ext = os.path.splitext(original_filename)[1]
    return os.path.join(upload_dir, f"{asset_id}{ext}")


def cut_output_path(upload_dir: str, video_id: str, start_time: str, source_path: str) -> str:
    """
    Output path for a trim of video_id starting at start_time.

    The source extension is kept so stream-copy never has to change container.
    """
    ext = os.path.splitext(source_path)[1] or CONCAT_EXTENSION
    name = f"{CUT_PREFIX}{video_id}_{_sanitize_filename(start_time)}{ext}"
    return os.path.join(upload_dir, name)


def rerun_output_path(path: str, stamp: Optional[int] = None) -> str:
    """
    Derive the output of one re-execution pass over path.

    The re-run marker goes in front of the first cut_ in the filename and the
    pass stamp is appended to the stem, so every pass writes new files and
    outputs of earlier passes are never overwritten. Only the filename is
    rewritten; a directory containing "cut_" is left alone. Filenames without
    the marker just get the re_ prefix.
    """
    stamp = stamp if stamp is not None else time.time_ns()
    directory, filename = os.path.split(path)
    stem, ext = os.path.splitext(filename)
    if CUT_PREFIX in stem:
        stem = stem.replace(CUT_PREFIX, RERUN_PREFIX + CUT_PREFIX, 1)
    else:
        stem = RERUN_PREFIX + stem
    return os.path.join(directory, f"{stem}_{stamp}{ext}")


def artifact_id(path: str) -> str:
    """
    Identifier a produced file is looked up by: its filename without extension.

    cut_<id>_00-00-01.mp4 -> cut_<id>_00-00-01
    """
    return os.path.splitext(os.path.basename(path))[0]


def concat_output_path(upload_dir: str, rerun: bool = False, stamp: Optional[int] = None) -> str:
    """Output path for a concat: concat_<ns>.mp4 or re_concat_<ns>.mp4."""
    stamp = stamp if stamp is not None else time.time_ns()
    prefix = RERUN_PREFIX if rerun else ""
    return os.path.join(upload_dir, f"{prefix}concat_{stamp}{CONCAT_EXTENSION}")


def manifest_path(upload_dir: str, job_id: str) -> str:
    """Manifest path unique to one concat job."""
    return os.path.join(upload_dir, f"filelist_{job_id}.txt")


def manifest_line(path: str) -> str:
    """
    Render one manifest entry.

    Paths are made absolute with forward slashes; single quotes are escaped
    the way the concat demuxer expects ('\\'' closes, escapes and reopens).
    """
    posix = Path(path).resolve().as_posix()
    escaped = posix.replace("'", "'\\''")
    return f"file '{escaped}'\n"


def render_manifest(paths: Iterable[str]) -> str:
    return "".join(manifest_line(p) for p in paths)


def public_relative_path(path: str, upload_dir: str) -> str:
    """
    Strip the storage folder prefix from a stored path.

    Works for both the configured form (./uploads/x.mp4) and a resolved
    absolute path inside the upload directory.
    """
    normalized_dir = os.path.normpath(upload_dir)
    normalized = os.path.normpath(path)

    if os.path.isabs(normalized) != os.path.isabs(normalized_dir):
        normalized_dir = os.path.abspath(normalized_dir)
        normalized = os.path.abspath(normalized)

    if normalized.startswith(normalized_dir + os.sep):
        relative = normalized[len(normalized_dir) + 1:]
    else:
        relative = os.path.basename(normalized)

    return relative.replace(os.sep, "/")


def build_download_url(base_url: str, static_prefix: str, path: str, upload_dir: str) -> str:
    """Externally reachable URL for a stored file."""
    relative = public_relative_path(path, upload_dir)
    prefix = "/" + static_prefix.strip("/") if static_prefix.strip("/") else ""
    return f"{base_url.rstrip('/')}{prefix}/{relative}"
