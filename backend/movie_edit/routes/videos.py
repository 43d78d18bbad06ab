"""
Video editing endpoints.

============================================================================
ENDPOINTS
============================================================================
POST /upload          - Upload one or more videos (multipart field "videos")
POST /trim            - Stream-copy trim of an uploaded video
POST /concat          - Queue a background concat of the posted videos
GET  /concat/{job_id} - Poll a concat job
POST /performAll      - Re-run every recorded cut and concat
GET  /download        - Resolve an id to a download URL
GET  /video-info      - One record, or all records when id is omitted
============================================================================

Handlers are plain functions so FastAPI runs each request on its own
worker thread; FFmpeg blocks only that thread.
"""

from typing import List, Optional, Union

from fastapi import APIRouter, File, Query, Request, UploadFile
from pydantic import BaseModel, ConfigDict

from ..records.models import ConcatJob, VideoRecord
from ..services.editing import EditingService
from ..storage import paths
from ..storage.models import UploadedAsset

router = APIRouter(tags=["videos"])


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class UploadResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str
    uploaded_files: List[UploadedAsset]


class TrimRequest(BaseModel):
    """Request body for a trim."""

    model_config = ConfigDict(extra="forbid")

    id: str
    start_time: str
    end_time: str


class TrimResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str
    output_file: str
    cut_id: str


class ConcatResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str
    job_id: str
    video_ids: List[str]
    concat_task: str


class PerformAllResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str
    output_file: Optional[str]
    cut_outputs: List[str]
    concat_job_id: Optional[str] = None


class DownloadResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str
    download_url: str


class VideoInfoResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str
    data: Union[VideoRecord, List[VideoRecord]]


def _service(request: Request) -> EditingService:
    return request.app.state.editing_service


def _incoming(videos: Optional[List[UploadFile]]):
    return [(video.filename or "", video.file) for video in videos or []]


def _close_all(videos: Optional[List[UploadFile]]) -> None:
    for video in videos or []:
        video.file.close()


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post("/upload", response_model=UploadResponse)
def upload_videos(request: Request, videos: Optional[List[UploadFile]] = File(None)) -> UploadResponse:
    """
    Store uploaded videos under freshly generated ids.

    Returns:
        UploadResponse with one {id, file_path} per file
    """
    try:
        assets = _service(request).upload(_incoming(videos))
    finally:
        _close_all(videos)

    return UploadResponse(message="Files uploaded successfully", uploaded_files=assets)


@router.post("/trim", response_model=TrimResponse)
def trim_video(request: Request, body: TrimRequest) -> TrimResponse:
    """
    Cut [start_time, end_time] out of an uploaded video without re-encoding.

    The returned cut_id resolves to the cut output through GET /download.

    Raises:
        404: Unknown id
        500: FFmpeg failure or empty/missing output
    """
    output_file = _service(request).trim(body.id, body.start_time, body.end_time)
    return TrimResponse(
        message="Cut editing completed successfully",
        output_file=output_file,
        cut_id=paths.artifact_id(output_file),
    )


@router.post("/concat", response_model=ConcatResponse)
def concat_videos(request: Request, videos: Optional[List[UploadFile]] = File(None)) -> ConcatResponse:
    """
    Store the posted videos and queue their concatenation.

    Answers as soon as the job is queued. Poll GET /concat/{job_id} for the
    outcome.
    """
    try:
        job = _service(request).submit_concat(_incoming(videos))
    finally:
        _close_all(videos)

    return ConcatResponse(
        message="Concat task started successfully",
        job_id=job.id,
        video_ids=job.input_video_ids,
        concat_task="Processing in background",
    )


@router.get("/concat/{job_id}", response_model=ConcatJob)
def get_concat_job(request: Request, job_id: str) -> ConcatJob:
    return _service(request).get_concat_job(job_id)


@router.post("/performAll", response_model=PerformAllResponse)
def perform_all(request: Request) -> PerformAllResponse:
    """
    Re-run every recorded cut, then re-concat every concat output.

    Raises:
        500: Any FFmpeg or file-write failure (earlier outputs are kept)
    """
    result = _service(request).perform_all()
    return PerformAllResponse(
        message="Previous tasks re-executed successfully",
        output_file=result.output_file,
        cut_outputs=result.cut_outputs,
        concat_job_id=result.concat_job_id,
    )


@router.get("/download", response_model=DownloadResponse)
def download_final_video(request: Request, video_id: Optional[str] = Query(None, alias="id")) -> DownloadResponse:
    """
    Resolve an upload, cut or concat id to a download URL.
    """
    settings = request.app.state.settings
    url = _service(request).download_url(video_id or "", str(request.base_url), settings.static_prefix)
    return DownloadResponse(message="Download link generated successfully", download_url=url)


@router.get("/video-info", response_model=VideoInfoResponse)
def get_video_info(request: Request, video_id: Optional[str] = Query(None, alias="id")) -> VideoInfoResponse:
    """
    Return one video's record, or every record when no id is given.
    """
    service = _service(request)

    if not video_id:
        return VideoInfoResponse(
            message="All video information retrieved successfully",
            data=service.list_video_info(),
        )

    return VideoInfoResponse(
        message="Video information retrieved successfully",
        data=service.get_video_info(video_id),
    )
