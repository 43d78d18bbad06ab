"""
Health endpoints.
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: str
    ffmpeg_available: bool


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """
    Report that the API is up and whether FFmpeg can be found.
    """
    service = request.app.state.editing_service
    return HealthResponse(status="ok", ffmpeg_available=service.runner.available)
