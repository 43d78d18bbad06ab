"""
movie-edit backend service: upload, trim, concat and download over HTTP.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from . import __version__
from .config import Settings, get_settings
from .errors import MovieEditError
from .routes import health, videos
from .services.editing import EditingService

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None, service: Optional[EditingService] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit settings (defaults to environment)
        service: Pre-built service, mainly for tests
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    service = service or EditingService.from_settings(settings)
    service.upload_store.ensure_directory()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        service.start()
        logger.info(f"movie-edit started, storing files in {service.upload_dir}")
        yield
        service.shutdown(timeout=30)

    app = FastAPI(title="movie-edit", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.editing_service = service

    @app.exception_handler(MovieEditError)
    async def handle_movie_edit_error(request: Request, exc: MovieEditError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
            for error in exc.errors()
        )
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "Invalid request format. Please check the JSON format and required fields.",
                "details": problems,
            },
        )

    app.include_router(health.router)
    app.include_router(videos.router)
    app.mount(settings.static_prefix, StaticFiles(directory=settings.upload_dir), name="uploads")

    @app.get("/")
    async def root():
        return {"service": "movie-edit", "status": "running"}

    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
