"""
FastAPI application entry point.

This module creates and configures the FastAPI application through an
application factory (create_app), so tests can build fresh instances.

For local development:
    uvicorn filebucket.main:app --reload --port 8080

For production:
    filebucket  (console script, listens on PORT, default 8080)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .api.errors import register_exception_handlers
from .api.routes import files, health
from .config.settings import get_settings

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Logs the storage target and any missing configuration on startup.
    The storage client itself is created lazily on the first request.
    """
    settings = get_settings()

    logger.info(
        "Filebucket API starting",
        extra={
            "version": settings.api_version,
            "bucket": settings.bucket_name,
            "endpoint": settings.aws_endpoint_url_s3,
            "mock_mode": {"storage": settings.storage_mock_mode},
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        # Keep serving: /health/ready reports the problem
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    logger.info("Filebucket API shutting down")


def create_app() -> FastAPI:
    """
    Application factory.

    API routers are registered before the static mount, which takes
    every path the API does not claim.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        List, upload and delete files in an S3-compatible bucket.

        - `GET /api/files` lists every file with a signed download URL
        - `POST /api/upload_files` stores a base64 data URL
        - `POST /api/delete_file` deletes a file

        Signed URLs are valid for one hour and are minted fresh on every call.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        files.router,
        prefix="/api",
        tags=["Files"],
    )

    static_path = settings.static_path
    if static_path.is_dir():
        app.mount(
            "/",
            StaticFiles(directory=static_path, html=True),
            name="static",
        )
    else:
        logger.warning(
            "Static directory not found, skipping static file serving",
            extra={"static_dir": str(static_path)}
        )

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
# This is what uvicorn imports
app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()

    logger.info("Listening", extra={"host": settings.host, "port": settings.port})

    uvicorn.run(
        "filebucket.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
