"""FastAPI application for the sitesnap REST API.

Provides endpoints for submitting archive jobs, polling their status,
browsing recorded snapshots, and a static mount replaying saved pages.

Example:
    uvicorn sitesnap.api.app:app --host 0.0.0.0 --port 8000
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from sitesnap.api.routes.archives import router as archives_router
from sitesnap.api.routes.health import router as health_router
from sitesnap.api.routes.jobs import router as jobs_router
from sitesnap.core.config import Settings
from sitesnap.core.errors import JobNotFoundError, SnapshotNotFoundError, ValidationError
from sitesnap.core.logger import get_logger
from sitesnap.services.crawler import SiteArchiver
from sitesnap.services.jobs import JobRegistry
from sitesnap.services.snapshots import SnapshotBrowser


def create_app(settings: Settings | None = None, archiver: SiteArchiver | None = None) -> FastAPI:
    """Build the API application.

    Args:
        settings: Service settings; loaded from the environment when omitted
        archiver: Crawl engine override, mainly for tests

    Returns:
        Configured FastAPI instance
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Create the job registry and snapshot browser for the app's lifetime.

        Args:
            app: FastAPI application instance

        Yields:
            None during application runtime
        """
        logger = get_logger("sitesnap", log_level=settings.log_level, log_file=settings.log_file)
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        app.state.settings = settings
        app.state.registry = JobRegistry(settings, archiver=archiver)
        app.state.browser = SnapshotBrowser(settings.data_dir)
        logger.info("sitesnap API started, data root %s", settings.data_dir.resolve())
        yield
        logger.info("sitesnap API shutting down")

    app = FastAPI(
        title="sitesnap API",
        description="REST API for website snapshot archiving",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(ValidationError)
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
        if isinstance(exc, RequestValidationError):
            detail = jsonable_encoder(exc.errors())
        else:
            detail = str(exc)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})

    @app.exception_handler(JobNotFoundError)
    @app.exception_handler(SnapshotNotFoundError)
    async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    # Health first so /api/archives/health is not captured by /api/archives/{host}
    app.include_router(health_router)
    app.include_router(jobs_router)
    app.include_router(archives_router)
    app.mount(
        "/archive",
        StaticFiles(directory=settings.data_dir, html=True, check_dir=False),
        name="archive",
    )
    return app


app = create_app()
