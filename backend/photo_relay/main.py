"""
FastAPI application entry point.

`create_app` builds the immutable relay configuration and the storage handle
once, then wires middleware, routes and error handlers around them.
"""
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from photo_relay import __version__
from photo_relay.api.router import api_router
from photo_relay.config import RelayConfig, Settings, get_settings
from photo_relay.errors import RelayError
from photo_relay.middleware.metrics_middleware import MetricsMiddleware
from photo_relay.middleware.origin_gate import OriginGateMiddleware
from photo_relay.services.upload_service import UploadService
from photo_relay.storage.base import ObjectStore
from photo_relay.storage.drive_client import build_object_store
from photo_relay.utils.logging import configure_logging

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]


def create_app(
    settings: Optional[Settings] = None,
    store_factory: Callable[[Settings], Optional[ObjectStore]] = build_object_store,
) -> FastAPI:
    """
    Create the relay application.

    Args:
        settings: Settings to use (defaults to the process environment)
        store_factory: Builds the object store from settings; returns None
            when storage is not configured

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    config = RelayConfig.from_settings(settings)
    if settings.is_production and not config.allowed_origins:
        logger.warning(
            "No allowed origins in production; every browser request will be refused. "
            "Set FRONTEND_URL or PRODUCTION_ORIGINS."
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for startup/shutdown events.
        - Startup: configure logging and report configuration presence
        """
        configure_logging('photo-relay', settings.log_level)
        logger.info(
            "Environment check",
            extra={
                "event": "environment_check",
                "port": settings.port,
                "environment": config.environment,
                "google_drive_folder_id": "Set" if config.folder_id else "Missing",
                "service_account_key": "Set" if config.has_service_account_key else "Missing",
                "drive_configured": app.state.upload_service.store is not None,
                "allowed_origins": list(config.allowed_origins),
            },
        )
        yield

    app = FastAPI(
        title="Photo Relay API",
        description="Relays guest photo and video uploads into a Google Drive folder",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.upload_service = UploadService(config, store_factory(settings))

    # CORS headers for allowed origins (also answers preflight requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.allowed_origins),
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    # Refuse foreign origins before the request reaches any route
    app.add_middleware(OriginGateMiddleware, allowed_origins=config.allowed_origins)
    # Metrics middleware (outermost so rejected requests are counted too)
    app.add_middleware(MetricsMiddleware)

    app.include_router(api_router)

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid upload request", "details": str(exc.errors())},
        )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Photo Relay API",
            "version": __version__,
            "environment": config.environment,
        }

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    @app.options("/{path:path}")
    async def options_fallback(path: str):
        """Answer bare OPTIONS requests (preflights are handled by CORSMiddleware)."""
        return Response(status_code=204)

    return app


app = create_app()


def run():
    """Run the relay with uvicorn on the configured port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("photo_relay.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
