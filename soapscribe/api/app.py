"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, error handlers,
routers, and the health endpoint. The module-level ``app`` instance
allows ``uvicorn soapscribe.api.app:app --reload``; ``soapscribe-api``
runs the same app through ``main()``.
"""

from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from soapscribe import __version__
from soapscribe.api.middleware.error_handler import register_error_handlers
from soapscribe.api.routes import soap
from soapscribe.core.config import get_settings
from soapscribe.core.logging import configure_logging
from soapscribe.core.models import HealthResponse


def create_app() -> FastAPI:
    """Build and return a fully configured FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="SOAP Scribe",
        description="Record a clinical encounter, transcribe it, "
        "and draft a SOAP note from the transcript.",
        version=__version__,
    )

    # -- CORS --
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Health check (root-level, not under /api) --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__, timestamp=datetime.now(UTC))

    # -- REST routes --
    app.include_router(soap.router, prefix="/api")

    return app


app = create_app()


def main() -> None:
    """Development-server entry point."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "soapscribe.api.app:app",
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
    )
