"""
bibresolver API

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import Depends, FastAPI

from .schemas import HealthResponse
from .routes import resolve
from .middleware import (
    setup_logging,
    setup_exception_handlers,
    LoggingConfig,
)
from .dependencies import (
    get_resolution_service,
    init_services,
    shutdown_services,
)
from bibresolver.config import Settings, get_settings
from bibresolver.logging_setup import configure_logging
from bibresolver.service import BookResolutionService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the resolution service on startup and close it on shutdown."""
    settings = get_settings()
    configure_logging(settings)
    logger.info(f"Starting bibresolver in {settings.environment} mode")

    try:
        app.state.services = init_services(settings)
        app.state.settings = settings
        yield
    finally:
        logger.info("Shutting down bibresolver...")
        await shutdown_services()
        logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Settings = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="bibresolver",
        description="Book identification and classification resolution.",
        version=VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_logging(
        app,
        config=LoggingConfig(enabled=True),
        structured=settings.environment != "development",
    )
    setup_exception_handlers(app)

    api_prefix = "/api/v1"

    app.include_router(resolve.router, prefix=api_prefix)

    @app.get(f"{api_prefix}/health", response_model=HealthResponse, tags=["System"])
    async def health_check(
        service: BookResolutionService = Depends(get_resolution_service),
    ) -> HealthResponse:
        """Report the enabled catalog sources."""
        return HealthResponse(
            status="healthy",
            version=VERSION,
            environment=settings.environment,
            sources=service.source_names,
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "bibresolver.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        workers=1 if settings.debug else 4,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
