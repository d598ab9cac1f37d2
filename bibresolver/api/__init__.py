"""
bibresolver - FastAPI Backend.
"""

from .main import app, create_app, main
from .dependencies import (
    get_resolution_service,
    init_services,
    shutdown_services,
)
from .schemas import (
    ResolveRequest,
    ResolvedBookResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    # Application
    "app",
    "create_app",
    "main",
    # Dependencies
    "get_resolution_service",
    "init_services",
    "shutdown_services",
    # Schemas
    "ResolveRequest",
    "ResolvedBookResponse",
    "HealthResponse",
    "ErrorResponse",
]
