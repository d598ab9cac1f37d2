"""
Dependency injection for FastAPI routes.
"""

from typing import Optional

from bibresolver.config import Settings, get_settings
from bibresolver.service import BookResolutionService


# Global resolution service (initialized in lifespan)
_resolution_service: Optional[BookResolutionService] = None


def init_services(settings: Settings) -> BookResolutionService:
    """Initialize the resolution service."""
    global _resolution_service
    _resolution_service = BookResolutionService(settings)
    return _resolution_service


async def shutdown_services() -> None:
    """Close the resolution service and its HTTP client."""
    global _resolution_service
    if _resolution_service is not None:
        await _resolution_service.close()
        _resolution_service = None


def get_resolution_service() -> BookResolutionService:
    """Dependency for the resolution service."""
    if _resolution_service is None:
        # Auto-initialize with default settings if not explicitly initialized
        return init_services(get_settings())
    return _resolution_service
