"""
API Routes for bibresolver

Route modules:
- resolve: ISBN and title/author resolution
"""

from bibresolver.api.routes.resolve import router as resolve_router

__all__ = [
    "resolve_router",
]
