"""Routes package for API endpoints."""

from .optimize_routes import router as optimize_router
from .run_routes import router as run_router

__all__ = ["optimize_router", "run_router"]
