"""API routers."""

from .ai import router as ai_router
from .documents import router as documents_router  # Imports from documents/ package
from .health import router as health_router
from .notifications import router as notifications_router
from .templates import router as templates_router

__all__ = [
    "ai_router",
    "documents_router",
    "health_router",
    "notifications_router",
    "templates_router",
]
