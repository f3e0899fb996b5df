"""
Documents router package.

Exports the router for document workflow endpoints.
"""

from .documents_router import router

__all__ = ["router"]
