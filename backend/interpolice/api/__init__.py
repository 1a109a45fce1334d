"""
API Routes Package

This module exports all FastAPI routers for the Interpolice service.
"""

from .auth_routes import router as auth_router
from .citizen_routes import router as citizen_router
from .citation_routes import (
    router as citation_router,
    search_router as citation_search_router,
)
from .record_routes import (
    router as record_router,
    search_router as record_search_router,
)

__all__ = [
    "auth_router",
    "citizen_router",
    "citation_router",
    "citation_search_router",
    "record_router",
    "record_search_router",
]
