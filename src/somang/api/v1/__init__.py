# src/somang/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    auth_router,
    boards_router,
    site_router,
)

__all__ = [
    "admin_router",
    "auth_router",
    "boards_router",
    "site_router",
]
