"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .post import (
    BoardResponse,
    Category,
    Post,
    PostDetail,
    PostDraft,
    PostResponse,
    PostSummary,
    PostWrite,
)
from .user import (
    AdminCreateRequest,
    AdminCreateResponse,
    CategoryCount,
    DashboardResponse,
    LoginRequest,
    LoginResponse,
    SessionStatusResponse,
)

__all__ = [
    "BoardResponse", "Category", "Post", "PostDetail", "PostDraft",
    "PostResponse", "PostSummary", "PostWrite",
    "AdminCreateRequest", "AdminCreateResponse", "CategoryCount",
    "DashboardResponse", "LoginRequest", "LoginResponse", "SessionStatusResponse",
]
