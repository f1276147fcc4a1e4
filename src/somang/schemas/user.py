# src/somang/schemas/user.py
"""Session and admin-account Pydantic schemas."""

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Credentials submitted on the login page."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Session material handed back after a successful login."""

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    user_id: str
    email: str
    is_admin: bool


class SessionStatusResponse(BaseModel):
    """Who the caller is, as far as the site is concerned."""

    status: str
    user_id: str | None = None
    email: str | None = None
    is_admin: bool = False


class AdminCreateRequest(BaseModel):
    """Form for adding a new administrator."""

    email: EmailStr
    password: str
    confirm_password: str


class AdminCreateResponse(BaseModel):
    """Identity of the administrator that was created."""

    user_id: str
    email: str


class CategoryCount(BaseModel):
    """Number of posts on one board."""

    category: str
    display_name: str
    count: int


class DashboardResponse(BaseModel):
    """Admin dashboard overview."""

    email: str | None
    total_posts: int
    board_count: int
    boards: list[CategoryCount]
