# src/somang/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """Boards a post can belong to."""

    NEWS = "news"
    SERMON = "sermon"
    ELEMENTARY = "elementary"
    YOUTH = "youth"
    YOUNG_ADULT = "young-adult"
    ADULT = "adult"

    @classmethod
    def parse(cls, value: str) -> "Category | None":
        """Return the member for ``value`` or None when it is not a board."""
        try:
            return cls(value)
        except ValueError:
            return None


class Post(BaseModel):
    """A post record as stored by the backend."""

    id: str
    title: str
    content: str
    category: str
    image_url: str | None = None
    youtube_url: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(extra="ignore")


class PostDraft(BaseModel):
    """Editable fields of a post, before the backend assigns identity."""

    title: str
    content: str
    category: str
    image_url: str | None = None
    youtube_url: str | None = None


class PostWrite(BaseModel):
    """Schema for the create/edit form; the board comes from the URL."""

    title: str = Field(..., max_length=200, description="Post title")
    content: str = Field(..., description="Body text, may contain simple markup")
    image_url: str | None = Field(None, description="Optional image URL")
    youtube_url: str | None = Field(None, description="Optional YouTube URL")


class PostSummary(BaseModel):
    """Row of a board listing."""

    id: str
    title: str
    preview: str
    has_image: bool
    has_video: bool
    created_at: datetime
    created_display: str


class BoardResponse(BaseModel):
    """A board page: its posts and whether the viewer may write."""

    category: str
    display_name: str
    can_write: bool
    posts: list[PostSummary]


class PostDetail(BaseModel):
    """Schema for a post detail page."""

    id: str
    title: str
    category: str
    body_html: str
    image_url: str | None
    youtube_url: str | None
    video_embed_url: str | None
    created_at: datetime
    updated_at: datetime
    created_display: str
    can_edit: bool


class PostResponse(BaseModel):
    """Schema returned after a post was written."""

    id: str
    title: str
    content: str
    category: str
    image_url: str | None
    youtube_url: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
