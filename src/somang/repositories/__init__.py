"""Repositories over the hosted backend's tables."""

from .post_repo import PostRepository

__all__ = ["PostRepository"]
