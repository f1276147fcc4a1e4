"""Data access helpers for working with posts."""
from __future__ import annotations

import logging
from collections import Counter
from typing import Any

from pydantic import ValidationError

from somang.core.settings import settings
from somang.schemas.post import Category, Post, PostDraft
from somang.services.backend import (
    BackendClient,
    BackendError,
    BackendResponseError,
    BackendUnavailableError,
)
from somang.utils.clock import next_timestamp

__all__ = [
    "PostNotFoundError",
    "PostRepository",
    "PostValidationError",
    "PostsUnavailableError",
    "RepositoryError",
    "normalize_draft",
    "validate_draft",
]

logger = logging.getLogger(__name__)


class RepositoryError(RuntimeError):
    """Base exception for post repository failures."""


class PostNotFoundError(RepositoryError):
    """Raised when no post matches the requested identifier."""


class PostValidationError(RepositoryError):
    """Raised before any remote call when a draft is not acceptable."""


class PostsUnavailableError(RepositoryError, BackendUnavailableError):
    """Raised for writes attempted while no backend is configured."""


def validate_draft(draft: PostDraft) -> None:
    """Reject drafts with a blank title or body or an unknown board.

    Raises:
        PostValidationError: If the draft fails any check.
    """
    if not draft.title.strip():
        raise PostValidationError("Title must not be empty")
    if not draft.content.strip():
        raise PostValidationError("Content must not be empty")
    if Category.parse(draft.category) is None:
        raise PostValidationError(f"Unknown category: {draft.category}")


def normalize_draft(draft: PostDraft) -> dict[str, Any]:
    """Return the row values for ``draft``; blank media links are stored as null."""
    return {
        "title": draft.title.strip(),
        "content": draft.content.strip(),
        "category": draft.category,
        "image_url": (draft.image_url or "").strip() or None,
        "youtube_url": (draft.youtube_url or "").strip() or None,
    }


def _to_post(row: dict[str, Any]) -> Post:
    try:
        return Post.model_validate(row)
    except ValidationError as err:
        raise RepositoryError(f"Backend returned a malformed post: {err}") from err


class PostRepository:
    """Thin wrapper around backend access for post records.

    The caller's access token is forwarded on every call so the backend
    applies its own permissions; the repository never elevates privilege.
    Authorization checks belong to the caller.
    """

    def __init__(
        self,
        backend: BackendClient,
        access_token: str | None = None,
        table: str | None = None,
    ) -> None:
        self._backend = backend
        self._access_token = access_token
        self._table = table or settings.posts_table

    async def list(self, category: str) -> list[Post]:
        """Return posts of ``category``, newest first.

        Unknown categories and an unconfigured backend both yield an empty list.
        """
        if Category.parse(category) is None or not self._backend.available:
            return []

        try:
            rows = await self._backend.select(
                self._table,
                filters={"category": category},
                order="created_at",
                descending=True,
                access_token=self._access_token,
            )
        except BackendError as err:
            raise RepositoryError(f"Could not load posts: {err}") from err
        return [_to_post(row) for row in rows]

    async def get(self, post_id: str) -> Post:
        """Return one post by identifier.

        Raises:
            PostNotFoundError: If no record matches (or there is no backend).
            RepositoryError: For other backend failures.
        """
        if not self._backend.available:
            raise PostNotFoundError(post_id)

        try:
            rows = await self._backend.select(
                self._table,
                filters={"id": post_id},
                access_token=self._access_token,
            )
        except BackendResponseError as err:
            # Malformed identifiers are rejected by the backend's type check.
            if err.status_code in (400, 404):
                raise PostNotFoundError(post_id) from err
            raise RepositoryError(f"Could not load post: {err}") from err
        except BackendError as err:
            raise RepositoryError(f"Could not load post: {err}") from err

        if not rows:
            raise PostNotFoundError(post_id)
        return _to_post(rows[0])

    def _ensure_writable(self) -> None:
        if not self._backend.available:
            raise PostsUnavailableError("Backend is not configured")

    async def create(self, draft: PostDraft) -> Post:
        """Insert a new post and return it as stored.

        Args:
            draft: Title, content, board and optional media links.

        Returns:
            The stored post; ``created_at`` equals ``updated_at``.
        """
        validate_draft(draft)
        self._ensure_writable()

        now = next_timestamp().isoformat()
        values = normalize_draft(draft)
        values["created_at"] = now
        values["updated_at"] = now

        try:
            row = await self._backend.insert(
                self._table, values, access_token=self._access_token
            )
        except BackendError as err:
            raise RepositoryError(f"Could not save post: {err}") from err

        post = _to_post(row)
        logger.info("Created post %s in %s", post.id, post.category)
        return post

    async def update(self, post_id: str, draft: PostDraft) -> Post:
        """Replace the editable fields of a post and refresh ``updated_at``.

        Raises:
            PostValidationError: Before any remote call, for a bad draft.
            PostNotFoundError: If the identifier does not exist.
        """
        validate_draft(draft)
        self._ensure_writable()

        values = normalize_draft(draft)
        values["updated_at"] = next_timestamp().isoformat()

        try:
            rows = await self._backend.update(
                self._table, post_id, values, access_token=self._access_token
            )
        except BackendResponseError as err:
            if err.status_code in (400, 404):
                raise PostNotFoundError(post_id) from err
            raise RepositoryError(f"Could not update post: {err}") from err
        except BackendError as err:
            raise RepositoryError(f"Could not update post: {err}") from err

        if not rows:
            raise PostNotFoundError(post_id)
        post = _to_post(rows[0])
        logger.info("Updated post %s", post.id)
        return post

    async def delete(self, post_id: str) -> None:
        """Delete a post.

        Raises:
            PostNotFoundError: If nothing was deleted, e.g. it was already gone.
        """
        self._ensure_writable()

        try:
            rows = await self._backend.delete(
                self._table, post_id, access_token=self._access_token
            )
        except BackendResponseError as err:
            if err.status_code in (400, 404):
                raise PostNotFoundError(post_id) from err
            raise RepositoryError(f"Could not delete post: {err}") from err
        except BackendError as err:
            raise RepositoryError(f"Could not delete post: {err}") from err

        if not rows:
            raise PostNotFoundError(post_id)
        logger.info("Deleted post %s", post_id)

    async def count_by_category(self) -> dict[str, int]:
        """Return the number of posts on every board (zero when unconfigured)."""
        counts = {category.value: 0 for category in Category}
        if not self._backend.available:
            return counts

        try:
            rows = await self._backend.select(
                self._table, columns="category", access_token=self._access_token
            )
        except BackendError as err:
            raise RepositoryError(f"Could not count posts: {err}") from err

        tally = Counter(row.get("category") for row in rows)
        for category in counts:
            counts[category] = tally.get(category, 0)
        return counts
