# src/somang/api/v1/endpoints/boards.py
"""Board and post endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from somang.api.v1.dependencies import AdminSessionDep, PostRepositoryDep, ViewerDep
from somang.content.site import category_display_name
from somang.core.settings import settings
from somang.repositories.post_repo import (
    PostNotFoundError,
    PostsUnavailableError,
    PostValidationError,
    RepositoryError,
)
from somang.schemas.post import (
    BoardResponse,
    Category,
    Post,
    PostDetail,
    PostDraft,
    PostResponse,
    PostSummary,
    PostWrite,
)
from somang.utils.content import (
    format_korean_date,
    preview_text,
    render_body,
    video_embed_url,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/boards", tags=["boards"])

NOT_FOUND_DETAIL = "게시물을 찾을 수 없습니다."
MISSING_FIELDS_DETAIL = "제목과 내용을 입력해주세요."
UNKNOWN_BOARD_DETAIL = "존재하지 않는 게시판입니다."
BACKEND_MISSING_DETAIL = "백엔드가 연결되지 않았습니다. 먼저 백엔드를 연결해주세요."
LOAD_FAILED_DETAIL = "게시물을 불러오는 중 오류가 발생했습니다."
SAVE_FAILED_DETAIL = "저장 중 오류가 발생했습니다."
DELETE_FAILED_DETAIL = "삭제 중 오류가 발생했습니다."


def _summary(post: Post) -> PostSummary:
    return PostSummary(
        id=post.id,
        title=post.title,
        preview=preview_text(post.content, settings.preview_length),
        has_image=bool(post.image_url),
        has_video=bool(post.youtube_url),
        created_at=post.created_at,
        created_display=format_korean_date(post.created_at),
    )


def _draft(category: str, payload: PostWrite) -> PostDraft:
    return PostDraft(
        title=payload.title,
        content=payload.content,
        category=category,
        image_url=payload.image_url,
        youtube_url=payload.youtube_url,
    )


def _write_error(category: str, err: RepositoryError, failure_detail: str) -> HTTPException:
    """Translate a repository failure on a write path into an HTTP error."""
    if isinstance(err, PostValidationError):
        known_board = Category.parse(category) is not None
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=MISSING_FIELDS_DETAIL if known_board else UNKNOWN_BOARD_DETAIL,
        )
    if isinstance(err, PostNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)
    if isinstance(err, PostsUnavailableError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=BACKEND_MISSING_DETAIL,
        )
    logger.error("Post write failed: %s", err)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=failure_detail)


@router.get("/{category}/posts", response_model=BoardResponse)
async def list_board(
    category: str,
    repo: PostRepositoryDep,
    viewer: ViewerDep,
) -> BoardResponse:
    """List a board's posts, newest first.

    Unknown boards and an unconfigured backend produce an empty list.
    """
    try:
        posts = await repo.list(category)
    except RepositoryError as err:
        logger.error("Listing %s failed: %s", category, err)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=LOAD_FAILED_DETAIL,
        ) from err

    return BoardResponse(
        category=category,
        display_name=category_display_name(category),
        can_write=viewer.is_admin,
        posts=[_summary(post) for post in posts],
    )


@router.get("/{category}/posts/{post_id}", response_model=PostDetail)
async def get_post(
    category: str,
    post_id: str,
    repo: PostRepositoryDep,
    viewer: ViewerDep,
) -> PostDetail:
    """Get a specific post by ID."""
    try:
        post = await repo.get(post_id)
    except PostNotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=NOT_FOUND_DETAIL,
        ) from err
    except RepositoryError as err:
        logger.error("Loading post %s failed: %s", post_id, err)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=LOAD_FAILED_DETAIL,
        ) from err

    return PostDetail(
        id=post.id,
        title=post.title,
        category=post.category,
        body_html=render_body(post.content),
        image_url=post.image_url,
        youtube_url=post.youtube_url,
        video_embed_url=video_embed_url(post.youtube_url),
        created_at=post.created_at,
        updated_at=post.updated_at,
        created_display=format_korean_date(post.created_at, with_time=True),
        can_edit=viewer.is_admin,
    )


@router.post(
    "/{category}/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    category: str,
    payload: PostWrite,
    repo: PostRepositoryDep,
    admin: AdminSessionDep,
) -> Post:
    """Create a post on a board (administrators only)."""
    try:
        return await repo.create(_draft(category, payload))
    except RepositoryError as err:
        raise _write_error(category, err, SAVE_FAILED_DETAIL) from err


@router.put("/{category}/posts/{post_id}", response_model=PostResponse)
async def update_post(
    category: str,
    post_id: str,
    payload: PostWrite,
    repo: PostRepositoryDep,
    admin: AdminSessionDep,
) -> Post:
    """Edit a post (administrators only)."""
    try:
        return await repo.update(post_id, _draft(category, payload))
    except RepositoryError as err:
        raise _write_error(category, err, SAVE_FAILED_DETAIL) from err


@router.delete("/{category}/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    category: str,
    post_id: str,
    repo: PostRepositoryDep,
    admin: AdminSessionDep,
) -> Response:
    """Delete a post (administrators only)."""
    try:
        await repo.delete(post_id)
    except RepositoryError as err:
        raise _write_error(category, err, DELETE_FAILED_DETAIL) from err
    return Response(status_code=status.HTTP_204_NO_CONTENT)
