# src/somang/api/v1/endpoints/auth.py
"""Authentication endpoints for the church site."""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from somang.api.v1.dependencies import GateDep, SessionStoreDep, ViewerDep
from somang.schemas.user import LoginRequest, LoginResponse, SessionStatusResponse
from somang.services.session_store import AuthError, InvalidCredentialsError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])

INVALID_CREDENTIALS_DETAIL = "이메일 또는 비밀번호가 올바르지 않습니다. 다시 확인해주세요."


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    store: SessionStoreDep,
    gate: GateDep,
) -> LoginResponse:
    """Sign in with email and password and report admin status."""
    try:
        session = await store.sign_in(payload.email, payload.password)
    except InvalidCredentialsError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS_DETAIL,
        ) from err
    except AuthError as err:
        logger.warning("Sign-in for %s failed: %s", payload.email, err)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"로그인 중 오류가 발생했습니다: {err}",
        ) from err

    is_admin = await store.resolve_admin(gate)
    return LoginResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        user_id=session.user_id,
        email=session.email,
        is_admin=is_admin,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(store: SessionStoreDep) -> Response:
    """Sign out; succeeds whether or not a session existed."""
    await store.sign_out()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=SessionStatusResponse)
async def who_am_i(viewer: ViewerDep) -> SessionStatusResponse:
    """Return the caller's session state."""
    session = viewer.current_session()
    return SessionStatusResponse(
        status=viewer.status.value,
        user_id=session.user_id if session else None,
        email=session.email if session else None,
        is_admin=viewer.is_admin,
    )
