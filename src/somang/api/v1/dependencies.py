"""Shared API dependencies for sessions, authorization and repositories."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from somang.repositories.post_repo import PostRepository
from somang.services.authorization import AuthorizationGate
from somang.services.backend import BackendClient, get_backend_client
from somang.services.session_store import Session, SessionStore

# Visitors without a token are anonymous, not rejected.
bearer_scheme = HTTPBearer(auto_error=False)

BackendDep = Annotated[BackendClient, Depends(get_backend_client)]


def get_access_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str | None:
    """Return the bearer token sent by the client, if any."""
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials


AccessTokenDep = Annotated[str | None, Depends(get_access_token)]


def get_authorization_gate(backend: BackendDep) -> AuthorizationGate:
    """Return an authorization gate bound to the backend."""
    return AuthorizationGate(backend)


GateDep = Annotated[AuthorizationGate, Depends(get_authorization_gate)]


async def get_session_store(backend: BackendDep, token: AccessTokenDep) -> SessionStore:
    """Build the caller's session store and resolve its initial session check."""
    store = SessionStore(backend, token)
    await store.load()
    return store


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]


async def get_viewer(store: SessionStoreDep, gate: GateDep) -> SessionStore:
    """Return the caller's session store with the admin flag re-derived.

    The flag decides what the API offers to the caller; the backend's
    row-level permissions remain the enforcement point for writes.
    """
    await store.resolve_admin(gate)
    return store


ViewerDep = Annotated[SessionStore, Depends(get_viewer)]


def require_admin(viewer: ViewerDep) -> Session:
    """Return the caller's session if it belongs to an administrator.

    Raises:
        HTTPException: 401 without a session, 403 for non-administrators.
    """
    session = viewer.current_session()
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="로그인이 필요합니다.",
        )
    if not viewer.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="관리자 권한이 필요합니다.",
        )
    return session


AdminSessionDep = Annotated[Session, Depends(require_admin)]


def get_post_repository(backend: BackendDep, token: AccessTokenDep) -> PostRepository:
    """Return a post repository acting with the caller's own credentials."""
    return PostRepository(backend, access_token=token)


PostRepositoryDep = Annotated[PostRepository, Depends(get_post_repository)]
