"""Session store wrapping the backend's sign-in/sign-out calls.

A store tracks one client's session. It is created per client and handed to
whatever needs it; there is no module-level "current user". The session itself
is persisted by the backend's auth service, the store only remembers the
access token and the identity it resolves to.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from somang.services.backend import (
    BackendClient,
    BackendError,
    BackendResponseError,
    BackendUnavailableError,
)

if TYPE_CHECKING:
    from somang.services.authorization import AuthorizationGate

logger = logging.getLogger(__name__)

HTTP_UNAUTHORIZED = 401
INVALID_CREDENTIALS_MESSAGE = "Invalid login credentials"
INVALID_CREDENTIALS_CODES = frozenset({"invalid_credentials", "invalid_grant"})


class AuthError(RuntimeError):
    """Raised when signing in fails for a reason other than bad credentials."""


class InvalidCredentialsError(AuthError):
    """Raised when the backend rejects the email/password pair."""


class AuthStatus(str, Enum):
    """What a view may assume about the visitor."""

    LOADING = "loading"
    SIGNED_OUT = "signed_out"
    ADMIN_PENDING = "admin_pending"
    MEMBER = "member"
    ADMIN = "admin"


class SessionEvent(str, Enum):
    """Transitions reported to subscribers."""

    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    SESSION_EXPIRED = "session_expired"
    ADMIN_RESOLVED = "admin_resolved"


@dataclass(frozen=True)
class Session:
    """A live authenticated identity."""

    user_id: str
    email: str
    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None


SessionListener = Callable[[SessionEvent, Session | None], None]


def _session_from_payload(payload: dict[str, Any]) -> Session:
    user = payload.get("user") or {}
    expires_at = payload.get("expires_at")
    return Session(
        user_id=str(user["id"]),
        email=str(user.get("email") or ""),
        access_token=str(payload["access_token"]),
        refresh_token=payload.get("refresh_token"),
        expires_at=datetime.fromtimestamp(int(expires_at), UTC) if expires_at else None,
    )


def _is_invalid_credentials(error: BackendResponseError) -> bool:
    return (
        error.message == INVALID_CREDENTIALS_MESSAGE
        or (error.code or "") in INVALID_CREDENTIALS_CODES
    )


class SessionStore:
    """Holds the current session (or none) and an admin flag."""

    def __init__(self, backend: BackendClient, access_token: str | None = None) -> None:
        self._backend = backend
        self._access_token = access_token
        self._session: Session | None = None
        self._status = AuthStatus.LOADING
        self._listeners: list[SessionListener] = []

    @property
    def status(self) -> AuthStatus:
        return self._status

    @property
    def is_admin(self) -> bool:
        return self._status == AuthStatus.ADMIN

    def current_session(self) -> Session | None:
        """Return the session, or None while loading or when signed out."""
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` for session changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            listener(event, self._session)

    def _set_session(self, session: Session | None) -> None:
        self._session = session
        self._access_token = session.access_token if session else None
        self._status = AuthStatus.ADMIN_PENDING if session else AuthStatus.SIGNED_OUT

    async def load(self) -> Session | None:
        """Resolve the initial session check against the backend.

        Returns:
            The session behind the stored access token, or None if there is
            no token, it has expired, or the backend is unavailable.
        """
        token = self._access_token
        if not token or not self._backend.available:
            self._set_session(None)
            return None

        try:
            user = await self._backend.get_user(token)
        except BackendResponseError as err:
            self._set_session(None)
            if err.status_code == HTTP_UNAUTHORIZED:
                logger.info("Stored session has expired")
                self._emit(SessionEvent.SESSION_EXPIRED)
            else:
                logger.warning("Session lookup rejected by backend: %s", err.message)
            return None
        except BackendError as err:
            logger.warning("Session lookup failed: %s", err)
            self._set_session(None)
            return None

        user_id = user.get("id") if isinstance(user, dict) else None
        if not user_id:
            logger.warning("Session lookup returned no user")
            self._set_session(None)
            return None

        self._set_session(
            Session(
                user_id=str(user_id),
                email=str(user.get("email") or ""),
                access_token=token,
            )
        )
        return self._session

    async def sign_in(self, email: str, password: str) -> Session:
        """Verify credentials with the backend and establish a session.

        Raises:
            InvalidCredentialsError: If the email/password pair is rejected.
            AuthError: For any other failure, including an unconfigured backend.
        """
        try:
            payload = await self._backend.sign_in(email, password)
        except BackendUnavailableError as err:
            raise AuthError("Backend is not configured") from err
        except BackendResponseError as err:
            if _is_invalid_credentials(err):
                raise InvalidCredentialsError(err.message) from err
            raise AuthError(err.message) from err
        except BackendError as err:
            raise AuthError(str(err)) from err

        try:
            session = _session_from_payload(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as err:
            raise AuthError("Backend returned an unusable session") from err

        self._set_session(session)
        logger.info("Signed in %s", session.email)
        self._emit(SessionEvent.SIGNED_IN)
        return session

    async def sign_out(self) -> None:
        """Drop the session; the local state is cleared even if revocation fails."""
        token = self._access_token
        had_session = self._session is not None or token is not None
        self._set_session(None)

        if token and self._backend.available:
            try:
                await self._backend.sign_out(token)
            except BackendError as err:
                logger.warning("Remote sign-out failed: %s", err)

        if had_session:
            logger.info("Signed out")
            self._emit(SessionEvent.SIGNED_OUT)

    async def resolve_admin(self, gate: AuthorizationGate) -> bool:
        """Re-derive the admin flag for the current session through ``gate``."""
        session = self._session
        if session is None:
            return False

        self._status = AuthStatus.ADMIN_PENDING
        is_admin = await gate.is_admin(session)
        # The session may have changed while the check was in flight.
        if self._session is not session:
            return False
        self._status = AuthStatus.ADMIN if is_admin else AuthStatus.MEMBER
        self._emit(SessionEvent.ADMIN_RESOLVED)
        return is_admin
