# tests/services/test_session_store.py
"""Tests for the session store and its status transitions."""

import httpx
import pytest

from somang.services.authorization import AuthorizationGate
from somang.services.backend import BackendClient, BackendConfig, BackendError
from somang.services.session_store import (
    AuthError,
    AuthStatus,
    InvalidCredentialsError,
    SessionEvent,
    SessionStore,
)


class TestLoad:
    def test_starts_loading(self, fake_backend):
        store = SessionStore(fake_backend, "token")
        assert store.status is AuthStatus.LOADING
        assert store.current_session() is None

    @pytest.mark.asyncio
    async def test_no_token_is_signed_out(self, fake_backend):
        store = SessionStore(fake_backend)
        assert await store.load() is None
        assert store.status is AuthStatus.SIGNED_OUT
        assert fake_backend.total_calls == 0

    @pytest.mark.asyncio
    async def test_valid_token_is_pending_admin_check(self, fake_backend, member_session):
        store = SessionStore(fake_backend, member_session.access_token)

        session = await store.load()

        assert session is not None
        assert session.user_id == member_session.user_id
        assert store.status is AuthStatus.ADMIN_PENDING

    @pytest.mark.asyncio
    async def test_expired_token(self, fake_backend):
        store = SessionStore(fake_backend, "expired")
        events = []
        store.subscribe(lambda event, session: events.append(event))

        assert await store.load() is None
        assert store.status is AuthStatus.SIGNED_OUT
        assert events == [SessionEvent.SESSION_EXPIRED]

    @pytest.mark.asyncio
    async def test_unreachable_backend_is_signed_out(self, fake_backend, member_session):
        fake_backend.fail("get_user", BackendError("timeout"))
        store = SessionStore(fake_backend, member_session.access_token)

        assert await store.load() is None
        assert store.status is AuthStatus.SIGNED_OUT

    @pytest.mark.asyncio
    async def test_unconfigured_backend_is_signed_out(self, offline_backend):
        store = SessionStore(offline_backend, "token")
        assert await store.load() is None
        assert offline_backend.total_calls == 0


class TestSignIn:
    @pytest.mark.asyncio
    async def test_sign_in(self, fake_backend, member_session, password):
        store = SessionStore(fake_backend)
        events = []
        store.subscribe(lambda event, session: events.append((event, session)))

        session = await store.sign_in(member_session.email, password)

        assert session.email == member_session.email
        assert session.user_id == member_session.user_id
        assert session.expires_at is not None
        assert store.current_session() == session
        assert events == [(SessionEvent.SIGNED_IN, session)]

    @pytest.mark.asyncio
    async def test_wrong_password(self, fake_backend, member_session):
        store = SessionStore(fake_backend)
        with pytest.raises(InvalidCredentialsError):
            await store.sign_in(member_session.email, "wrong")
        assert store.current_session() is None

    @pytest.mark.asyncio
    async def test_other_failure(self, fake_backend, member_session, password):
        fake_backend.fail("sign_in", BackendError("connection refused"))
        store = SessionStore(fake_backend)
        with pytest.raises(AuthError) as exc_info:
            await store.sign_in(member_session.email, password)
        assert not isinstance(exc_info.value, InvalidCredentialsError)

    @pytest.mark.asyncio
    async def test_unconfigured_backend(self, offline_backend, member_session, password):
        with pytest.raises(AuthError):
            await SessionStore(offline_backend).sign_in(member_session.email, password)


class TestSignOut:
    @pytest.mark.asyncio
    async def test_sign_out_revokes_token(self, fake_backend, member_session, password):
        store = SessionStore(fake_backend)
        session = await store.sign_in(member_session.email, password)

        await store.sign_out()

        assert store.current_session() is None
        assert store.status is AuthStatus.SIGNED_OUT
        assert session.access_token not in fake_backend.tokens

    @pytest.mark.asyncio
    async def test_sign_out_is_idempotent(self, fake_backend):
        store = SessionStore(fake_backend)
        events = []
        store.subscribe(lambda event, session: events.append(event))

        await store.sign_out()
        await store.sign_out()

        assert store.status is AuthStatus.SIGNED_OUT
        assert events == []

    @pytest.mark.asyncio
    async def test_sign_out_clears_locally_when_remote_fails(
        self, fake_backend, member_session, password
    ):
        store = SessionStore(fake_backend)
        await store.sign_in(member_session.email, password)
        fake_backend.fail("sign_out", BackendError("timeout"))

        await store.sign_out()

        assert store.current_session() is None

    @pytest.mark.asyncio
    async def test_unsubscribe(self, fake_backend, member_session, password):
        store = SessionStore(fake_backend)
        events = []
        unsubscribe = store.subscribe(lambda event, session: events.append(event))
        unsubscribe()

        await store.sign_in(member_session.email, password)

        assert events == []


class TestResolveAdmin:
    @pytest.mark.asyncio
    async def test_admin(self, fake_backend, admin_session, password):
        store = SessionStore(fake_backend)
        await store.sign_in(admin_session.email, password)

        assert await store.resolve_admin(AuthorizationGate(fake_backend)) is True
        assert store.status is AuthStatus.ADMIN
        assert store.is_admin

    @pytest.mark.asyncio
    async def test_member(self, fake_backend, member_session, password):
        store = SessionStore(fake_backend)
        await store.sign_in(member_session.email, password)

        assert await store.resolve_admin(AuthorizationGate(fake_backend)) is False
        assert store.status is AuthStatus.MEMBER

    @pytest.mark.asyncio
    async def test_signed_out_stays_signed_out(self, fake_backend):
        store = SessionStore(fake_backend)
        await store.load()

        assert await store.resolve_admin(AuthorizationGate(fake_backend)) is False
        assert store.status is AuthStatus.SIGNED_OUT

    @pytest.mark.asyncio
    async def test_new_session_is_rechecked(
        self, fake_backend, admin_session, member_session, password
    ):
        gate = AuthorizationGate(fake_backend)
        store = SessionStore(fake_backend)
        await store.sign_in(admin_session.email, password)
        await store.resolve_admin(gate)

        await store.sign_out()
        await store.sign_in(member_session.email, password)

        assert store.status is AuthStatus.ADMIN_PENDING
        assert store.is_admin is False
        assert await store.resolve_admin(gate) is False


class TestMalformedBackendAnswers:
    @staticmethod
    def _backend(response: httpx.Response) -> BackendClient:
        config = BackendConfig(
            base_url="https://church.supabase.co",
            anon_key="anon-key",
            timeout_seconds=5.0,
            available=True,
        )
        return BackendClient(config, transport=httpx.MockTransport(lambda request: response))

    @pytest.mark.asyncio
    async def test_html_user_lookup_is_signed_out(self):
        backend = self._backend(httpx.Response(200, text="<html>not json</html>"))
        store = SessionStore(backend, "token")

        assert await store.load() is None
        assert store.status is AuthStatus.SIGNED_OUT
        await backend.close()

    @pytest.mark.asyncio
    async def test_user_lookup_without_id_is_signed_out(self):
        backend = self._backend(httpx.Response(200, json={"email": "a@example.com"}))
        store = SessionStore(backend, "token")

        assert await store.load() is None
        await backend.close()

    @pytest.mark.asyncio
    async def test_html_sign_in_is_auth_error(self):
        backend = self._backend(httpx.Response(200, text="<html>not json</html>"))
        store = SessionStore(backend)

        with pytest.raises(AuthError):
            await store.sign_in("a@example.com", "secret-password")
        assert store.current_session() is None
        await backend.close()
