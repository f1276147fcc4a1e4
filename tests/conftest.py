# tests/conftest.py
from __future__ import annotations

import uuid
from collections import Counter
from collections.abc import Iterator, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from somang.main import app as fastapi_app
from somang.services.backend import (
    BackendError,
    BackendResponseError,
    BackendUnavailableError,
    get_backend_client,
)
from somang.services.session_store import Session

ADMIN_EMAIL = "admin@example.com"
MEMBER_EMAIL = "member@example.com"
PASSWORD = "secret-password"


class FakeBackend:
    """In-memory stand-in for ``BackendClient`` with per-method call counts.

    Mirrors the client's behaviour: every call raises ``BackendUnavailableError``
    when ``available`` is False, table rows are filtered by string equality,
    and auth failures surface as ``BackendResponseError`` with the hosted
    service's messages.
    """

    def __init__(self, *, available: bool = True) -> None:
        self.available = available
        self.tables: dict[str, list[dict[str, Any]]] = {"posts": [], "admin_users": []}
        self.users: dict[str, dict[str, Any]] = {}
        self.tokens: dict[str, str] = {}
        self.calls: Counter[str] = Counter()
        self.failures: dict[str, Exception] = {}
        self.closed = False

    # -- helpers -------------------------------------------------------

    def _enter(self, method: str) -> None:
        self.calls[method] += 1
        if not self.available:
            raise BackendUnavailableError("Backend is not configured")
        failure = self.failures.get(method)
        if failure is not None:
            raise failure

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    def fail(self, method: str, error: Exception | None = None) -> None:
        self.failures[method] = error or BackendError(f"{method} failed")

    def add_user(self, email: str, password: str = PASSWORD, *, admin: bool = False) -> Session:
        user_id = str(uuid.uuid4())
        self.users[email] = {"id": user_id, "email": email, "password": password}
        if admin:
            self.tables["admin_users"].append(
                {"id": user_id, "email": email, "is_admin": True}
            )
        token = f"token-{user_id}"
        self.tokens[token] = user_id
        return Session(user_id=user_id, email=email, access_token=token)

    def add_post(
        self,
        *,
        title: str = "주일 예배 안내",
        content: str = "<p>이번 주일 예배는 오전 11시입니다.</p>",
        category: str = "news",
        created_at: datetime | None = None,
        **extra: Any,
    ) -> dict[str, Any]:
        stamp = (created_at or datetime.now(UTC)).isoformat()
        row = {
            "id": str(uuid.uuid4()),
            "title": title,
            "content": content,
            "category": category,
            "image_url": None,
            "youtube_url": None,
            "created_at": stamp,
            "updated_at": stamp,
        }
        row.update(extra)
        self.tables["posts"].append(row)
        return dict(row)

    def _user_by_id(self, user_id: str) -> dict[str, Any] | None:
        for user in self.users.values():
            if user["id"] == user_id:
                return user
        return None

    # -- table API -----------------------------------------------------

    async def select(
        self,
        table: str,
        *,
        filters: Mapping[str, str] | None = None,
        order: str | None = None,
        descending: bool = False,
        columns: str = "*",
        access_token: str | None = None,
    ) -> list[dict[str, Any]]:
        self._enter("select")
        rows = [
            dict(row)
            for row in self.tables.setdefault(table, [])
            if all(str(row.get(key)) == str(value) for key, value in (filters or {}).items())
        ]
        if order:
            rows.sort(key=lambda row: row[order], reverse=descending)
        if columns != "*":
            wanted = [name.strip() for name in columns.split(",")]
            rows = [{name: row.get(name) for name in wanted} for row in rows]
        return rows

    async def insert(
        self,
        table: str,
        row: Mapping[str, Any],
        *,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        self._enter("insert")
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        self.tables.setdefault(table, []).append(stored)
        return dict(stored)

    async def update(
        self,
        table: str,
        row_id: str,
        values: Mapping[str, Any],
        *,
        access_token: str | None = None,
    ) -> list[dict[str, Any]]:
        self._enter("update")
        updated = []
        for row in self.tables.setdefault(table, []):
            if str(row.get("id")) == str(row_id):
                row.update(values)
                updated.append(dict(row))
        return updated

    async def delete(
        self,
        table: str,
        row_id: str,
        *,
        access_token: str | None = None,
    ) -> list[dict[str, Any]]:
        self._enter("delete")
        rows = self.tables.setdefault(table, [])
        removed = [dict(row) for row in rows if str(row.get("id")) == str(row_id)]
        self.tables[table] = [row for row in rows if str(row.get("id")) != str(row_id)]
        return removed

    # -- auth API ------------------------------------------------------

    async def sign_up(self, email: str, password: str) -> dict[str, Any]:
        self._enter("sign_up")
        if email in self.users:
            raise BackendResponseError(422, "User already registered", "user_already_exists")
        user_id = str(uuid.uuid4())
        self.users[email] = {"id": user_id, "email": email, "password": password}
        return {"id": user_id, "email": email}

    async def sign_in(self, email: str, password: str) -> dict[str, Any]:
        self._enter("sign_in")
        user = self.users.get(email)
        if user is None or user["password"] != password:
            raise BackendResponseError(400, "Invalid login credentials", "invalid_credentials")
        token = f"token-{uuid.uuid4()}"
        self.tokens[token] = user["id"]
        expires_at = datetime.now(UTC) + timedelta(hours=1)
        return {
            "access_token": token,
            "refresh_token": f"refresh-{token}",
            "expires_at": int(expires_at.timestamp()),
            "user": {"id": user["id"], "email": email},
        }

    async def sign_out(self, access_token: str) -> None:
        self._enter("sign_out")
        self.tokens.pop(access_token, None)

    async def get_user(self, access_token: str) -> dict[str, Any]:
        self._enter("get_user")
        user_id = self.tokens.get(access_token)
        user = self._user_by_id(user_id) if user_id else None
        if user is None:
            raise BackendResponseError(401, "invalid JWT: token is expired", "bad_jwt")
        return {"id": user["id"], "email": user["email"]}

    async def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def offline_backend() -> FakeBackend:
    """A backend that behaves as if no endpoint values were configured."""
    return FakeBackend(available=False)


@pytest.fixture()
def password() -> str:
    return PASSWORD


@pytest.fixture()
def admin_session(fake_backend: FakeBackend) -> Session:
    return fake_backend.add_user(ADMIN_EMAIL, admin=True)


@pytest.fixture()
def member_session(fake_backend: FakeBackend) -> Session:
    return fake_backend.add_user(MEMBER_EMAIL)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(app: FastAPI, fake_backend: FakeBackend) -> Iterator[TestClient]:
    app.dependency_overrides[get_backend_client] = lambda: fake_backend
    try:
        with TestClient(app, base_url="http://test") as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_backend_client, None)


@pytest.fixture()
def offline_client(app: FastAPI, offline_backend: FakeBackend) -> Iterator[TestClient]:
    app.dependency_overrides[get_backend_client] = lambda: offline_backend
    try:
        with TestClient(app, base_url="http://test") as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_backend_client, None)


@pytest.fixture()
def admin_headers(admin_session: Session) -> dict[str, str]:
    """Return authorization headers for an allow-listed administrator."""
    return {"Authorization": f"Bearer {admin_session.access_token}"}


@pytest.fixture()
def member_headers(member_session: Session) -> dict[str, str]:
    """Return authorization headers for a signed-in non-administrator."""
    return {"Authorization": f"Bearer {member_session.access_token}"}
