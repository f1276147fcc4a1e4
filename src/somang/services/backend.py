"""Client for the hosted backend that stores posts and manages accounts.

The backend exposes two surfaces that this module speaks to over HTTP:

- a table API (``/rest/v1/<table>``) with equality filters, ordering and
  insert/update/delete by identifier
- an auth API (``/auth/v1/...``) for sign-up, sign-in, sign-out and
  looking up the user behind an access token

Whether the backend is configured at all is decided once, when the client
configuration is loaded. Every call checks that single flag and raises
``BackendUnavailableError`` when it is off, so callers can degrade uniformly.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from somang.core.settings import settings

logger = logging.getLogger(__name__)

HTTP_NO_CONTENT = 204


class BackendError(RuntimeError):
    """Base exception raised for backend failures."""


class BackendUnavailableError(BackendError):
    """Raised when a call is attempted while no backend is configured."""


class BackendResponseError(BackendError):
    """Raised when the backend answers with a non-success status."""

    def __init__(self, status_code: int, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code


@dataclass(frozen=True)
class BackendConfig:
    """Immutable configuration for backend operations."""

    base_url: str | None
    anon_key: str | None
    timeout_seconds: float
    available: bool


def load_backend_config() -> BackendConfig:
    """Build configuration object from global settings."""

    return BackendConfig(
        base_url=settings.backend_url,
        anon_key=settings.backend_anon_key,
        timeout_seconds=float(settings.backend_http_timeout_seconds),
        available=settings.backend_available,
    )


def _error_from_response(response: httpx.Response) -> BackendResponseError:
    message = response.reason_phrase or f"HTTP {response.status_code}"
    code: str | None = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, Mapping):
        for key in ("msg", "message", "error_description", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                message = value
                break
        raw_code = body.get("error_code") or body.get("code") or body.get("error")
        if raw_code is not None:
            code = str(raw_code)
    return BackendResponseError(response.status_code, message, code)


class BackendClient:
    """HTTP client wrapper for the hosted table and auth APIs."""

    def __init__(
        self,
        config: BackendConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_backend_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def available(self) -> bool:
        return self.config.available

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.available:
            raise BackendUnavailableError("Backend is not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url or "",
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        key = self.config.anon_key or ""
        return {
            "apikey": key,
            "Authorization": f"Bearer {access_token or key}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        access_token: str | None = None,
        params: Mapping[str, str] | None = None,
        json_data: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        client = await self._ensure_client()
        request_headers = self._headers(access_token)
        if headers:
            request_headers.update(headers)

        try:
            response = await client.request(
                method,
                path,
                params=params,
                json=json_data,
                headers=request_headers,
            )
        except httpx.HTTPError as exc:
            logger.warning("Backend request %s %s failed: %s", method, path, exc)
            raise BackendError(f"Backend request failed: {exc}") from exc

        if response.is_error:
            error = _error_from_response(response)
            logger.debug(
                "Backend responded %d to %s %s: %s",
                response.status_code,
                method,
                path,
                error.message,
            )
            raise error
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            logger.warning(
                "Backend returned a non-JSON body for %s %s",
                response.request.method,
                response.request.url.path,
            )
            raise BackendError("Backend returned a non-JSON body") from exc

    @classmethod
    def _rows(cls, response: httpx.Response) -> list[dict[str, Any]]:
        if response.status_code == HTTP_NO_CONTENT or not response.content:
            return []
        body = cls._json(response)
        if isinstance(body, list):
            return body
        return [body]

    # ------------------------------------------------------------------
    # Table API
    # ------------------------------------------------------------------

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
        """Return rows of ``table`` matching every equality filter."""
        params: dict[str, str] = {"select": columns}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"
        if order:
            params["order"] = f"{order}.{'desc' if descending else 'asc'}"

        response = await self._request(
            "GET", f"/rest/v1/{table}", access_token=access_token, params=params
        )
        return self._rows(response)

    async def insert(
        self,
        table: str,
        row: Mapping[str, Any],
        *,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """Insert one row and return it as stored by the backend."""
        response = await self._request(
            "POST",
            f"/rest/v1/{table}",
            access_token=access_token,
            json_data=[dict(row)],
            headers={"Prefer": "return=representation"},
        )
        rows = self._rows(response)
        if not rows:
            raise BackendError(f"Insert into {table} returned no row")
        return rows[0]

    async def update(
        self,
        table: str,
        row_id: str,
        values: Mapping[str, Any],
        *,
        access_token: str | None = None,
    ) -> list[dict[str, Any]]:
        """Update the row with ``id = row_id``; returns the updated rows."""
        response = await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            access_token=access_token,
            params={"id": f"eq.{row_id}"},
            json_data=dict(values),
            headers={"Prefer": "return=representation"},
        )
        return self._rows(response)

    async def delete(
        self,
        table: str,
        row_id: str,
        *,
        access_token: str | None = None,
    ) -> list[dict[str, Any]]:
        """Delete the row with ``id = row_id``; returns the deleted rows."""
        response = await self._request(
            "DELETE",
            f"/rest/v1/{table}",
            access_token=access_token,
            params={"id": f"eq.{row_id}"},
            headers={"Prefer": "return=representation"},
        )
        return self._rows(response)

    # ------------------------------------------------------------------
    # Auth API
    # ------------------------------------------------------------------

    async def sign_up(self, email: str, password: str) -> dict[str, Any]:
        """Create an identity; returns the backend's user (and maybe session)."""
        response = await self._request(
            "POST",
            "/auth/v1/signup",
            json_data={"email": email, "password": password},
        )
        return self._json(response)

    async def sign_in(self, email: str, password: str) -> dict[str, Any]:
        """Exchange credentials for a session payload."""
        response = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json_data={"email": email, "password": password},
        )
        return self._json(response)

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind ``access_token``."""
        await self._request("POST", "/auth/v1/logout", access_token=access_token)

    async def get_user(self, access_token: str) -> dict[str, Any]:
        """Return the user the access token belongs to."""
        response = await self._request("GET", "/auth/v1/user", access_token=access_token)
        return self._json(response)

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""

        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class _BackendClientSingleton:
    """Singleton wrapper for BackendClient."""

    _instance: BackendClient | None = None

    @classmethod
    def get_instance(cls) -> BackendClient:
        """Get or create the singleton BackendClient instance."""
        if cls._instance is None:
            cls._instance = BackendClient()
        return cls._instance


def get_backend_client() -> BackendClient:
    """Return the process-wide backend client instance."""
    return _BackendClientSingleton.get_instance()
