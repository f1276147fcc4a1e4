"""Admin allow-list checks.

The result only decides what the site offers to show or submit. Whether a
write is actually permitted is enforced by the backend's own row-level
policies, which this module neither sees nor simulates.
"""

from __future__ import annotations

import logging

from somang.core.settings import settings
from somang.services.backend import BackendClient, BackendError
from somang.services.session_store import Session

logger = logging.getLogger(__name__)


class AuthorizationGate:
    """Derives administrator status from the admin allow-list."""

    def __init__(self, backend: BackendClient, table: str | None = None) -> None:
        self._backend = backend
        self._table = table or settings.admin_table

    async def is_admin(self, session: Session | None) -> bool:
        """Return True only if the allow-list holds an entry for the session's user.

        Absence of the session, of the entry, or of a reachable backend all
        yield False; this method never raises.
        """
        if session is None or not session.user_id:
            return False
        if not self._backend.available:
            return False

        try:
            rows = await self._backend.select(
                self._table,
                filters={"id": session.user_id},
                columns="id,is_admin",
                access_token=session.access_token,
            )
        except BackendError as err:
            logger.warning("Admin check for %s failed: %s", session.user_id, err)
            return False

        return any(row.get("is_admin", True) is True for row in rows)
