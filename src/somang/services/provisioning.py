"""Provisioning of new administrator accounts."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from somang.core.settings import settings
from somang.services.backend import (
    BackendClient,
    BackendError,
    BackendResponseError,
    BackendUnavailableError,
)

logger = logging.getLogger(__name__)

ALREADY_REGISTERED_MESSAGE = "User already registered"
ALREADY_REGISTERED_CODES = frozenset({"user_already_exists", "email_exists"})


class ProvisionError(RuntimeError):
    """Base exception for admin provisioning failures."""


class PasswordMismatchError(ProvisionError):
    """Raised when the password and its confirmation differ."""


class PasswordTooShortError(ProvisionError):
    """Raised when the password is shorter than the configured minimum."""


class AlreadyRegisteredError(ProvisionError):
    """Raised when the email already belongs to an identity."""


class AllowListInsertError(ProvisionError):
    """Raised when the identity was created but could not be allow-listed.

    The identity is left in place; an operator has to add the allow-list
    entry (or remove the identity) by hand.
    """

    def __init__(self, user_id: str, email: str, reason: str) -> None:
        super().__init__(f"Identity {user_id} created but not allow-listed: {reason}")
        self.user_id = user_id
        self.email = email


@dataclass(frozen=True)
class AdminAccount:
    """An administrator identity that was just provisioned."""

    user_id: str
    email: str


def _is_already_registered(error: BackendResponseError) -> bool:
    return (
        ALREADY_REGISTERED_MESSAGE in error.message
        or (error.code or "") in ALREADY_REGISTERED_CODES
    )


class AdminProvisioner:
    """Creates an identity and then its admin allow-list entry.

    The two steps are separate, sequential backend calls with no transaction
    around them.
    """

    def __init__(
        self,
        backend: BackendClient,
        *,
        access_token: str | None = None,
        min_password_length: int | None = None,
        table: str | None = None,
    ) -> None:
        self._backend = backend
        self._access_token = access_token
        self._min_password_length = (
            settings.min_password_length if min_password_length is None else min_password_length
        )
        self._table = table or settings.admin_table

    def validate(self, password: str, confirm_password: str) -> None:
        """Check the password pair without contacting the backend."""
        if password != confirm_password:
            raise PasswordMismatchError("Passwords do not match")
        if len(password) < self._min_password_length:
            raise PasswordTooShortError(
                f"Password must be at least {self._min_password_length} characters"
            )

    async def provision_admin(
        self, email: str, password: str, confirm_password: str
    ) -> AdminAccount:
        """Create an administrator account for ``email``.

        Args:
            email: Login email of the new administrator.
            password: Chosen password.
            confirm_password: Must equal ``password``.

        Returns:
            The created account.

        Raises:
            PasswordMismatchError: Passwords differ (no backend call made).
            PasswordTooShortError: Password too short (no backend call made).
            AlreadyRegisteredError: The email already has an identity.
            AllowListInsertError: Identity created, allow-list insert failed.
            ProvisionError: Any other failure.
        """
        self.validate(password, confirm_password)

        try:
            payload = await self._backend.sign_up(email, password)
        except BackendUnavailableError as err:
            raise ProvisionError("Backend is not configured") from err
        except BackendResponseError as err:
            if _is_already_registered(err):
                raise AlreadyRegisteredError(email) from err
            raise ProvisionError(err.message) from err
        except BackendError as err:
            raise ProvisionError(str(err)) from err

        # Depending on confirmation settings the user is either the payload
        # itself or nested under "user".
        if not isinstance(payload, dict):
            raise ProvisionError("Backend did not return the created user")
        user = payload.get("user") if isinstance(payload.get("user"), dict) else payload
        user_id = user.get("id")
        if not user_id:
            raise ProvisionError("Backend did not return the created user")
        user_id = str(user_id)

        try:
            await self._backend.insert(
                self._table,
                {"id": user_id, "email": email, "is_admin": True},
                access_token=self._access_token,
            )
        except BackendError as err:
            logger.error(
                "Identity %s (%s) created but allow-list insert failed: %s",
                user_id,
                email,
                err,
            )
            raise AllowListInsertError(user_id, email, str(err)) from err

        logger.info("Provisioned administrator %s", email)
        return AdminAccount(user_id=user_id, email=email)
