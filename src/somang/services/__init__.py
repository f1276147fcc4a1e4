# src/somang/services/__init__.py
"""Backend access, session and authorization services."""

from .authorization import AuthorizationGate
from .backend import BackendClient, get_backend_client
from .provisioning import AdminProvisioner
from .session_store import SessionStore

__all__ = [
    "AdminProvisioner",
    "AuthorizationGate",
    "BackendClient",
    "SessionStore",
    "get_backend_client",
]
