"""Identity & session store.

An ``IdentitySession`` is created by the collaborator layer (an HTTP dependency
or a sign-in call), passed by reference into every core operation and closed
by the same layer. The principal it holds never changes; once closed the
session reports no principal and every authorization check fails closed.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from werkzeug.security import check_password_hash, generate_password_hash

from backoffice.exceptions import Unauthorized

if TYPE_CHECKING:
    from backoffice.schemas.auth import Principal

logger = logging.getLogger(__name__)


class IdentitySession:
    """Holds the authenticated principal for the lifetime of one session."""

    def __init__(self, principal: Principal) -> None:
        self._principal = principal
        self._opened_at = datetime.now(UTC)
        self._closed = False

    @property
    def principal(self) -> Principal | None:
        if self._closed:
            return None
        return self._principal

    @property
    def opened_at(self) -> datetime:
        return self._opened_at

    @property
    def is_open(self) -> bool:
        return not self._closed

    def close(self) -> None:
        self._closed = True


@runtime_checkable
class IdentityProvider(Protocol):
    """Interface for signing principals in and out."""

    async def sign_in(self, email: str, password: str) -> IdentitySession:
        """Authenticate and open a session. Raises Unauthorized on failure."""
        ...

    async def sign_out(self, session: IdentitySession) -> None:
        """Close the session."""
        ...


class InMemoryIdentityProvider:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._accounts: dict[str, tuple[Principal, str]] = {}

    def seed(self, principal: Principal, password: str) -> None:
        """Seed an account for testing."""
        self._accounts[principal.email.lower()] = (principal, generate_password_hash(password))

    async def sign_in(self, email: str, password: str) -> IdentitySession:
        account = self._accounts.get(email.lower())
        if account is None or not check_password_hash(account[1], password):
            raise Unauthorized("Invalid email or password")
        principal = account[0]
        if not principal.active:
            raise Unauthorized("Account is inactive")
        logger.info("Signed in principal=%s role=%s", principal.id, principal.role)
        return IdentitySession(principal)

    async def sign_out(self, session: IdentitySession) -> None:
        principal = session.principal
        session.close()
        if principal is not None:
            logger.info("Signed out principal=%s", principal.id)


_identity_provider: IdentityProvider = InMemoryIdentityProvider()


def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency for the identity provider."""
    return _identity_provider


def set_identity_provider(provider: IdentityProvider) -> None:
    """Override the provider (for testing or production wiring)."""
    global _identity_provider
    _identity_provider = provider
