# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Header, Path
from pydantic import ValidationError as PydanticValidationError

from backoffice.exceptions import Unauthorized
from backoffice.models.enums import ADMIN_ROLES, UserRole
from backoffice.schemas.auth import Principal
from backoffice.services.authorization import can_access_company, require_roles
from backoffice.services.identity import IdentitySession


async def get_principal(
    x_user_id: uuid.UUID = Header(),
    x_role: UserRole = Header(default=UserRole.EMPLOYEE),
    x_company_id: uuid.UUID | None = Header(default=None),
    x_employee_id: uuid.UUID | None = Header(default=None),
    x_email: str = Header(default=""),
    x_active: bool = Header(default=True),
) -> Principal:
    """Extract the dev principal from request headers."""
    try:
        return Principal(
            id=x_user_id,
            email=x_email,
            role=x_role,
            company_id=x_company_id,
            employee_id=x_employee_id,
            active=x_active,
        )
    except PydanticValidationError:
        raise Unauthorized("Invalid principal") from None


async def get_identity(principal: Principal = Depends(get_principal)) -> AsyncIterator[IdentitySession]:
    """Open an identity session for the duration of the HTTP request."""
    session = IdentitySession(principal)
    try:
        yield session
    finally:
        session.close()


IdentityDep = Annotated[IdentitySession, Depends(get_identity)]


async def require_admin(identity: IdentityDep) -> IdentitySession:
    """Require an admin-class role for the request."""
    require_roles(identity.principal, ADMIN_ROLES)
    return identity


AdminDep = Annotated[IdentitySession, Depends(require_admin)]


async def validate_company_scope(
    company_id: uuid.UUID = Path(),
    identity: IdentitySession = Depends(get_identity),
) -> IdentitySession:
    """Ensure the caller may act within the path company_id."""
    if not can_access_company(identity.principal, company_id):
        raise Unauthorized("Company ID mismatch")
    return identity
