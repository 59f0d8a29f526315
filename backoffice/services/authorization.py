"""Authorization engine: pure allow/deny decisions for a principal.

Both predicates fail closed. A missing or inactive principal is denied, and
``super_admin`` passes every check.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from backoffice.exceptions import Unauthorized
from backoffice.models.enums import UserRole

if TYPE_CHECKING:
    import uuid
    from collections.abc import Collection

    from backoffice.schemas.auth import Principal

logger = logging.getLogger(__name__)


def can_access(principal: Principal | None, required_roles: Collection[UserRole]) -> bool:
    """Return True if the principal holds one of ``required_roles``."""
    if principal is None or not principal.active:
        return False
    if principal.role == UserRole.SUPER_ADMIN:
        return True
    return principal.role in required_roles


def can_access_company(principal: Principal | None, company_id: uuid.UUID | None) -> bool:
    """Return True if the principal may see data belonging to ``company_id``."""
    if principal is None or not principal.active:
        return False
    if principal.role == UserRole.SUPER_ADMIN:
        return True
    return principal.company_id is not None and principal.company_id == company_id


def require_roles(principal: Principal | None, required_roles: Collection[UserRole]) -> Principal:
    """Raise Unauthorized unless ``can_access`` allows the principal."""
    if principal is None or not can_access(principal, required_roles):
        logger.warning(
            "Role check denied: principal=%s role=%s required=%s",
            principal.id if principal else None,
            principal.role if principal else None,
            sorted(required_roles),
        )
        raise Unauthorized("Insufficient role for this operation")
    return principal


def require_company(principal: Principal | None, company_id: uuid.UUID | None, *, conceal: bool = True) -> Principal:
    """Raise Unauthorized unless ``can_access_company`` allows the principal."""
    if principal is None or not can_access_company(principal, company_id):
        logger.warning(
            "Company scope denied: principal=%s company=%s",
            principal.id if principal else None,
            company_id,
        )
        raise Unauthorized("Company scope mismatch", conceal=conceal)
    return principal
