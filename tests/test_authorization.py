"""Tests for the authorization engine's allow/deny decisions."""

from __future__ import annotations

import uuid

import pytest

from backoffice.exceptions import Unauthorized
from backoffice.models.enums import ADMIN_ROLES, UserRole
from backoffice.schemas.auth import Principal
from backoffice.services.authorization import can_access, can_access_company, require_company, require_roles

COMPANY_A = uuid.uuid4()
COMPANY_B = uuid.uuid4()


def _principal(role: UserRole, company_id: uuid.UUID | None = COMPANY_A, *, active: bool = True) -> Principal:
    employee_id = uuid.uuid4() if role == UserRole.EMPLOYEE else None
    return Principal(id=uuid.uuid4(), role=role, company_id=company_id, employee_id=employee_id, active=active)


# ---------------------------------------------------------------------------
# can_access
# ---------------------------------------------------------------------------


def test_no_principal_is_denied() -> None:
    assert can_access(None, ADMIN_ROLES) is False
    assert can_access_company(None, COMPANY_A) is False


def test_inactive_principal_is_denied() -> None:
    admin = _principal(UserRole.ADMIN, active=False)
    assert can_access(admin, ADMIN_ROLES) is False
    assert can_access_company(admin, COMPANY_A) is False


def test_inactive_super_admin_is_denied() -> None:
    root = _principal(UserRole.SUPER_ADMIN, None, active=False)
    assert can_access(root, ADMIN_ROLES) is False


@pytest.mark.parametrize(
    ("role", "expected"),
    [(UserRole.ADMIN, True), (UserRole.SUPER_ADMIN, True), (UserRole.EMPLOYEE, False)],
)
def test_role_check(role: UserRole, expected: bool) -> None:
    assert can_access(_principal(role), ADMIN_ROLES) is expected


def test_super_admin_passes_any_role_set() -> None:
    assert can_access(_principal(UserRole.SUPER_ADMIN), [UserRole.EMPLOYEE]) is True
    assert can_access(_principal(UserRole.SUPER_ADMIN), []) is True


def test_empty_role_set_denies_non_super_admin() -> None:
    assert can_access(_principal(UserRole.ADMIN), []) is False


# ---------------------------------------------------------------------------
# can_access_company
# ---------------------------------------------------------------------------


def test_same_company_allowed() -> None:
    assert can_access_company(_principal(UserRole.ADMIN), COMPANY_A) is True
    assert can_access_company(_principal(UserRole.EMPLOYEE), COMPANY_A) is True


def test_other_company_denied() -> None:
    assert can_access_company(_principal(UserRole.ADMIN), COMPANY_B) is False


def test_missing_company_binding_denied() -> None:
    assert can_access_company(_principal(UserRole.ADMIN, None), COMPANY_A) is False
    assert can_access_company(_principal(UserRole.ADMIN, None), None) is False


def test_super_admin_crosses_companies() -> None:
    root = _principal(UserRole.SUPER_ADMIN, None)
    assert can_access_company(root, COMPANY_A) is True
    assert can_access_company(root, COMPANY_B) is True


# ---------------------------------------------------------------------------
# require_*
# ---------------------------------------------------------------------------


def test_require_roles_returns_principal() -> None:
    admin = _principal(UserRole.ADMIN)
    assert require_roles(admin, ADMIN_ROLES) is admin


def test_require_roles_raises_plain_unauthorized() -> None:
    with pytest.raises(Unauthorized) as exc_info:
        require_roles(_principal(UserRole.EMPLOYEE), ADMIN_ROLES)
    assert exc_info.value.conceal is False
    assert exc_info.value.status_code == 403


def test_require_company_conceals_by_default() -> None:
    with pytest.raises(Unauthorized) as exc_info:
        require_company(_principal(UserRole.ADMIN), COMPANY_B)
    assert exc_info.value.conceal is True


def test_require_company_can_be_explicit() -> None:
    with pytest.raises(Unauthorized) as exc_info:
        require_company(_principal(UserRole.ADMIN), COMPANY_B, conceal=False)
    assert exc_info.value.conceal is False


def test_employee_principal_needs_employee_binding() -> None:
    with pytest.raises(ValueError, match="employee_id"):
        Principal(id=uuid.uuid4(), role=UserRole.EMPLOYEE, company_id=COMPANY_A)


def test_require_without_principal_raises() -> None:
    with pytest.raises(Unauthorized):
        require_roles(None, ADMIN_ROLES)
    with pytest.raises(Unauthorized) as exc_info:
        require_company(None, COMPANY_A)
    assert exc_info.value.conceal is True
