"""Tests for the collaborator stubs: employee directory, identity provider,
file storage and notifier.
"""

from __future__ import annotations

import uuid

import pytest

from backoffice.exceptions import Unauthorized, ValidationError
from backoffice.models.enums import RequestKind, UserRole
from backoffice.schemas.auth import Principal
from backoffice.services.employee import EmployeeInfo, InMemoryEmployeeService
from backoffice.services.identity import InMemoryIdentityProvider, IdentitySession
from backoffice.services.notifier import (
    InMemoryNotifier,
    OperationOutcome,
    get_notifier,
    publish,
    set_notifier,
)
from backoffice.services.storage import PublicUrlFileStorage

COMPANY_A = uuid.uuid4()
COMPANY_B = uuid.uuid4()


def _make_employee(company_id: uuid.UUID, name: str = "Jane") -> EmployeeInfo:
    return EmployeeInfo(
        id=uuid.uuid4(),
        company_id=company_id,
        employee_number=f"EMP-{name.upper()}",
        first_name=name,
        last_name="Doe",
        email=f"{name.lower()}@example.com",
    )


# ---------------------------------------------------------------------------
# InMemoryEmployeeService tests
# ---------------------------------------------------------------------------


async def test_employee_service_get_not_found() -> None:
    svc = InMemoryEmployeeService()
    assert await svc.get_employee(uuid.uuid4()) is None


async def test_employee_service_seed_and_get() -> None:
    svc = InMemoryEmployeeService()
    emp = _make_employee(COMPANY_A)
    svc.seed(emp)
    result = await svc.get_employee(emp.id)
    assert result is not None
    assert result.full_name == "Jane Doe"
    assert result.company_id == COMPANY_A


async def test_employee_service_list_filters_by_company() -> None:
    svc = InMemoryEmployeeService()
    emp_a = _make_employee(COMPANY_A, "Alice")
    svc.seed(emp_a)
    svc.seed(_make_employee(COMPANY_B, "Bob"))
    result = await svc.list_employees(COMPANY_A)
    assert [e.id for e in result] == [emp_a.id]


# ---------------------------------------------------------------------------
# Identity tests
# ---------------------------------------------------------------------------


def _admin_principal(active: bool = True) -> Principal:
    return Principal(
        id=uuid.uuid4(), email="Admin@Example.com", role=UserRole.ADMIN, company_id=COMPANY_A, active=active
    )


async def test_sign_in_and_out() -> None:
    provider = InMemoryIdentityProvider()
    principal = _admin_principal()
    provider.seed(principal, "s3cret")

    session = await provider.sign_in("admin@example.com", "s3cret")
    assert session.principal == principal
    assert session.is_open

    await provider.sign_out(session)
    assert session.principal is None
    assert not session.is_open


async def test_sign_in_wrong_password() -> None:
    provider = InMemoryIdentityProvider()
    provider.seed(_admin_principal(), "s3cret")
    with pytest.raises(Unauthorized):
        await provider.sign_in("admin@example.com", "guess")


async def test_stored_password_hashes_are_salted() -> None:
    provider = InMemoryIdentityProvider()
    first, second = _admin_principal(), _admin_principal()
    second = second.model_copy(update={"email": "other@example.com"})
    provider.seed(first, "s3cret")
    provider.seed(second, "s3cret")

    first_hash = provider._accounts["admin@example.com"][1]
    second_hash = provider._accounts["other@example.com"][1]
    assert first_hash != second_hash
    assert "s3cret" not in first_hash
    assert (await provider.sign_in("other@example.com", "s3cret")).principal == second


async def test_sign_in_unknown_account() -> None:
    with pytest.raises(Unauthorized):
        await InMemoryIdentityProvider().sign_in("nobody@example.com", "x")


async def test_sign_in_inactive_account() -> None:
    provider = InMemoryIdentityProvider()
    provider.seed(_admin_principal(active=False), "s3cret")
    with pytest.raises(Unauthorized, match="inactive"):
        await provider.sign_in("admin@example.com", "s3cret")


def test_identity_session_principal_is_fixed() -> None:
    principal = _admin_principal()
    session = IdentitySession(principal)
    assert session.principal is principal
    session.close()
    assert session.principal is None


# ---------------------------------------------------------------------------
# File storage tests
# ---------------------------------------------------------------------------


async def test_storage_resolves_key_against_base_url() -> None:
    storage = PublicUrlFileStorage("https://files.example.com/")
    assert await storage.resolve_location("/letters/a.pdf") == "https://files.example.com/letters/a.pdf"


async def test_storage_passes_absolute_urls_through() -> None:
    storage = PublicUrlFileStorage("https://files.example.com")
    assert await storage.resolve_location("https://cdn.example.com/a.pdf") == "https://cdn.example.com/a.pdf"


async def test_storage_rejects_empty_location() -> None:
    with pytest.raises(ValidationError):
        await PublicUrlFileStorage("https://files.example.com").resolve_location("  ")


# ---------------------------------------------------------------------------
# Notifier tests
# ---------------------------------------------------------------------------


def _outcome() -> OperationOutcome:
    return OperationOutcome(operation="approve", kind=RequestKind.LEAVE, success=True, status="APPROVED")


async def test_publish_reaches_notifier(notifier: InMemoryNotifier) -> None:
    assert get_notifier() is notifier
    await publish(_outcome())
    assert notifier.outcomes == [_outcome()]


class _ExplodingNotifier:
    async def notify(self, outcome: OperationOutcome) -> None:
        raise ConnectionError("push gateway down")


async def test_publish_swallows_notifier_errors(caplog: pytest.LogCaptureFixture) -> None:
    set_notifier(_ExplodingNotifier())
    await publish(_outcome())
    assert "Notifier failed" in caplog.text
