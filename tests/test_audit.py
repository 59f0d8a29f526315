"""Tests for the request audit trail and its query endpoint."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from backoffice.services.employee import EmployeeInfo, InMemoryEmployeeService, set_employee_service

if TYPE_CHECKING:
    from collections.abc import Iterator

    from httpx import AsyncClient

COMPANY_ID = uuid.uuid4()
ADMIN_ID = uuid.uuid4()
EMPLOYEE_ID = uuid.uuid4()
AUTH_HEADERS = {
    "X-Company-Id": str(COMPANY_ID),
    "X-User-Id": str(ADMIN_ID),
    "X-Role": "admin",
}
EMPLOYEE_HEADERS = {
    "X-Company-Id": str(COMPANY_ID),
    "X-User-Id": str(EMPLOYEE_ID),
    "X-Employee-Id": str(EMPLOYEE_ID),
    "X-Role": "employee",
}
BASE_URL = f"/companies/{COMPANY_ID}"
AUDIT_URL = f"{BASE_URL}/audit-log"


@pytest.fixture(autouse=True)
def _seed_employee_service() -> Iterator[None]:
    svc = InMemoryEmployeeService()
    svc.seed(
        EmployeeInfo(
            id=EMPLOYEE_ID,
            company_id=COMPANY_ID,
            employee_number="EMP-001",
            first_name="Test",
            last_name="Employee",
            email="test@example.com",
        )
    )
    set_employee_service(svc)
    yield
    set_employee_service(InMemoryEmployeeService())


async def _submit_and_approve(client: AsyncClient) -> str:
    resp = await client.post(
        f"{BASE_URL}/leave-requests",
        json={"leave_type": "Annual", "start_date": "2024-06-10", "end_date": "2024-06-11"},
        headers=EMPLOYEE_HEADERS,
    )
    request_id: str = resp.json()["id"]
    await client.post(f"{BASE_URL}/requests/leave/{request_id}/approve", headers=AUTH_HEADERS)
    return request_id


async def test_transitions_are_audited(async_client: AsyncClient) -> None:
    request_id = await _submit_and_approve(async_client)

    resp = await async_client.get(AUDIT_URL, params={"entity_id": request_id}, headers=AUTH_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    by_action = {entry["action"]: entry for entry in data["items"]}
    assert set(by_action) == {"SUBMIT", "APPROVE"}

    submit = by_action["SUBMIT"]
    assert submit["actor_id"] == str(EMPLOYEE_ID)
    assert submit["entity_type"] == "LEAVE"
    assert submit["before_json"] is None
    assert submit["after_json"]["status"] == "PENDING"

    approve = by_action["APPROVE"]
    assert approve["actor_id"] == str(ADMIN_ID)
    assert approve["before_json"]["version"] == 1
    assert approve["after_json"]["status"] == "APPROVED"
    assert approve["after_json"]["version"] == 2


async def test_filter_by_action(async_client: AsyncClient) -> None:
    await _submit_and_approve(async_client)
    await _submit_and_approve(async_client)

    resp = await async_client.get(AUDIT_URL, params={"action": "APPROVE"}, headers=AUTH_HEADERS)
    data = resp.json()
    assert data["total"] == 2
    assert all(entry["action"] == "APPROVE" for entry in data["items"])


async def test_failed_transition_is_not_audited(async_client: AsyncClient) -> None:
    request_id = await _submit_and_approve(async_client)
    await async_client.post(f"{BASE_URL}/requests/leave/{request_id}/approve", headers=AUTH_HEADERS)

    resp = await async_client.get(AUDIT_URL, params={"entity_id": request_id}, headers=AUTH_HEADERS)
    assert resp.json()["total"] == 2


async def test_audit_log_requires_admin(async_client: AsyncClient) -> None:
    resp = await async_client.get(AUDIT_URL, headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 403


async def test_date_range_includes_whole_end_day(async_client: AsyncClient) -> None:
    await _submit_and_approve(async_client)
    today = datetime.now(UTC).date()

    resp = await async_client.get(
        AUDIT_URL,
        params={"start_date": today.isoformat(), "end_date": today.isoformat()},
        headers=AUTH_HEADERS,
    )
    assert resp.json()["total"] == 2


async def test_date_range_before_today_is_empty(async_client: AsyncClient) -> None:
    await _submit_and_approve(async_client)
    yesterday = datetime.now(UTC).date() - timedelta(days=1)

    resp = await async_client.get(AUDIT_URL, params={"end_date": yesterday.isoformat()}, headers=AUTH_HEADERS)
    assert resp.json()["total"] == 0
