"""Tests for mapping each request kind onto the unified view."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime

import pytest

from backoffice.models.document import DocumentRequest
from backoffice.models.employee_request import EmployeeRequest
from backoffice.models.enums import CanonicalStatus, RequestKind
from backoffice.models.leave import LeaveRequest
from backoffice.services.employee import EmployeeInfo
from backoffice.services.normalizer import canonical_status, normalize

COMPANY_ID = uuid.uuid4()
EMPLOYEE = EmployeeInfo(
    id=uuid.uuid4(),
    company_id=COMPANY_ID,
    employee_number="EMP-042",
    first_name="Sara",
    last_name="Nasser",
    email="sara@example.com",
    department="Finance",
)
AT = datetime(2024, 3, 1, 8, 30, tzinfo=UTC)


def _leave(**overrides: object) -> LeaveRequest:
    fields: dict[str, object] = {
        "company_id": COMPANY_ID,
        "employee_id": EMPLOYEE.id,
        "status": "PENDING",
        "leave_type": "Sick",
        "start_date": date(2024, 3, 4),
        "end_date": date(2024, 3, 5),
        "created_at": AT,
    }
    fields.update(overrides)
    return LeaveRequest(**fields)


# ---------------------------------------------------------------------------
# Status mapping
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("kind", "status", "expected"),
    [
        (RequestKind.LEAVE, "APPROVED", CanonicalStatus.APPROVED),
        (RequestKind.DOCUMENT, "IN_PROGRESS", CanonicalStatus.IN_REVIEW),
        (RequestKind.DOCUMENT, "COMPLETED", CanonicalStatus.APPROVED),
        (RequestKind.GENERIC, "COMPLETED", CanonicalStatus.APPROVED),
        (RequestKind.GENERIC, "CANCELLED", CanonicalStatus.CANCELLED),
        (RequestKind.GENERIC, "ARCHIVED", CanonicalStatus.PENDING),
    ],
)
def test_canonical_status(kind: RequestKind, status: str, expected: CanonicalStatus) -> None:
    assert canonical_status(kind, status) == expected


# ---------------------------------------------------------------------------
# Per-kind mapping
# ---------------------------------------------------------------------------


def test_leave_mapping() -> None:
    item = normalize(_leave(), RequestKind.LEAVE, EMPLOYEE)
    assert item.kind == RequestKind.LEAVE
    assert item.type == "Leave Request"
    assert item.category == "Attendance & Leaves"
    assert item.employee_name == "Sara Nasser"
    assert item.employee_external_id == "EMP-042"
    assert item.department == "Finance"
    assert item.submitted_at == AT
    assert item.details == {"leaveType": "Sick", "fromDate": "2024-03-04", "toDate": "2024-03-05", "reason": "N/A"}


def test_document_mapping() -> None:
    record = DocumentRequest(
        company_id=COMPANY_ID,
        employee_id=EMPLOYEE.id,
        status="IN_PROGRESS",
        document_type="Experience Letter",
        language="ar",
        requested_at=AT,
    )
    item = normalize(record, RequestKind.DOCUMENT, EMPLOYEE)
    assert item.type == "Experience Letter"
    assert item.category == "Letters & Certificates"
    assert item.status == CanonicalStatus.IN_REVIEW
    assert item.details == {
        "documentType": "Experience Letter",
        "purpose": "N/A",
        "language": "ar",
        "destination": "N/A",
    }


def test_generic_details_follow_catalog_order() -> None:
    record = EmployeeRequest(
        company_id=COMPANY_ID,
        employee_id=EMPLOYEE.id,
        status="PENDING",
        request_type="Advance / Loan",
        request_category="Payroll & Finance",
        form_data={"extra": "note", "amount": 5000, "agreement": True, "reason": ""},
        submitted_at=AT,
    )
    item = normalize(record, RequestKind.GENERIC, EMPLOYEE)
    assert list(item.details) == ["amount", "reason", "installments", "startDeductionDate", "agreement", "extra"]
    assert item.details["amount"] == "5000"
    assert item.details["agreement"] == "Yes"
    assert item.details["reason"] == "N/A"
    assert item.details["installments"] == "N/A"


def test_generic_custom_type_keeps_form_keys() -> None:
    record = EmployeeRequest(
        company_id=COMPANY_ID,
        employee_id=EMPLOYEE.id,
        status="PENDING",
        request_type="Parking Permit",
        request_category="Facilities",
        form_data={"plate": "AB-123", "days": ["Mon", "Tue"]},
        submitted_at=AT,
    )
    item = normalize(record, RequestKind.GENERIC)
    assert item.details == {"plate": "AB-123", "days": "Mon, Tue"}
    assert item.employee_name == "Unknown"
    assert item.category == "Facilities"


def test_naive_timestamps_are_treated_as_utc() -> None:
    item = normalize(_leave(created_at=datetime(2024, 3, 1, 8, 30)), RequestKind.LEAVE)
    assert item.submitted_at == AT


def test_kind_mismatch_raises() -> None:
    with pytest.raises(TypeError):
        normalize(_leave(), RequestKind.DOCUMENT)


@pytest.mark.parametrize("employee", [EMPLOYEE, None])
def test_normalize_is_repeatable(employee: EmployeeInfo | None) -> None:
    record = _leave(reason="Flu")
    first = normalize(record, RequestKind.LEAVE, employee)
    second = normalize(record, RequestKind.LEAVE, employee)
    assert first == second
    assert first.model_dump() == second.model_dump()
