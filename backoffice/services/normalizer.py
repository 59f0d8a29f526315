"""Maps the three request kinds onto one ``UnifiedRequest`` view.

``normalize`` is total: missing employees, absent form keys and naive
timestamps never raise, they fall back to display defaults.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from backoffice.models.document import DocumentRequest
from backoffice.models.employee_request import EmployeeRequest
from backoffice.models.enums import CanonicalStatus, DocumentStatus, GenericStatus, LeaveStatus, RequestKind
from backoffice.models.leave import LeaveRequest
from backoffice.schemas.request import UnifiedRequest
from backoffice.services.catalog import DOCUMENT_CATEGORY, LEAVE_CATEGORY, find_request_type

if TYPE_CHECKING:
    from backoffice.models import RequestRecord
    from backoffice.services.employee import EmployeeInfo

MISSING = "N/A"
UNKNOWN_EMPLOYEE = "Unknown"
LEAVE_TYPE_LABEL = "Leave Request"

_CANONICAL_STATUS: dict[RequestKind, dict[str, CanonicalStatus]] = {
    RequestKind.LEAVE: {
        LeaveStatus.PENDING: CanonicalStatus.PENDING,
        LeaveStatus.APPROVED: CanonicalStatus.APPROVED,
        LeaveStatus.REJECTED: CanonicalStatus.REJECTED,
    },
    RequestKind.DOCUMENT: {
        DocumentStatus.PENDING: CanonicalStatus.PENDING,
        DocumentStatus.IN_PROGRESS: CanonicalStatus.IN_REVIEW,
        DocumentStatus.COMPLETED: CanonicalStatus.APPROVED,
        DocumentStatus.REJECTED: CanonicalStatus.REJECTED,
    },
    RequestKind.GENERIC: {
        GenericStatus.PENDING: CanonicalStatus.PENDING,
        GenericStatus.IN_REVIEW: CanonicalStatus.IN_REVIEW,
        GenericStatus.APPROVED: CanonicalStatus.APPROVED,
        GenericStatus.COMPLETED: CanonicalStatus.APPROVED,
        GenericStatus.REJECTED: CanonicalStatus.REJECTED,
        GenericStatus.CANCELLED: CanonicalStatus.CANCELLED,
    },
}

_EXPECTED_MODEL: dict[RequestKind, type] = {
    RequestKind.LEAVE: LeaveRequest,
    RequestKind.DOCUMENT: DocumentRequest,
    RequestKind.GENERIC: EmployeeRequest,
}


def canonical_status(kind: RequestKind, status: str) -> CanonicalStatus:
    """Collapse a kind-specific status onto the canonical vocabulary.

    Unrecognised legacy values are shown as pending rather than failing.
    """
    return _CANONICAL_STATUS[kind].get(status, CanonicalStatus.PENDING)


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive datetimes for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _display(value: Any) -> str:
    if value is None:
        return MISSING
    if isinstance(value, str):
        return value if value.strip() else MISSING
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(_display(v) for v in value) if value else MISSING
    return str(value)


def submitted_at(record: RequestRecord) -> datetime:
    """Submission timestamp of any kind, as an aware UTC datetime."""
    if isinstance(record, LeaveRequest):
        return _as_utc(record.created_at)
    if isinstance(record, DocumentRequest):
        return _as_utc(record.requested_at)
    return _as_utc(record.submitted_at)


def _generic_details(record: EmployeeRequest) -> dict[str, str]:
    form = record.form_data if isinstance(record.form_data, dict) else {}
    request_type = find_request_type(record.request_type or "")
    keys = list(request_type.field_keys) if request_type is not None else []
    keys.extend(k for k in form if k not in keys)
    return {key: _display(form.get(key)) for key in keys}


def normalize(record: RequestRecord, kind: RequestKind, employee: EmployeeInfo | None = None) -> UnifiedRequest:
    """Build the unified view of ``record``, which must be stored under ``kind``."""
    expected = _EXPECTED_MODEL[kind]
    if not isinstance(record, expected):
        msg = f"{type(record).__name__} is not a {kind.value} record"
        raise TypeError(msg)

    if isinstance(record, LeaveRequest):
        type_, category = LEAVE_TYPE_LABEL, LEAVE_CATEGORY
        details = {
            "leaveType": _display(record.leave_type),
            "fromDate": _display(record.start_date.isoformat() if record.start_date else None),
            "toDate": _display(record.end_date.isoformat() if record.end_date else None),
            "reason": _display(record.reason),
        }
    elif isinstance(record, DocumentRequest):
        type_, category = record.document_type or MISSING, DOCUMENT_CATEGORY
        details = {
            "documentType": _display(record.document_type),
            "purpose": _display(record.purpose),
            "language": _display(record.language),
            "destination": _display(record.destination),
        }
    else:
        type_, category = record.request_type or MISSING, record.request_category or MISSING
        details = _generic_details(record)

    if employee is not None:
        name = employee.full_name or UNKNOWN_EMPLOYEE
        external_id = employee.employee_number
        department = employee.department
    else:
        name, external_id, department = UNKNOWN_EMPLOYEE, "", None

    return UnifiedRequest(
        id=record.id,
        kind=kind,
        employee_id=record.employee_id,
        employee_name=name,
        employee_external_id=external_id,
        department=department,
        type=type_,
        category=category,
        submitted_at=submitted_at(record),
        status=canonical_status(kind, record.status),
        version=record.version,
        details=details,
    )
