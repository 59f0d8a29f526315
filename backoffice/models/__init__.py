from sqlmodel import SQLModel

from backoffice.models.audit import AuditLog
from backoffice.models.base import RequestRecordBase, TimestampMixin, UUIDBase
from backoffice.models.document import DocumentRequest
from backoffice.models.employee_request import EmployeeRequest
from backoffice.models.enums import (
    ADMIN_ROLES,
    AuditAction,
    CanonicalStatus,
    DocumentStatus,
    GenericStatus,
    LeaveStatus,
    RequestKind,
    UserRole,
)
from backoffice.models.leave import LeaveRequest

RequestRecord = LeaveRequest | DocumentRequest | EmployeeRequest

MODEL_BY_KIND: dict[RequestKind, type[LeaveRequest] | type[DocumentRequest] | type[EmployeeRequest]] = {
    RequestKind.LEAVE: LeaveRequest,
    RequestKind.DOCUMENT: DocumentRequest,
    RequestKind.GENERIC: EmployeeRequest,
}

__all__ = [
    "ADMIN_ROLES",
    "MODEL_BY_KIND",
    "AuditAction",
    "AuditLog",
    "CanonicalStatus",
    "DocumentRequest",
    "DocumentStatus",
    "EmployeeRequest",
    "GenericStatus",
    "LeaveRequest",
    "LeaveStatus",
    "RequestKind",
    "RequestRecord",
    "RequestRecordBase",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
    "UserRole",
]
