from __future__ import annotations

import enum


class UserRole(enum.StrEnum):
    """Role carried by an authenticated principal."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    EMPLOYEE = "employee"


ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN})


class RequestKind(enum.StrEnum):
    """The three request sources handled by the lifecycle engine."""

    LEAVE = "LEAVE"
    DOCUMENT = "DOCUMENT"
    GENERIC = "GENERIC"


class LeaveStatus(enum.StrEnum):
    """Leave requests have binary approval; there is no review stage."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class DocumentStatus(enum.StrEnum):
    """State machine for letter and certificate requests."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


class GenericStatus(enum.StrEnum):
    """State machine for self-service employee requests."""

    PENDING = "PENDING"
    IN_REVIEW = "IN_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class CanonicalStatus(enum.StrEnum):
    """Status vocabulary shared by every kind for display and filtering."""

    PENDING = "PENDING"
    IN_REVIEW = "IN_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    SUBMIT = "SUBMIT"
    START_REVIEW = "START_REVIEW"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    FULFILL = "FULFILL"
    CANCEL = "CANCEL"
