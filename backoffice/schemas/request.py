# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Annotated, Any, Literal, Self

from pydantic import BaseModel, Field, model_validator

from backoffice.models.enums import CanonicalStatus, DocumentStatus, GenericStatus, LeaveStatus, RequestKind

# ---------------------------------------------------------------------------
# Submission payloads (validated by the lifecycle engine)
# ---------------------------------------------------------------------------


class LeavePayload(BaseModel):
    """Fields of a new leave request."""

    leave_type: str = Field(min_length=1, max_length=100)
    start_date: date
    end_date: date
    reason: str = Field(default="", max_length=2000)

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.start_date > self.end_date:
            msg = "start_date must be on or before end_date"
            raise ValueError(msg)
        return self


class DocumentPayload(BaseModel):
    """Fields of a new document request."""

    document_type: str = Field(min_length=1, max_length=100)
    purpose: str | None = Field(default=None, max_length=1000)
    language: str | None = Field(default=None, max_length=20)
    destination: str | None = Field(default=None, max_length=255)


class GenericPayload(BaseModel):
    """Fields of a new self-service request. ``form_data`` is kept schema-less."""

    request_type: str = Field(min_length=1, max_length=100)
    request_category: str | None = Field(default=None, max_length=100)
    form_data: dict[str, Any] = Field(default_factory=dict)
    workflow_route: list[str] | None = None
    current_approver: str | None = Field(default=None, max_length=50)


# HTTP bodies: same fields plus the employee the request is for. When omitted
# the caller's own employee binding is used.


class LeaveSubmission(LeavePayload):
    employee_id: uuid.UUID | None = None


class DocumentSubmission(DocumentPayload):
    employee_id: uuid.UUID | None = None


class GenericSubmission(GenericPayload):
    employee_id: uuid.UUID | None = None


class DecisionPayload(BaseModel):
    """Request body for approve actions."""

    comments: str | None = Field(default=None, max_length=2000)
    expected_version: int | None = Field(default=None, ge=1)


class RejectPayload(BaseModel):
    """Request body for reject actions. The reason is mandatory."""

    reason: str | None = Field(default=None, max_length=2000)
    expected_version: int | None = Field(default=None, ge=1)


class VersionPayload(BaseModel):
    """Request body for actions that carry only the optimistic-concurrency token."""

    expected_version: int | None = Field(default=None, ge=1)


class FulfillPayload(BaseModel):
    """Request body for attaching a document to a document request."""

    existing_document_id: str | None = Field(default=None, max_length=255)
    uploaded_document_location: str | None = None
    notes: str | None = Field(default=None, max_length=2000)
    expected_version: int | None = Field(default=None, ge=1)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveRequestResponse(BaseModel):
    """Response schema for a leave request."""

    kind: Literal[RequestKind.LEAVE] = RequestKind.LEAVE
    id: uuid.UUID
    company_id: uuid.UUID
    employee_id: uuid.UUID
    leave_type: str
    start_date: date
    end_date: date
    duration_days: int
    reason: str
    status: LeaveStatus
    created_at: datetime
    approved_by: uuid.UUID | None
    reviewed_at: datetime | None
    review_comments: str | None
    version: int


class FulfillmentResponse(BaseModel):
    """The document attached to a document request."""

    existing_document_id: str | None = None
    uploaded_document_location: str | None = None


class DocumentRequestResponse(BaseModel):
    """Response schema for a document request."""

    kind: Literal[RequestKind.DOCUMENT] = RequestKind.DOCUMENT
    id: uuid.UUID
    company_id: uuid.UUID
    employee_id: uuid.UUID
    document_type: str
    purpose: str | None
    language: str
    destination: str | None
    status: DocumentStatus
    requested_at: datetime
    completed_at: datetime | None
    completed_by: uuid.UUID | None
    fulfillment: FulfillmentResponse | None
    notes: str | None
    version: int


class EmployeeRequestResponse(BaseModel):
    """Response schema for a generic employee request."""

    kind: Literal[RequestKind.GENERIC] = RequestKind.GENERIC
    id: uuid.UUID
    company_id: uuid.UUID
    employee_id: uuid.UUID
    request_type: str
    request_category: str
    form_data: dict[str, Any]
    workflow_route: list[str]
    current_approver: str
    status: GenericStatus
    submitted_at: datetime
    reviewed_at: datetime | None
    reviewed_by: uuid.UUID | None
    review_comments: str | None
    version: int


RequestResponse = Annotated[
    LeaveRequestResponse | DocumentRequestResponse | EmployeeRequestResponse,
    Field(discriminator="kind"),
]


class UnifiedRequest(BaseModel):
    """Kind-independent view of a request, derived and never persisted."""

    id: uuid.UUID
    kind: RequestKind
    employee_id: uuid.UUID
    employee_name: str
    employee_external_id: str
    department: str | None = None
    type: str
    category: str
    submitted_at: datetime
    status: CanonicalStatus
    version: int
    details: dict[str, str] = Field(default_factory=dict)


class UnifiedRequestFilters(BaseModel):
    """Post-merge filters and paging for the unified request list."""

    status: CanonicalStatus | None = None
    category: str | None = None
    search: str | None = None
    company_id: uuid.UUID | None = None
    offset: int = Field(default=0, ge=0)
    limit: int | None = Field(default=None, ge=1, le=500)


class UnifiedRequestListResponse(BaseModel):
    """Paginated list of unified requests, newest submission first."""

    items: list[UnifiedRequest]
    total: int
