# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from enum import StrEnum

from fastapi import APIRouter, Depends, Query, status

from backoffice.api.deps import IdentityDep, validate_company_scope
from backoffice.db import SessionDep
from backoffice.models.enums import CanonicalStatus, RequestKind
from backoffice.schemas.request import (
    DecisionPayload,
    DocumentSubmission,
    FulfillPayload,
    GenericSubmission,
    LeaveSubmission,
    RejectPayload,
    RequestResponse,
    UnifiedRequest,
    UnifiedRequestFilters,
    UnifiedRequestListResponse,
    VersionPayload,
)
from backoffice.services import aggregator, lifecycle
from backoffice.services.identity import IdentitySession

requests_router = APIRouter(
    prefix="/companies/{company_id}",
    tags=["requests"],
    dependencies=[Depends(validate_company_scope)],
)


class KindSegment(StrEnum):
    """Path segment naming a request kind, e.g. ``/requests/leave/{id}``."""

    LEAVE = "leave"
    DOCUMENT = "document"
    GENERIC = "generic"

    @property
    def kind(self) -> RequestKind:
        return RequestKind[self.name]


def _own_employee(identity: IdentitySession, employee_id: uuid.UUID | None) -> uuid.UUID | None:
    if employee_id is not None:
        return employee_id
    principal = identity.principal
    return principal.employee_id if principal is not None else None


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


@requests_router.post("/leave-requests", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_leave_request(
    payload: LeaveSubmission,
    session: SessionDep,
    identity: IdentityDep,
) -> RequestResponse:
    """Submit a new leave request."""
    employee_id = _own_employee(identity, payload.employee_id)
    return await lifecycle.submit_request(
        session, identity, RequestKind.LEAVE, employee_id, payload.model_dump(exclude={"employee_id"})
    )


@requests_router.post("/document-requests", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_document_request(
    payload: DocumentSubmission,
    session: SessionDep,
    identity: IdentityDep,
) -> RequestResponse:
    """Submit a new document request."""
    employee_id = _own_employee(identity, payload.employee_id)
    return await lifecycle.submit_request(
        session, identity, RequestKind.DOCUMENT, employee_id, payload.model_dump(exclude={"employee_id"})
    )


@requests_router.post("/employee-requests", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_employee_request(
    payload: GenericSubmission,
    session: SessionDep,
    identity: IdentityDep,
) -> RequestResponse:
    """Submit a new self-service request of a catalogued or custom type."""
    employee_id = _own_employee(identity, payload.employee_id)
    return await lifecycle.submit_request(
        session, identity, RequestKind.GENERIC, employee_id, payload.model_dump(exclude={"employee_id"})
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


@requests_router.get("/requests", response_model=UnifiedRequestListResponse)
async def list_requests(
    company_id: uuid.UUID,
    session: SessionDep,
    identity: IdentityDep,
    status_filter: CanonicalStatus | None = Query(default=None, alias="status"),
    category: str | None = Query(default=None),
    search: str | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int | None = Query(default=None, ge=1, le=500),
) -> UnifiedRequestListResponse:
    """List requests of every kind, newest first, in one unified shape."""
    filters = UnifiedRequestFilters(
        status=status_filter,
        category=category,
        search=search,
        company_id=company_id,
        offset=offset,
        limit=limit,
    )
    return await aggregator.list_unified(session, identity, filters)


@requests_router.get("/requests/{segment}/{request_id}", response_model=RequestResponse)
async def get_request(
    segment: KindSegment,
    request_id: uuid.UUID,
    session: SessionDep,
    identity: IdentityDep,
) -> RequestResponse:
    """Get a single request in its kind-specific shape."""
    return await lifecycle.get_request(session, identity, segment.kind, request_id)


@requests_router.get("/requests/{segment}/{request_id}/unified", response_model=UnifiedRequest)
async def get_unified_request(
    segment: KindSegment,
    request_id: uuid.UUID,
    session: SessionDep,
    identity: IdentityDep,
) -> UnifiedRequest:
    """Get a single request in the unified shape."""
    return await aggregator.get_unified_request(session, identity, segment.kind, request_id)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


@requests_router.post("/requests/{segment}/{request_id}/review", response_model=RequestResponse)
async def start_review(
    segment: KindSegment,
    request_id: uuid.UUID,
    session: SessionDep,
    identity: IdentityDep,
    payload: VersionPayload | None = None,
) -> RequestResponse:
    """Move a pending request into review (admin only)."""
    expected_version = payload.expected_version if payload else None
    return await lifecycle.start_review(session, identity, segment.kind, request_id, expected_version)


@requests_router.post("/requests/{segment}/{request_id}/approve", response_model=RequestResponse)
async def approve_request(
    segment: KindSegment,
    request_id: uuid.UUID,
    session: SessionDep,
    identity: IdentityDep,
    payload: DecisionPayload | None = None,
) -> RequestResponse:
    """Approve a pending or in-review request (admin only)."""
    payload = payload or DecisionPayload()
    return await lifecycle.approve_request(
        session, identity, segment.kind, request_id, payload.comments, payload.expected_version
    )


@requests_router.post("/requests/{segment}/{request_id}/reject", response_model=RequestResponse)
async def reject_request(
    segment: KindSegment,
    request_id: uuid.UUID,
    payload: RejectPayload,
    session: SessionDep,
    identity: IdentityDep,
) -> RequestResponse:
    """Reject a pending or in-review request with a reason (admin only)."""
    return await lifecycle.reject_request(
        session, identity, segment.kind, request_id, payload.reason, payload.expected_version
    )


@requests_router.post("/requests/{segment}/{request_id}/cancel", response_model=RequestResponse)
async def cancel_request(
    segment: KindSegment,
    request_id: uuid.UUID,
    session: SessionDep,
    identity: IdentityDep,
    payload: VersionPayload | None = None,
) -> RequestResponse:
    """Cancel a request (the submitting employee or an admin)."""
    expected_version = payload.expected_version if payload else None
    return await lifecycle.cancel_request(session, identity, segment.kind, request_id, expected_version)


@requests_router.post("/document-requests/{request_id}/fulfill", response_model=RequestResponse)
async def fulfill_document_request(
    request_id: uuid.UUID,
    payload: FulfillPayload,
    session: SessionDep,
    identity: IdentityDep,
) -> RequestResponse:
    """Attach an existing or uploaded document to a document request (admin only)."""
    return await lifecycle.fulfill_document_request(
        session,
        identity,
        request_id,
        existing_document_id=payload.existing_document_id,
        uploaded_document_location=payload.uploaded_document_location,
        notes=payload.notes,
        expected_version=payload.expected_version,
    )
