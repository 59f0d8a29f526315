# ruff: noqa: TC003
"""Request lifecycle engine: submit, review, approve, reject, fulfill, cancel.

Every operation authorizes the caller before mutating, re-checks the record's
version immediately before writing, and commits the status change together
with its audit row. Failures are raised, never swallowed. Both successes and
failures are reported to the notifier.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from backoffice.config import get_settings
from backoffice.exceptions import (
    AppError,
    FulfillmentRequired,
    InvalidTransition,
    NotFound,
    StaleState,
    Unauthorized,
    ValidationError,
)
from backoffice.models.document import DocumentRequest
from backoffice.models.employee_request import EmployeeRequest
from backoffice.models.enums import ADMIN_ROLES, AuditAction, RequestKind, UserRole
from backoffice.models.leave import LeaveRequest
from backoffice.schemas.request import (
    DocumentPayload,
    DocumentRequestResponse,
    EmployeeRequestResponse,
    FulfillmentResponse,
    GenericPayload,
    LeavePayload,
    LeaveRequestResponse,
    RequestResponse,
)
from backoffice.services.audit import model_to_audit_dict, write_audit_log
from backoffice.services.authorization import can_access, require_company, require_roles
from backoffice.services.catalog import category_title, find_request_type, missing_fields
from backoffice.services.employee import get_employee_service
from backoffice.services.notifier import OperationOutcome, publish
from backoffice.services.storage import get_file_storage
from backoffice.services.store import SqlRequestStore
from backoffice.services.workflow import workflow_for

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from backoffice.models import RequestRecord
    from backoffice.schemas.auth import Principal
    from backoffice.services.identity import IdentitySession

logger = logging.getLogger(__name__)

ALL_ROLES = frozenset(UserRole)

_PAYLOAD_ADAPTERS: dict[RequestKind, TypeAdapter[Any]] = {
    RequestKind.LEAVE: TypeAdapter(LeavePayload),
    RequestKind.DOCUMENT: TypeAdapter(DocumentPayload),
    RequestKind.GENERIC: TypeAdapter(GenericPayload),
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def build_request_response(record: RequestRecord) -> RequestResponse:
    """Map a stored record of any kind to its response schema."""
    if isinstance(record, LeaveRequest):
        return LeaveRequestResponse(
            id=record.id,
            company_id=record.company_id,
            employee_id=record.employee_id,
            leave_type=record.leave_type,
            start_date=record.start_date,
            end_date=record.end_date,
            duration_days=record.duration_days,
            reason=record.reason,
            status=record.status,
            created_at=record.created_at,
            approved_by=record.approved_by,
            reviewed_at=record.reviewed_at,
            review_comments=record.review_comments,
            version=record.version,
        )
    if isinstance(record, DocumentRequest):
        fulfillment = None
        if record.has_fulfillment:
            fulfillment = FulfillmentResponse(
                existing_document_id=record.document_id,
                uploaded_document_location=record.uploaded_document_url,
            )
        return DocumentRequestResponse(
            id=record.id,
            company_id=record.company_id,
            employee_id=record.employee_id,
            document_type=record.document_type,
            purpose=record.purpose,
            language=record.language,
            destination=record.destination,
            status=record.status,
            requested_at=record.requested_at,
            completed_at=record.completed_at,
            completed_by=record.completed_by,
            fulfillment=fulfillment,
            notes=record.notes,
            version=record.version,
        )
    return EmployeeRequestResponse(
        id=record.id,
        company_id=record.company_id,
        employee_id=record.employee_id,
        request_type=record.request_type,
        request_category=record.request_category,
        form_data=record.form_data or {},
        workflow_route=record.workflow_route or [],
        current_approver=record.current_approver,
        status=record.status,
        submitted_at=record.submitted_at,
        reviewed_at=record.reviewed_at,
        reviewed_by=record.reviewed_by,
        review_comments=record.review_comments,
        version=record.version,
    )


async def _get_record_or_404(store: SqlRequestStore, kind: RequestKind, request_id: uuid.UUID) -> RequestRecord:
    record = await store.find_by_id(kind, request_id)
    if record is None:
        raise NotFound(f"{kind.value.title()} request not found")
    return record


def _check_expected_version(record: RequestRecord, expected_version: int | None) -> None:
    """Fail if the record moved on since the caller's read."""
    if expected_version is not None and record.version != expected_version:
        raise StaleState()


def _validate_payload(kind: RequestKind, payload: BaseModel | Mapping[str, Any]) -> Any:
    data = payload.model_dump() if isinstance(payload, BaseModel) else dict(payload)
    try:
        return _PAYLOAD_ADAPTERS[kind].validate_python(data)
    except PydanticValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'payload'}: {err['msg']}" for err in exc.errors()
        )
        raise ValidationError(f"Invalid {kind.value.lower()} request: {problems}") from None


def _decision_fields(
    kind: RequestKind,
    principal: Principal,
    now: datetime,
    comments: str | None,
    *,
    approved: bool,
) -> dict[str, Any]:
    """Kind-specific columns recording who decided, when, and why."""
    if kind == RequestKind.LEAVE:
        fields: dict[str, Any] = {"reviewed_at": now}
        if approved:
            fields["approved_by"] = principal.id
        if comments:
            fields["review_comments"] = comments
        return fields
    if kind == RequestKind.DOCUMENT:
        fields = {"completed_by": principal.id, "completed_at": now}
        if comments:
            fields["notes"] = comments
        return fields
    fields = {"reviewed_by": principal.id, "reviewed_at": now}
    if comments:
        fields["review_comments"] = comments
    return fields


async def _apply(
    store: SqlRequestStore,
    kind: RequestKind,
    record: RequestRecord,
    principal: Principal,
    action: AuditAction,
    *,
    new_status: str | None = None,
    extra: dict[str, Any] | None = None,
) -> RequestRecord:
    """Conditionally write the change, append the audit row, commit."""
    session = store.session
    before = model_to_audit_dict(record)
    old_status = record.status
    read_version = record.version

    if new_status is not None:
        updated = await store.update_status(kind, record.id, new_status, extra or {}, read_version)
    else:
        updated = await store.update_fields(kind, record.id, extra or {}, read_version)
    if updated is None:
        logger.warning("Stale write rejected: %s %s at version %d", kind.value, record.id, read_version)
        raise StaleState()

    await write_audit_log(
        session,
        company_id=updated.company_id,
        actor_id=principal.id,
        kind=kind,
        entity_id=updated.id,
        action=action,
        before_json=before,
        after_json=model_to_audit_dict(updated),
    )
    await session.commit()
    logger.info(
        "%s %s %s by %s: %s -> %s (v%d)",
        action.value,
        kind.value,
        updated.id,
        principal.id,
        old_status,
        updated.status,
        updated.version,
    )
    return updated


async def _observed(
    operation: str,
    kind: RequestKind,
    request_id: uuid.UUID | None,
    identity: IdentitySession,
    work: Awaitable[RequestRecord],
) -> RequestRecord:
    principal = identity.principal
    actor_id = principal.id if principal is not None else None
    try:
        record = await work
    except AppError as exc:
        await publish(
            OperationOutcome(
                operation=operation,
                kind=kind,
                request_id=request_id,
                actor_id=actor_id,
                success=False,
                error=type(exc).__name__,
                message=exc.message,
            )
        )
        raise
    await publish(
        OperationOutcome(
            operation=operation,
            kind=kind,
            request_id=record.id,
            actor_id=actor_id,
            success=True,
            status=record.status,
        )
    )
    return record


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


async def _submit(
    session: AsyncSession,
    identity: IdentitySession,
    kind: RequestKind,
    employee_id: uuid.UUID | None,
    payload: BaseModel | Mapping[str, Any],
) -> RequestRecord:
    principal = require_roles(identity.principal, ALL_ROLES)
    if employee_id is None:
        raise ValidationError("employee_id is required")
    data = _validate_payload(kind, payload)

    if principal.role == UserRole.EMPLOYEE and principal.employee_id != employee_id:
        raise Unauthorized("Employees can only submit requests for themselves")

    employee = await get_employee_service().get_employee(employee_id)
    if employee is None:
        raise NotFound("Employee not found")
    require_company(principal, employee.company_id)

    settings = get_settings()
    record: RequestRecord
    if kind == RequestKind.LEAVE:
        record = LeaveRequest(
            company_id=employee.company_id,
            employee_id=employee_id,
            leave_type=data.leave_type,
            start_date=data.start_date,
            end_date=data.end_date,
            reason=data.reason,
            status=workflow_for(kind).initial,
        )
    elif kind == RequestKind.DOCUMENT:
        record = DocumentRequest(
            company_id=employee.company_id,
            employee_id=employee_id,
            document_type=data.document_type,
            purpose=data.purpose,
            language=data.language or settings.default_document_language,
            destination=data.destination,
            status=workflow_for(kind).initial,
        )
    else:
        request_type = find_request_type(data.request_type)
        category = data.request_category or (category_title(request_type) if request_type else None)
        if not category:
            raise ValidationError("request_category is required for request types outside the catalog")
        if request_type is not None:
            missing = missing_fields(request_type, data.form_data)
            if missing:
                raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        if data.workflow_route is not None:
            route = list(data.workflow_route)
        else:
            route = list(request_type.workflow_route) if request_type else []
        record = EmployeeRequest(
            company_id=employee.company_id,
            employee_id=employee_id,
            request_type=request_type.title if request_type else data.request_type,
            request_category=category,
            form_data=dict(data.form_data),
            workflow_route=route,
            current_approver=data.current_approver or (route[0] if route else settings.default_approver),
            status=workflow_for(kind).initial,
        )

    store = SqlRequestStore(session)
    await store.insert(kind, record)
    await write_audit_log(
        session,
        company_id=record.company_id,
        actor_id=principal.id,
        kind=kind,
        entity_id=record.id,
        action=AuditAction.SUBMIT,
        after_json=model_to_audit_dict(record),
    )
    await session.commit()
    logger.info("SUBMIT %s %s for employee %s by %s", kind.value, record.id, employee_id, principal.id)
    return record


async def submit_request(
    session: AsyncSession,
    identity: IdentitySession,
    kind: RequestKind,
    employee_id: uuid.UUID | None,
    payload: BaseModel | Mapping[str, Any],
) -> RequestResponse:
    """Create a request of ``kind`` in its initial PENDING state.

    The payload is validated against the kind's schema; generic requests of a
    catalogued type are also checked for the type's required form fields and
    get its default category and approval route.
    """
    record = await _observed("submit", kind, None, identity, _submit(session, identity, kind, employee_id, payload))
    return build_request_response(record)


async def _start_review(
    session: AsyncSession,
    identity: IdentitySession,
    kind: RequestKind,
    request_id: uuid.UUID,
    expected_version: int | None,
) -> RequestRecord:
    principal = require_roles(identity.principal, ADMIN_ROLES)
    store = SqlRequestStore(session)
    record = await _get_record_or_404(store, kind, request_id)
    require_company(principal, record.company_id)
    _check_expected_version(record, expected_version)

    workflow = workflow_for(kind)
    if workflow.review is None:
        raise InvalidTransition(f"{kind.value.title()} requests have no review stage")
    workflow.ensure_transition(record.status, workflow.review)

    extra: dict[str, Any] = {"reviewed_by": principal.id} if kind == RequestKind.GENERIC else {}
    return await _apply(store, kind, record, principal, AuditAction.START_REVIEW, new_status=workflow.review, extra=extra)


async def start_review(
    session: AsyncSession,
    identity: IdentitySession,
    kind: RequestKind,
    request_id: uuid.UUID,
    expected_version: int | None = None,
) -> RequestResponse:
    """Move a pending request into its review stage (admin only)."""
    record = await _observed(
        "start_review", kind, request_id, identity, _start_review(session, identity, kind, request_id, expected_version)
    )
    return build_request_response(record)


async def _approve(
    session: AsyncSession,
    identity: IdentitySession,
    kind: RequestKind,
    request_id: uuid.UUID,
    comments: str | None,
    expected_version: int | None,
) -> RequestRecord:
    principal = require_roles(identity.principal, ADMIN_ROLES)
    store = SqlRequestStore(session)
    record = await _get_record_or_404(store, kind, request_id)
    require_company(principal, record.company_id)
    _check_expected_version(record, expected_version)

    workflow = workflow_for(kind)
    workflow.ensure_transition(record.status, workflow.approved)
    if isinstance(record, DocumentRequest) and not record.has_fulfillment:
        raise FulfillmentRequired()

    extra = _decision_fields(kind, principal, datetime.now(UTC), comments, approved=True)
    return await _apply(store, kind, record, principal, AuditAction.APPROVE, new_status=workflow.approved, extra=extra)


async def approve_request(
    session: AsyncSession,
    identity: IdentitySession,
    kind: RequestKind,
    request_id: uuid.UUID,
    comments: str | None = None,
    expected_version: int | None = None,
) -> RequestResponse:
    """Approve a pending or in-review request (admin only).

    Document requests complete rather than approve, and need a fulfillment
    attached first.
    """
    record = await _observed(
        "approve",
        kind,
        request_id,
        identity,
        _approve(session, identity, kind, request_id, comments, expected_version),
    )
    return build_request_response(record)


async def _reject(
    session: AsyncSession,
    identity: IdentitySession,
    kind: RequestKind,
    request_id: uuid.UUID,
    reason: str | None,
    expected_version: int | None,
) -> RequestRecord:
    principal = require_roles(identity.principal, ADMIN_ROLES)
    if reason is None or not reason.strip():
        raise ValidationError("A reason is required to reject a request")
    store = SqlRequestStore(session)
    record = await _get_record_or_404(store, kind, request_id)
    require_company(principal, record.company_id)
    _check_expected_version(record, expected_version)

    workflow = workflow_for(kind)
    workflow.ensure_transition(record.status, workflow.rejected)

    extra = _decision_fields(kind, principal, datetime.now(UTC), reason.strip(), approved=False)
    return await _apply(store, kind, record, principal, AuditAction.REJECT, new_status=workflow.rejected, extra=extra)


async def reject_request(
    session: AsyncSession,
    identity: IdentitySession,
    kind: RequestKind,
    request_id: uuid.UUID,
    reason: str | None,
    expected_version: int | None = None,
) -> RequestResponse:
    """Reject a pending or in-review request with a mandatory reason (admin only)."""
    record = await _observed(
        "reject",
        kind,
        request_id,
        identity,
        _reject(session, identity, kind, request_id, reason, expected_version),
    )
    return build_request_response(record)


async def _fulfill(
    session: AsyncSession,
    identity: IdentitySession,
    request_id: uuid.UUID,
    existing_document_id: str | None,
    uploaded_document_location: str | None,
    notes: str | None,
    expected_version: int | None,
) -> RequestRecord:
    principal = require_roles(identity.principal, ADMIN_ROLES)
    existing = (existing_document_id or "").strip()
    upload = (uploaded_document_location or "").strip()
    if bool(existing) == bool(upload):
        raise ValidationError("Provide exactly one of existing_document_id or uploaded_document_location")

    kind = RequestKind.DOCUMENT
    store = SqlRequestStore(session)
    record = await _get_record_or_404(store, kind, request_id)
    require_company(principal, record.company_id)
    _check_expected_version(record, expected_version)

    workflow = workflow_for(kind)
    if workflow.is_terminal(record.status):
        raise InvalidTransition(f"Cannot attach a document to a {record.status} request")

    extra: dict[str, Any]
    if existing:
        extra = {"document_id": existing, "uploaded_document_url": None}
    else:
        location = await get_file_storage().resolve_location(upload)
        extra = {"document_id": None, "uploaded_document_url": location}
    if notes:
        extra["notes"] = notes

    return await _apply(store, kind, record, principal, AuditAction.FULFILL, extra=extra)


async def fulfill_document_request(
    session: AsyncSession,
    identity: IdentitySession,
    request_id: uuid.UUID,
    *,
    existing_document_id: str | None = None,
    uploaded_document_location: str | None = None,
    notes: str | None = None,
    expected_version: int | None = None,
) -> RequestResponse:
    """Attach an existing or freshly uploaded document to a document request.

    Exactly one source must be given. The status is left unchanged; approving
    afterwards completes the request.
    """
    record = await _observed(
        "fulfill",
        RequestKind.DOCUMENT,
        request_id,
        identity,
        _fulfill(
            session,
            identity,
            request_id,
            existing_document_id,
            uploaded_document_location,
            notes,
            expected_version,
        ),
    )
    return build_request_response(record)


async def _cancel(
    session: AsyncSession,
    identity: IdentitySession,
    kind: RequestKind,
    request_id: uuid.UUID,
    expected_version: int | None,
) -> RequestRecord:
    principal = require_roles(identity.principal, ALL_ROLES)
    store = SqlRequestStore(session)
    record = await _get_record_or_404(store, kind, request_id)
    require_company(principal, record.company_id)

    is_owner = principal.employee_id is not None and principal.employee_id == record.employee_id
    if not is_owner and not can_access(principal, ADMIN_ROLES):
        logger.warning("Cancel denied: principal=%s request=%s", principal.id, record.id)
        raise Unauthorized("Not authorized to cancel this request", conceal=True)
    _check_expected_version(record, expected_version)

    workflow = workflow_for(kind)
    if workflow.cancelled is None:
        raise InvalidTransition(f"{kind.value.title()} requests cannot be cancelled")
    workflow.ensure_transition(record.status, workflow.cancelled)

    return await _apply(store, kind, record, principal, AuditAction.CANCEL, new_status=workflow.cancelled)


async def cancel_request(
    session: AsyncSession,
    identity: IdentitySession,
    kind: RequestKind,
    request_id: uuid.UUID,
    expected_version: int | None = None,
) -> RequestResponse:
    """Cancel a non-terminal request. The submitting employee or an admin can cancel."""
    record = await _observed(
        "cancel", kind, request_id, identity, _cancel(session, identity, kind, request_id, expected_version)
    )
    return build_request_response(record)


async def load_visible_record(
    session: AsyncSession,
    identity: IdentitySession,
    kind: RequestKind,
    request_id: uuid.UUID,
) -> RequestRecord:
    """Fetch a record the caller may see: their own, or any in their company for admins."""
    principal = require_roles(identity.principal, ALL_ROLES)
    record = await _get_record_or_404(SqlRequestStore(session), kind, request_id)
    require_company(principal, record.company_id)
    is_owner = principal.employee_id is not None and principal.employee_id == record.employee_id
    if not is_owner and not can_access(principal, ADMIN_ROLES):
        logger.warning("Read denied: principal=%s request=%s", principal.id, record.id)
        raise Unauthorized("Not authorized to view this request", conceal=True)
    return record


async def get_request(
    session: AsyncSession,
    identity: IdentitySession,
    kind: RequestKind,
    request_id: uuid.UUID,
) -> RequestResponse:
    """Get a single request in its kind-specific shape."""
    return build_request_response(await load_visible_record(session, identity, kind, request_id))
