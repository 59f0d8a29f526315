# ruff: noqa: TC003
"""Unified request list: merges all three kinds into one ordered, filtered view."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from backoffice.config import get_settings
from backoffice.exceptions import Unauthorized, ValidationError
from backoffice.models.enums import ADMIN_ROLES, RequestKind, UserRole
from backoffice.schemas.request import UnifiedRequest, UnifiedRequestFilters, UnifiedRequestListResponse
from backoffice.services.authorization import can_access, require_company, require_roles
from backoffice.services.employee import get_employee_service
from backoffice.services.lifecycle import load_visible_record
from backoffice.services.normalizer import normalize
from backoffice.services.store import SqlRequestStore

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from backoffice.models import RequestRecord
    from backoffice.schemas.auth import Principal
    from backoffice.services.employee import EmployeeInfo
    from backoffice.services.identity import IdentitySession

logger = logging.getLogger(__name__)

# Order of kinds when two requests share a submission timestamp.
KIND_ORDER: tuple[RequestKind, ...] = (RequestKind.LEAVE, RequestKind.DOCUMENT, RequestKind.GENERIC)
_KIND_RANK = {kind: rank for rank, kind in enumerate(KIND_ORDER)}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _resolve_company(principal: Principal, requested: uuid.UUID | None) -> uuid.UUID:
    if principal.role == UserRole.SUPER_ADMIN:
        if requested is None:
            raise ValidationError("company_id is required when listing as super_admin")
        return requested
    if requested is not None:
        require_company(principal, requested)
    if principal.company_id is None:
        raise Unauthorized("Principal has no company binding")
    return principal.company_id


async def _drain_company(
    store: SqlRequestStore, kind: RequestKind, company_id: uuid.UUID, page_size: int
) -> list[RequestRecord]:
    records: list[RequestRecord] = []
    page = 1
    while True:
        batch = await store.list_by_company(kind, company_id, page, page_size)
        records.extend(batch)
        if len(batch) < page_size:
            return records
        page += 1


async def _collect(
    store: SqlRequestStore, principal: Principal, company_id: uuid.UUID
) -> list[tuple[RequestKind, RequestRecord]]:
    page_size = get_settings().store_page_size
    is_admin = can_access(principal, ADMIN_ROLES)
    collected: list[tuple[RequestKind, RequestRecord]] = []
    for kind in KIND_ORDER:
        if is_admin:
            records = await _drain_company(store, kind, company_id, page_size)
        else:
            if principal.employee_id is None:
                raise Unauthorized("Principal has no employee binding")
            records = await store.list_by_employee(kind, principal.employee_id)
        # Drop anything outside the resolved company.
        collected.extend((kind, r) for r in records if r.company_id == company_id)
    return collected


async def _employee_map(principal: Principal, company_id: uuid.UUID) -> dict[uuid.UUID, EmployeeInfo]:
    service = get_employee_service()
    if can_access(principal, ADMIN_ROLES):
        return {e.id: e for e in await service.list_employees(company_id)}
    if principal.employee_id is None:
        raise Unauthorized("Principal has no employee binding")
    employee = await service.get_employee(principal.employee_id)
    return {employee.id: employee} if employee is not None else {}


def sort_key(item: UnifiedRequest) -> tuple[float, int, str]:
    """Newest submission first; ties go leave, document, generic, then by id."""
    return (-item.submitted_at.timestamp(), _KIND_RANK[item.kind], str(item.id))


def _matches(item: UnifiedRequest, filters: UnifiedRequestFilters) -> bool:
    if filters.status is not None and item.status != filters.status:
        return False
    if filters.category and item.category.casefold() != filters.category.strip().casefold():
        return False
    if filters.search:
        needle = filters.search.strip().casefold()
        haystack = (item.type, item.employee_name, item.employee_external_id)
        if needle and not any(needle in value.casefold() for value in haystack):
            return False
    return True


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def list_unified(
    session: AsyncSession,
    identity: IdentitySession,
    filters: UnifiedRequestFilters | None = None,
) -> UnifiedRequestListResponse:
    """List every request the caller may see as ``UnifiedRequest`` items.

    Admins see their whole company; a ``super_admin`` must name the company.
    Employees see only their own requests. Filters apply after the merge, and
    ``total`` counts matches before ``offset``/``limit``.
    """
    filters = filters or UnifiedRequestFilters()
    principal = require_roles(identity.principal, frozenset(UserRole))
    if principal.role == UserRole.EMPLOYEE and principal.employee_id is None:
        raise Unauthorized("Principal has no employee binding")
    company_id = _resolve_company(principal, filters.company_id)

    store = SqlRequestStore(session)
    records = await _collect(store, principal, company_id)
    employees = await _employee_map(principal, company_id)

    items = [normalize(record, kind, employees.get(record.employee_id)) for kind, record in records]
    items.sort(key=sort_key)
    matched = [item for item in items if _matches(item, filters)]

    limit = filters.limit or get_settings().default_list_limit
    page = matched[filters.offset : filters.offset + limit]
    logger.debug(
        "Unified list for %s in company %s: %d merged, %d matched, %d returned",
        principal.id,
        company_id,
        len(items),
        len(matched),
        len(page),
    )
    return UnifiedRequestListResponse(items=page, total=len(matched))


async def get_unified_request(
    session: AsyncSession,
    identity: IdentitySession,
    kind: RequestKind,
    request_id: uuid.UUID,
) -> UnifiedRequest:
    """Get one request in the unified shape."""
    record = await load_visible_record(session, identity, kind, request_id)
    employee = await get_employee_service().get_employee(record.employee_id)
    return normalize(record, kind, employee)
