from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlmodel import col

from backoffice.models.audit import AuditLog
from backoffice.schemas.audit import AuditLogEntryResponse, AuditLogListResponse

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from backoffice.models.enums import AuditAction, RequestKind


def model_to_audit_dict(model: SQLModel) -> dict[str, Any]:
    """Serialize a SQLModel instance to a JSON-safe dict for audit logging."""
    data: dict[str, Any] = {}
    for key, value in model.model_dump().items():
        if isinstance(value, uuid.UUID):
            data[key] = str(value)
        elif isinstance(value, (datetime, date)):
            data[key] = value.isoformat()
        elif isinstance(value, Enum):
            data[key] = value.value
        else:
            data[key] = value
    return data


async def write_audit_log(
    session: AsyncSession,
    *,
    company_id: uuid.UUID,
    actor_id: uuid.UUID,
    kind: RequestKind,
    entity_id: uuid.UUID,
    action: AuditAction,
    before_json: dict[str, Any] | None = None,
    after_json: dict[str, Any] | None = None,
) -> AuditLog:
    """Write an immutable audit log entry within the caller's transaction."""
    entry = AuditLog(
        company_id=company_id,
        actor_id=actor_id,
        entity_type=kind.value,
        entity_id=entity_id,
        action=action.value,
        before_json=before_json,
        after_json=after_json,
    )
    session.add(entry)
    return entry


async def query_audit_log(
    session: AsyncSession,
    company_id: uuid.UUID,
    *,
    entity_type: str | None = None,
    entity_id: uuid.UUID | None = None,
    action: str | None = None,
    actor_id: uuid.UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    offset: int = 0,
    limit: int = 50,
) -> AuditLogListResponse:
    """Query audit log entries with optional filters, newest first."""
    filters = [col(AuditLog.company_id) == company_id]

    if entity_type is not None:
        filters.append(col(AuditLog.entity_type) == entity_type)
    if entity_id is not None:
        filters.append(col(AuditLog.entity_id) == entity_id)
    if action is not None:
        filters.append(col(AuditLog.action) == action)
    if actor_id is not None:
        filters.append(col(AuditLog.actor_id) == actor_id)
    if start_date is not None:
        filters.append(col(AuditLog.created_at) >= start_date)
    if end_date is not None:
        filters.append(col(AuditLog.created_at) < end_date + timedelta(days=1))

    count_result = await session.execute(select(func.count()).select_from(AuditLog).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(AuditLog).where(*filters).order_by(col(AuditLog.created_at).desc()).offset(offset).limit(limit)
    )
    entries = list(result.scalars().all())

    return AuditLogListResponse(
        items=[
            AuditLogEntryResponse(
                id=e.id,
                company_id=e.company_id,
                actor_id=e.actor_id,
                entity_type=e.entity_type,
                entity_id=e.entity_id,
                action=e.action,
                before_json=e.before_json,
                after_json=e.after_json,
                created_at=e.created_at,
            )
            for e in entries
        ],
        total=total,
    )
