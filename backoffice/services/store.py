# ruff: noqa: TC003
"""Persistence collaborator for request records.

These are the only read and mutation primitives the lifecycle engine and the
aggregator use. Writes are flushed but not committed; the caller commits
once, together with the audit row.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from sqlalchemy import select, update
from sqlmodel import col

from backoffice.models import MODEL_BY_KIND
from backoffice.models.enums import RequestKind

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from backoffice.models import RequestRecord


@runtime_checkable
class RequestStore(Protocol):
    """Interface for request persistence."""

    async def insert(self, kind: RequestKind, record: RequestRecord) -> RequestRecord: ...

    async def update_status(
        self,
        kind: RequestKind,
        request_id: uuid.UUID,
        new_status: str,
        extra: dict[str, Any],
        expected_version: int,
    ) -> RequestRecord | None: ...

    async def update_fields(
        self,
        kind: RequestKind,
        request_id: uuid.UUID,
        extra: dict[str, Any],
        expected_version: int,
    ) -> RequestRecord | None: ...

    async def find_by_id(self, kind: RequestKind, request_id: uuid.UUID) -> RequestRecord | None: ...

    async def list_by_employee(self, kind: RequestKind, employee_id: uuid.UUID) -> list[RequestRecord]: ...

    async def list_by_company(
        self, kind: RequestKind, company_id: uuid.UUID, page: int, page_size: int
    ) -> list[RequestRecord]: ...


class SqlRequestStore:
    """``RequestStore`` over an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def insert(self, kind: RequestKind, record: RequestRecord) -> RequestRecord:
        model = MODEL_BY_KIND[kind]
        if not isinstance(record, model):
            msg = f"{type(record).__name__} cannot be stored as {kind.value}"
            raise TypeError(msg)
        self._session.add(record)
        await self._session.flush()
        return record

    async def update_status(
        self,
        kind: RequestKind,
        request_id: uuid.UUID,
        new_status: str,
        extra: dict[str, Any],
        expected_version: int,
    ) -> RequestRecord | None:
        """Apply a status change if the stored version still equals ``expected_version``.

        Returns the refreshed record, or None when another writer got there first.
        """
        return await self.update_fields(kind, request_id, {**extra, "status": new_status}, expected_version)

    async def update_fields(
        self,
        kind: RequestKind,
        request_id: uuid.UUID,
        extra: dict[str, Any],
        expected_version: int,
    ) -> RequestRecord | None:
        model = MODEL_BY_KIND[kind]
        result = await self._session.execute(
            update(model)
            .where(col(model.id) == request_id, col(model.version) == expected_version)
            .values(**extra, version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:  # ty: ignore[unresolved-attribute]
            return None
        await self._session.flush()
        record = await self._session.get(model, request_id, populate_existing=True)
        return record

    async def find_by_id(self, kind: RequestKind, request_id: uuid.UUID) -> RequestRecord | None:
        model = MODEL_BY_KIND[kind]
        result = await self._session.execute(
            select(model).where(col(model.id) == request_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_by_employee(self, kind: RequestKind, employee_id: uuid.UUID) -> list[RequestRecord]:
        model = MODEL_BY_KIND[kind]
        result = await self._session.execute(
            select(model).where(col(model.employee_id) == employee_id).order_by(col(model.id))
        )
        return list(result.scalars().all())

    async def list_by_company(
        self, kind: RequestKind, company_id: uuid.UUID, page: int, page_size: int
    ) -> list[RequestRecord]:
        """Return one page (1-based) of a company's records of ``kind``."""
        model = MODEL_BY_KIND[kind]
        result = await self._session.execute(
            select(model)
            .where(col(model.company_id) == company_id)
            .order_by(col(model.id))
            .offset((max(page, 1) - 1) * page_size)
            .limit(page_size)
        )
        return list(result.scalars().all())
