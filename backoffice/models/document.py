# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from backoffice.models.base import RequestRecordBase, now_utc


class DocumentRequest(RequestRecordBase, table=True):
    """A request for a letter or certificate.

    Fulfillment is either ``document_id`` (an existing stored document) or
    ``uploaded_document_url`` (a freshly uploaded one), never both.
    """

    __tablename__ = "document_request"
    __table_args__ = (sa.Index("ix_document_request_company_status", "company_id", "status"),)

    document_type: str = Field(max_length=100)
    purpose: str | None = None
    language: str = Field(default="en", max_length=20)
    destination: str | None = None
    requested_at: datetime = Field(
        default_factory=now_utc,
        index=True,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    completed_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    completed_by: uuid.UUID | None = None
    document_id: str | None = Field(default=None, max_length=255)
    uploaded_document_url: str | None = None
    notes: str | None = None

    @property
    def has_fulfillment(self) -> bool:
        return bool(self.document_id) or bool(self.uploaded_document_url)
