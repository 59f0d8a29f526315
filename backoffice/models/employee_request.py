# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from backoffice.models.base import RequestRecordBase, now_utc


class EmployeeRequest(RequestRecordBase, table=True):
    """A generic self-service request with a schema-less form payload."""

    __tablename__ = "employee_request"
    __table_args__ = (sa.Index("ix_employee_request_company_status", "company_id", "status"),)

    request_type: str = Field(max_length=100)
    request_category: str = Field(max_length=100)
    form_data: dict[str, Any] = Field(default_factory=dict, sa_type=sa.JSON)
    workflow_route: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    current_approver: str = Field(default="HR", max_length=50)
    submitted_at: datetime = Field(
        default_factory=now_utc,
        index=True,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    reviewed_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    reviewed_by: uuid.UUID | None = None
    review_comments: str | None = None
