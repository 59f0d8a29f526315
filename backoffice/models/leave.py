# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from backoffice.models.base import RequestRecordBase, TimestampMixin


class LeaveRequest(RequestRecordBase, TimestampMixin, table=True):
    """An employee's leave request. Submission time is ``created_at``."""

    __tablename__ = "leave_request"
    __table_args__ = (sa.Index("ix_leave_request_company_status", "company_id", "status"),)

    leave_type: str = Field(max_length=100)
    start_date: date
    end_date: date
    reason: str = ""
    approved_by: uuid.UUID | None = None
    reviewed_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    review_comments: str | None = None

    @property
    def duration_days(self) -> int:
        """Inclusive day count between start and end."""
        return (self.end_date - self.start_date).days + 1
