"""Request tables and audit log.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _request_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("company_id", sa.Uuid(), nullable=False, index=True),
        sa.Column("employee_id", sa.Uuid(), nullable=False, index=True),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="PENDING", index=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
    ]


def upgrade() -> None:
    op.create_table(
        "leave_request",
        *_request_columns(),
        sa.Column("leave_type", sa.String(length=100), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.String(), nullable=False),
        sa.Column("approved_by", sa.Uuid(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_comments", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_leave_request_company_status", "leave_request", ["company_id", "status"])

    op.create_table(
        "document_request",
        *_request_columns(),
        sa.Column("document_type", sa.String(length=100), nullable=False),
        sa.Column("purpose", sa.String(), nullable=True),
        sa.Column("language", sa.String(length=20), nullable=False),
        sa.Column("destination", sa.String(), nullable=True),
        sa.Column(
            "requested_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), index=True
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_by", sa.Uuid(), nullable=True),
        sa.Column("document_id", sa.String(length=255), nullable=True),
        sa.Column("uploaded_document_url", sa.String(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
    )
    op.create_index("ix_document_request_company_status", "document_request", ["company_id", "status"])

    op.create_table(
        "employee_request",
        *_request_columns(),
        sa.Column("request_type", sa.String(length=100), nullable=False),
        sa.Column("request_category", sa.String(length=100), nullable=False),
        sa.Column("form_data", sa.JSON(), nullable=False),
        sa.Column("workflow_route", sa.JSON(), nullable=False),
        sa.Column("current_approver", sa.String(length=50), nullable=False),
        sa.Column(
            "submitted_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), index=True
        ),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by", sa.Uuid(), nullable=True),
        sa.Column("review_comments", sa.String(), nullable=True),
    )
    op.create_index("ix_employee_request_company_status", "employee_request", ["company_id", "status"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("company_id", sa.Uuid(), nullable=False, index=True),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(), index=True
        ),
    )
    op.create_index("ix_audit_entity", "audit_log", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("employee_request")
    op.drop_table("document_request")
    op.drop_table("leave_request")
