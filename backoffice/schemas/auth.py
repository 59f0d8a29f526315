# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Self

from pydantic import BaseModel, ConfigDict, model_validator

from backoffice.models.enums import UserRole


class Principal(BaseModel):
    """The authenticated identity attempting an operation."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    email: str = ""
    role: UserRole = UserRole.EMPLOYEE
    company_id: uuid.UUID | None = None
    employee_id: uuid.UUID | None = None
    active: bool = True

    @model_validator(mode="after")
    def _employee_binding(self) -> Self:
        if self.role == UserRole.EMPLOYEE and self.employee_id is None:
            msg = "employee principals must be bound to an employee_id"
            raise ValueError(msg)
        return self
