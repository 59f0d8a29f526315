# ruff: noqa: TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from backoffice.api.deps import AdminDep, IdentityDep, validate_company_scope
from backoffice.exceptions import NotFound
from backoffice.models.enums import ADMIN_ROLES
from backoffice.schemas.employee import EmployeeListResponse, EmployeeResponse, UpsertEmployeeRequest
from backoffice.services.authorization import can_access
from backoffice.services.employee import EmployeeInfo, get_employee_service

employees_router = APIRouter(
    prefix="/companies/{company_id}/employees",
    tags=["employees"],
    dependencies=[Depends(validate_company_scope)],
)


def _build_employee_response(employee: EmployeeInfo) -> EmployeeResponse:
    return EmployeeResponse(
        id=employee.id,
        company_id=employee.company_id,
        employee_number=employee.employee_number,
        first_name=employee.first_name,
        last_name=employee.last_name,
        email=employee.email,
        department=employee.department,
    )


@employees_router.put(
    "/{employee_id}",
    response_model=EmployeeResponse,
)
async def upsert_employee(
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    payload: UpsertEmployeeRequest,
    identity: AdminDep,
) -> EmployeeResponse:
    """Create or update an employee in the directory stub (admin only)."""
    svc = get_employee_service()
    employee = EmployeeInfo(
        id=employee_id,
        company_id=company_id,
        employee_number=payload.employee_number,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        department=payload.department,
    )
    svc.seed(employee)  # ty: ignore[unresolved-attribute]
    return _build_employee_response(employee)


@employees_router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
)
async def get_employee(
    company_id: uuid.UUID,
    employee_id: uuid.UUID,
    identity: IdentityDep,
) -> EmployeeResponse:
    """Get employee info: your own entry, or any entry in the company for admins."""
    principal = identity.principal
    is_self = principal is not None and principal.employee_id == employee_id
    if not is_self and not can_access(principal, ADMIN_ROLES):
        raise NotFound("Employee not found")
    employee = await get_employee_service().get_employee(employee_id)
    if employee is None or employee.company_id != company_id:
        raise NotFound("Employee not found")
    return _build_employee_response(employee)


@employees_router.get(
    "",
    response_model=EmployeeListResponse,
)
async def list_employees(
    company_id: uuid.UUID,
    identity: AdminDep,
) -> EmployeeListResponse:
    """List all employees for a company (admin only)."""
    employees = await get_employee_service().list_employees(company_id)
    items = [_build_employee_response(e) for e in employees]
    return EmployeeListResponse(items=items, total=len(items))
