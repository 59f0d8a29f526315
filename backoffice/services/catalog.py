"""Catalog of self-service request types, their form fields and approval routes."""

from __future__ import annotations

from dataclasses import dataclass, field

from backoffice.schemas.catalog import CatalogResponse, RequestCategoryResponse, RequestTypeResponse


@dataclass(frozen=True)
class RequestTypeDef:
    id: str
    title: str
    category_id: str
    required_fields: tuple[str, ...]
    optional_fields: tuple[str, ...] = ()
    workflow_route: tuple[str, ...] = ("HR",)

    @property
    def field_keys(self) -> tuple[str, ...]:
        return self.required_fields + self.optional_fields


@dataclass(frozen=True)
class RequestCategoryDef:
    id: str
    title: str
    request_types: tuple[RequestTypeDef, ...] = field(default_factory=tuple)


LEAVE_CATEGORY = "Attendance & Leaves"
DOCUMENT_CATEGORY = "Letters & Certificates"

CATEGORIES: tuple[RequestCategoryDef, ...] = (
    RequestCategoryDef(
        id="attendance-leaves",
        title=LEAVE_CATEGORY,
        request_types=(
            RequestTypeDef(
                id="leave-request",
                title="Leave Request",
                category_id="attendance-leaves",
                required_fields=("leaveType", "fromDate", "toDate"),
                optional_fields=("reason", "attachment"),
                workflow_route=("Manager", "HR"),
            ),
            RequestTypeDef(
                id="permission-early-leave",
                title="Permission / Early Leave",
                category_id="attendance-leaves",
                required_fields=("date", "fromTime", "toTime", "reason"),
                workflow_route=("Manager",),
            ),
            RequestTypeDef(
                id="attendance-correction",
                title="Attendance Correction",
                category_id="attendance-leaves",
                required_fields=("date", "correctionType", "reason"),
                optional_fields=("correctInTime", "correctOutTime"),
                workflow_route=("Manager", "HR"),
            ),
        ),
    ),
    RequestCategoryDef(
        id="payroll-finance",
        title="Payroll & Finance",
        request_types=(
            RequestTypeDef(
                id="payslip-inquiry",
                title="Payslip Inquiry / Payroll Issue",
                category_id="payroll-finance",
                required_fields=("month", "issueType", "description"),
                optional_fields=("attachment",),
                workflow_route=("Finance", "HR"),
            ),
            RequestTypeDef(
                id="advance-loan",
                title="Advance / Loan",
                category_id="payroll-finance",
                required_fields=("amount", "reason", "installments", "startDeductionDate", "agreement"),
                workflow_route=("Finance", "HR"),
            ),
            RequestTypeDef(
                id="expense-reimbursement",
                title="Expense Reimbursement",
                category_id="payroll-finance",
                required_fields=("expenseType", "date", "amount", "paymentMethod", "invoice"),
                workflow_route=("Manager", "Finance"),
            ),
        ),
    ),
    RequestCategoryDef(
        id="administrative",
        title="Administrative",
        request_types=(
            RequestTypeDef(
                id="update-personal-data",
                title="Update Personal Data",
                category_id="administrative",
                required_fields=("fieldType", "newValue"),
                optional_fields=("attachment",),
            ),
        ),
    ),
    RequestCategoryDef(
        id="letters-certificates",
        title=DOCUMENT_CATEGORY,
        request_types=(
            RequestTypeDef(
                id="salary-certificate",
                title="Salary Certificate",
                category_id="letters-certificates",
                required_fields=("language", "destination", "purpose", "stampedCopy"),
            ),
            RequestTypeDef(
                id="experience-letter",
                title="Experience Letter",
                category_id="letters-certificates",
                required_fields=("language",),
            ),
            RequestTypeDef(
                id="document-request",
                title="Document Request",
                category_id="letters-certificates",
                required_fields=("documentType", "language", "purpose"),
                optional_fields=("destination",),
            ),
        ),
    ),
    RequestCategoryDef(
        id="training-development",
        title="Training & Development",
        request_types=(
            RequestTypeDef(
                id="training-request",
                title="Training Request",
                category_id="training-development",
                required_fields=("courseName", "provider", "dateFrom", "dateTo", "insideWorkHours", "estimatedCost"),
                workflow_route=("Manager", "HR"),
            ),
        ),
    ),
    RequestCategoryDef(
        id="assets-it",
        title="Assets & IT Support",
        request_types=(
            RequestTypeDef(
                id="asset-request",
                title="Asset Request",
                category_id="assets-it",
                required_fields=("assetType", "justification", "neededDate"),
                workflow_route=("IT", "Manager"),
            ),
            RequestTypeDef(
                id="it-support",
                title="IT Support Ticket",
                category_id="assets-it",
                required_fields=("issueCategory", "systemOrDevice", "priority", "description"),
                workflow_route=("IT",),
            ),
        ),
    ),
    RequestCategoryDef(
        id="sensitive",
        title="Sensitive Requests",
        request_types=(
            RequestTypeDef(
                id="complaint-grievance",
                title="Complaint / Grievance",
                category_id="sensitive",
                required_fields=("category", "description", "confidentiality"),
                optional_fields=("attachment",),
            ),
            RequestTypeDef(
                id="resignation",
                title="Resignation",
                category_id="sensitive",
                required_fields=("lastWorkingDay", "agreement"),
                optional_fields=("reason",),
                workflow_route=("Manager", "HR"),
            ),
        ),
    ),
)

_CATEGORY_BY_ID: dict[str, RequestCategoryDef] = {c.id: c for c in CATEGORIES}
_TYPES_BY_KEY: dict[str, RequestTypeDef] = {}
for _category in CATEGORIES:
    for _rt in _category.request_types:
        _TYPES_BY_KEY[_rt.id] = _rt
        _TYPES_BY_KEY[_rt.title.lower()] = _rt


def find_request_type(key: str) -> RequestTypeDef | None:
    """Look up a request type by id (``it-support``) or title (``IT Support Ticket``)."""
    return _TYPES_BY_KEY.get(key.strip().lower())


def category_title(request_type: RequestTypeDef) -> str:
    return _CATEGORY_BY_ID[request_type.category_id].title


def missing_fields(request_type: RequestTypeDef, form_data: dict[str, object]) -> list[str]:
    """Return required field keys that are absent or blank in ``form_data``."""
    missing = []
    for key in request_type.required_fields:
        value = form_data.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(key)
    return missing


def build_catalog_response() -> CatalogResponse:
    return CatalogResponse(
        items=[
            RequestCategoryResponse(
                id=c.id,
                title=c.title,
                request_types=[
                    RequestTypeResponse(
                        id=rt.id,
                        title=rt.title,
                        category=c.title,
                        required_fields=list(rt.required_fields),
                        optional_fields=list(rt.optional_fields),
                        workflow_route=list(rt.workflow_route),
                    )
                    for rt in c.request_types
                ],
            )
            for c in CATEGORIES
        ]
    )
