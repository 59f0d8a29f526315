from __future__ import annotations

from pydantic import BaseModel


class RequestTypeResponse(BaseModel):
    """A self-service request type and its approval route."""

    id: str
    title: str
    category: str
    required_fields: list[str]
    optional_fields: list[str]
    workflow_route: list[str]


class RequestCategoryResponse(BaseModel):
    """A group of request types shown together in the self-service portal."""

    id: str
    title: str
    request_types: list[RequestTypeResponse]


class CatalogResponse(BaseModel):
    items: list[RequestCategoryResponse]
