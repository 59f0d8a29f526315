"""Tests for the request-type catalog."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from backoffice.services.catalog import (
    CATEGORIES,
    build_catalog_response,
    category_title,
    find_request_type,
    missing_fields,
)

if TYPE_CHECKING:
    from httpx import AsyncClient

ADMIN_HEADERS = {"X-User-Id": str(uuid.uuid4()), "X-Role": "admin"}


def test_catalog_shape() -> None:
    assert len(CATEGORIES) == 7
    assert sum(len(c.request_types) for c in CATEGORIES) == 15


def test_type_ids_are_unique() -> None:
    ids = [rt.id for c in CATEGORIES for rt in c.request_types]
    assert len(ids) == len(set(ids))


def test_find_by_id_and_title() -> None:
    by_id = find_request_type("advance-loan")
    by_title = find_request_type("  advance / LOAN ")
    assert by_id is not None
    assert by_id is by_title
    assert category_title(by_id) == "Payroll & Finance"
    assert by_id.workflow_route == ("Finance", "HR")


def test_find_unknown_type() -> None:
    assert find_request_type("Parking Permit") is None


def test_missing_fields_treats_blank_as_missing() -> None:
    rt = find_request_type("resignation")
    assert rt is not None
    assert missing_fields(rt, {"lastWorkingDay": "2024-07-01", "agreement": True}) == []
    assert missing_fields(rt, {"lastWorkingDay": " ", "agreement": False}) == ["lastWorkingDay"]
    assert missing_fields(rt, {}) == ["lastWorkingDay", "agreement"]


def test_catalog_response_lists_fields() -> None:
    response = build_catalog_response()
    it_support = next(rt for c in response.items for rt in c.request_types if rt.id == "it-support")
    assert it_support.category == "Assets & IT Support"
    assert it_support.required_fields == ["issueCategory", "systemOrDevice", "priority", "description"]
    assert it_support.workflow_route == ["IT"]


async def test_catalog_endpoint(async_client: AsyncClient) -> None:
    resp = await async_client.get("/catalog/request-types", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    assert len(resp.json()["items"]) == 7


async def test_catalog_endpoint_requires_identity(async_client: AsyncClient) -> None:
    resp = await async_client.get("/catalog/request-types")
    assert resp.status_code == 422
