"""Seed script for development data.

Run with:  python -m backoffice.seed   (against a running API)

The employee directory is an in-memory stub, so re-run this after every API
restart.
"""

from __future__ import annotations

import asyncio
import sys
from datetime import UTC, datetime, timedelta

import httpx

BASE_URL = "http://localhost:8000"
COMPANY_ID = "00000000-0000-0000-0000-000000000001"
ADMIN_USER_ID = "00000000-0000-0000-0000-000000000001"

HEADERS = {
    "Content-Type": "application/json",
    "X-Company-Id": COMPANY_ID,
    "X-User-Id": ADMIN_USER_ID,
    "X-Role": "admin",
}

# Well-known employee UUIDs
ALICE_ID = "00000000-0000-0000-0000-000000000002"
BOB_ID = "00000000-0000-0000-0000-000000000003"
CAROL_ID = "00000000-0000-0000-0000-000000000004"

EMPLOYEES = [
    {
        "id": ALICE_ID,
        "employee_number": "EMP-0001",
        "first_name": "Alice",
        "last_name": "Johnson",
        "email": "alice.johnson@example.com",
        "department": "Engineering",
    },
    {
        "id": BOB_ID,
        "employee_number": "EMP-0002",
        "first_name": "Bob",
        "last_name": "Smith",
        "email": "bob.smith@example.com",
        "department": "Finance",
    },
    {
        "id": CAROL_ID,
        "employee_number": "EMP-0003",
        "first_name": "Carol",
        "last_name": "Williams",
        "email": "carol.williams@example.com",
        "department": "Operations",
    },
]


def _employee_headers(employee_id: str) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "X-Company-Id": COMPANY_ID,
        "X-User-Id": employee_id,
        "X-Employee-Id": employee_id,
        "X-Role": "employee",
    }


async def _safe_post(
    client: httpx.AsyncClient, url: str, json: dict, label: str, headers: dict[str, str] = HEADERS
) -> dict | None:
    resp = await client.post(url, json=json, headers=headers)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    if resp.status_code == 409:
        print(f"  [SKIP] {label} ({resp.json().get('detail', 'conflict')})")
        return None
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def _safe_put(client: httpx.AsyncClient, url: str, json: dict, label: str) -> dict | None:
    resp = await client.put(url, json=json, headers=HEADERS)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def seed_employees(client: httpx.AsyncClient) -> None:
    print("\n--- Seeding employees ---")
    for emp in EMPLOYEES:
        emp_id = emp["id"]
        body = {k: v for k, v in emp.items() if k != "id"}
        await _safe_put(
            client,
            f"{BASE_URL}/companies/{COMPANY_ID}/employees/{emp_id}",
            body,
            f"{emp['first_name']} {emp['last_name']}",
        )


async def seed_requests(client: httpx.AsyncClient) -> None:
    print("\n--- Seeding requests ---")
    company_url = f"{BASE_URL}/companies/{COMPANY_ID}"
    today = datetime.now(UTC).date()

    # Alice: 3-day annual leave, approved by HR
    start = today + timedelta(days=14)
    leave = await _safe_post(
        client,
        f"{company_url}/leave-requests",
        {
            "leave_type": "Annual",
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(days=2)).isoformat(),
            "reason": "Family trip",
        },
        "Request: Alice 3-day annual leave",
        headers=_employee_headers(ALICE_ID),
    )
    if leave:
        await _safe_post(
            client,
            f"{company_url}/requests/leave/{leave['id']}/approve",
            {"comments": "Enjoy!", "expected_version": leave["version"]},
            "Approved Alice's leave",
        )

    # Bob: salary certificate, fulfilled from an uploaded file and completed
    document = await _safe_post(
        client,
        f"{company_url}/document-requests",
        {"document_type": "Salary Certificate", "purpose": "Bank loan", "destination": "City Bank"},
        "Request: Bob salary certificate",
        headers=_employee_headers(BOB_ID),
    )
    if document:
        fulfilled = await _safe_post(
            client,
            f"{company_url}/document-requests/{document['id']}/fulfill",
            {"uploaded_document_location": "certificates/bob-salary.pdf", "expected_version": document["version"]},
            "Attached Bob's certificate",
        )
        if fulfilled:
            await _safe_post(
                client,
                f"{company_url}/requests/document/{document['id']}/approve",
                {"expected_version": fulfilled["version"]},
                "Completed Bob's document request",
            )

    # Carol: IT support ticket, stays PENDING
    await _safe_post(
        client,
        f"{company_url}/employee-requests",
        {
            "request_type": "it-support",
            "form_data": {
                "issueCategory": "Hardware",
                "systemOrDevice": "Laptop",
                "priority": "High",
                "description": "Screen flickers after docking",
            },
        },
        "Request: Carol IT support ticket (PENDING)",
        headers=_employee_headers(CAROL_ID),
    )


async def main() -> None:
    print("=" * 60)
    print("  HR Back Office: Development Seed Script")
    print("=" * 60)

    async with httpx.AsyncClient(timeout=30.0) as client:
        # Health check
        try:
            resp = await client.get(f"{BASE_URL}/health")
            if resp.status_code != 200:
                print(f"API health check failed: {resp.status_code}")
                sys.exit(1)
            print("\n[OK] API is healthy")
        except httpx.ConnectError:
            print("ERROR: Cannot connect to API at", BASE_URL)
            print("Make sure the API is running (uvicorn backoffice.main:app)")
            sys.exit(1)

        await seed_employees(client)
        await seed_requests(client)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
