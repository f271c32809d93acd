"""API tests for invoice endpoints."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_generate_invoice_endpoint(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    reservation_id = app_context["reservation_ids"][0]

    response = await client.post(
        "/api/v1/invoices/generate",
        json={"reservation_id": reservation_id, "invoice_date": "2024-03-05"},
        headers={"X-Actor": "maria"},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    assert body == {
        "reservation_id": reservation_id,
        "invoice_number": "FR07/001",
        "invoice_date": "2024-03-05",
    }

    again = await client.post(
        "/api/v1/invoices/generate", json={"reservation_id": reservation_id}
    )
    assert again.status_code == 409
    assert again.json()["detail"]["code"] == "already_invoiced"

    ledger = await client.get(f"/api/v1/invoices/by-reservation/{reservation_id}")
    assert ledger.status_code == 200
    assert ledger.json()["number"] == "FR07/001"


async def test_generate_invoice_unknown_reservation(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    response = await client.post("/api/v1/invoices/generate", json={"reservation_id": 999})
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "not_found"


async def test_batch_and_pending_count(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]

    pending = await client.get("/api/v1/invoices/pending-count")
    assert pending.status_code == 200
    assert pending.json() == {"count": 3}

    filtered = await client.get(
        "/api/v1/invoices/pending-count",
        params={"from_date": "2024-02-01", "to_date": "2024-02-29"},
    )
    assert filtered.json() == {"count": 1}

    response = await client.post("/api/v1/invoices/batch", json={})
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["generated"] == 3
    assert body["invoice_numbers"] == ["FR07/001", "FR07/002", "FR07/003"]
    assert body["errors"] == []

    march, january, february = app_context["reservation_ids"]
    listing = await client.get("/api/v1/invoices")
    assert listing.status_code == 200
    items = listing.json()["items"]
    assert [(item["reservation_id"], item["invoice_number"]) for item in items] == [
        (january, "FR07/001"),
        (february, "FR07/002"),
        (march, "FR07/003"),
    ]
    assert items[0]["guest_surname"] == "Ferrer"
    assert listing.json()["total"] == 3

    pending = await client.get("/api/v1/invoices/pending-count")
    assert pending.json() == {"count": 0}


async def test_batch_rejects_inverted_range(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    response = await client.post(
        "/api/v1/invoices/batch",
        json={"from_date": "2024-03-01", "to_date": "2024-01-01"},
    )
    assert response.status_code == 422


async def test_delete_invoice_endpoint(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    await client.post("/api/v1/invoices/batch")
    march, january, _ = app_context["reservation_ids"]

    blocked = await client.delete(f"/api/v1/invoices/by-reservation/{january}")
    assert blocked.status_code == 409
    assert blocked.json()["detail"]["code"] == "not_last_in_series"

    response = await client.delete(f"/api/v1/invoices/by-reservation/{march}")
    assert response.status_code == 200
    assert response.json() == {
        "reservation_id": march,
        "deleted_invoice_number": "FR07/003",
        "last_invoice_number": 2,
    }

    missing = await client.delete(f"/api/v1/invoices/by-reservation/{march}")
    assert missing.status_code == 409
    assert missing.json()["detail"]["code"] == "no_invoice"

    ledger = await client.get(f"/api/v1/invoices/by-reservation/{march}")
    assert ledger.status_code == 404


async def test_owner_invoice_counter(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    owner_id = app_context["owner_id"]

    await client.post(
        "/api/v1/invoices/generate",
        json={"reservation_id": app_context["reservation_ids"][0]},
    )
    response = await client.get(f"/api/v1/owners/{owner_id}/invoice-counter")
    assert response.status_code == 200
    assert response.json() == {
        "owner_id": owner_id,
        "series": "FR07",
        "last_invoice_number": 1,
        "ledger_max": 1,
        "next_invoice_number": "FR07/002",
    }

    missing = await client.get("/api/v1/owners/404/invoice-counter")
    assert missing.status_code == 404
