"""API tests for guarded reservation updates and deletes."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import AsyncClient

from roomflow.db.session import get_sessionmaker
from roomflow.models import AuditEvent, Reservation
from roomflow.services import audit_service

pytestmark = pytest.mark.asyncio


async def _invoice(client: AsyncClient, reservation_id: int) -> None:
    response = await client.post(
        "/api/v1/invoices/generate", json={"reservation_id": reservation_id}
    )
    assert response.status_code == 201


async def test_patch_invoiced_reservation(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    reservation_id = app_context["reservation_ids"][0]
    await _invoice(client, reservation_id)

    rejected = await client.patch(
        f"/api/v1/reservations/{reservation_id}",
        json={"price": "99.00", "start_date": "2024-03-02"},
    )
    assert rejected.status_code == 409
    detail = rejected.json()["detail"]
    assert detail["code"] == "protected_fields"
    assert detail["fields"] == ["price", "start_date"]

    accepted = await client.patch(
        f"/api/v1/reservations/{reservation_id}",
        json={"notes": "Invoice sent by email"},
        headers={"X-Actor": "front-desk"},
    )
    assert accepted.status_code == 200, accepted.text
    body = accepted.json()
    assert body["notes"] == "Invoice sent by email"
    assert body["invoice_number"] == "FR07/001"


async def test_patch_cannot_set_invoice_fields(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    reservation_id = app_context["reservation_ids"][0]

    response = await client.patch(
        f"/api/v1/reservations/{reservation_id}",
        json={"invoice_number": "FR07/999"},
    )
    assert response.status_code == 422


async def test_patch_uninvoiced_reservation(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    reservation_id = app_context["pending_reservation_id"]

    response = await client.patch(
        f"/api/v1/reservations/{reservation_id}",
        json={"payment_method": "transfer", "price": "85.50"},
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["payment_method"] == "transfer"
    assert body["price"] == "85.50"

    inverted = await client.patch(
        f"/api/v1/reservations/{reservation_id}",
        json={"end_date": "2024-03-01"},
    )
    assert inverted.status_code == 400


async def test_delete_reservation(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    invoiced_id = app_context["reservation_ids"][0]
    await _invoice(client, invoiced_id)

    blocked = await client.delete(f"/api/v1/reservations/{invoiced_id}")
    assert blocked.status_code == 409
    assert blocked.json()["detail"]["code"] == "delete_blocked"

    pending_id = app_context["pending_reservation_id"]
    deleted = await client.delete(f"/api/v1/reservations/{pending_id}")
    assert deleted.status_code == 204

    missing = await client.get(f"/api/v1/reservations/{pending_id}")
    assert missing.status_code == 404


@pytest.mark.parametrize("field", ["start_date", "end_date", "price", "payment_method"])
async def test_patch_rejects_null_for_required_fields(
    app_context: dict[str, Any], field: str
) -> None:
    client: AsyncClient = app_context["client"]
    reservation_id = app_context["pending_reservation_id"]

    response = await client.patch(
        f"/api/v1/reservations/{reservation_id}", json={field: None}
    )
    assert response.status_code == 422

    nullable = await client.patch(
        f"/api/v1/reservations/{reservation_id}",
        json={"notes": None, "room_id": None},
    )
    assert nullable.status_code == 200, nullable.text
    assert nullable.json()["room_id"] is None


async def test_patch_survives_failed_audit_write(
    app_context: dict[str, Any], db_url: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    client: AsyncClient = app_context["client"]
    reservation_id = app_context["pending_reservation_id"]

    async def _broken_record_event(session, **kwargs):
        session.add(AuditEvent(actor=None, action=kwargs["action"], table_name="x"))
        await session.commit()

    monkeypatch.setattr(audit_service, "record_event", _broken_record_event)

    response = await client.patch(
        f"/api/v1/reservations/{reservation_id}",
        json={"notes": "Late arrival"},
    )
    assert response.status_code == 200, response.text
    assert response.json()["notes"] == "Late arrival"

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        reservation = await session.get(Reservation, reservation_id)
        assert reservation.notes == "Late arrival"
