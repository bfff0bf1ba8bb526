from __future__ import annotations

import asyncio
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from barberbook.dependencies.services import get_booking_service, get_supabase_client_cached
from barberbook.main import app
from barberbook.services.booking import BookingService
from barberbook.services.mock_store import (
    DEMO_BARBER_IDS,
    DEMO_MASTER_USER_ID,
    DEMO_OWNER_USER_ID,
    DEMO_SERVICE_IDS,
    DEMO_SHOP_ID,
    DEMO_SHOP_SLUG,
    DEMO_STAFF_USER_ID,
    get_mock_store,
    reset_mock_store,
)

JOAO, PEDRO = DEMO_BARBER_IDS
CORTE = DEMO_SERVICE_IDS[0]
FIXED_NOW = datetime(2030, 1, 6, 10, 0, tzinfo=ZoneInfo("America/Sao_Paulo"))


@pytest.fixture
def client():
    reset_mock_store()
    app.dependency_overrides[get_booking_service] = lambda: BookingService(
        get_supabase_client_cached(), clock=lambda: FIXED_NOW
    )
    yield TestClient(app)
    app.dependency_overrides.clear()
    reset_mock_store()


def _book(client: TestClient, time: str = "10:00", barber_id: str = JOAO):
    return client.post(
        f"/shops/{DEMO_SHOP_SLUG}/appointments",
        json={
            "client_name": "Carlos",
            "client_phone": "11999990000",
            "barber_id": barber_id,
            "service_id": CORTE,
            "date": "2030-01-07",
            "time": time,
        },
    )


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["ok"] is True


def test_public_shop_catalog(client: TestClient) -> None:
    shop = client.get(f"/shops/{DEMO_SHOP_SLUG}")
    assert shop.status_code == 200
    assert shop.json()["name"] == "Barbearia Central"

    services = client.get(f"/shops/{DEMO_SHOP_SLUG}/services").json()
    assert services["total"] == 3

    barbers = client.get(f"/shops/{DEMO_SHOP_SLUG}/barbers").json()
    assert [item["id"] for item in barbers["items"]] == [JOAO, PEDRO]

    assert client.get("/shops/unknown").status_code == 404


def test_availability_then_booking_then_conflict(client: TestClient) -> None:
    slots = client.post(
        f"/shops/{DEMO_SHOP_SLUG}/availability",
        json={"service_id": CORTE, "barber_id": JOAO, "date": "2030-01-07"},
    )
    assert slots.status_code == 200
    assert "10:00" in slots.json()["slots"]

    created = _book(client)
    assert created.status_code == 201
    assert created.json()["status"] == "pending"

    conflict = _book(client)
    assert conflict.status_code == 409

    slots = client.post(
        f"/shops/{DEMO_SHOP_SLUG}/availability",
        json={"service_id": CORTE, "barber_id": JOAO, "date": "2030-01-07"},
    ).json()
    assert "10:00" not in slots["slots"]


def test_booking_rejects_malformed_time(client: TestClient) -> None:
    assert _book(client, time="ten o'clock").status_code == 422


def test_dashboard_requires_member_header(client: TestClient) -> None:
    response = client.get(f"/dashboard/{DEMO_SHOP_SLUG}/appointments")
    assert response.status_code == 403

    response = client.get(
        f"/dashboard/{DEMO_SHOP_SLUG}/appointments",
        headers={"X-User-Id": DEMO_OWNER_USER_ID},
    )
    assert response.status_code == 200
    assert response.json()["total"] == 0


def test_dashboard_appointment_lifecycle(client: TestClient) -> None:
    appointment_id = _book(client).json()["appointment_id"]
    owner = {"X-User-Id": DEMO_OWNER_USER_ID}

    early_payment = client.post(
        f"/dashboard/{DEMO_SHOP_SLUG}/appointments/{appointment_id}/payments",
        json={"payment_method": "cash"},
        headers=owner,
    )
    assert early_payment.status_code == 422

    confirmed = client.post(
        f"/dashboard/{DEMO_SHOP_SLUG}/appointments/{appointment_id}/status",
        json={"status": "confirmed"},
        headers=owner,
    )
    assert confirmed.status_code == 200

    payment = client.post(
        f"/dashboard/{DEMO_SHOP_SLUG}/appointments/{appointment_id}/payments",
        json={"payment_method": "cash"},
        headers=owner,
    )
    assert payment.status_code == 201
    assert payment.json()["barber_commission"] == 27.0

    payments = client.get(f"/dashboard/{DEMO_SHOP_SLUG}/payments", headers=owner).json()
    assert payments["total"] == 1

    staff_payments = client.get(
        f"/dashboard/{DEMO_SHOP_SLUG}/payments", headers={"X-User-Id": DEMO_STAFF_USER_ID}
    ).json()
    assert staff_payments["total"] == 0

    report = client.get(
        f"/dashboard/{DEMO_SHOP_SLUG}/revenue/monthly",
        params={"year": 2030},
        headers=owner,
    ).json()
    assert report["total"] == 45.0

    stats = client.get(f"/dashboard/{DEMO_SHOP_SLUG}/stats", headers=owner)
    assert stats.status_code == 200


def test_staff_cannot_edit_catalog(client: TestClient) -> None:
    response = client.post(
        f"/dashboard/{DEMO_SHOP_SLUG}/services",
        json={"name": "Pigmentação", "price": 40, "duration": 30},
        headers={"X-User-Id": DEMO_STAFF_USER_ID},
    )
    assert response.status_code == 403

    response = client.post(
        f"/dashboard/{DEMO_SHOP_SLUG}/services",
        json={"name": "Pigmentação", "price": 40, "duration": 30},
        headers={"X-User-Id": DEMO_OWNER_USER_ID},
    )
    assert response.status_code == 201


def test_opening_hours_roundtrip(client: TestClient) -> None:
    owner = {"X-User-Id": DEMO_OWNER_USER_ID}
    week = client.get(f"/dashboard/{DEMO_SHOP_SLUG}/availability", headers=owner).json()
    assert len(week["days"]) == 7

    saved = client.put(
        f"/dashboard/{DEMO_SHOP_SLUG}/availability",
        json={"days": [{"day_of_week": 6, "start_time": "10:00", "end_time": "16:00"}]},
        headers=owner,
    )
    assert saved.status_code == 200
    assert saved.json()["days"][6]["end_time"] == "16:00"

    invalid = client.put(
        f"/dashboard/{DEMO_SHOP_SLUG}/availability",
        json={"days": [{"day_of_week": 6, "start_time": "16:00", "end_time": "10:00"}]},
        headers=owner,
    )
    assert invalid.status_code == 422


def test_admin_endpoints_require_master(client: TestClient) -> None:
    denied = client.get("/admin/barbershops", headers={"X-User-Id": DEMO_OWNER_USER_ID})
    assert denied.status_code == 403

    master = {"X-User-Id": DEMO_MASTER_USER_ID}
    created = client.post(
        "/admin/barbershops", json={"name": "Barbearia do Zé"}, headers=master
    )
    assert created.status_code == 201
    assert created.json()["slug"] == "barbearia-do-ze"
    assert created.json()["is_active"] is False

    duplicate = client.post(
        "/admin/barbershops", json={"name": "Barbearia do Zé"}, headers=master
    )
    assert duplicate.status_code == 422

    listing = client.get("/admin/barbershops", headers=master).json()
    assert listing["total"] == 2

    removed = client.delete(f"/admin/barbershops/{created.json()['id']}", headers=master)
    assert removed.status_code == 204


def test_opening_hours_survive_an_inconsistent_stored_day(client: TestClient) -> None:
    asyncio.run(
        get_mock_store().tables.update(
            "availability",
            {"end_time": "12:00", "breaks": [{"start": "12:00", "end": "13:00"}]},
            filters=[("barbershop_id", "eq", DEMO_SHOP_ID), ("day_of_week", "eq", 3)],
        )
    )
    owner = {"X-User-Id": DEMO_OWNER_USER_ID}

    week = client.get(f"/dashboard/{DEMO_SHOP_SLUG}/availability", headers=owner)
    assert week.status_code == 200
    assert week.json()["days"][3]["end_time"] == "19:00"

    saved = client.put(
        f"/dashboard/{DEMO_SHOP_SLUG}/availability",
        json={"days": [{"day_of_week": 3, "start_time": "09:00", "end_time": "19:00"}]},
        headers=owner,
    )
    assert saved.status_code == 200
    assert saved.json()["days"][3]["end_time"] == "19:00"
