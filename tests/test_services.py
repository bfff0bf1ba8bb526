import asyncio
import os
import sys
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from barberbook.clients.supabase import SupabaseClient
from barberbook.schemas.appointment import BookingRequest, StatusUpdateRequest
from barberbook.schemas.availability import DayAvailability, SlotQuery, WeeklyAvailability
from barberbook.schemas.barbershop import (
    BarbershopCreateRequest,
    BarbershopUpdateRequest,
    ImageUploadRequest,
    MemberCreateRequest,
)
from barberbook.schemas.billing import PaymentRequest
from barberbook.schemas.catalog import BarberRequest, ServiceRequest
from barberbook.services.analytics import AnalyticsService
from barberbook.services.appointments import AppointmentService, split_commission
from barberbook.services.availability import AvailabilityService, day_of_week_for
from barberbook.services.barbers import BarberService
from barberbook.services.booking import BookingService
from barberbook.services.branding import ProfileService, cache_buster
from barberbook.services.catalog import CatalogService
from barberbook.services.exceptions import (
    DownstreamServiceError,
    NotFoundError,
    PermissionDeniedError,
    SlotUnavailableError,
    ValidationFailedError,
)
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
from barberbook.services.tenants import BarbershopService, slugify

SAO_PAULO = ZoneInfo("America/Sao_Paulo")
MONDAY = date(2030, 1, 7)
JOAO, PEDRO = DEMO_BARBER_IDS
CORTE, BARBA, COMBO = DEMO_SERVICE_IDS


@pytest.fixture(autouse=True)
def _reset_store() -> None:
    reset_mock_store()
    yield
    reset_mock_store()


def _clock(*args):
    fixed = datetime(*args, tzinfo=SAO_PAULO)
    return lambda: fixed


SUNDAY_MORNING = _clock(2030, 1, 6, 10, 0)


def _client() -> SupabaseClient:
    return SupabaseClient("https://demo.supabase.co", use_mock_data=True)


def _booking(time: str, *, barber_id: str = JOAO, service_id: str = CORTE, phone: str = "11999990000"):
    return BookingRequest(
        client_name="Carlos",
        client_phone=phone,
        barber_id=barber_id,
        service_id=service_id,
        date=MONDAY,
        time=time,
    )


def _book(time: str, **kwargs):
    service = BookingService(_client(), clock=SUNDAY_MORNING)
    return asyncio.run(service.book(DEMO_SHOP_SLUG, _booking(time, **kwargs)))


def test_available_slots_skip_lunch_break() -> None:
    service = BookingService(_client(), clock=SUNDAY_MORNING)

    response = asyncio.run(
        service.available_slots(
            DEMO_SHOP_SLUG, SlotQuery(service_id=CORTE, barber_id=JOAO, date=MONDAY)
        )
    )

    assert response.slots[0] == "09:00"
    assert response.slots[-1] == "18:30"
    assert "11:30" in response.slots
    assert "12:00" not in response.slots
    assert "12:30" not in response.slots
    assert response.message is None


def test_closed_sunday_reports_no_availability() -> None:
    service = BookingService(_client(), clock=SUNDAY_MORNING)

    response = asyncio.run(
        service.available_slots(
            DEMO_SHOP_SLUG, SlotQuery(service_id=CORTE, barber_id=JOAO, date=date(2030, 1, 13))
        )
    )

    assert response.slots == []
    assert response.message == "No availability for this date."


def test_booking_blocks_slot_for_same_barber_only() -> None:
    first = _book("10:00")
    assert first.status == "pending"

    with pytest.raises(SlotUnavailableError):
        _book("10:00", phone="11888880000")
    with pytest.raises(SlotUnavailableError):
        _book("09:30", service_id=COMBO, phone="11888880000")

    other_barber = _book("10:00", barber_id=PEDRO, phone="11888880000")
    assert other_barber.appointment_id != first.appointment_id

    stored = get_mock_store().tables.rows("appointments")
    assert {row["barber_id"] for row in stored} == {JOAO, PEDRO}
    assert all(row["service_price_at_booking"] == 45.0 for row in stored)
    assert all(row["service_duration_at_booking"] == 30 for row in stored)


def test_booking_reuses_client_by_phone() -> None:
    first = _book("09:00")
    second = _book("15:00")

    assert first.client_id == second.client_id
    assert len(get_mock_store().tables.rows("clients")) == 1


def test_booking_rejects_time_off_the_grid_and_inactive_service() -> None:
    with pytest.raises(SlotUnavailableError):
        _book("09:10")

    catalog = CatalogService(_client())
    asyncio.run(catalog.toggle(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, BARBA))
    with pytest.raises(NotFoundError):
        _book("09:00", service_id=BARBA)


def test_cancelled_appointment_frees_the_slot() -> None:
    booked = _book("10:00")
    appointments = AppointmentService(_client(), clock=SUNDAY_MORNING)
    asyncio.run(
        appointments.update_status(
            DEMO_OWNER_USER_ID,
            DEMO_SHOP_SLUG,
            booked.appointment_id,
            StatusUpdateRequest(status="cancelled"),
        )
    )

    again = _book("10:00", phone="11777770000")
    assert again.status == "pending"


def test_unknown_shop_raises_not_found() -> None:
    service = BookingService(_client(), clock=SUNDAY_MORNING)

    with pytest.raises(NotFoundError):
        asyncio.run(
            service.available_slots(
                "nope", SlotQuery(service_id=CORTE, barber_id=JOAO, date=MONDAY)
            )
        )


def test_status_transitions_are_enforced() -> None:
    booked = _book("10:00")
    service = AppointmentService(_client(), clock=SUNDAY_MORNING)

    with pytest.raises(ValidationFailedError):
        asyncio.run(
            service.update_status(
                DEMO_OWNER_USER_ID,
                DEMO_SHOP_SLUG,
                booked.appointment_id,
                StatusUpdateRequest(status="completed"),
            )
        )

    confirmed = asyncio.run(
        service.update_status(
            DEMO_OWNER_USER_ID,
            DEMO_SHOP_SLUG,
            booked.appointment_id,
            StatusUpdateRequest(status="confirmed"),
        )
    )
    assert confirmed.status == "confirmed"


def test_staff_only_sees_and_manages_own_appointments() -> None:
    mine = _book("10:00", barber_id=PEDRO)
    theirs = _book("11:00", barber_id=JOAO)
    service = AppointmentService(_client(), clock=SUNDAY_MORNING)

    listing = asyncio.run(service.list(DEMO_STAFF_USER_ID, DEMO_SHOP_SLUG))
    assert [item.id for item in listing.items] == [mine.appointment_id]
    assert listing.items[0].barber_name == "Pedro Santos"
    assert listing.items[0].client_name == "Carlos"

    with pytest.raises(PermissionDeniedError):
        asyncio.run(
            service.update_status(
                DEMO_STAFF_USER_ID,
                DEMO_SHOP_SLUG,
                theirs.appointment_id,
                StatusUpdateRequest(status="confirmed"),
            )
        )

    owner_listing = asyncio.run(service.list(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG))
    assert owner_listing.total == 2


def test_dashboard_requires_membership() -> None:
    service = AppointmentService(_client())

    with pytest.raises(PermissionDeniedError):
        asyncio.run(service.list(None, DEMO_SHOP_SLUG))
    with pytest.raises(PermissionDeniedError):
        asyncio.run(service.list("user-stranger", DEMO_SHOP_SLUG))


def _confirmed_appointment(time: str = "10:00", **kwargs) -> str:
    booked = _book(time, **kwargs)
    service = AppointmentService(_client(), clock=SUNDAY_MORNING)
    asyncio.run(
        service.update_status(
            DEMO_OWNER_USER_ID,
            DEMO_SHOP_SLUG,
            booked.appointment_id,
            StatusUpdateRequest(status="confirmed"),
        )
    )
    return booked.appointment_id


def test_payment_splits_commission_and_completes_appointment() -> None:
    appointment_id = _confirmed_appointment()
    service = AppointmentService(_client(), clock=SUNDAY_MORNING)

    payment = asyncio.run(
        service.register_payment(
            DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, appointment_id, PaymentRequest(payment_method="pix")
        )
    )

    assert payment.amount == 45.0
    assert payment.barber_commission == 27.0
    assert payment.barbershop_revenue == 18.0
    assert payment.barber_id == JOAO
    assert payment.appointment_date == MONDAY.isoformat()

    stored = get_mock_store().tables.rows("appointments")
    assert stored[0]["status"] == "completed"

    with pytest.raises(ValidationFailedError):
        asyncio.run(
            service.register_payment(
                DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, appointment_id, PaymentRequest()
            )
        )


def test_payment_requires_confirmed_appointment_and_positive_amount() -> None:
    pending = _book("09:00")
    service = AppointmentService(_client(), clock=SUNDAY_MORNING)

    with pytest.raises(ValidationFailedError):
        asyncio.run(
            service.register_payment(
                DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, pending.appointment_id, PaymentRequest()
            )
        )

    confirmed = _confirmed_appointment("11:00")
    with pytest.raises(ValidationFailedError):
        asyncio.run(
            service.register_payment(
                DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, confirmed, PaymentRequest(amount=0)
            )
        )


def test_split_commission_rounds_to_cents() -> None:
    assert split_commission(33.33, 0.6) == (20.0, 13.33)


def test_stats_and_monthly_revenue_follow_appointment_date() -> None:
    appointment_id = _confirmed_appointment()
    payments = AppointmentService(_client(), clock=SUNDAY_MORNING)
    asyncio.run(
        payments.register_payment(
            DEMO_OWNER_USER_ID,
            DEMO_SHOP_SLUG,
            appointment_id,
            PaymentRequest(amount=50.0, payment_method="card"),
        )
    )
    _book("15:00", barber_id=PEDRO)

    analytics = AnalyticsService(_client(), clock=_clock(2030, 1, 7, 18, 0))
    stats = asyncio.run(analytics.stats(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG))
    assert stats.today_appointments == 2
    assert stats.pending_appointments == 1
    assert stats.today_revenue == 50.0
    assert stats.monthly_revenue == 50.0

    report = asyncio.run(analytics.monthly_revenue(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG))
    assert report.year == 2030
    assert len(report.months) == 12
    assert report.months[0].label == "Jan"
    assert report.months[0].revenue == 50.0
    assert report.total == 50.0

    staff_report = asyncio.run(analytics.monthly_revenue(DEMO_STAFF_USER_ID, DEMO_SHOP_SLUG))
    assert staff_report.barber_id == PEDRO
    assert staff_report.total == 0.0

    with pytest.raises(PermissionDeniedError):
        asyncio.run(
            analytics.monthly_revenue(DEMO_STAFF_USER_ID, DEMO_SHOP_SLUG, barber_id=JOAO)
        )

    last_year = asyncio.run(
        analytics.monthly_revenue(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, year=2029)
    )
    assert last_year.total == 0.0


def test_catalog_validation_and_ownership() -> None:
    service = CatalogService(_client())

    with pytest.raises(ValidationFailedError):
        asyncio.run(
            service.create(
                DEMO_OWNER_USER_ID,
                DEMO_SHOP_SLUG,
                ServiceRequest(name="Pigmentação", price=-1, duration=30),
            )
        )
    with pytest.raises(ValidationFailedError):
        asyncio.run(
            service.create(
                DEMO_OWNER_USER_ID,
                DEMO_SHOP_SLUG,
                ServiceRequest(name="Pigmentação", price=40, duration=0),
            )
        )
    with pytest.raises(PermissionDeniedError):
        asyncio.run(
            service.create(
                DEMO_STAFF_USER_ID,
                DEMO_SHOP_SLUG,
                ServiceRequest(name="Pigmentação", price=40, duration=30),
            )
        )

    created = asyncio.run(
        service.create(
            DEMO_OWNER_USER_ID,
            DEMO_SHOP_SLUG,
            ServiceRequest(name="  Pigmentação ", price=40, duration=30),
        )
    )
    assert created.name == "Pigmentação"

    public = asyncio.run(service.list_public(DEMO_SHOP_SLUG))
    prices = [item.price for item in public.items]
    assert prices == sorted(prices)

    toggled = asyncio.run(service.toggle(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, created.id))
    assert toggled.is_active is False
    public = asyncio.run(service.list_public(DEMO_SHOP_SLUG))
    assert created.id not in [item.id for item in public.items]

    asyncio.run(service.delete(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, created.id))
    with pytest.raises(NotFoundError):
        asyncio.run(service.delete(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, created.id))


def test_barber_listing_and_cascade_delete() -> None:
    _book("10:00", barber_id=PEDRO)
    service = BarberService(_client())

    listing = asyncio.run(service.list(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG))
    roles = {item.id: item.role for item in listing.items}
    assert roles == {JOAO: "owner", PEDRO: "staff"}

    staff_view = asyncio.run(service.list(DEMO_STAFF_USER_ID, DEMO_SHOP_SLUG))
    assert [item.id for item in staff_view.items] == [PEDRO]

    with pytest.raises(PermissionDeniedError):
        asyncio.run(service.delete(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, JOAO))

    asyncio.run(service.delete(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, PEDRO))
    tables = get_mock_store().tables
    assert [row["id"] for row in tables.rows("barbers")] == [JOAO]
    assert tables.rows("appointments") == []
    assert all(row["barber_id"] != PEDRO for row in tables.rows("barbershop_members"))


def test_barber_create_requires_name() -> None:
    service = BarberService(_client())

    with pytest.raises(ValidationFailedError):
        asyncio.run(service.create(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, BarberRequest(name="  ")))

    created = asyncio.run(
        service.create(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, BarberRequest(name="Rafael"))
    )
    public = asyncio.run(service.list_public(DEMO_SHOP_SLUG))
    assert created.id in [item.id for item in public.items]


def test_weekday_index_starts_on_sunday() -> None:
    assert day_of_week_for(date(2030, 1, 6)) == 0
    assert day_of_week_for(MONDAY) == 1
    assert day_of_week_for(date(2030, 1, 12)) == 6


def test_saving_week_merges_days_and_drives_slots() -> None:
    service = AvailabilityService(_client())
    sunday = DayAvailability(
        day_of_week=0,
        start_time="10:00",
        end_time="12:00",
        is_active=True,
        breaks=[{"start": "", "end": ""}],
    )

    with pytest.raises(PermissionDeniedError):
        asyncio.run(
            service.save_week(DEMO_STAFF_USER_ID, DEMO_SHOP_SLUG, WeeklyAvailability(days=[sunday]))
        )

    saved = asyncio.run(
        service.save_week(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, WeeklyAvailability(days=[sunday]))
    )
    assert len(saved.days) == 7
    assert saved.days[0].is_active is True
    assert saved.days[0].breaks == []
    assert saved.days[1].breaks[0].start == "12:00"
    assert len(get_mock_store().tables.rows("availability")) == 7

    booking = BookingService(_client(), clock=SUNDAY_MORNING)
    response = asyncio.run(
        booking.available_slots(
            DEMO_SHOP_SLUG, SlotQuery(service_id=CORTE, barber_id=JOAO, date=date(2030, 1, 13))
        )
    )
    assert response.slots == ["10:00", "10:30", "11:00", "11:30"]


def test_day_availability_rejects_breaks_outside_window() -> None:
    with pytest.raises(ValueError):
        DayAvailability(
            day_of_week=1,
            start_time="09:00",
            end_time="18:00",
            breaks=[{"start": "17:30", "end": "18:30"}],
        )
    with pytest.raises(ValueError):
        DayAvailability(day_of_week=1, start_time="18:00", end_time="09:00")


def _new_shop(name: str = "Barbearia do Zé", **kwargs):
    service = BarbershopService(_client())
    return asyncio.run(
        service.create(DEMO_MASTER_USER_ID, BarbershopCreateRequest(name=name, **kwargs))
    )


def test_tenant_creation_slugifies_and_rejects_duplicates() -> None:
    created = _new_shop(is_active=True)
    assert created.slug == "barbearia-do-ze"

    with pytest.raises(ValidationFailedError):
        _new_shop()

    with pytest.raises(PermissionDeniedError):
        asyncio.run(
            BarbershopService(_client()).create(
                DEMO_OWNER_USER_ID, BarbershopCreateRequest(name="Outra")
            )
        )

    assert slugify("  Ação & Cia!! ") == "acao-cia"
    assert slugify("***") == "barbearia"


def test_new_tenant_without_hours_shows_defaults_but_books_nothing() -> None:
    shop = _new_shop(is_active=True)
    admin = BarbershopService(_client())
    asyncio.run(
        admin.add_member(
            DEMO_MASTER_USER_ID,
            MemberCreateRequest(user_id="user-ze", barbershop_id=shop.id, role="owner"),
        )
    )

    week = asyncio.run(AvailabilityService(_client()).get_week("user-ze", shop.slug))
    assert [day.is_active for day in week.days] == [False] + [True] * 6

    barber = asyncio.run(
        BarberService(_client()).create("user-ze", shop.slug, BarberRequest(name="Zé"))
    )
    service = asyncio.run(
        CatalogService(_client()).create(
            "user-ze", shop.slug, ServiceRequest(name="Corte", price=35, duration=30)
        )
    )
    response = asyncio.run(
        BookingService(_client(), clock=SUNDAY_MORNING).available_slots(
            shop.slug, SlotQuery(service_id=service.id, barber_id=barber.id, date=MONDAY)
        )
    )
    assert response.slots == []


def test_staff_member_must_reference_a_barber() -> None:
    admin = BarbershopService(_client())

    with pytest.raises(ValidationFailedError):
        asyncio.run(
            admin.add_member(
                DEMO_MASTER_USER_ID,
                MemberCreateRequest(user_id="user-new", barbershop_id=DEMO_SHOP_ID, role="staff"),
            )
        )
    with pytest.raises(NotFoundError):
        asyncio.run(
            admin.add_member(
                DEMO_MASTER_USER_ID,
                MemberCreateRequest(
                    user_id="user-new",
                    barbershop_id=DEMO_SHOP_ID,
                    role="staff",
                    barber_id="barber-missing",
                ),
            )
        )


def test_inactive_tenant_is_hidden_and_locked() -> None:
    admin = BarbershopService(_client())
    asyncio.run(
        admin.update(
            DEMO_MASTER_USER_ID,
            DEMO_SHOP_ID,
            BarbershopUpdateRequest(name="Barbearia Central", slug=DEMO_SHOP_SLUG, is_active=False),
        )
    )

    with pytest.raises(NotFoundError):
        asyncio.run(admin.get_public_profile(DEMO_SHOP_SLUG))
    with pytest.raises(PermissionDeniedError):
        asyncio.run(AppointmentService(_client()).list(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG))


def test_public_profile_resolves_storage_urls() -> None:
    profile = asyncio.run(BarbershopService(_client()).get_public_profile(DEMO_SHOP_SLUG))

    version = int(datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc).timestamp() * 1000)
    assert profile.logo_url == (
        "https://demo.supabase.co/storage/v1/object/public/barbershop-assets/"
        f"barbearia-central/logo.png?v={version}"
    )
    assert profile.hero_background_url == ""
    assert cache_buster("https://cdn.example/a.png?x=1", "2026-01-10T12:00:00Z").endswith(
        f"&v={version}"
    )


def test_profile_update_and_image_upload_ticket() -> None:
    service = ProfileService(_client())

    with pytest.raises(ValidationFailedError):
        asyncio.run(
            service.request_image_upload(
                DEMO_OWNER_USER_ID,
                DEMO_SHOP_SLUG,
                "logo",
                ImageUploadRequest(filename="logo.pdf", content_type="application/pdf"),
            )
        )

    ticket = asyncio.run(
        service.request_image_upload(
            DEMO_OWNER_USER_ID,
            DEMO_SHOP_SLUG,
            "hero",
            ImageUploadRequest(filename="Fachada.JPG", content_type="image/jpeg"),
        )
    )
    assert ticket.path.startswith(f"{DEMO_SHOP_ID}/hero-")
    assert ticket.path.endswith(".jpg")
    assert ticket.public_url.endswith(ticket.path)

    with pytest.raises(PermissionDeniedError):
        asyncio.run(
            service.request_image_upload(
                DEMO_STAFF_USER_ID,
                DEMO_SHOP_SLUG,
                "logo",
                ImageUploadRequest(filename="logo.png", content_type="image/png"),
            )
        )


def _store_invalid_wednesday() -> None:
    asyncio.run(
        get_mock_store().tables.update(
            "availability",
            {"end_time": "12:00", "breaks": [{"start": "12:00", "end": "13:00"}]},
            filters=[("barbershop_id", "eq", DEMO_SHOP_ID), ("day_of_week", "eq", 3)],
        )
    )


def test_invalid_stored_day_falls_back_and_can_be_repaired() -> None:
    _store_invalid_wednesday()
    service = AvailabilityService(_client())

    week = asyncio.run(service.get_week(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG))
    assert week.days[3].end_time == "19:00"
    assert week.days[3].breaks == []
    assert week.days[1].breaks[0].start == "12:00"

    booking = BookingService(_client(), clock=SUNDAY_MORNING)
    wednesday = SlotQuery(service_id=CORTE, barber_id=JOAO, date=date(2030, 1, 9))
    response = asyncio.run(booking.available_slots(DEMO_SHOP_SLUG, wednesday))
    assert response.slots == []

    repaired = DayAvailability(day_of_week=3, start_time="09:00", end_time="19:00")
    asyncio.run(
        service.save_week(DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, WeeklyAvailability(days=[repaired]))
    )

    response = asyncio.run(booking.available_slots(DEMO_SHOP_SLUG, wednesday))
    assert response.slots[0] == "09:00"
    assert "12:00" in response.slots


class _FailingStatusTables:
    """Delegates to the mock tables but refuses appointment updates."""

    def __init__(self, tables) -> None:
        self._tables = tables

    def __getattr__(self, name):
        return getattr(self._tables, name)

    async def update(self, table, values, *, filters):
        if table == "appointments":
            raise DownstreamServiceError("Data store returned an error response", status_code=503)
        return await self._tables.update(table, values, filters=filters)


def test_payment_is_removed_when_appointment_cannot_be_completed() -> None:
    appointment_id = _confirmed_appointment()
    tables = get_mock_store().tables
    service = AppointmentService(
        _client(), tables=_FailingStatusTables(tables), clock=SUNDAY_MORNING
    )

    with pytest.raises(DownstreamServiceError):
        asyncio.run(
            service.register_payment(
                DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, appointment_id, PaymentRequest()
            )
        )

    assert tables.rows("payments") == []
    assert tables.rows("appointments")[0]["status"] == "confirmed"


def test_deleting_tenant_removes_owned_rows() -> None:
    appointment_id = _confirmed_appointment()
    asyncio.run(
        AppointmentService(_client(), clock=SUNDAY_MORNING).register_payment(
            DEMO_OWNER_USER_ID, DEMO_SHOP_SLUG, appointment_id, PaymentRequest()
        )
    )
    other = _new_shop(is_active=True)
    admin = BarbershopService(_client())

    asyncio.run(admin.delete(DEMO_MASTER_USER_ID, DEMO_SHOP_ID))

    tables = get_mock_store().tables
    for table in (
        "payments",
        "appointments",
        "clients",
        "availability",
        "services",
        "barbershop_members",
        "barbers",
    ):
        assert all(row.get("barbershop_id") != DEMO_SHOP_ID for row in tables.rows(table))
    assert [row["id"] for row in tables.rows("barbershop_settings")] == [other.id]

    with pytest.raises(NotFoundError):
        asyncio.run(admin.delete(DEMO_MASTER_USER_ID, DEMO_SHOP_ID))
