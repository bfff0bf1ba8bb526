from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List

from pydantic import ValidationError

from barberbook.clients.supabase import SupabaseClient, TableGateway
from barberbook.config import Settings
from barberbook.scheduling import (
    BookedSpan,
    InvalidAvailabilityError,
    format_clock,
    parse_clock,
    resolve_available_slots,
)
from barberbook.schemas.appointment import ACTIVE_STATUSES, BookingRequest, BookingResponse
from barberbook.schemas.availability import SlotListResponse, SlotQuery
from barberbook.services.availability import AvailabilityService, day_of_week_for
from barberbook.services.base import Clock, TenantService, translate_errors
from barberbook.services.exceptions import NotFoundError, SlotUnavailableError

logger = logging.getLogger(__name__)

NO_AVAILABILITY_MESSAGE = "No availability for this date."
UNAVAILABLE_MESSAGE = "Unable to compute availability."


class BookingService(TenantService):
    """Public booking flow: list free start times and create appointments."""

    def __init__(
        self,
        client: SupabaseClient,
        *,
        tables: TableGateway | None = None,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(client, tables=tables, settings=settings, clock=clock)
        self._availability = AvailabilityService(
            client, tables=self._tables, settings=self._settings, clock=clock
        )

    async def available_slots(self, slug: str, query: SlotQuery) -> SlotListResponse:
        logger.info(
            "Resolving slots for %s (service=%s, barber=%s, date=%s)",
            slug,
            query.service_id,
            query.barber_id,
            query.date,
        )
        shop = await self._get_shop(slug)
        service = await self._active_service(shop["id"], query.service_id)
        await self._get_row("barbers", query.barber_id, shop["id"])

        try:
            slots = await self._compute_slots(shop["id"], service, query.barber_id, query.date)
        except (InvalidAvailabilityError, ValidationError) as exc:
            logger.warning("Unable to compute availability for %s: %s", slug, exc)
            return SlotListResponse(
                date=query.date,
                service_id=query.service_id,
                barber_id=query.barber_id,
                slots=[],
                message=UNAVAILABLE_MESSAGE,
            )

        return SlotListResponse(
            date=query.date,
            service_id=query.service_id,
            barber_id=query.barber_id,
            slots=[format_clock(slot) for slot in slots],
            message=None if slots else NO_AVAILABILITY_MESSAGE,
        )

    async def book(self, slug: str, request: BookingRequest) -> BookingResponse:
        logger.info("Booking %s on %s at %s for %s", slug, request.date, request.time, request.client_name)
        shop = await self._get_shop(slug)
        shop_id = shop["id"]
        service = await self._active_service(shop_id, request.service_id)
        await self._get_row("barbers", request.barber_id, shop_id)

        # The slot list may be stale by now, so resolve again against current bookings.
        try:
            slots = await self._compute_slots(shop_id, service, request.barber_id, request.date)
        except (InvalidAvailabilityError, ValidationError) as exc:
            logger.warning("Unable to compute availability for %s: %s", slug, exc)
            raise SlotUnavailableError(UNAVAILABLE_MESSAGE, cause=exc) from exc

        if parse_clock(request.time) not in slots:
            raise SlotUnavailableError(
                f"{request.time} on {request.date.isoformat()} is no longer available"
            )

        with translate_errors("book appointment"):
            client_id = await self._find_or_create_client(shop_id, request)
            rows = await self._tables.insert(
                "appointments",
                {
                    "barbershop_id": shop_id,
                    "client_id": client_id,
                    "barber_id": request.barber_id,
                    "service_id": service["id"],
                    "appointment_date": request.date.isoformat(),
                    "appointment_time": request.time,
                    "status": "pending",
                    "notes": (request.notes or "").strip() or None,
                    "service_price_at_booking": float(service["price"]),
                    "service_duration_at_booking": int(service["duration"]),
                },
            )

        appointment = rows[0]
        return BookingResponse(
            status=appointment["status"],
            appointment_id=appointment["id"],
            client_id=client_id,
            message="Appointment requested successfully.",
        )

    async def _active_service(self, shop_id: str, service_id: str) -> Dict[str, Any]:
        service = await self._get_row("services", service_id, shop_id)
        if not service.get("is_active", True):
            raise NotFoundError(f"Service '{service_id}' is not available for booking")
        return service

    async def _compute_slots(
        self, shop_id: str, service: Dict[str, Any], barber_id: str, requested: date
    ) -> List[int]:
        day = await self._availability.load_day(shop_id, day_of_week_for(requested))
        rows = await self._tables.select(
            "appointments",
            filters=[
                ("barbershop_id", "eq", shop_id),
                ("barber_id", "eq", barber_id),
                ("appointment_date", "eq", requested.isoformat()),
                ("status", "in", list(ACTIVE_STATUSES)),
            ],
        )
        booked = [
            BookedSpan(
                start=parse_clock(row["appointment_time"]),
                duration_minutes=self._booked_duration(row.get("service_duration_at_booking")),
            )
            for row in rows
        ]
        return resolve_available_slots(
            int(service["duration"]),
            day.to_window() if day is not None else None,
            booked,
            requested,
            self._now(),
            slot_granularity_minutes=self._settings.slot_granularity_minutes,
            cutoff_minutes=self._settings.booking_cutoff_minutes,
        )

    def _booked_duration(self, value: Any) -> int:
        try:
            duration = int(value)
        except (TypeError, ValueError):
            duration = 0
        if duration <= 0:
            return self._settings.fallback_appointment_minutes
        return duration

    async def _find_or_create_client(self, shop_id: str, request: BookingRequest) -> str:
        phone = request.client_phone.strip()
        existing = await self._tables.select(
            "clients",
            filters=[("barbershop_id", "eq", shop_id), ("phone", "eq", phone)],
            limit=1,
        )
        if existing:
            return existing[0]["id"]

        rows = await self._tables.insert(
            "clients",
            {
                "barbershop_id": shop_id,
                "name": request.client_name.strip(),
                "phone": phone,
                "email": (request.client_email or "").strip() or None,
            },
        )
        logger.info("Registered new client %s for barbershop %s", rows[0]["id"], shop_id)
        return rows[0]["id"]
