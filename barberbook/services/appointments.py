from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from barberbook.schemas.appointment import (
    AppointmentListResponse,
    AppointmentRecord,
    StatusUpdateRequest,
)
from barberbook.schemas.barbershop import Membership
from barberbook.schemas.billing import PaymentListResponse, PaymentRecord, PaymentRequest
from barberbook.services.base import TenantService, translate_errors
from barberbook.services.exceptions import (
    PermissionDeniedError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

STATUS_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"completed", "cancelled"},
}


def split_commission(amount: float, rate: float) -> tuple[float, float]:
    """Return ``(barber_commission, barbershop_revenue)`` rounded to cents."""
    return round(amount * rate, 2), round(amount * (1.0 - rate), 2)


def member_scope(shop_id: str, member: Membership) -> List[tuple]:
    filters = [("barbershop_id", "eq", shop_id)]
    if member.is_staff:
        filters.append(("barber_id", "eq", member.barber_id))
    return filters


class AppointmentService(TenantService):
    """Dashboard view of appointments and the payments registered against them."""

    async def list(self, user_id: Optional[str], slug: str) -> AppointmentListResponse:
        shop, member = await self._member_context(user_id, slug)
        logger.info("Listing appointments for barbershop %s", shop["id"])
        rows = await self._tables.select(
            "appointments",
            filters=member_scope(shop["id"], member),
            order=["appointment_date.asc", "appointment_time.asc"],
        )
        names = await self._display_names(shop["id"])
        items = [
            AppointmentRecord.model_validate(
                {
                    **row,
                    "client_name": names["clients"].get(row.get("client_id")),
                    "barber_name": names["barbers"].get(row.get("barber_id")),
                    "service_name": names["services"].get(row.get("service_id")),
                }
            )
            for row in rows
        ]
        return AppointmentListResponse(total=len(items), items=items)

    async def update_status(
        self,
        user_id: Optional[str],
        slug: str,
        appointment_id: str,
        request: StatusUpdateRequest,
    ) -> AppointmentRecord:
        shop, member = await self._member_context(user_id, slug)
        appointment = await self._visible_appointment(shop["id"], member, appointment_id)
        self._check_transition(appointment["status"], request.status)

        logger.info(
            "Appointment %s: %s -> %s", appointment_id, appointment["status"], request.status
        )
        with translate_errors("update appointment status"):
            rows = await self._tables.update(
                "appointments",
                {"status": request.status},
                filters=[("id", "eq", appointment_id), ("barbershop_id", "eq", shop["id"])],
            )
        return AppointmentRecord.model_validate(rows[0])

    async def register_payment(
        self,
        user_id: Optional[str],
        slug: str,
        appointment_id: str,
        request: PaymentRequest,
    ) -> PaymentRecord:
        """Record a payment for a confirmed appointment and mark it completed."""
        shop, member = await self._member_context(user_id, slug)
        appointment = await self._visible_appointment(shop["id"], member, appointment_id)
        self._check_transition(appointment["status"], "completed")

        amount = request.amount
        if amount is None:
            amount = float(appointment.get("service_price_at_booking") or 0)
        if not amount or amount <= 0:
            raise ValidationFailedError(f"Invalid payment amount: {amount}")

        commission, revenue = split_commission(amount, self._settings.barber_commission_rate)
        logger.info(
            "Registering %s payment of %.2f for appointment %s",
            request.payment_method,
            amount,
            appointment_id,
        )
        with translate_errors("register payment"):
            rows = await self._tables.insert(
                "payments",
                {
                    "barbershop_id": shop["id"],
                    "appointment_id": appointment_id,
                    "barber_id": appointment["barber_id"],
                    "amount": round(float(amount), 2),
                    "payment_method": request.payment_method,
                    "payment_date": self._now().isoformat(),
                    "barber_commission": commission,
                    "barbershop_revenue": revenue,
                    "notes": (request.notes or "").strip() or None,
                },
            )
            try:
                await self._tables.update(
                    "appointments",
                    {"status": "completed"},
                    filters=[("id", "eq", appointment_id), ("barbershop_id", "eq", shop["id"])],
                )
            except Exception:
                logger.warning(
                    "Completing appointment %s failed, removing payment %s",
                    appointment_id,
                    rows[0]["id"],
                )
                await self._tables.delete("payments", filters=[("id", "eq", rows[0]["id"])])
                raise
        return PaymentRecord.model_validate(
            {**rows[0], "appointment_date": appointment.get("appointment_date")}
        )

    async def list_payments(self, user_id: Optional[str], slug: str) -> PaymentListResponse:
        shop, member = await self._member_context(user_id, slug)
        items = await self.payments_with_dates(shop["id"], member)
        return PaymentListResponse(total=len(items), items=items)

    async def payments_with_dates(
        self, shop_id: str, member: Membership
    ) -> List[PaymentRecord]:
        """Payments visible to the member, each tagged with its appointment's date."""
        rows = await self._tables.select(
            "payments", filters=member_scope(shop_id, member), order=["payment_date.desc"]
        )
        appointment_ids = sorted({row["appointment_id"] for row in rows if row.get("appointment_id")})
        dates: Dict[str, Any] = {}
        if appointment_ids:
            appointments = await self._tables.select(
                "appointments",
                filters=[("barbershop_id", "eq", shop_id), ("id", "in", appointment_ids)],
            )
            dates = {row["id"]: row.get("appointment_date") for row in appointments}
        return [
            PaymentRecord.model_validate(
                {**row, "appointment_date": dates.get(row.get("appointment_id"))}
            )
            for row in rows
        ]

    async def _visible_appointment(
        self, shop_id: str, member: Membership, appointment_id: str
    ) -> Dict[str, Any]:
        appointment = await self._get_row("appointments", appointment_id, shop_id)
        if member.is_staff and appointment.get("barber_id") != member.barber_id:
            raise PermissionDeniedError("Staff can only manage their own appointments")
        return appointment

    @staticmethod
    def _check_transition(current: str, target: str) -> None:
        if target not in STATUS_TRANSITIONS.get(current, set()):
            raise ValidationFailedError(f"Cannot change appointment from {current} to {target}")

    async def _display_names(self, shop_id: str) -> Dict[str, Dict[str, str]]:
        scoped = [("barbershop_id", "eq", shop_id)]
        names: Dict[str, Dict[str, str]] = {}
        for table in ("clients", "barbers", "services"):
            rows = await self._tables.select(table, filters=scoped)
            names[table] = {row["id"]: row.get("name") for row in rows}
        return names
