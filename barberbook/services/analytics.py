from __future__ import annotations

import logging
from typing import List, Optional

from barberbook.clients.supabase import SupabaseClient, TableGateway
from barberbook.config import Settings
from barberbook.schemas.analytics import (
    MONTH_LABELS,
    DashboardStats,
    MonthlyRevenue,
    MonthlyRevenueResponse,
)
from barberbook.schemas.barbershop import Membership
from barberbook.schemas.billing import PaymentRecord
from barberbook.services.appointments import AppointmentService, member_scope
from barberbook.services.base import Clock, TenantService
from barberbook.services.exceptions import PermissionDeniedError

logger = logging.getLogger(__name__)


def _revenue_on(payments: List[PaymentRecord], prefix: str) -> float:
    total = sum(
        payment.amount
        for payment in payments
        if (payment.appointment_date or "").startswith(prefix)
    )
    return round(total, 2)


class AnalyticsService(TenantService):
    """Dashboard counters and revenue reports.

    Revenue is attributed to the date of the appointment a payment settles,
    not to the moment the payment was registered.
    """

    def __init__(
        self,
        client: SupabaseClient,
        *,
        tables: TableGateway | None = None,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(client, tables=tables, settings=settings, clock=clock)
        self._appointments = AppointmentService(
            client, tables=self._tables, settings=self._settings, clock=clock
        )

    async def stats(self, user_id: Optional[str], slug: str) -> DashboardStats:
        shop, member = await self._member_context(user_id, slug)
        now = self._now()
        today = now.date().isoformat()
        logger.debug("Computing dashboard stats for %s on %s", shop["id"], today)

        appointments = await self._tables.select(
            "appointments", filters=member_scope(shop["id"], member)
        )
        payments = await self._appointments.payments_with_dates(shop["id"], member)

        return DashboardStats(
            today_appointments=sum(
                1 for row in appointments if str(row.get("appointment_date")) == today
            ),
            pending_appointments=sum(1 for row in appointments if row.get("status") == "pending"),
            today_revenue=_revenue_on(payments, today),
            monthly_revenue=_revenue_on(payments, today[:7]),
            report_generated_at=now.isoformat(),
        )

    async def monthly_revenue(
        self,
        user_id: Optional[str],
        slug: str,
        *,
        year: Optional[int] = None,
        barber_id: Optional[str] = None,
    ) -> MonthlyRevenueResponse:
        """Twelve monthly revenue buckets for ``year``, optionally for one barber."""
        shop, member = await self._member_context(user_id, slug)
        barber_id = self._resolve_barber(member, barber_id)
        year = year or self._now().year

        payments = await self._appointments.payments_with_dates(shop["id"], member)
        totals = [0.0] * 12
        for payment in payments:
            if barber_id and payment.barber_id != barber_id:
                continue
            if not (payment.appointment_date or "").startswith(f"{year:04d}-"):
                continue
            month = int(payment.appointment_date[5:7])
            totals[month - 1] += payment.amount

        months = [
            MonthlyRevenue(month=index + 1, label=MONTH_LABELS[index], revenue=round(value, 2))
            for index, value in enumerate(totals)
        ]
        logger.info("Monthly revenue for %s in %s (barber=%s)", shop["id"], year, barber_id)
        return MonthlyRevenueResponse(
            year=year,
            barber_id=barber_id,
            months=months,
            total=round(sum(totals), 2),
        )

    @staticmethod
    def _resolve_barber(member: Membership, barber_id: Optional[str]) -> Optional[str]:
        if not member.is_staff:
            return barber_id
        if barber_id and barber_id != member.barber_id:
            raise PermissionDeniedError("Staff can only view their own revenue")
        return member.barber_id
