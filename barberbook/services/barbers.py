from __future__ import annotations

import logging
from typing import Optional

from barberbook.schemas.catalog import Barber, BarberListResponse, BarberRequest
from barberbook.services.base import TenantService, translate_errors
from barberbook.services.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)


class BarberService(TenantService):
    async def list_public(self, slug: str) -> BarberListResponse:
        shop = await self._get_shop(slug)
        rows = await self._tables.select(
            "barbers", filters=[("barbershop_id", "eq", shop["id"])], order=["name.asc"]
        )
        items = [Barber.model_validate(row) for row in rows]
        return BarberListResponse(total=len(items), items=items)

    async def list(self, user_id: Optional[str], slug: str) -> BarberListResponse:
        """Barbers of the shop with their member role; staff only see themselves."""
        shop, member = await self._member_context(user_id, slug)
        filters = [("barbershop_id", "eq", shop["id"])]
        if member.is_staff:
            filters.append(("id", "eq", member.barber_id))
        rows = await self._tables.select("barbers", filters=filters, order=["name.asc"])

        members = await self._tables.select(
            "barbershop_members", filters=[("barbershop_id", "eq", shop["id"])]
        )
        roles = {row["barber_id"]: row.get("role") for row in members if row.get("barber_id")}
        items = [Barber.model_validate({**row, "role": roles.get(row["id"])}) for row in rows]
        return BarberListResponse(total=len(items), items=items)

    async def create(
        self, user_id: Optional[str], slug: str, request: BarberRequest
    ) -> Barber:
        shop, member = await self._member_context(user_id, slug)
        self._require_owner(member, "create barbers")
        payload = self._payload(request)
        payload["barbershop_id"] = shop["id"]
        logger.info("Creating barber '%s' for barbershop %s", payload["name"], shop["id"])
        with translate_errors("create barber"):
            rows = await self._tables.insert("barbers", payload)
        return Barber.model_validate(rows[0])

    async def update(
        self, user_id: Optional[str], slug: str, barber_id: str, request: BarberRequest
    ) -> Barber:
        shop, member = await self._member_context(user_id, slug)
        self._require_owner(member, "edit barbers")
        with translate_errors("update barber"):
            rows = await self._tables.update(
                "barbers",
                self._payload(request),
                filters=[("id", "eq", barber_id), ("barbershop_id", "eq", shop["id"])],
            )
        if not rows:
            raise NotFoundError(f"Barber '{barber_id}' not found")
        return Barber.model_validate(rows[0])

    async def delete(self, user_id: Optional[str], slug: str, barber_id: str) -> None:
        """Remove a staff barber together with their payments, appointments and membership."""
        shop, member = await self._member_context(user_id, slug)
        self._require_owner(member, "delete barbers")
        shop_id = shop["id"]

        await self._get_row("barbers", barber_id, shop_id)
        targets = await self._tables.select(
            "barbershop_members",
            filters=[("barbershop_id", "eq", shop_id), ("barber_id", "eq", barber_id)],
            limit=1,
        )
        if not targets:
            raise NotFoundError("Barber has no membership in this barbershop")
        if targets[0].get("role") != "staff":
            raise PermissionDeniedError("Only the master admin can remove an owner")

        scoped = [("barbershop_id", "eq", shop_id), ("barber_id", "eq", barber_id)]
        logger.info("Deleting barber %s and related records from %s", barber_id, shop_id)
        with translate_errors("delete barber"):
            payments = await self._tables.delete("payments", filters=scoped)
            appointments = await self._tables.delete("appointments", filters=scoped)
            await self._tables.delete("barbershop_members", filters=scoped)
            await self._tables.delete(
                "barbers", filters=[("id", "eq", barber_id), ("barbershop_id", "eq", shop_id)]
            )
        logger.info(
            "Removed barber %s (%d payments, %d appointments)",
            barber_id,
            len(payments),
            len(appointments),
        )

    @staticmethod
    def _payload(request: BarberRequest) -> dict:
        name = request.name.strip()
        if not name:
            raise ValidationFailedError("Barber name is required")
        return {
            "name": name,
            "email": (request.email or "").strip() or None,
            "phone": (request.phone or "").strip() or None,
            "specialty": (request.specialty or "").strip() or None,
        }
