from __future__ import annotations

import logging
import math
from typing import Optional

from barberbook.schemas.catalog import ServiceItem, ServiceListResponse, ServiceRequest
from barberbook.services.base import TenantService, translate_errors
from barberbook.services.exceptions import NotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)


class CatalogService(TenantService):
    """Services (haircut, beard, ...) offered by a barbershop."""

    async def list_public(self, slug: str) -> ServiceListResponse:
        shop = await self._get_shop(slug)
        rows = await self._tables.select(
            "services",
            filters=[("barbershop_id", "eq", shop["id"]), ("is_active", "eq", True)],
            order=["price.asc"],
        )
        items = [ServiceItem.model_validate(row) for row in rows]
        return ServiceListResponse(total=len(items), items=items)

    async def list(self, user_id: Optional[str], slug: str) -> ServiceListResponse:
        shop, _ = await self._member_context(user_id, slug)
        rows = await self._tables.select(
            "services", filters=[("barbershop_id", "eq", shop["id"])], order=["name.asc"]
        )
        items = [ServiceItem.model_validate(row) for row in rows]
        return ServiceListResponse(total=len(items), items=items)

    async def create(
        self, user_id: Optional[str], slug: str, request: ServiceRequest
    ) -> ServiceItem:
        shop, member = await self._member_context(user_id, slug)
        self._require_owner(member, "create services")
        payload = self._validated_payload(request)
        payload["barbershop_id"] = shop["id"]
        payload["is_active"] = request.is_active
        logger.info("Creating service '%s' for barbershop %s", payload["name"], shop["id"])
        with translate_errors("create service"):
            rows = await self._tables.insert("services", payload)
        return ServiceItem.model_validate(rows[0])

    async def update(
        self, user_id: Optional[str], slug: str, service_id: str, request: ServiceRequest
    ) -> ServiceItem:
        shop, member = await self._member_context(user_id, slug)
        self._require_owner(member, "edit services")
        payload = self._validated_payload(request)
        with translate_errors("update service"):
            rows = await self._tables.update(
                "services",
                payload,
                filters=[("id", "eq", service_id), ("barbershop_id", "eq", shop["id"])],
            )
        if not rows:
            raise NotFoundError(f"Service '{service_id}' not found")
        return ServiceItem.model_validate(rows[0])

    async def toggle(self, user_id: Optional[str], slug: str, service_id: str) -> ServiceItem:
        shop, member = await self._member_context(user_id, slug)
        self._require_owner(member, "change services")
        current = await self._get_row("services", service_id, shop["id"])
        with translate_errors("toggle service"):
            rows = await self._tables.update(
                "services",
                {"is_active": not current.get("is_active", True)},
                filters=[("id", "eq", service_id), ("barbershop_id", "eq", shop["id"])],
            )
        return ServiceItem.model_validate(rows[0])

    async def delete(self, user_id: Optional[str], slug: str, service_id: str) -> None:
        shop, member = await self._member_context(user_id, slug)
        self._require_owner(member, "delete services")
        with translate_errors("delete service"):
            rows = await self._tables.delete(
                "services",
                filters=[("id", "eq", service_id), ("barbershop_id", "eq", shop["id"])],
            )
        if not rows:
            raise NotFoundError(f"Service '{service_id}' not found")

    @staticmethod
    def _validated_payload(request: ServiceRequest) -> dict:
        name = request.name.strip()
        if not name:
            raise ValidationFailedError("Service name is required")
        if not math.isfinite(request.price) or request.price < 0:
            raise ValidationFailedError(f"Invalid price: {request.price}")
        if request.duration <= 0:
            raise ValidationFailedError(f"Invalid duration: {request.duration}")
        return {
            "name": name,
            "price": float(request.price),
            "duration": int(request.duration),
            "description": (request.description or "").strip() or None,
        }
