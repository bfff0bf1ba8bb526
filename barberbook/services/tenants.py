from __future__ import annotations

import logging
import re
import unicodedata
from datetime import datetime, timezone
from typing import Optional

from barberbook.schemas.barbershop import (
    BarbershopCreateRequest,
    BarbershopListResponse,
    BarbershopSummary,
    BarbershopUpdateRequest,
    MemberCreateRequest,
    Membership,
    PublicShopResponse,
)
from barberbook.services.base import TenantService, translate_errors
from barberbook.services.branding import cache_buster, public_url_from_path
from barberbook.services.exceptions import (
    DownstreamServiceError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

DEFAULT_SLUG = "barbearia"
DEFAULT_SHOP_NAME = "Barbearia"
DEFAULT_SHOP_DESCRIPTION = "Agende seu horário online"

# Tenant-owned tables, children before the rows they reference.
TENANT_TABLES = (
    "payments",
    "appointments",
    "clients",
    "availability",
    "services",
    "barbershop_members",
    "barbers",
)


def slugify(value: str) -> str:
    """Accent-free, lowercase, dash separated slug."""
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    slug = re.sub(r"[^a-z0-9]+", "-", stripped.lower()).strip("-")
    return slug or DEFAULT_SLUG


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class BarbershopService(TenantService):
    """Tenant provisioning for the master admin and public shop lookups."""

    async def require_master_admin(self, user_id: Optional[str]) -> None:
        if not user_id:
            raise PermissionDeniedError("Authentication required")
        rows = await self._tables.select(
            "master_admins", filters=[("user_id", "eq", user_id)], limit=1
        )
        if not rows:
            raise PermissionDeniedError("Master admin access required")

    async def list(self, user_id: Optional[str]) -> BarbershopListResponse:
        await self.require_master_admin(user_id)
        rows = await self._tables.select("barbershop_settings", order=["name.asc"])
        items = [BarbershopSummary.model_validate(row) for row in rows]
        return BarbershopListResponse(total=len(items), items=items)

    async def create(
        self, user_id: Optional[str], request: BarbershopCreateRequest
    ) -> BarbershopSummary:
        await self.require_master_admin(user_id)
        name = request.name.strip()
        if not name:
            raise ValidationFailedError("Name is required")

        slug = slugify(request.slug.strip()) if request.slug and request.slug.strip() else slugify(name)
        logger.info("Creating barbershop '%s' with slug '%s'", name, slug)
        payload = {
            "name": name,
            "slug": slug,
            "description": (request.description or "").strip() or None,
            "is_active": request.is_active,
            "updated_at": _utc_now_iso(),
        }
        with translate_errors("create barbershop"):
            try:
                rows = await self._tables.insert("barbershop_settings", payload)
            except DownstreamServiceError as exc:
                if exc.status_code == 409:
                    raise ValidationFailedError(f"Slug '{slug}' is already in use", cause=exc) from exc
                raise
        return BarbershopSummary.model_validate(rows[0])

    async def update(
        self, user_id: Optional[str], shop_id: str, request: BarbershopUpdateRequest
    ) -> BarbershopSummary:
        await self.require_master_admin(user_id)
        name = request.name.strip()
        slug = (request.slug or "").strip()
        if not name or not slug:
            raise ValidationFailedError("Name and slug are required")

        payload = {
            "name": name,
            "slug": slugify(slug),
            "description": (request.description or "").strip() or None,
            "is_active": request.is_active,
            "updated_at": _utc_now_iso(),
        }
        logger.info("Updating barbershop %s", shop_id)
        with translate_errors("update barbershop"):
            try:
                rows = await self._tables.update(
                    "barbershop_settings", payload, filters=[("id", "eq", shop_id)]
                )
            except DownstreamServiceError as exc:
                if exc.status_code == 409:
                    raise ValidationFailedError(f"Slug '{payload['slug']}' is already in use", cause=exc) from exc
                raise
        if not rows:
            raise NotFoundError(f"Barbershop '{shop_id}' not found")
        return BarbershopSummary.model_validate(rows[0])

    async def delete(self, user_id: Optional[str], shop_id: str) -> None:
        """Remove a barbershop and every row it owns."""
        await self.require_master_admin(user_id)
        shops = await self._tables.select(
            "barbershop_settings", filters=[("id", "eq", shop_id)], limit=1
        )
        if not shops:
            raise NotFoundError(f"Barbershop '{shop_id}' not found")

        logger.info("Deleting barbershop %s", shop_id)
        scoped = [("barbershop_id", "eq", shop_id)]
        with translate_errors("delete barbershop"):
            for table in TENANT_TABLES:
                removed = await self._tables.delete(table, filters=scoped)
                logger.debug("Removed %d rows from %s", len(removed), table)
            await self._tables.delete("barbershop_settings", filters=[("id", "eq", shop_id)])

    async def add_member(
        self, user_id: Optional[str], request: MemberCreateRequest
    ) -> Membership:
        await self.require_master_admin(user_id)
        shops = await self._tables.select(
            "barbershop_settings", filters=[("id", "eq", request.barbershop_id)], limit=1
        )
        if not shops:
            raise NotFoundError(f"Barbershop '{request.barbershop_id}' not found")
        if request.role == "staff" and not request.barber_id:
            raise ValidationFailedError("Staff members must be linked to a barber")
        if request.barber_id:
            await self._get_row("barbers", request.barber_id, request.barbershop_id)

        logger.info(
            "Linking user %s to barbershop %s as %s",
            request.user_id,
            request.barbershop_id,
            request.role,
        )
        with translate_errors("create membership"):
            rows = await self._tables.insert("barbershop_members", request.model_dump())
        return Membership.model_validate(rows[0])

    async def get_public_profile(self, slug: str) -> PublicShopResponse:
        shop = await self._get_shop(slug, active_only=True)
        updated_at = shop.get("updated_at")
        logo = cache_buster(public_url_from_path(self._client, shop.get("logo_url")), updated_at)
        hero = cache_buster(
            public_url_from_path(self._client, shop.get("hero_background_url")), updated_at
        )
        return PublicShopResponse(
            id=shop["id"],
            name=shop.get("name") or DEFAULT_SHOP_NAME,
            slug=shop["slug"],
            description=shop.get("description") or DEFAULT_SHOP_DESCRIPTION,
            logo_url=logo,
            hero_background_url=hero,
        )
