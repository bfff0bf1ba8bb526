from __future__ import annotations

import logging
import posixpath
import uuid
from datetime import datetime, timezone
from typing import Optional

from barberbook.clients.supabase import SupabaseClient
from barberbook.schemas.barbershop import (
    BarbershopSummary,
    ImageUploadRequest,
    ImageUploadTicket,
    ProfileUpdateRequest,
)
from barberbook.services.base import TenantService, translate_errors
from barberbook.services.exceptions import NotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)

IMAGE_KINDS = ("logo", "hero")


def public_url_from_path(client: SupabaseClient, path: Optional[str]) -> str:
    """Resolve a storage path to a browser URL; absolute URLs pass through."""
    if not path:
        return ""
    if path.startswith("http://") or path.startswith("https://"):
        return path
    return client.public_url(path)


def cache_buster(url: str, updated_at: Optional[str]) -> str:
    """Append ``v=<epoch ms>`` so browsers refetch images after a profile change."""
    if not url or not updated_at:
        return url
    try:
        stamp = datetime.fromisoformat(updated_at.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Ignoring unparseable updated_at %r", updated_at)
        return url
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    version = int(stamp.timestamp() * 1000)
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}v={version}"


class ProfileService(TenantService):
    """Shop branding managed from the staff dashboard."""

    async def get_profile(self, user_id: Optional[str], slug: str) -> BarbershopSummary:
        shop, _ = await self._member_context(user_id, slug)
        return BarbershopSummary.model_validate(shop)

    async def update_profile(
        self, user_id: Optional[str], slug: str, request: ProfileUpdateRequest
    ) -> BarbershopSummary:
        shop, member = await self._member_context(user_id, slug)
        self._require_owner(member, "edit the barbershop profile")

        name = request.name.strip()
        if not name:
            raise ValidationFailedError("Barbershop name is required")

        payload = {
            "name": name,
            "description": (request.description or "").strip() or None,
            "logo_url": request.logo_url or None,
            "hero_background_url": request.hero_background_url or None,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        logger.info("Updating profile of barbershop %s", shop["id"])
        with translate_errors("update barbershop profile"):
            rows = await self._tables.update(
                "barbershop_settings", payload, filters=[("id", "eq", shop["id"])]
            )
        if not rows:
            raise NotFoundError(f"Barbershop '{slug}' not found")
        return BarbershopSummary.model_validate(rows[0])

    async def request_image_upload(
        self, user_id: Optional[str], slug: str, kind: str, request: ImageUploadRequest
    ) -> ImageUploadTicket:
        """Validate an upload and return the storage path the client should write to."""
        shop, member = await self._member_context(user_id, slug)
        self._require_owner(member, "upload barbershop images")

        if kind not in IMAGE_KINDS:
            raise ValidationFailedError(f"Unknown image kind '{kind}'")
        if not request.content_type.startswith("image/"):
            raise ValidationFailedError("Only image uploads are accepted")

        extension = posixpath.splitext(request.filename)[1].lower() or ".png"
        path = f"{shop['id']}/{kind}-{uuid.uuid4().hex}{extension}"
        return ImageUploadTicket(path=path, public_url=public_url_from_path(self._client, path))
