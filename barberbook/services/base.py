from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, Optional, Tuple
from zoneinfo import ZoneInfo

from barberbook.clients.supabase import SupabaseClient, TableGateway
from barberbook.config import Settings, get_settings
from barberbook.schemas.barbershop import Membership
from barberbook.services.exceptions import NotFoundError, PermissionDeniedError, ServiceError
from barberbook.services.mock_store import get_mock_store

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Re-raise unexpected failures as ``ServiceError`` with the cause attached."""
    try:
        yield
    except ServiceError:
        raise
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected error while trying to %s", action)
        raise ServiceError(f"Failed to {action}", cause=exc) from exc


class TenantService:
    """Common wiring for services that read and write tenant-scoped tables."""

    def __init__(
        self,
        client: SupabaseClient,
        *,
        tables: TableGateway | None = None,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._client = client
        self._tables = tables
        if self._tables is None:
            self._tables = get_mock_store().tables if client.use_mock_data else client
        self._settings = settings or get_settings()
        self._clock = clock

    def _now(self) -> datetime:
        if self._clock is not None:
            return self._clock()
        return datetime.now(ZoneInfo(self._settings.timezone))

    async def _get_shop(self, slug: str, *, active_only: bool = True) -> Dict[str, Any]:
        filters = [("slug", "eq", slug)]
        if active_only:
            filters.append(("is_active", "eq", True))
        rows = await self._tables.select("barbershop_settings", filters=filters, limit=1)
        if not rows:
            raise NotFoundError(f"Barbershop '{slug}' not found")
        return rows[0]

    async def _get_row(self, table: str, row_id: str, shop_id: str) -> Dict[str, Any]:
        rows = await self._tables.select(
            table,
            filters=[("id", "eq", row_id), ("barbershop_id", "eq", shop_id)],
            limit=1,
        )
        if not rows:
            raise NotFoundError(f"Record '{row_id}' not found in {table}")
        return rows[0]

    async def _member_context(
        self, user_id: Optional[str], slug: str
    ) -> Tuple[Dict[str, Any], Membership]:
        """Resolve the shop and the caller's membership for dashboard operations."""
        if not user_id:
            raise PermissionDeniedError("Authentication required")

        shop = await self._get_shop(slug, active_only=False)
        if not shop.get("is_active"):
            raise PermissionDeniedError(f"Barbershop '{slug}' is inactive")

        rows = await self._tables.select(
            "barbershop_members",
            filters=[("user_id", "eq", user_id), ("barbershop_id", "eq", shop["id"])],
            limit=1,
        )
        if not rows:
            raise PermissionDeniedError("User is not a member of this barbershop")

        member = Membership.model_validate(rows[0])
        if member.is_staff and not member.barber_id:
            raise PermissionDeniedError("Staff membership is missing its barber")
        return shop, member

    @staticmethod
    def _require_owner(member: Membership, action: str) -> None:
        if not member.is_owner:
            raise PermissionDeniedError(f"Your role cannot {action}")
