from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from barberbook.schemas.availability import DayAvailability, WeeklyAvailability
from barberbook.services.base import TenantService, translate_errors

logger = logging.getLogger(__name__)

DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "19:00"
SUNDAY = 0


def day_of_week_for(value: date) -> int:
    """Stored weekday index: 0 = Sunday .. 6 = Saturday."""
    return (value.weekday() + 1) % 7


def default_day(day_of_week: int) -> DayAvailability:
    return DayAvailability(
        day_of_week=day_of_week,
        start_time=DEFAULT_START_TIME,
        end_time=DEFAULT_END_TIME,
        is_active=day_of_week != SUNDAY,
        breaks=[],
    )


def parse_stored_day(row: Dict[str, Any]) -> Optional[DayAvailability]:
    """Validate a stored availability row, ``None`` when it is inconsistent."""
    try:
        return DayAvailability.model_validate(row)
    except ValidationError as exc:
        logger.warning(
            "Ignoring invalid availability for barbershop %s day %s: %s",
            row.get("barbershop_id"),
            row.get("day_of_week"),
            exc.errors(include_url=False),
        )
        return None


class AvailabilityService(TenantService):
    """Weekly opening hours and breaks of a barbershop."""

    async def load_day(self, shop_id: str, day_of_week: int) -> Optional[DayAvailability]:
        """Stored availability for one weekday, ``None`` when never configured or unusable."""
        rows = await self._tables.select(
            "availability",
            filters=[("barbershop_id", "eq", shop_id), ("day_of_week", "eq", day_of_week)],
            limit=1,
        )
        if not rows:
            return None
        return parse_stored_day(rows[0])

    async def load_week(self, shop_id: str) -> List[DayAvailability]:
        rows = await self._tables.select(
            "availability",
            filters=[("barbershop_id", "eq", shop_id)],
            order=["day_of_week.asc"],
        )
        stored: Dict[int, DayAvailability] = {}
        for row in rows:
            day = parse_stored_day(row)
            if day is not None:
                stored[day.day_of_week] = day
        return [stored.get(day, default_day(day)) for day in range(7)]

    async def get_week(self, user_id: Optional[str], slug: str) -> WeeklyAvailability:
        shop, _ = await self._member_context(user_id, slug)
        return WeeklyAvailability(days=await self.load_week(shop["id"]))

    async def save_week(
        self, user_id: Optional[str], slug: str, week: WeeklyAvailability
    ) -> WeeklyAvailability:
        shop, member = await self._member_context(user_id, slug)
        self._require_owner(member, "edit opening hours")

        # Days missing from the request keep what the weekly view shows for them.
        provided = {day.day_of_week: day for day in week.days}
        current = await self.load_week(shop["id"])
        days = [provided.get(day.day_of_week, day) for day in current]
        updates = [
            {
                "barbershop_id": shop["id"],
                "day_of_week": day.day_of_week,
                "start_time": day.start_time,
                "end_time": day.end_time,
                "is_active": day.is_active,
                "breaks": [brk.model_dump() for brk in day.breaks],
            }
            for day in days
        ]
        logger.info(
            "Saving availability for barbershop %s (%d active days)",
            shop["id"],
            sum(1 for day in days if day.is_active),
        )
        with translate_errors("save availability"):
            await self._tables.upsert(
                "availability", updates, on_conflict="barbershop_id,day_of_week"
            )
        return WeeklyAvailability(days=days)
