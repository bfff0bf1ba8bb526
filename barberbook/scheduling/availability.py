"""
Availability Resolver

Computes the bookable start times for a (service, barber, date) triple from
data the caller has already fetched:
- the weekday's operating window and breaks
- the barber's active appointments on that date
- the current time (injected)

Times are minute-of-day integers. The resolver performs no I/O and never
mutates its inputs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

DEFAULT_SLOT_GRANULARITY_MINUTES = 30
DEFAULT_CUTOFF_MINUTES = 5
# Occupied span for appointments stored without a usable duration.
FALLBACK_APPOINTMENT_MINUTES = 30


class InvalidAvailabilityError(ValueError):
    """Raised when resolver inputs have an impossible shape."""


@dataclass(frozen=True)
class Break:
    start: int
    end: int


@dataclass(frozen=True)
class DayWindow:
    """Operating window of one weekday, in minutes of the day."""

    start: int
    end: int
    is_active: bool = True
    breaks: Tuple[Break, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class BookedSpan:
    """An existing pending or confirmed appointment."""

    start: int
    duration_minutes: Optional[int] = None

    @property
    def end(self) -> int:
        duration = self.duration_minutes
        if duration is None or duration <= 0:
            duration = FALLBACK_APPOINTMENT_MINUTES
        return self.start + duration


def parse_clock(value: Union[str, time]) -> int:
    """Convert ``HH:MM`` / ``HH:MM:SS`` (or a ``time``) to minutes since midnight.

    Seconds are truncated. ``24:00`` is accepted as the end of the day.
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    text = str(value).strip()
    parts = text.split(":")
    if len(parts) not in (2, 3) or not all(part.isdigit() for part in parts):
        raise InvalidAvailabilityError(f"Invalid clock time: {value!r}")

    hours, minutes = int(parts[0]), int(parts[1])
    if minutes > 59 or hours > 24 or (hours == 24 and minutes != 0):
        raise InvalidAvailabilityError(f"Invalid clock time: {value!r}")
    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    """Render minutes since midnight as ``HH:MM``."""
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"


def spans_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open interval intersection; touching spans do not overlap."""
    return a_start < b_end and a_end > b_start


def _validate(
    window: DayWindow,
    service_duration: int,
    slot_granularity_minutes: int,
    cutoff_minutes: int,
) -> None:
    if service_duration is None or service_duration <= 0:
        raise InvalidAvailabilityError(
            f"Service duration must be positive, got {service_duration!r}"
        )
    if slot_granularity_minutes <= 0:
        raise InvalidAvailabilityError(
            f"Slot granularity must be positive, got {slot_granularity_minutes!r}"
        )
    if cutoff_minutes < 0:
        raise InvalidAvailabilityError(
            f"Cutoff must not be negative, got {cutoff_minutes!r}"
        )
    if not (0 <= window.start <= MINUTES_PER_DAY and 0 <= window.end <= MINUTES_PER_DAY):
        raise InvalidAvailabilityError(
            f"Window {window.start}-{window.end} lies outside the day"
        )
    if window.end <= window.start:
        raise InvalidAvailabilityError(
            f"Window end {format_clock(window.end)} must be after start "
            f"{format_clock(window.start)}"
        )
    for brk in window.breaks:
        if brk.end <= brk.start:
            raise InvalidAvailabilityError(
                f"Break end {format_clock(brk.end)} must be after start "
                f"{format_clock(brk.start)}"
            )


def _blocked_intervals(
    window: DayWindow, appointments: Iterable[BookedSpan]
) -> List[Tuple[int, int]]:
    blocked = [(appt.start, appt.end) for appt in appointments]
    blocked.extend((brk.start, brk.end) for brk in window.breaks)
    return blocked


def resolve_available_slots(
    service_duration: int,
    day_availability: Optional[DayWindow],
    existing_appointments: Sequence[BookedSpan],
    requested_date: date,
    now: datetime,
    *,
    slot_granularity_minutes: int = DEFAULT_SLOT_GRANULARITY_MINUTES,
    cutoff_minutes: int = DEFAULT_CUTOFF_MINUTES,
) -> List[int]:
    """
    Return the valid start times (minutes of the day) for a new booking.

    Args:
        service_duration: length of the requested service in minutes
        day_availability: window for the requested weekday, ``None`` when the
            shop has not configured it
        existing_appointments: pending/confirmed appointments of the barber on
            ``requested_date``
        requested_date: calendar date of the booking
        now: current time; naive or aware, compared in its own timezone
        slot_granularity_minutes: step between generated candidates
        cutoff_minutes: minimum lead time for same-day bookings

    Returns:
        list[int]: strictly ascending start times, possibly empty.

    Raises:
        InvalidAvailabilityError: malformed window, breaks or parameters.
    """
    if day_availability is None or not day_availability.is_active:
        return []

    _validate(day_availability, service_duration, slot_granularity_minutes, cutoff_minutes)

    today = now.date()
    if requested_date < today:
        return []

    earliest_start: Optional[datetime] = None
    if requested_date == today:
        earliest_start = now + timedelta(minutes=cutoff_minutes)

    blocked = _blocked_intervals(day_availability, existing_appointments)
    slots: List[int] = []

    for slot in range(day_availability.start, day_availability.end, slot_granularity_minutes):
        slot_end = slot + service_duration
        if slot_end > day_availability.end:
            # Later candidates end even later.
            break

        if any(spans_overlap(slot, slot_end, b_start, b_end) for b_start, b_end in blocked):
            continue

        if earliest_start is not None:
            slot_at = datetime.combine(requested_date, time.min, tzinfo=now.tzinfo) + timedelta(
                minutes=slot
            )
            if slot_at <= earliest_start:
                continue

        slots.append(slot)

    logger.debug(
        "Resolved %d slots for %s (duration=%s, blocked=%d)",
        len(slots),
        requested_date.isoformat(),
        service_duration,
        len(blocked),
    )
    return slots
