"""
Scheduling Module

Pure scheduling logic with no I/O:
- Bookable slot resolution (availability.py)
"""

from .availability import (
    BookedSpan,
    Break,
    DayWindow,
    InvalidAvailabilityError,
    format_clock,
    parse_clock,
    resolve_available_slots,
    spans_overlap,
)

__all__ = [
    "BookedSpan",
    "Break",
    "DayWindow",
    "InvalidAvailabilityError",
    "format_clock",
    "parse_clock",
    "resolve_available_slots",
    "spans_overlap",
]
