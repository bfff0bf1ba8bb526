from __future__ import annotations

from datetime import date as date_type
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from barberbook.scheduling import Break, DayWindow, InvalidAvailabilityError, format_clock, parse_clock

DAY_LABELS = {
    0: "Domingo",
    1: "Segunda-feira",
    2: "Terça-feira",
    3: "Quarta-feira",
    4: "Quinta-feira",
    5: "Sexta-feira",
    6: "Sábado",
}


def normalize_clock(value: Any) -> str:
    try:
        return format_clock(parse_clock(value))
    except InvalidAvailabilityError as exc:
        raise ValueError(str(exc)) from exc


class BreakInterval(BaseModel):
    """A sub-interval of the working day when no bookings are accepted."""

    start: str = Field(..., description="Break start, HH:MM")
    end: str = Field(..., description="Break end, HH:MM")

    @field_validator("start", "end", mode="before")
    def _clock(cls, value: Any) -> str:
        return normalize_clock(value)

    @model_validator(mode="after")
    def _ordered(self) -> "BreakInterval":
        if parse_clock(self.end) <= parse_clock(self.start):
            raise ValueError(f"break end {self.end} must be after start {self.start}")
        return self


class DayAvailability(BaseModel):
    """Opening hours of one weekday (0 = Sunday .. 6 = Saturday)."""

    day_of_week: int = Field(..., ge=0, le=6)
    start_time: str = "09:00"
    end_time: str = "19:00"
    is_active: bool = True
    breaks: List[BreakInterval] = Field(default_factory=list)

    @field_validator("start_time", "end_time", mode="before")
    def _clock(cls, value: Any) -> str:
        return normalize_clock(value)

    @field_validator("breaks", mode="before")
    def _drop_blank_breaks(cls, value: Any) -> Any:
        # Stored rows may carry half-filled breaks from the dashboard editor.
        if value is None:
            return []
        if isinstance(value, list):
            return [
                item
                for item in value
                if not isinstance(item, dict) or (item.get("start") and item.get("end"))
            ]
        return value

    @model_validator(mode="after")
    def _window(self) -> "DayAvailability":
        start = parse_clock(self.start_time)
        end = parse_clock(self.end_time)
        if end <= start:
            raise ValueError(
                f"end_time {self.end_time} must be after start_time {self.start_time}"
            )
        for brk in self.breaks:
            if parse_clock(brk.start) < start or parse_clock(brk.end) > end:
                raise ValueError(
                    f"break {brk.start}-{brk.end} falls outside {self.start_time}-{self.end_time}"
                )
        return self

    @property
    def label(self) -> str:
        return DAY_LABELS[self.day_of_week]

    def to_window(self) -> DayWindow:
        return DayWindow(
            start=parse_clock(self.start_time),
            end=parse_clock(self.end_time),
            is_active=self.is_active,
            breaks=tuple(
                Break(start=parse_clock(brk.start), end=parse_clock(brk.end))
                for brk in self.breaks
            ),
        )


class WeeklyAvailability(BaseModel):
    days: List[DayAvailability]

    @model_validator(mode="after")
    def _one_per_day(self) -> "WeeklyAvailability":
        seen = [day.day_of_week for day in self.days]
        if len(seen) != len(set(seen)):
            raise ValueError("each day_of_week may appear only once")
        self.days.sort(key=lambda day: day.day_of_week)
        return self


class SlotQuery(BaseModel):
    service_id: str
    barber_id: str
    date: date_type


class SlotListResponse(BaseModel):
    date: date_type
    service_id: str
    barber_id: str
    slots: List[str] = Field(default_factory=list)
    message: Optional[str] = None
