from __future__ import annotations

from datetime import date as date_type
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from barberbook.schemas.availability import normalize_clock

AppointmentStatus = Literal["pending", "confirmed", "completed", "cancelled"]

# Statuses that occupy the barber's time.
ACTIVE_STATUSES = ("pending", "confirmed")


class BookingRequest(BaseModel):
    client_name: str = Field(..., min_length=1)
    client_phone: str = Field(..., min_length=1)
    client_email: Optional[str] = None
    barber_id: str
    service_id: str
    date: date_type
    time: str = Field(..., description="Chosen start time, HH:MM")
    notes: Optional[str] = None

    @field_validator("time", mode="before")
    def _clock(cls, value):
        return normalize_clock(value)


class BookingResponse(BaseModel):
    status: str
    appointment_id: str
    client_id: str
    message: Optional[str] = None


class AppointmentRecord(BaseModel):
    id: str
    client_id: Optional[str] = None
    barber_id: str
    service_id: Optional[str] = None
    appointment_date: str
    appointment_time: str
    status: AppointmentStatus
    notes: Optional[str] = None
    service_price_at_booking: float = 0.0
    service_duration_at_booking: Optional[int] = None
    created_at: Optional[str] = None
    client_name: Optional[str] = None
    barber_name: Optional[str] = None
    service_name: Optional[str] = None


class AppointmentListResponse(BaseModel):
    total: int
    items: List[AppointmentRecord]


class StatusUpdateRequest(BaseModel):
    status: Literal["confirmed", "completed", "cancelled"]
