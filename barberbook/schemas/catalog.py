from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class Barber(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    specialty: Optional[str] = None
    role: Optional[str] = None
    created_at: Optional[str] = None


class BarberRequest(BaseModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    specialty: Optional[str] = None


class BarberListResponse(BaseModel):
    total: int
    items: List[Barber]


class ServiceItem(BaseModel):
    """A bookable service offered by a barbershop."""

    id: str
    name: str
    duration: int = Field(..., description="Duration in minutes")
    price: float
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[str] = None


class ServiceRequest(BaseModel):
    name: str
    price: float
    duration: int
    description: Optional[str] = None
    is_active: bool = True


class ServiceListResponse(BaseModel):
    total: int
    items: List[ServiceItem]
