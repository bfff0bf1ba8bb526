from typing import List, Literal, Optional

from pydantic import BaseModel

PaymentMethod = Literal["cash", "card", "pix"]


class PaymentRequest(BaseModel):
    amount: Optional[float] = None  # defaults to the price snapshot of the appointment
    payment_method: PaymentMethod = "cash"
    notes: Optional[str] = None


class PaymentRecord(BaseModel):
    id: str
    appointment_id: str
    barber_id: Optional[str] = None
    amount: float
    payment_method: PaymentMethod
    payment_date: Optional[str] = None
    barber_commission: float
    barbershop_revenue: float
    notes: Optional[str] = None
    appointment_date: Optional[str] = None


class PaymentListResponse(BaseModel):
    total: int
    items: List[PaymentRecord]
