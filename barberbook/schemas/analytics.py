from typing import List, Optional

from pydantic import BaseModel, Field

MONTH_LABELS = ["Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez"]


class DashboardStats(BaseModel):
    today_appointments: int
    pending_appointments: int
    today_revenue: float
    monthly_revenue: float
    report_generated_at: str


class MonthlyRevenue(BaseModel):
    month: int = Field(..., ge=1, le=12)
    label: str
    revenue: float


class MonthlyRevenueResponse(BaseModel):
    year: int
    barber_id: Optional[str] = None
    months: List[MonthlyRevenue]
    total: float
