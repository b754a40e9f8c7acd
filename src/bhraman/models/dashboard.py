"""Admin dashboard statistics."""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import BookingStatus


class RecentBooking(BaseModel):
    booking_id: str
    package_name: str
    customer_name: str
    date: datetime
    amount: float
    status: BookingStatus


class MonthlyStat(BaseModel):
    month: int = Field(..., ge=1, le=12)
    count: int = 0
    revenue: float = 0


class DashboardStats(BaseModel):
    """Counts and revenue shown on the admin landing page."""

    total_packages: int
    total_bookings: int
    total_users: int
    total_revenue: float
    pending_bookings: int
    recent_bookings: list[RecentBooking]
    monthly_stats: list[MonthlyStat]
