"""Admin dashboard statistics."""

import datetime as dt
from typing import TYPE_CHECKING

from bhraman.models import (
    BookingStatus,
    DashboardStats,
    MonthlyStat,
    RecentBooking,
    UserRole,
)

if TYPE_CHECKING:
    from .bookings import BookingService
    from .dynamodb import DynamoDBService

RECENT_LIMIT = 5
REVENUE_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.COMPLETED)


class DashboardService:
    """Aggregates counts and revenue for the admin landing page."""

    PACKAGES_TABLE = "packages"
    USERS_TABLE = "users"

    def __init__(self, db: "DynamoDBService", bookings: "BookingService") -> None:
        self.db = db
        self.bookings = bookings

    def get_stats(self, now: dt.datetime | None = None) -> DashboardStats:
        """Compute dashboard statistics.

        Revenue counts confirmed and completed bookings. Monthly stats cover
        every month of the current (UTC) year, zero-filled.

        Args:
            now: Reference time, defaults to the current UTC time
        """
        now = now or dt.datetime.now(dt.UTC)
        bookings = self.bookings.list_all()
        bookings.sort(key=lambda b: b.created_at, reverse=True)

        users = self.db.scan(self.USERS_TABLE)
        total_users = sum(
            1 for u in users if u.get("role", UserRole.USER.value) == UserRole.USER.value
        )

        monthly = {month: MonthlyStat(month=month) for month in range(1, 13)}
        for booking in bookings:
            if booking.created_at.year == now.year:
                stat = monthly[booking.created_at.month]
                stat.count += 1
                stat.revenue += booking.total_amount

        recent = self.bookings.resolve(bookings[:RECENT_LIMIT])

        return DashboardStats(
            total_packages=len(self.db.scan(self.PACKAGES_TABLE)),
            total_bookings=len(bookings),
            total_users=total_users,
            total_revenue=sum(
                b.total_amount for b in bookings if b.status in REVENUE_STATUSES
            ),
            pending_bookings=sum(1 for b in bookings if b.status == BookingStatus.PENDING),
            recent_bookings=[
                RecentBooking(
                    booking_id=d.booking_id,
                    package_name=d.package_name,
                    customer_name=d.customer_name,
                    date=d.created_at,
                    amount=d.total_amount,
                    status=d.status,
                )
                for d in recent
            ],
            monthly_stats=list(monthly.values()),
        )
