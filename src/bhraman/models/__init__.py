"""Domain models for the Bhraman booking backend."""

from .booking import (
    AdminBookingCreate,
    Booking,
    BookingCreate,
    BookingCreated,
    BookingDetail,
    BookingUpdate,
    ContactInfo,
    PaymentRecord,
)
from .dashboard import DashboardStats, MonthlyStat, RecentBooking
from .enums import BookingStatus, PaymentStatus, UserRole
from .errors import BhramanError, ErrorCode, ErrorResponse
from .home_config import HomeConfig, HomeConfigUpdate
from .pagination import Page, Pagination, paginate
from .package import ItineraryDay, Package, PackageCreate, PackageSummary, PackageUpdate
from .references import (
    UNKNOWN_PACKAGE,
    BookingUser,
    MissingRef,
    PackageRef,
    ResolvedPackageRef,
    ResolvedUserRef,
    UnresolvedRef,
    UserRef,
)
from .user import Identity, LegacyAdmin, User, UserDetail, UserSummary

__all__ = [
    # Enums
    "BookingStatus",
    "PaymentStatus",
    "UserRole",
    # Errors
    "BhramanError",
    "ErrorCode",
    "ErrorResponse",
    # Users
    "Identity",
    "LegacyAdmin",
    "User",
    "UserDetail",
    "UserSummary",
    # Packages
    "ItineraryDay",
    "Package",
    "PackageCreate",
    "PackageSummary",
    "PackageUpdate",
    # Bookings
    "AdminBookingCreate",
    "Booking",
    "BookingCreate",
    "BookingCreated",
    "BookingDetail",
    "BookingUpdate",
    "ContactInfo",
    "PaymentRecord",
    # References
    "UNKNOWN_PACKAGE",
    "BookingUser",
    "MissingRef",
    "PackageRef",
    "ResolvedPackageRef",
    "ResolvedUserRef",
    "UnresolvedRef",
    "UserRef",
    # Dashboard
    "DashboardStats",
    "MonthlyStat",
    "RecentBooking",
    # Pagination
    "Page",
    "Pagination",
    "paginate",
    # Site content
    "HomeConfig",
    "HomeConfigUpdate",
]
