"""Enumeration types for Bhraman data models."""

from enum import Enum


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    """Payment status of a booking, tracked independently of BookingStatus."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class UserRole(str, Enum):
    """Application role of a user."""

    USER = "user"
    ADMIN = "admin"


# Admin-triggerable status transitions. Cancelled and completed are terminal.
BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    """Check whether an admin may move a booking from current to target.

    Re-applying the current status is a no-op and always allowed.
    """
    return current == target or target in BOOKING_TRANSITIONS[current]


def can_transition_payment(current: PaymentStatus, target: PaymentStatus) -> bool:
    """Check whether an admin may move a payment from current to target.

    Any payment may be marked failed or refunded; only a pending payment
    may be completed.
    """
    if current == target:
        return True
    if target in (PaymentStatus.FAILED, PaymentStatus.REFUNDED):
        return True
    return current == PaymentStatus.PENDING and target == PaymentStatus.COMPLETED
