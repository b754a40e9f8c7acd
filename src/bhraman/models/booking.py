"""Booking models: stored record, requests and read projections."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .enums import BookingStatus, PaymentStatus
from .references import PackageRef, UserRef


class ContactInfo(BaseModel):
    """Contact details captured with every booking."""

    name: str = Field(..., min_length=1, description="Contact name")
    email: EmailStr = Field(..., description="Contact e-mail")
    phone: str = Field(default="", description="Contact phone (at least 10 digits)")


class Booking(BaseModel):
    """A reservation of a package by a user.

    ``total_amount`` is a snapshot taken at creation and is never
    recomputed when the package price changes.
    """

    booking_id: str = Field(..., description="Unique booking ID")
    package_id: str | None = Field(default=None, description="Referenced package, may dangle")
    user_id: str | None = Field(default=None, description="Booking owner, may be unset")
    start_date: date
    number_of_people: int = Field(..., ge=1)
    total_amount: float = Field(..., ge=0)
    contact_info: ContactInfo
    special_requests: str | None = None
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_id: str | None = None
    created_at: datetime
    updated_at: datetime


class BookingCreate(BaseModel):
    """Customer request to book a package.

    The total amount is computed server-side; a client-supplied total is
    ignored.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "package_id": "7b0c2f3e-0a51-4d8e-9a43-1f0e5c7d9b21",
                    "start_date": "2026-12-20",
                    "number_of_people": 2,
                    "contact_info": {
                        "name": "Asha Rao",
                        "email": "asha@example.com",
                        "phone": "+91 98765 43210",
                    },
                    "special_requests": "Vegetarian meals",
                }
            ]
        },
    )

    package_id: str = Field(..., min_length=1)
    start_date: date
    number_of_people: int = Field(..., ge=1)
    contact_info: ContactInfo
    special_requests: str | None = Field(default=None, max_length=1000)


class BookingUpdate(BaseModel):
    """Admin patch for a booking. Only provided fields change.

    Status values are plain strings so that out-of-enum values reach the
    service and are rejected with a domain validation error.
    """

    status: str | None = None
    payment_status: str | None = None
    payment_id: str | None = None
    start_date: date | None = None
    number_of_people: int | None = Field(default=None, ge=1)
    special_requests: str | None = None
    contact_info: ContactInfo | None = None


class AdminBookingCreate(BookingCreate):
    """Admin request to book on behalf of a user."""

    user_id: str | None = None


class BookingDetail(BaseModel):
    """Booking read projection with references resolved."""

    booking_id: str
    package: PackageRef
    user: UserRef
    package_name: str
    customer_name: str
    customer_email: str
    start_date: date
    number_of_people: int
    total_amount: float
    contact_info: ContactInfo
    special_requests: str | None = None
    status: BookingStatus
    payment_status: PaymentStatus
    payment_id: str | None = None
    created_at: datetime
    updated_at: datetime


class BookingCreated(BaseModel):
    """Result of a customer booking."""

    message: str = "Booking created successfully"
    booking_id: str
    status: BookingStatus


class PaymentRecord(BaseModel):
    """Payment view of a booking, rendered client-side as an invoice."""

    id: str
    booking_id: str
    package_name: str
    amount: float
    status: PaymentStatus
    date: datetime
    payment_method: str
