"""User model for the unified user directory."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .enums import UserRole


class Identity(BaseModel):
    """Authenticated identity supplied by the identity provider.

    Not persisted. Built per request from the gateway-validated claims.
    """

    model_config = ConfigDict(frozen=True)

    external_id: str = Field(..., min_length=1, description="Identity provider subject")
    email: str | None = Field(default=None, description="E-mail claim, if present")
    name: str | None = Field(default=None, description="Display name claim, if present")
    profile_image: str | None = Field(default=None, description="Picture claim")


class User(BaseModel):
    """An application user. Admins are users with role=admin."""

    user_id: str = Field(..., description="Unique user ID (UUID)")
    external_id: str = Field(..., description="Identity provider subject (unique)")
    email: EmailStr = Field(..., description="E-mail address (unique, lower-case)")
    name: str = Field(..., description="Full name")
    phone: str | None = Field(default=None, description="Phone number (unique if set)")
    profile_image: str | None = Field(default=None, description="Avatar URL")
    role: UserRole = Field(default=UserRole.USER, description="Application role")
    permissions: list[str] = Field(
        default_factory=list,
        description="Stored but advisory: every admin has full access",
    )
    last_login: datetime | None = Field(
        default=None, description="Last admin-gated request"
    )
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserSummary(BaseModel):
    """User row for the admin user list."""

    user_id: str
    external_id: str
    name: str
    email: str
    phone: str | None = None
    profile_image: str | None = None
    role: UserRole
    created_at: datetime
    updated_at: datetime
    booking_count: int = Field(default=0, ge=0)


class UserBookingSummary(BaseModel):
    """Compact booking row embedded in the admin user detail."""

    booking_id: str
    package_name: str
    start_date: str
    status: str
    total_amount: float
    created_at: datetime


class UserDetail(UserSummary):
    """Admin view of a single user with their bookings."""

    bookings: list[UserBookingSummary] = Field(default_factory=list)


class LegacyAdmin(BaseModel):
    """Record from the legacy admin collection. Migration input only."""

    admin_id: str
    external_id: str
    email: str
    profile_image: str | None = None
    permissions: list[str] = Field(default_factory=list)
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
