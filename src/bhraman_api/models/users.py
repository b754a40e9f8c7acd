"""API models for user profile and admin user endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from bhraman.models import User, UserRole


class ProfileUpdateRequest(BaseModel):
    """Self-service profile update. Omitted fields keep their value."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [{"first_name": "Asha", "last_name": "Rao", "phone": "+91 98765 43210"}]
        },
    )

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=20)


class RoleUpdateRequest(BaseModel):
    """Admin role change. Any value other than user/admin is rejected with 400."""

    role: str = Field(..., description="user or admin", examples=["admin"])


class UserProfile(BaseModel):
    """Public projection of the caller's own user record."""

    user_id: str
    external_id: str
    email: str
    name: str
    phone: str | None = None
    profile_image: str | None = None
    role: UserRole
    last_login: datetime | None = None
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            user_id=user.user_id,
            external_id=user.external_id,
            email=user.email,
            name=user.name,
            phone=user.phone,
            profile_image=user.profile_image,
            role=user.role,
            last_login=user.last_login,
            created_at=user.created_at,
        )
