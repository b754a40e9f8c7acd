"""Signed-in user endpoints.

Provides REST endpoints for:
- GET /auth/me - Current user, created on first sign-in
- GET /users/me - Alias of /auth/me
- POST /users/update-profile - Update own name and phone

The user record is created lazily from the identity provider claims, so
there is no separate registration step.
"""

from fastapi import APIRouter, Depends

from bhraman.models import Identity, User
from bhraman.services.users import UserDirectory
from bhraman.utils.logging import get_logger
from bhraman_api.dependencies import get_user_directory
from bhraman_api.models.common import DataResponse, MessageDataResponse
from bhraman_api.models.users import ProfileUpdateRequest, UserProfile
from bhraman_api.security import get_current_user, require_identity

logger = get_logger(__name__)

router = APIRouter(tags=["users"])

_AUTH_RESPONSES: dict[int | str, dict[str, str]] = {
    401: {"description": "Not authenticated"},
    409: {"description": "E-mail already registered to another account"},
}


@router.get(
    "/auth/me",
    summary="Get current user",
    description="""
Get the profile of the authenticated caller.

**Requires authentication.**

A user record is created on the first call for a new identity. If another
account already owns the e-mail the call fails with 409.
""",
    response_model=DataResponse[UserProfile],
    responses=_AUTH_RESPONSES,
)
def get_me(user: User = Depends(get_current_user)) -> DataResponse[UserProfile]:
    return DataResponse[UserProfile](data=UserProfile.from_user(user))


@router.get(
    "/users/me",
    summary="Get current user (alias)",
    response_model=DataResponse[UserProfile],
    responses=_AUTH_RESPONSES,
)
def get_users_me(user: User = Depends(get_current_user)) -> DataResponse[UserProfile]:
    return DataResponse[UserProfile](data=UserProfile.from_user(user))


@router.post(
    "/users/update-profile",
    summary="Update own profile",
    description="""
Update the caller's first name, last name and phone.

**Requires authentication.**

Omitted name parts keep their current value. Phone numbers are unique
across users.
""",
    response_model=MessageDataResponse[UserProfile],
    responses={
        200: {"description": "Profile updated"},
        400: {"description": "Phone number already in use"},
        401: {"description": "Not authenticated"},
    },
)
def update_profile(
    request: ProfileUpdateRequest,
    identity: Identity = Depends(require_identity),
    users: UserDirectory = Depends(get_user_directory),
) -> MessageDataResponse[UserProfile]:
    user = users.update_profile(
        identity,
        first_name=request.first_name,
        last_name=request.last_name,
        phone=request.phone,
    )
    return MessageDataResponse[UserProfile](
        message="Profile updated successfully",
        data=UserProfile.from_user(user),
    )
