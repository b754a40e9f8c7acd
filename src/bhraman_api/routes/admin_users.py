"""Admin user management endpoints.

Provides REST endpoints for:
- GET /admin/users - List users with booking counts
- GET /admin/users/{user_id} - Get a user with recent bookings
- PATCH /admin/users/{user_id} - Change a user's role
- DELETE /admin/users/{user_id} - Delete a user
"""

from fastapi import APIRouter, Depends, Query

from bhraman.models import Page, UserDetail, UserSummary
from bhraman.services.users import UserDirectory
from bhraman_api.dependencies import get_user_directory
from bhraman_api.models.common import DataResponse, MessageDataResponse, MessageResponse
from bhraman_api.models.users import RoleUpdateRequest, UserProfile
from bhraman_api.security import require_admin

router = APIRouter(
    prefix="/admin/users",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Admin access required"},
    },
)


@router.get(
    "",
    summary="List users",
    description="""
List users with their booking counts.

**Parameters:**
- `search`: substring of name or e-mail
- `role`: user, admin or all
- `sort`: name, email, role or created_at (newest first)
""",
    response_model=Page[UserSummary],
)
def list_users(
    search: str | None = Query(default=None),
    role: str | None = Query(default=None),
    sort: str = Query(default="name"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    users: UserDirectory = Depends(get_user_directory),
) -> Page[UserSummary]:
    return users.list_users(search=search, role=role, sort=sort, page=page, limit=limit)


@router.get(
    "/{user_id}",
    summary="Get user",
    description="Get a user with their five most recent bookings, or all with `all_bookings=true`.",
    response_model=DataResponse[UserDetail],
    responses={404: {"description": "User not found"}},
)
def get_user(
    user_id: str,
    all_bookings: bool = Query(default=False),
    users: UserDirectory = Depends(get_user_directory),
) -> DataResponse[UserDetail]:
    return DataResponse[UserDetail](data=users.get_user_detail(user_id, all_bookings))


@router.patch(
    "/{user_id}",
    summary="Change user role",
    response_model=MessageDataResponse[UserProfile],
    responses={
        400: {"description": "Invalid role"},
        404: {"description": "User not found"},
    },
)
def update_user_role(
    user_id: str,
    request: RoleUpdateRequest,
    users: UserDirectory = Depends(get_user_directory),
) -> MessageDataResponse[UserProfile]:
    user = users.set_role(user_id, request.role)
    return MessageDataResponse[UserProfile](
        message="User role updated successfully",
        data=UserProfile.from_user(user),
    )


@router.delete(
    "/{user_id}",
    summary="Delete user",
    description="Delete a user. Their bookings are kept and keep the dangling user ID.",
    response_model=MessageResponse,
    responses={404: {"description": "User not found"}},
)
def delete_user(
    user_id: str,
    users: UserDirectory = Depends(get_user_directory),
) -> MessageResponse:
    users.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")
