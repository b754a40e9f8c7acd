"""Admin session, site content and dashboard endpoints.

Provides REST endpoints for:
- GET /admin/me - The authenticated admin
- GET /admin/home-config - Home page configuration, created with defaults
- PATCH /admin/home-config - Merge section updates
- GET /admin/dashboard - Aggregate statistics
"""

from fastapi import APIRouter, Depends

from bhraman.models import DashboardStats, HomeConfig, HomeConfigUpdate, User
from bhraman.services.dashboard import DashboardService
from bhraman.services.home_config import HomeConfigService
from bhraman_api.dependencies import get_dashboard_service, get_home_config_service
from bhraman_api.models.common import DataResponse, MessageDataResponse
from bhraman_api.models.users import UserProfile
from bhraman_api.security import require_admin

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Admin access required"},
    },
)


@router.get(
    "/me",
    summary="Get current admin",
    description="Confirm admin access and return the admin's profile with the refreshed last_login.",
    response_model=DataResponse[UserProfile],
)
def get_admin_me(admin: User = Depends(require_admin)) -> DataResponse[UserProfile]:
    return DataResponse[UserProfile](data=UserProfile.from_user(admin))


@router.get(
    "/home-config",
    summary="Get home page configuration",
    description="Get the home page configuration, creating it with defaults on first access.",
    response_model=DataResponse[HomeConfig],
)
def get_home_config(
    service: HomeConfigService = Depends(get_home_config_service),
) -> DataResponse[HomeConfig]:
    return DataResponse[HomeConfig](data=service.get_or_create())


@router.patch(
    "/home-config",
    summary="Update home page configuration",
    description="""
Merge the provided sections into the stored configuration.

Only the fields given inside a section change; sections that are not
provided are left alone. Lists are replaced as a whole.
""",
    response_model=MessageDataResponse[HomeConfig],
    responses={400: {"description": "Merged configuration is invalid"}},
)
def update_home_config(
    request: HomeConfigUpdate,
    service: HomeConfigService = Depends(get_home_config_service),
) -> MessageDataResponse[HomeConfig]:
    config = service.update(request)
    return MessageDataResponse[HomeConfig](
        message="Home configuration updated successfully", data=config
    )


@router.get(
    "/dashboard",
    summary="Dashboard statistics",
    description="""
Aggregate statistics for the admin dashboard.

Revenue counts confirmed and completed bookings. Monthly stats cover the
twelve months of the current year.
""",
    response_model=DataResponse[DashboardStats],
)
def get_dashboard(
    service: DashboardService = Depends(get_dashboard_service),
) -> DataResponse[DashboardStats]:
    return DataResponse[DashboardStats](data=service.get_stats())
