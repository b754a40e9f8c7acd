"""Public site content endpoint."""

from fastapi import APIRouter, Depends

from bhraman.models import HomeConfig
from bhraman.services.home_config import HomeConfigService
from bhraman_api.dependencies import get_home_config_service
from bhraman_api.models.common import DataResponse

router = APIRouter(tags=["site-content"])


@router.get(
    "/home-config",
    summary="Get home page configuration",
    description="""
Get the home page content sections.

**Public endpoint** - no authentication required.
Returns 404 until an administrator has opened the site editor once.
""",
    response_model=DataResponse[HomeConfig],
    responses={404: {"description": "Home configuration not created yet"}},
)
def get_home_config(
    service: HomeConfigService = Depends(get_home_config_service),
) -> DataResponse[HomeConfig]:
    return DataResponse[HomeConfig](data=service.get_public())
