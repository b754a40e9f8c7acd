"""Admin catalog management endpoints.

Provides REST endpoints for:
- GET /admin/packages - List packages, newest first
- POST /admin/packages - Create a package
- GET /admin/packages/{package_id} - Get a package
- PATCH /admin/packages/{package_id} - Update a package
- DELETE /admin/packages/{package_id} - Delete a package
"""

from fastapi import APIRouter, Depends, Query

from bhraman.models import Package, PackageCreate, PackageUpdate, Page
from bhraman.services.packages import PackageCatalog
from bhraman_api.dependencies import get_package_catalog
from bhraman_api.models.common import DataResponse, MessageDataResponse, MessageResponse
from bhraman_api.security import require_admin

router = APIRouter(
    prefix="/admin/packages",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Admin access required"},
    },
)


@router.get(
    "",
    summary="List packages",
    response_model=Page[Package],
)
def list_packages(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str | None = Query(default=None),
    featured: bool | None = Query(default=None),
    catalog: PackageCatalog = Depends(get_package_catalog),
) -> Page[Package]:
    return catalog.list_admin(page=page, limit=limit, search=search, featured=featured)


@router.post(
    "",
    summary="Create package",
    description="""
Create a catalog package.

The slug is derived from the title; on collision a numeric suffix is
appended (`golden-triangle`, `golden-triangle-1`, ...).

**Errors:**
- 400 when the discounted price is above the price
""",
    response_model=MessageDataResponse[Package],
    status_code=201,
    responses={
        201: {"description": "Package created"},
        400: {"description": "Validation error"},
    },
)
def create_package(
    request: PackageCreate,
    catalog: PackageCatalog = Depends(get_package_catalog),
) -> MessageDataResponse[Package]:
    package = catalog.create_package(request)
    return MessageDataResponse[Package](message="Package created successfully", data=package)


@router.get(
    "/{package_id}",
    summary="Get package",
    response_model=DataResponse[Package],
    responses={404: {"description": "Package not found"}},
)
def get_package(
    package_id: str,
    catalog: PackageCatalog = Depends(get_package_catalog),
) -> DataResponse[Package]:
    return DataResponse[Package](data=catalog.require_package(package_id))


@router.patch(
    "/{package_id}",
    summary="Update package",
    description="Partially update a package. A new title regenerates the slug.",
    response_model=MessageDataResponse[Package],
    responses={
        400: {"description": "Validation error"},
        404: {"description": "Package not found"},
    },
)
def update_package(
    package_id: str,
    request: PackageUpdate,
    catalog: PackageCatalog = Depends(get_package_catalog),
) -> MessageDataResponse[Package]:
    package = catalog.update_package(package_id, request)
    return MessageDataResponse[Package](message="Package updated successfully", data=package)


@router.delete(
    "/{package_id}",
    summary="Delete package",
    description="""
Delete a package. Existing bookings keep their package ID and are shown
with "Unknown Package" afterwards.
""",
    response_model=MessageResponse,
    responses={404: {"description": "Package not found"}},
)
def delete_package(
    package_id: str,
    catalog: PackageCatalog = Depends(get_package_catalog),
) -> MessageResponse:
    catalog.delete_package(package_id)
    return MessageResponse(message="Package deleted successfully")
