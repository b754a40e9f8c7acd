"""Public catalog endpoints.

Provides REST endpoints for:
- GET /packages - List packages with filters and sorting
- GET /packages/{slug} - Get a package by its URL slug

Both endpoints are public.
"""

from fastapi import APIRouter, Depends, Query

from bhraman.models import Package
from bhraman.services.packages import PackageCatalog
from bhraman_api.dependencies import get_package_catalog
from bhraman_api.models.common import DataResponse

router = APIRouter(prefix="/packages", tags=["packages"])


@router.get(
    "",
    summary="List packages",
    description="""
List packages in the public catalog.

**Public endpoint** - no authentication required.

**Filters:**
- `search`: substring of title or descriptions (case-insensitive)
- `location`: exact location; `All Locations` disables the filter
- `duration`: `1-3 Days`, `4-7 Days`, `7+ Days` or `Any Duration`
- `price_range`: `$0-$500`, `$1000+` or `Any Price`
- `featured`: only featured packages when true

**Sorting:** `popular` (featured first, then cheapest), `price-low-high`,
`price-high-low`, `newest`.
""",
    response_model=DataResponse[list[Package]],
)
def list_packages(
    search: str | None = Query(default=None),
    location: str | None = Query(default=None),
    duration: str | None = Query(default=None),
    price_range: str | None = Query(default=None),
    featured: bool = Query(default=False),
    sort_by: str = Query(default="popular"),
    catalog: PackageCatalog = Depends(get_package_catalog),
) -> DataResponse[list[Package]]:
    packages = catalog.list_public(
        search=search,
        location=location,
        duration=duration,
        price_range=price_range,
        featured=featured,
        sort_by=sort_by,
    )
    return DataResponse[list[Package]](data=packages)


@router.get(
    "/{slug}",
    summary="Get package by slug",
    response_model=DataResponse[Package],
    responses={
        200: {"description": "Package found"},
        404: {"description": "Package not found"},
    },
)
def get_package(
    slug: str,
    catalog: PackageCatalog = Depends(get_package_catalog),
) -> DataResponse[Package]:
    return DataResponse[Package](data=catalog.get_by_slug(slug))
