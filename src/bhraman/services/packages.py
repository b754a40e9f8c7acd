"""Package catalog: CRUD, slug derivation and public listing."""

import datetime as dt
import re
import uuid
from typing import TYPE_CHECKING, Any

from bhraman.models import (
    BhramanError,
    ErrorCode,
    ItineraryDay,
    Package,
    PackageCreate,
    PackageSummary,
    PackageUpdate,
    Page,
    paginate,
)
from bhraman.utils.logging import get_logger
from bhraman.utils.slugs import unique_slug

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService

logger = get_logger(__name__)

# Filter values meaning "no filter" on the public listing
ANY_LOCATION = "All Locations"
ANY_DURATION = "Any Duration"
ANY_PRICE = "Any Price"

PUBLIC_SORTS = {"popular", "price-low-high", "price-high-low", "newest"}

# Optional package fields an update may clear with an explicit null
CLEARABLE_FIELDS = ("discounted_price",)


def parse_range(value: str | None, strip: str = "") -> tuple[float | None, float | None]:
    """Parse "1-3 Days", "7+ Days", "$0-$500" or "$1000+" into (min, max).

    Unparseable input yields (None, None), i.e. no filter.
    """
    if not value:
        return None, None
    text = value.replace(strip, "") if strip else value
    bounded = re.match(r"^\s*(\d+(?:\.\d+)?)\s*-\s*(\d+(?:\.\d+)?)", text)
    if bounded:
        return float(bounded.group(1)), float(bounded.group(2))
    open_ended = re.match(r"^\s*(\d+(?:\.\d+)?)\s*\+", text)
    if open_ended:
        return float(open_ended.group(1)), None
    return None, None


def _in_range(value: float, bounds: tuple[float | None, float | None]) -> bool:
    low, high = bounds
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


class PackageCatalog:
    """Service for travel packages."""

    PACKAGES_TABLE = "packages"

    def __init__(self, db: "DynamoDBService") -> None:
        """Initialize package catalog.

        Args:
            db: DynamoDB service instance
        """
        self.db = db

    # Reads

    def get_package(self, package_id: str) -> Package | None:
        item = self.db.get_item(self.PACKAGES_TABLE, {"package_id": package_id})
        return self._item_to_package(item) if item else None

    def require_package(self, package_id: str) -> Package:
        """Get a package or raise PACKAGE_MISSING (404)."""
        package = self.get_package(package_id)
        if package is None:
            raise BhramanError(
                code=ErrorCode.PACKAGE_MISSING, details={"package_id": package_id}
            )
        return package

    def get_by_slug(self, slug: str) -> Package:
        """Public lookup by slug.

        Raises:
            BhramanError: PACKAGE_MISSING
        """
        results = self.db.query_by_gsi(
            table=self.PACKAGES_TABLE,
            index_name="slug-index",
            partition_key_name="slug",
            partition_key_value=slug,
        )
        if not results:
            raise BhramanError(code=ErrorCode.PACKAGE_MISSING, details={"slug": slug})
        return self._item_to_package(results[0])

    def get_summaries(self, package_ids: set[str]) -> dict[str, PackageSummary]:
        """Batch-load compact projections keyed by package ID. Missing IDs are absent."""
        items = self.db.batch_get(
            self.PACKAGES_TABLE, [{"package_id": pid} for pid in package_ids]
        )
        return {item["package_id"]: self._item_to_summary(item) for item in items}

    def slug_exists(self, slug: str, exclude_id: str | None = None) -> bool:
        results = self.db.query_by_gsi(
            table=self.PACKAGES_TABLE,
            index_name="slug-index",
            partition_key_name="slug",
            partition_key_value=slug,
        )
        return any(item["package_id"] != exclude_id for item in results)

    def list_all(self) -> list[Package]:
        return [self._item_to_package(item) for item in self.db.scan(self.PACKAGES_TABLE)]

    def list_admin(
        self,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        featured: bool | None = None,
    ) -> Page[Package]:
        """Admin listing: newest first, paginated.

        Args:
            page: 1-based page number
            limit: Page size
            search: Case-insensitive substring of title, location or description
            featured: Filter on the featured flag when set
        """
        packages = self.list_all()
        if search:
            needle = search.lower()
            packages = [
                p
                for p in packages
                if needle in p.title.lower()
                or needle in p.location.lower()
                or needle in p.description.lower()
            ]
        if featured is not None:
            packages = [p for p in packages if p.featured == featured]
        packages.sort(key=lambda p: p.created_at, reverse=True)
        return paginate(packages, page, limit)

    def list_public(
        self,
        search: str | None = None,
        location: str | None = None,
        duration: str | None = None,
        price_range: str | None = None,
        featured: bool = False,
        sort_by: str = "popular",
    ) -> list[Package]:
        """Public catalog listing with filters.

        Args:
            search: Case-insensitive substring of title or descriptions
            location: Exact location, "All Locations" for any
            duration: "1-3 Days", "7+ Days" or "Any Duration"
            price_range: "$0-$500", "$1000+" or "Any Price"
            featured: Only featured packages when True
            sort_by: popular (featured first, then cheapest), price-low-high,
                price-high-low or newest
        """
        packages = self.list_all()

        if search:
            needle = search.lower()
            packages = [
                p
                for p in packages
                if needle in p.title.lower()
                or needle in p.description.lower()
                or needle in p.short_description.lower()
            ]
        if location and location != ANY_LOCATION:
            packages = [p for p in packages if p.location == location]
        if duration and duration != ANY_DURATION:
            bounds = parse_range(duration)
            packages = [p for p in packages if _in_range(p.duration, bounds)]
        if price_range and price_range != ANY_PRICE:
            bounds = parse_range(price_range, strip="$")
            packages = [p for p in packages if _in_range(p.price, bounds)]
        if featured:
            packages = [p for p in packages if p.featured]

        if sort_by == "price-low-high":
            packages.sort(key=lambda p: p.price)
        elif sort_by == "price-high-low":
            packages.sort(key=lambda p: p.price, reverse=True)
        elif sort_by == "newest":
            packages.sort(key=lambda p: p.created_at, reverse=True)
        else:
            packages.sort(key=lambda p: (not p.featured, p.price))
        return packages

    # Writes

    def create_package(self, data: PackageCreate) -> Package:
        """Create a package with a unique slug derived from its title.

        Raises:
            BhramanError: INVALID_PRICE if discounted_price exceeds price.
        """
        self._check_prices(data.price, data.discounted_price)

        now = dt.datetime.now(dt.UTC)
        package = Package(
            package_id=str(uuid.uuid4()),
            slug=unique_slug(data.title, self.slug_exists),
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        self.db.put_item(
            self.PACKAGES_TABLE,
            self._package_to_item(package),
            condition_expression="attribute_not_exists(package_id)",
        )
        logger.info(
            "package_created",
            extra={"package_id": package.package_id, "slug": package.slug},
        )
        return package

    def update_package(self, package_id: str, data: PackageUpdate) -> Package:
        """Apply a partial update. A changed title re-derives the slug.

        Raises:
            BhramanError: PACKAGE_MISSING, INVALID_PRICE
        """
        current = self.require_package(package_id)
        provided = data.model_dump(exclude_unset=True)
        # An explicit null clears a nullable field; nulls elsewhere are ignored
        remove = [f for f in CLEARABLE_FIELDS if f in provided and provided[f] is None]
        changes = {k: v for k, v in provided.items() if v is not None}
        if not changes and not remove:
            return current

        discounted_price = changes.get("discounted_price", current.discounted_price)
        self._check_prices(
            changes.get("price", current.price),
            None if "discounted_price" in remove else discounted_price,
        )
        if "itinerary" in changes:
            changes["itinerary"] = [
                {k: v for k, v in day.items() if v is not None} for day in changes["itinerary"]
            ]

        if "title" in changes:
            changes["title"] = changes["title"].strip()
            if changes["title"] != current.title:
                changes["slug"] = unique_slug(
                    changes["title"],
                    lambda slug: self.slug_exists(slug, exclude_id=package_id),
                )

        changes["updated_at"] = dt.datetime.now(dt.UTC).isoformat()
        attrs = self.db.update_fields(
            self.PACKAGES_TABLE,
            {"package_id": package_id},
            changes,
            condition_expression="attribute_exists(package_id)",
            remove=remove,
        )
        if attrs is None:
            raise BhramanError(
                code=ErrorCode.PACKAGE_MISSING, details={"package_id": package_id}
            )
        logger.info(
            "package_updated",
            extra={"package_id": package_id, "updated_fields": sorted([*changes, *remove])},
        )
        return self._item_to_package(attrs)

    def delete_package(self, package_id: str) -> None:
        """Hard delete. Bookings referencing the package keep the dangling id.

        Raises:
            BhramanError: PACKAGE_MISSING
        """
        self.require_package(package_id)
        self.db.delete_item(self.PACKAGES_TABLE, {"package_id": package_id})
        logger.info("package_deleted", extra={"package_id": package_id})

    @staticmethod
    def _check_prices(price: float, discounted_price: float | None) -> None:
        if discounted_price is not None and discounted_price > price:
            raise BhramanError(
                code=ErrorCode.INVALID_PRICE,
                details={"price": str(price), "discounted_price": str(discounted_price)},
            )

    # Persistence helpers

    def _package_to_item(self, package: Package) -> dict[str, Any]:
        """Convert Package model to DynamoDB item."""
        item = package.model_dump(mode="json", exclude_none=True)
        # Itinerary entries without an image are stored without the key
        item["itinerary"] = [
            {k: v for k, v in day.items() if v is not None} for day in item["itinerary"]
        ]
        return item

    def _item_to_package(self, item: dict[str, Any]) -> Package:
        """Convert DynamoDB item to Package model."""
        return Package(
            package_id=item["package_id"],
            slug=item["slug"],
            title=item["title"],
            description=item.get("description", ""),
            short_description=item.get("short_description", ""),
            location=item.get("location", ""),
            duration=item["duration"],
            price=item["price"],
            discounted_price=item.get("discounted_price"),
            max_group_size=item["max_group_size"],
            images=list(item.get("images", [])),
            inclusions=list(item.get("inclusions", [])),
            exclusions=list(item.get("exclusions", [])),
            itinerary=[ItineraryDay(**day) for day in item.get("itinerary", [])],
            featured=bool(item.get("featured", False)),
            created_at=dt.datetime.fromisoformat(item["created_at"]),
            updated_at=dt.datetime.fromisoformat(item["updated_at"]),
        )

    def _item_to_summary(self, item: dict[str, Any]) -> PackageSummary:
        return PackageSummary(
            package_id=item["package_id"],
            title=item["title"],
            slug=item["slug"],
            location=item.get("location"),
            duration=item.get("duration"),
            price=item.get("price"),
            images=list(item.get("images", [])),
        )
