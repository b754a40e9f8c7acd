"""Pytest configuration and fixtures for Bhraman backend tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto (all tables and GSIs)
- Service instances wired to the mocked database
- Sample users, packages and bookings
- A TestClient for the FastAPI app with gateway identity headers
"""

import os
from datetime import date, timedelta
from typing import Any, Callable, Generator

import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from bhraman import schema
from bhraman.config import Settings
from bhraman.models import (
    BookingCreate,
    ContactInfo,
    ItineraryDay,
    Package,
    PackageCreate,
    User,
    UserRole,
)
from bhraman.services.bookings import BookingService
from bhraman.services.dashboard import DashboardService
from bhraman.services.dynamodb import DatabasePool, DynamoDBService
from bhraman.services.home_config import HomeConfigService
from bhraman.services.packages import PackageCatalog
from bhraman.services.users import UserDirectory

# === Environment Setup ===

# Set environment variables for testing before imports
# Only set fake credentials if no real AWS credentials are configured
os.environ.setdefault("AWS_DEFAULT_REGION", "ap-south-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-bhraman")

if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

TEST_REGION = "ap-south-1"
TEST_TABLE_PREFIX = "test-bhraman"


# === DynamoDB Fixtures ===


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto."""
    if not os.environ.get("AWS_PROFILE"):
        os.environ["AWS_ACCESS_KEY_ID"] = "testing"
        os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
        os.environ["AWS_SECURITY_TOKEN"] = "testing"
        os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = TEST_REGION


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the mocked tables."""
    return Settings(
        environment="test",
        table_prefix=TEST_TABLE_PREFIX,
        aws_region=TEST_REGION,
        db_max_connect_attempts=2,
        db_connect_cooldown_seconds=30,
    )


@pytest.fixture
def dynamodb_client(aws_credentials: None) -> Generator[Any, None, None]:
    """Create a mocked DynamoDB client."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name=TEST_REGION)
        yield client


@pytest.fixture
def create_tables(dynamodb_client: Any) -> list[str]:
    """Create all required DynamoDB tables for testing."""
    return schema.create_tables(dynamodb_client, TEST_TABLE_PREFIX)


@pytest.fixture
def db_pool(create_tables: list[str], settings: Settings) -> Generator[DatabasePool, None, None]:
    """Connection pool bound to the mocked tables."""
    pool = DatabasePool(settings)
    yield pool
    pool.shutdown()


@pytest.fixture
def db(db_pool: DatabasePool) -> DynamoDBService:
    return db_pool.connect()


# === Service Fixtures ===


@pytest.fixture
def users(db: DynamoDBService) -> UserDirectory:
    return UserDirectory(db=db)


@pytest.fixture
def catalog(db: DynamoDBService) -> PackageCatalog:
    return PackageCatalog(db=db)


@pytest.fixture
def bookings(db: DynamoDBService, catalog: PackageCatalog) -> BookingService:
    return BookingService(db=db, catalog=catalog)


@pytest.fixture
def home_config(db: DynamoDBService) -> HomeConfigService:
    return HomeConfigService(db=db)


@pytest.fixture
def dashboard(db: DynamoDBService, bookings: BookingService) -> DashboardService:
    return DashboardService(db=db, bookings=bookings)


# === Sample Data Fixtures ===


@pytest.fixture
def package_create() -> PackageCreate:
    """A valid package request: 400 per person, 300 discounted, up to 4 people."""
    return PackageCreate(
        title="Goa Beach Escape",
        description="Five days of beaches, forts and seafood along the Goan coast.",
        short_description="Sun and sand in North Goa",
        location="Goa",
        duration=5,
        price=400,
        discounted_price=300,
        max_group_size=4,
        images=["https://images.example.com/goa.jpg"],
        inclusions=["Hotel", "Breakfast"],
        exclusions=["Flights"],
        itinerary=[
            ItineraryDay(day=1, title="Arrival", description="Check in and sunset at Baga."),
        ],
        featured=True,
    )


@pytest.fixture
def sample_package(catalog: PackageCatalog, package_create: PackageCreate) -> Package:
    return catalog.create_package(package_create)


@pytest.fixture
def customer(users: UserDirectory) -> User:
    return users.create_user(
        external_id="sub-customer-0001",
        email="asha@example.com",
        name="Asha Rao",
    )


@pytest.fixture
def other_customer(users: UserDirectory) -> User:
    return users.create_user(
        external_id="sub-customer-0002",
        email="vikram@example.com",
        name="Vikram Singh",
    )


@pytest.fixture
def admin(users: UserDirectory) -> User:
    return users.create_user(
        external_id="sub-admin-0001",
        email="admin@example.com",
        name="Site Admin",
        role=UserRole.ADMIN,
    )


@pytest.fixture
def contact_info() -> ContactInfo:
    return ContactInfo(name="Asha Rao", email="asha@example.com", phone="+91 98765 43210")


@pytest.fixture
def booking_request(sample_package: Package, contact_info: ContactInfo) -> BookingCreate:
    """Request for 2 people, 30 days from today."""
    return BookingCreate(
        package_id=sample_package.package_id,
        start_date=date.today() + timedelta(days=30),
        number_of_people=2,
        contact_info=contact_info,
        special_requests="Sea-facing room",
    )


# === API Fixtures ===


@pytest.fixture
def client(db_pool: DatabasePool, settings: Settings) -> TestClient:
    """TestClient for an app wired to the mocked tables."""
    from bhraman_api.main import create_app

    return TestClient(create_app(settings=settings, pool=db_pool))


@pytest.fixture
def headers_for() -> Callable[[User], dict[str, str]]:
    """Build the identity headers API Gateway injects for a user."""

    def _headers(user: User) -> dict[str, str]:
        return {
            "x-user-sub": user.external_id,
            "x-user-email": user.email,
            "x-user-name": user.name,
        }

    return _headers
