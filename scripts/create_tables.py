#!/usr/bin/env python3
"""Create the DynamoDB tables and optionally seed sample data.

Creates the users, packages, bookings, home-config and legacy admins
tables under ``bhraman-{env}-``. With --seed, adds a few sample packages
and the default home page configuration.

Usage:
    python scripts/create_tables.py --env dev
    python scripts/create_tables.py --env dev --seed
    python scripts/create_tables.py --env dev --prefix my-sandbox
"""

import argparse
import os
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import boto3  # noqa: E402

from bhraman.config import Settings  # noqa: E402
from bhraman.models import ItineraryDay, PackageCreate  # noqa: E402
from bhraman.schema import create_tables  # noqa: E402
from bhraman.services.dynamodb import DatabasePool  # noqa: E402
from bhraman.services.home_config import HomeConfigService  # noqa: E402
from bhraman.services.packages import PackageCatalog  # noqa: E402
from bhraman.utils.logging import configure_logging  # noqa: E402

SAMPLE_PACKAGES = [
    PackageCreate(
        title="Golden Triangle Tour",
        description="Delhi, Agra and Jaipur in one week, with a sunrise visit to the Taj Mahal.",
        short_description="Classic Delhi, Agra and Jaipur circuit",
        location="Rajasthan",
        duration=6,
        price=899,
        discounted_price=799,
        max_group_size=12,
        images=["https://images.example.com/golden-triangle.jpg"],
        inclusions=["Hotels", "Breakfast", "Private transport"],
        exclusions=["Flights", "Entrance fees"],
        itinerary=[
            ItineraryDay(day=1, title="Arrive in Delhi", description="Transfer and old city walk."),
            ItineraryDay(day=2, title="Agra", description="Drive to Agra and visit the fort."),
        ],
        featured=True,
    ),
    PackageCreate(
        title="Kerala Backwaters",
        description="Houseboat cruise through Alleppey and tea gardens in Munnar.",
        short_description="Houseboats and hill stations",
        location="Kerala",
        duration=5,
        price=650,
        max_group_size=6,
        images=["https://images.example.com/kerala.jpg"],
        inclusions=["Houseboat night", "All meals on board"],
    ),
    PackageCreate(
        title="Ladakh Adventure",
        description="High passes, monasteries and Pangong Lake.",
        short_description="Road trip across the roof of India",
        location="Ladakh",
        duration=9,
        price=1250,
        max_group_size=8,
        images=["https://images.example.com/ladakh.jpg"],
    ),
]


def seed(settings: Settings) -> None:
    """Add sample packages and the default home page configuration."""
    pool = DatabasePool(settings)
    db = pool.connect()
    try:
        catalog = PackageCatalog(db=db)
        for data in SAMPLE_PACKAGES:
            package = catalog.create_package(data)
            print(f"  Created package {package.slug}")
        HomeConfigService(db=db).get_or_create()
        print("  Home configuration ready")
    finally:
        pool.shutdown()


def main() -> int:
    """Run the table setup script."""
    parser = argparse.ArgumentParser(description="Create DynamoDB tables for the Bhraman API")
    parser.add_argument(
        "--env",
        choices=["dev", "staging", "prod"],
        default="dev",
        help="Target environment (default: dev)",
    )
    parser.add_argument(
        "--region",
        default=os.environ.get("AWS_DEFAULT_REGION", "ap-south-1"),
        help="AWS region (default: ap-south-1 or AWS_DEFAULT_REGION env var)",
    )
    parser.add_argument("--prefix", help="Table prefix (default: bhraman-<env>)")
    parser.add_argument("--seed", action="store_true", help="Add sample packages")

    args = parser.parse_args()
    configure_logging()

    settings = Settings(
        environment=args.env,
        table_prefix=args.prefix or f"bhraman-{args.env}",
        aws_region=args.region,
    )

    print(f"\nCreating tables for {settings.table_prefix} (region: {args.region})\n")
    client = boto3.client("dynamodb", region_name=args.region)
    created = create_tables(client, settings.table_prefix)
    for name in created:
        client.get_waiter("table_exists").wait(TableName=name)
        print(f"  Created {name}")
    if not created:
        print("  All tables already exist")

    if args.seed:
        print()
        seed(settings)

    print("\nDone.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
