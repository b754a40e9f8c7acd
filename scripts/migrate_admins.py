#!/usr/bin/env python3
"""Move legacy admin records into the user directory.

Each legacy admin becomes (or promotes) a user with role admin. Safe to
run repeatedly. The legacy table is left as it is.

Usage:
    python scripts/migrate_admins.py --env dev --dry-run
    python scripts/migrate_admins.py --env prod
"""

import argparse
import os
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bhraman.config import Settings  # noqa: E402
from bhraman.models import BhramanError  # noqa: E402
from bhraman.services.admin_migration import load_legacy_admins, migrate_admins  # noqa: E402
from bhraman.services.dynamodb import DatabasePool  # noqa: E402
from bhraman.services.users import UserDirectory  # noqa: E402
from bhraman.utils.logging import configure_logging  # noqa: E402


def run(settings: Settings, dry_run: bool = False) -> int:
    """Migrate admins for the given settings and print a summary."""
    pool = DatabasePool(settings)
    try:
        db = pool.connect()
    except BhramanError as e:
        print(f"Could not connect to DynamoDB: {e.message}")
        return 1

    try:
        admins = load_legacy_admins(db)
        print(f"Found {len(admins)} legacy admin(s)")
        report = migrate_admins(admins, UserDirectory(db=db), dry_run=dry_run)
    finally:
        pool.shutdown()

    verb = "Would create" if dry_run else "Created"
    for email in report.created:
        print(f"  {verb} admin user {email}")
    verb = "Would update" if dry_run else "Updated"
    for email in report.updated:
        print(f"  {verb} existing user {email}")
    for email in report.skipped:
        print(f"  Skipped {email}: e-mail belongs to another user")
    print(
        f"\n{len(report.created)} created, {len(report.updated)} updated, "
        f"{len(report.skipped)} skipped"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the migration script."""
    parser = argparse.ArgumentParser(description="Migrate legacy admins into the users table")
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
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing",
    )

    args = parser.parse_args(argv)
    configure_logging()

    if args.env == "prod" and not args.dry_run:
        confirm = input("WARNING: You are about to modify PRODUCTION users. Type 'yes' to continue: ")
        if confirm.lower() != "yes":
            print("Aborted.")
            return 1

    settings = Settings(
        environment=args.env,
        table_prefix=args.prefix or f"bhraman-{args.env}",
        aws_region=args.region,
    )
    return run(settings, dry_run=args.dry_run)


if __name__ == "__main__":
    sys.exit(main())
