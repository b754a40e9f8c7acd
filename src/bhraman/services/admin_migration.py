"""One-time migration of the legacy admin table into the user directory.

Idempotent: a legacy admin whose external ID already has a user is
promoted in place, so repeated runs never create duplicates. The legacy
table is only read, never modified.
"""

import datetime as dt
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from bhraman.models import LegacyAdmin, UserRole
from bhraman.utils.logging import get_logger, mask_email

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService
    from .users import UserDirectory

logger = get_logger(__name__)

LEGACY_ADMINS_TABLE = "admins"


@dataclass
class MigrationReport:
    """Outcome of a migration run."""

    found: int = 0
    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def load_legacy_admins(db: "DynamoDBService") -> list[LegacyAdmin]:
    """Read every record of the legacy admin table."""
    return [_item_to_legacy_admin(item) for item in db.scan(LEGACY_ADMINS_TABLE)]


def _item_to_legacy_admin(item: dict[str, Any]) -> LegacyAdmin:
    def _ts(key: str) -> dt.datetime | None:
        return dt.datetime.fromisoformat(item[key]) if item.get(key) else None

    return LegacyAdmin(
        admin_id=item["admin_id"],
        external_id=item["external_id"],
        email=item["email"],
        profile_image=item.get("profile_image"),
        permissions=list(item.get("permissions", [])),
        last_login=_ts("last_login"),
        created_at=_ts("created_at"),
        updated_at=_ts("updated_at"),
    )


def migrate_admins(
    admins: list[LegacyAdmin],
    users: "UserDirectory",
    dry_run: bool = False,
) -> MigrationReport:
    """Promote or create a user for every legacy admin.

    Existing users (matched by external ID) get role admin, an empty
    permission list and the admin's last login. Missing users are created
    with the e-mail local part as name, unless another user already owns
    the e-mail; such conflicts are skipped and reported.

    Args:
        admins: Legacy admin records
        users: Target user directory
        dry_run: Report what would change without writing

    Returns:
        MigrationReport listing created, updated and skipped e-mails
    """
    report = MigrationReport(found=len(admins))
    now = dt.datetime.now(dt.UTC)

    for admin in admins:
        last_login = admin.last_login or now
        existing = users.get_by_external_id(admin.external_id)

        if existing is not None:
            logger.info(
                "admin_migration_update",
                extra={"user_id": existing.user_id, "email_masked": mask_email(existing.email)},
            )
            if not dry_run:
                users.db.update_fields(
                    users.USERS_TABLE,
                    {"user_id": existing.user_id},
                    {
                        "role": UserRole.ADMIN.value,
                        "permissions": [],
                        "last_login": last_login.isoformat(),
                        "updated_at": now.isoformat(),
                    },
                )
            report.updated.append(existing.email)
            continue

        owner = users.get_by_email(admin.email)
        if owner is not None:
            logger.warning(
                "admin_migration_email_conflict",
                extra={"user_id": owner.user_id, "email_masked": mask_email(owner.email)},
            )
            report.skipped.append(owner.email)
            continue

        logger.info("admin_migration_create", extra={"email_masked": mask_email(admin.email)})
        if not dry_run:
            users.create_user(
                external_id=admin.external_id,
                email=admin.email,
                name=admin.email.split("@")[0],
                role=UserRole.ADMIN,
                permissions=[],
                profile_image=admin.profile_image,
                last_login=last_login,
                created_at=admin.created_at,
            )
        report.created.append(admin.email.lower())

    logger.info(
        "admin_migration_finished",
        extra={
            "found": report.found,
            "created": len(report.created),
            "updated": len(report.updated),
            "skipped": len(report.skipped),
            "dry_run": dry_run,
        },
    )
    return report
