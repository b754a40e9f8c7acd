"""Unit tests for the legacy admin migration."""

import datetime as dt

import pytest

from bhraman.models import LegacyAdmin, User, UserRole
from bhraman.services.admin_migration import load_legacy_admins, migrate_admins
from bhraman.services.dynamodb import DynamoDBService
from bhraman.services.users import UserDirectory

LAST_LOGIN = dt.datetime(2024, 3, 1, 9, 30, tzinfo=dt.UTC)
CREATED_AT = dt.datetime(2023, 6, 15, tzinfo=dt.UTC)


@pytest.fixture
def legacy_admins(db: DynamoDBService, customer: User) -> None:
    """One legacy admin matching the existing customer, one without a user."""
    db.put_item(
        "admins",
        {
            "admin_id": "adm-1",
            "external_id": customer.external_id,
            "email": customer.email,
            "permissions": ["manage_packages"],
            "last_login": LAST_LOGIN.isoformat(),
        },
    )
    db.put_item(
        "admins",
        {
            "admin_id": "adm-2",
            "external_id": "sub-legacy-admin",
            "email": "Ops.Team@Example.com",
            "created_at": CREATED_AT.isoformat(),
        },
    )


class TestMigrateAdmins:
    def test_promotes_existing_and_creates_missing(
        self, db: DynamoDBService, users: UserDirectory, customer: User, legacy_admins: None
    ) -> None:
        report = migrate_admins(load_legacy_admins(db), users)

        assert report.found == 2
        assert report.updated == [customer.email]
        assert report.created == ["ops.team@example.com"]

        promoted = users.get_user(customer.user_id)
        assert promoted.role == UserRole.ADMIN
        assert promoted.permissions == []
        assert promoted.last_login == LAST_LOGIN

        created = users.get_by_external_id("sub-legacy-admin")
        assert created.role == UserRole.ADMIN
        assert created.name == "Ops.Team"
        assert created.created_at == CREATED_AT
        assert created.last_login is not None

    def test_is_idempotent(
        self, db: DynamoDBService, users: UserDirectory, legacy_admins: None
    ) -> None:
        migrate_admins(load_legacy_admins(db), users)
        second = migrate_admins(load_legacy_admins(db), users)

        assert second.created == []
        assert len(second.updated) == 2
        assert len(db.scan("users")) == 2

    def test_dry_run_writes_nothing(
        self, db: DynamoDBService, users: UserDirectory, customer: User, legacy_admins: None
    ) -> None:
        report = migrate_admins(load_legacy_admins(db), users, dry_run=True)

        assert len(report.created) == 1
        assert users.get_by_external_id("sub-legacy-admin") is None
        assert users.get_user(customer.user_id).role == UserRole.USER

    def test_legacy_table_is_untouched(
        self, db: DynamoDBService, users: UserDirectory, legacy_admins: None
    ) -> None:
        migrate_admins(load_legacy_admins(db), users)

        assert {item["admin_id"] for item in db.scan("admins")} == {"adm-1", "adm-2"}

    def test_email_owned_by_another_user_is_skipped(
        self, users: UserDirectory, customer: User
    ) -> None:
        admin = LegacyAdmin(
            admin_id="adm-3", external_id="sub-ops-new", email=customer.email.upper()
        )

        report = migrate_admins([admin], users)

        assert report.created == []
        assert report.skipped == [customer.email]
        assert users.get_by_external_id("sub-ops-new") is None
        matching = [u for u in users.db.scan("users") if u["email"] == customer.email]
        assert len(matching) == 1
        assert users.get_user(customer.user_id).role == UserRole.USER
