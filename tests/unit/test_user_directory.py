"""Unit tests for UserDirectory: lazy creation, profile updates and admin management."""

import pytest

from bhraman.models import (
    BhramanError,
    BookingCreate,
    ErrorCode,
    Identity,
    Package,
    User,
    UserRole,
)
from bhraman.services.bookings import BookingService
from bhraman.services.packages import PackageCatalog
from bhraman.services.users import UserDirectory


class TestGetOrCreate:
    """First sign-in creates the user; later sign-ins find it."""

    def test_creates_user_for_new_identity(self, users: UserDirectory) -> None:
        identity = Identity(external_id="sub-new", email="Neha@Example.com", name="Neha Gupta")

        user = users.get_or_create(identity)

        assert user.external_id == "sub-new"
        assert user.email == "neha@example.com"
        assert user.name == "Neha Gupta"
        assert user.role == UserRole.USER
        assert users.get_by_external_id("sub-new") == user

    def test_returns_existing_user(self, users: UserDirectory, customer: User) -> None:
        identity = Identity(external_id=customer.external_id, email=customer.email)

        assert users.get_or_create(identity).user_id == customer.user_id

    def test_name_defaults_to_email_local_part(self, users: UserDirectory) -> None:
        user = users.get_or_create(Identity(external_id="sub-x", email="traveller@example.com"))
        assert user.name == "traveller"

    def test_new_subject_with_taken_email_is_rejected(
        self, users: UserDirectory, customer: User
    ) -> None:
        identity = Identity(external_id="sub-other", email=customer.email.upper())

        with pytest.raises(BhramanError) as exc_info:
            users.get_or_create(identity)

        assert exc_info.value.code == ErrorCode.EMAIL_IN_USE
        assert users.get_by_external_id("sub-other") is None
        assert users.get_user(customer.user_id).external_id == customer.external_id

    def test_admin_email_does_not_grant_admin(self, users: UserDirectory, admin: User) -> None:
        identity = Identity(external_id="sub-claims-admin-email", email=admin.email)

        with pytest.raises(BhramanError) as exc_info:
            users.get_or_create(identity)

        assert exc_info.value.code == ErrorCode.EMAIL_IN_USE
        assert users.resolve(identity) is None
        stored = users.get_user(admin.user_id)
        assert stored.external_id == "sub-admin-0001"
        assert stored.role == UserRole.ADMIN

    def test_create_user_rejects_duplicate_email(
        self, users: UserDirectory, customer: User
    ) -> None:
        with pytest.raises(BhramanError) as exc_info:
            users.create_user(external_id="sub-dup", email=" Asha@Example.com ", name="Dup")

        assert exc_info.value.code == ErrorCode.EMAIL_IN_USE
        assert len(users.db.scan("users")) == 1

    def test_missing_email_claim_is_rejected(self, users: UserDirectory) -> None:
        with pytest.raises(BhramanError) as exc_info:
            users.get_or_create(Identity(external_id="sub-no-email"))

        assert exc_info.value.code == ErrorCode.AUTH_REQUIRED


class TestUpdateProfile:
    def test_updates_name_parts_and_phone(self, users: UserDirectory, customer: User) -> None:
        identity = Identity(external_id=customer.external_id, email=customer.email)

        user = users.update_profile(identity, last_name="Iyer", phone="9876543210")

        assert user.name == "Asha Iyer"
        assert user.phone == "9876543210"

    def test_phone_must_be_unique(
        self, users: UserDirectory, customer: User, other_customer: User
    ) -> None:
        users.update_profile(
            Identity(external_id=customer.external_id, email=customer.email),
            phone="9876543210",
        )

        with pytest.raises(BhramanError) as exc_info:
            users.update_profile(
                Identity(external_id=other_customer.external_id, email=other_customer.email),
                phone="9876543210",
            )

        assert exc_info.value.code == ErrorCode.PHONE_IN_USE

    def test_keeping_own_phone_is_allowed(self, users: UserDirectory, customer: User) -> None:
        identity = Identity(external_id=customer.external_id, email=customer.email)
        users.update_profile(identity, phone="9876543210")

        user = users.update_profile(identity, first_name="Asha", phone="9876543210")

        assert user.phone == "9876543210"


class TestAdminManagement:
    def test_list_users_filters_sorts_and_counts_bookings(
        self,
        users: UserDirectory,
        bookings: BookingService,
        customer: User,
        other_customer: User,
        admin: User,
        booking_request: BookingCreate,
    ) -> None:
        bookings.create_booking(customer, booking_request)
        bookings.create_booking(customer, booking_request)

        page = users.list_users(role="user", sort="name")

        assert [u.name for u in page.data] == ["Asha Rao", "Vikram Singh"]
        assert page.data[0].booking_count == 2
        assert page.data[1].booking_count == 0
        assert page.pagination.total == 2

    def test_list_users_search_and_paginate(
        self, users: UserDirectory, customer: User, other_customer: User, admin: User
    ) -> None:
        page = users.list_users(search="EXAMPLE.COM", sort="email", page=2, limit=2)

        assert page.pagination.total == 3
        assert page.pagination.pages == 2
        assert [u.email for u in page.data] == ["vikram@example.com"]

    def test_user_detail_shows_unknown_package_for_deleted_package(
        self,
        users: UserDirectory,
        bookings: BookingService,
        catalog: PackageCatalog,
        customer: User,
        sample_package: Package,
        booking_request: BookingCreate,
    ) -> None:
        bookings.create_booking(customer, booking_request)
        catalog.delete_package(sample_package.package_id)

        detail = users.get_user_detail(customer.user_id)

        assert detail.booking_count == 1
        assert detail.bookings[0].package_name == "Unknown Package"

    def test_user_detail_limits_recent_bookings(
        self,
        users: UserDirectory,
        bookings: BookingService,
        customer: User,
        booking_request: BookingCreate,
    ) -> None:
        for _ in range(6):
            bookings.create_booking(customer, booking_request)

        assert len(users.get_user_detail(customer.user_id).bookings) == 5
        assert len(users.get_user_detail(customer.user_id, all_bookings=True).bookings) == 6

    def test_set_role_promotes_user(self, users: UserDirectory, customer: User) -> None:
        user = users.set_role(customer.user_id, "admin")

        assert user.role == UserRole.ADMIN
        assert user.is_admin

    def test_set_role_rejects_unknown_role(self, users: UserDirectory, customer: User) -> None:
        with pytest.raises(BhramanError) as exc_info:
            users.set_role(customer.user_id, "superuser")

        assert exc_info.value.code == ErrorCode.INVALID_ROLE

    def test_delete_user_keeps_bookings(
        self,
        users: UserDirectory,
        bookings: BookingService,
        customer: User,
        booking_request: BookingCreate,
    ) -> None:
        created = bookings.create_booking(customer, booking_request)

        users.delete_user(customer.user_id)

        assert users.get_user(customer.user_id) is None
        detail = bookings.get_booking(created.booking_id)
        assert detail.user.kind == "missing"
        assert detail.customer_name == "Asha Rao"

    def test_delete_unknown_user(self, users: UserDirectory) -> None:
        with pytest.raises(BhramanError) as exc_info:
            users.delete_user("nope")

        assert exc_info.value.code == ErrorCode.USER_NOT_FOUND
