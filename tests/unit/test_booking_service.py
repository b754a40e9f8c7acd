"""Unit tests for BookingService: creation rules, admin updates and read projections."""

from datetime import date, timedelta

import pytest

from bhraman.models import (
    AdminBookingCreate,
    BhramanError,
    BookingCreate,
    BookingStatus,
    BookingUpdate,
    ContactInfo,
    ErrorCode,
    Package,
    PackageUpdate,
    PaymentStatus,
    User,
)
from bhraman.services.bookings import BookingService, validate_phone
from bhraman.services.packages import PackageCatalog
from bhraman.services.users import UserDirectory


class TestCreateBooking:
    def test_creates_pending_booking_with_amount_snapshot(
        self, bookings: BookingService, customer: User, booking_request: BookingCreate
    ) -> None:
        created = bookings.create_booking(customer, booking_request)

        assert created.status == BookingStatus.PENDING
        stored = bookings.get_stored(created.booking_id)
        assert stored.payment_status == PaymentStatus.PENDING
        assert stored.user_id == customer.user_id
        # 2 people at the discounted 300
        assert stored.total_amount == 600

    def test_amount_is_not_recomputed_after_price_change(
        self,
        bookings: BookingService,
        catalog: PackageCatalog,
        customer: User,
        sample_package: Package,
        booking_request: BookingCreate,
    ) -> None:
        created = bookings.create_booking(customer, booking_request)

        catalog.update_package(
            sample_package.package_id, PackageUpdate(price=900, discounted_price=800)
        )

        assert bookings.get_booking(created.booking_id).total_amount == 600

    def test_group_larger_than_package_is_rejected(
        self, bookings: BookingService, customer: User, booking_request: BookingCreate
    ) -> None:
        request = booking_request.model_copy(update={"number_of_people": 5})

        with pytest.raises(BhramanError) as exc_info:
            bookings.create_booking(customer, request)

        assert exc_info.value.code == ErrorCode.CAPACITY_EXCEEDED
        assert bookings.list_all() == []

    def test_unknown_package_is_rejected(
        self, bookings: BookingService, customer: User, booking_request: BookingCreate
    ) -> None:
        request = booking_request.model_copy(update={"package_id": "no-such-package"})

        with pytest.raises(BhramanError) as exc_info:
            bookings.create_booking(customer, request)

        assert exc_info.value.code == ErrorCode.PACKAGE_NOT_FOUND

    def test_short_phone_is_rejected(
        self, bookings: BookingService, customer: User, booking_request: BookingCreate
    ) -> None:
        request = booking_request.model_copy(
            update={"contact_info": ContactInfo(name="A", email="a@example.com", phone="12345")}
        )

        with pytest.raises(BhramanError) as exc_info:
            bookings.create_booking(customer, request)

        assert exc_info.value.code == ErrorCode.INVALID_PHONE

    def test_admins_cannot_book(
        self, bookings: BookingService, admin: User, booking_request: BookingCreate
    ) -> None:
        with pytest.raises(BhramanError) as exc_info:
            bookings.create_booking(admin, booking_request)

        assert exc_info.value.code == ErrorCode.FORBIDDEN

    def test_admin_create_for_unknown_user(
        self, bookings: BookingService, booking_request: BookingCreate
    ) -> None:
        request = AdminBookingCreate(**booking_request.model_dump(), user_id="ghost")

        with pytest.raises(BhramanError) as exc_info:
            bookings.admin_create_booking(request)

        assert exc_info.value.code == ErrorCode.USER_NOT_FOUND

    def test_admin_create_without_user(
        self, bookings: BookingService, booking_request: BookingCreate
    ) -> None:
        detail = bookings.admin_create_booking(AdminBookingCreate(**booking_request.model_dump()))

        assert detail.user.kind == "missing"
        assert detail.customer_email == "asha@example.com"


class TestValidatePhone:
    @pytest.mark.parametrize("phone", ["+91 98765 43210", "(022) 1234-5678", "9876543210"])
    def test_accepts_ten_digits(self, phone: str) -> None:
        validate_phone(phone)

    @pytest.mark.parametrize("phone", ["", None, "98765-4321", "phone"])
    def test_rejects_fewer_digits(self, phone: str | None) -> None:
        with pytest.raises(BhramanError):
            validate_phone(phone)


class TestReads:
    def test_detail_resolves_package_and_user(
        self,
        bookings: BookingService,
        customer: User,
        sample_package: Package,
        booking_request: BookingCreate,
    ) -> None:
        created = bookings.create_booking(customer, booking_request)

        detail = bookings.get_booking(created.booking_id)

        assert detail.package.kind == "resolved"
        assert detail.package.package.slug == sample_package.slug
        assert detail.package_name == "Goa Beach Escape"
        assert detail.user.kind == "resolved"
        assert detail.customer_name == customer.name

    def test_deleted_package_reads_as_unknown(
        self,
        bookings: BookingService,
        catalog: PackageCatalog,
        customer: User,
        sample_package: Package,
        booking_request: BookingCreate,
    ) -> None:
        created = bookings.create_booking(customer, booking_request)
        catalog.delete_package(sample_package.package_id)

        detail = bookings.get_booking(created.booking_id)

        assert detail.package.kind == "missing"
        assert detail.package.id == sample_package.package_id
        assert detail.package_name == "Unknown Package"

    def test_only_owner_can_read(
        self,
        bookings: BookingService,
        customer: User,
        other_customer: User,
        booking_request: BookingCreate,
    ) -> None:
        created = bookings.create_booking(customer, booking_request)

        assert bookings.get_booking_for_user(customer, created.booking_id).booking_id == (
            created.booking_id
        )
        with pytest.raises(BhramanError) as exc_info:
            bookings.get_booking_for_user(other_customer, created.booking_id)

        assert exc_info.value.code == ErrorCode.NOT_OWNER

    def test_missing_booking(self, bookings: BookingService) -> None:
        with pytest.raises(BhramanError) as exc_info:
            bookings.get_booking("nope")

        assert exc_info.value.code == ErrorCode.BOOKING_NOT_FOUND

    def test_user_bookings_newest_first(
        self, bookings: BookingService, customer: User, booking_request: BookingCreate
    ) -> None:
        first = bookings.create_booking(customer, booking_request)
        second = bookings.create_booking(customer, booking_request)

        ids = [d.booking_id for d in bookings.list_bookings_for_user(customer)]

        assert ids == [second.booking_id, first.booking_id]

    def test_admin_list_filters_and_search(
        self,
        bookings: BookingService,
        customer: User,
        other_customer: User,
        booking_request: BookingCreate,
    ) -> None:
        first = bookings.create_booking(customer, booking_request)
        other_request = booking_request.model_copy(
            update={
                "contact_info": ContactInfo(
                    name="Vikram Singh", email="vikram@example.com", phone="9123456780"
                )
            }
        )
        bookings.create_booking(other_customer, other_request)
        bookings.update_booking(first.booking_id, BookingUpdate(status="confirmed"))

        confirmed = bookings.list_bookings(status="confirmed")
        assert [d.booking_id for d in confirmed.data] == [first.booking_id]

        searched = bookings.list_bookings(search="VIKRAM")
        assert [d.customer_name for d in searched.data] == ["Vikram Singh"]

        by_phone = bookings.list_bookings(search="91234")
        assert by_phone.pagination.total == 1

        unfiltered = bookings.list_bookings(status="bogus", limit=1)
        assert unfiltered.pagination.total == 2
        assert unfiltered.pagination.pages == 2
        assert len(unfiltered.data) == 1


class TestUpdateBooking:
    @pytest.fixture
    def booking_id(
        self, bookings: BookingService, customer: User, booking_request: BookingCreate
    ) -> str:
        return bookings.create_booking(customer, booking_request).booking_id

    def test_confirm_advances_updated_at(self, bookings: BookingService, booking_id: str) -> None:
        before = bookings.get_stored(booking_id)

        detail = bookings.update_booking(booking_id, BookingUpdate(status="confirmed"))

        assert detail.status == BookingStatus.CONFIRMED
        assert detail.updated_at > before.updated_at
        assert detail.package_name == "Goa Beach Escape"

    def test_unknown_status_is_rejected_before_write(
        self, bookings: BookingService, booking_id: str
    ) -> None:
        before = bookings.get_stored(booking_id)

        with pytest.raises(BhramanError) as exc_info:
            bookings.update_booking(
                booking_id, BookingUpdate(status="shipped", special_requests="changed")
            )

        assert exc_info.value.code == ErrorCode.INVALID_STATUS
        assert bookings.get_stored(booking_id) == before

    def test_unknown_payment_status(self, bookings: BookingService, booking_id: str) -> None:
        with pytest.raises(BhramanError) as exc_info:
            bookings.update_booking(booking_id, BookingUpdate(payment_status="paid"))

        assert exc_info.value.code == ErrorCode.INVALID_PAYMENT_STATUS

    def test_terminal_status_cannot_change(
        self, bookings: BookingService, booking_id: str
    ) -> None:
        bookings.update_booking(booking_id, BookingUpdate(status="cancelled"))

        with pytest.raises(BhramanError) as exc_info:
            bookings.update_booking(booking_id, BookingUpdate(status="confirmed"))

        assert exc_info.value.code == ErrorCode.INVALID_TRANSITION

    def test_group_size_is_rechecked_without_repricing(
        self, bookings: BookingService, booking_id: str
    ) -> None:
        detail = bookings.update_booking(booking_id, BookingUpdate(number_of_people=3))
        assert detail.number_of_people == 3
        assert detail.total_amount == 600

        with pytest.raises(BhramanError) as exc_info:
            bookings.update_booking(booking_id, BookingUpdate(number_of_people=10))

        assert exc_info.value.code == ErrorCode.CAPACITY_EXCEEDED

    def test_refund_from_any_payment_state(
        self, bookings: BookingService, booking_id: str
    ) -> None:
        bookings.complete_payment(booking_id, payment_id="pi_123")

        detail = bookings.update_booking(booking_id, BookingUpdate(payment_status="refunded"))

        assert detail.payment_status == PaymentStatus.REFUNDED

    def test_update_start_date_and_contact(
        self, bookings: BookingService, booking_id: str
    ) -> None:
        new_date = date.today() + timedelta(days=60)
        contact = ContactInfo(name="Asha R", email="asha.r@example.com", phone="9988776655")

        detail = bookings.update_booking(
            booking_id, BookingUpdate(start_date=new_date, contact_info=contact)
        )

        assert detail.start_date == new_date
        assert detail.contact_info == contact


class TestPayments:
    def test_complete_payment(
        self, bookings: BookingService, customer: User, booking_request: BookingCreate
    ) -> None:
        created = bookings.create_booking(customer, booking_request)

        detail = bookings.complete_payment(created.booking_id, payment_id="pi_123")

        assert detail.payment_status == PaymentStatus.COMPLETED
        assert detail.payment_id == "pi_123"

    def test_complete_payment_twice_is_rejected(
        self, bookings: BookingService, customer: User, booking_request: BookingCreate
    ) -> None:
        created = bookings.create_booking(customer, booking_request)
        bookings.complete_payment(created.booking_id)

        with pytest.raises(BhramanError) as exc_info:
            bookings.complete_payment(created.booking_id)

        assert exc_info.value.code == ErrorCode.INVALID_TRANSITION

    def test_payment_history(
        self, bookings: BookingService, customer: User, booking_request: BookingCreate
    ) -> None:
        paid_online = bookings.create_booking(customer, booking_request)
        paid_direct = bookings.create_booking(customer, booking_request)
        bookings.create_booking(customer, booking_request)
        bookings.complete_payment(paid_online.booking_id, payment_id="pi_999")
        bookings.complete_payment(paid_direct.booking_id)

        records = {r.booking_id: r for r in bookings.list_payments_for_user(customer)}

        assert set(records) == {paid_online.booking_id, paid_direct.booking_id}
        assert records[paid_online.booking_id].id == "pi_999"
        assert records[paid_online.booking_id].payment_method == "Online Payment"
        assert records[paid_direct.booking_id].id == f"PAY-{paid_direct.booking_id}"
        assert records[paid_direct.booking_id].payment_method == "Direct Payment"
        assert records[paid_direct.booking_id].amount == 600


class TestDeleteAndConfirm:
    def test_delete_booking(
        self,
        bookings: BookingService,
        users: UserDirectory,
        customer: User,
        booking_request: BookingCreate,
    ) -> None:
        created = bookings.create_booking(customer, booking_request)

        bookings.delete_booking(created.booking_id)

        with pytest.raises(BhramanError):
            bookings.get_stored(created.booking_id)
        assert users.get_user(customer.user_id) is not None

    def test_send_confirmation_sends_nothing(
        self, bookings: BookingService, customer: User, booking_request: BookingCreate
    ) -> None:
        created = bookings.create_booking(customer, booking_request)

        message = bookings.send_confirmation(created.booking_id)

        assert message == f"Confirmation email queued for {customer.email}"
