"""Booking lifecycle service.

Bookings are created pending by customers and moved through their status
and payment axes by admins:

    pending -> confirmed -> completed
    pending -> cancelled

Read paths resolve the package and user references of each booking and
tolerate references that no longer resolve.
"""

import datetime as dt
import uuid
from typing import TYPE_CHECKING, Any

from bhraman.models import (
    AdminBookingCreate,
    BhramanError,
    Booking,
    BookingCreate,
    BookingCreated,
    BookingDetail,
    BookingStatus,
    BookingUpdate,
    BookingUser,
    ContactInfo,
    ErrorCode,
    MissingRef,
    Page,
    PaymentRecord,
    PaymentStatus,
    ResolvedPackageRef,
    ResolvedUserRef,
    User,
    paginate,
)
from bhraman.models.enums import can_transition, can_transition_payment
from bhraman.models.references import (
    UnresolvedRef,
    customer_identity,
    package_name,
    ref_from_id,
)
from bhraman.utils.logging import get_logger, log_booking_operation

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService
    from .packages import PackageCatalog

logger = get_logger(__name__)

MIN_PHONE_DIGITS = 10


def validate_phone(phone: str | None) -> None:
    """Require at least 10 digits in a contact phone.

    Raises:
        BhramanError: INVALID_PHONE
    """
    digits = sum(ch.isdigit() for ch in phone or "")
    if digits < MIN_PHONE_DIGITS:
        raise BhramanError(
            code=ErrorCode.INVALID_PHONE,
            details={"digits": str(digits), "minimum": str(MIN_PHONE_DIGITS)},
        )


class BookingService:
    """Service for the booking lifecycle."""

    BOOKINGS_TABLE = "bookings"
    USERS_TABLE = "users"

    def __init__(self, db: "DynamoDBService", catalog: "PackageCatalog") -> None:
        """Initialize booking service.

        Args:
            db: DynamoDB service instance
            catalog: Package catalog for price and capacity lookups
        """
        self.db = db
        self.catalog = catalog

    # Creation

    def create_booking(self, user: User, data: BookingCreate) -> BookingCreated:
        """Create a pending booking for a customer.

        The total amount is a snapshot of number_of_people times the unit
        price at this instant.

        Args:
            user: The booking customer
            data: Booking request

        Returns:
            BookingCreated with the new booking ID and status

        Raises:
            BhramanError: FORBIDDEN for admins, PACKAGE_NOT_FOUND,
                CAPACITY_EXCEEDED, INVALID_PHONE
        """
        if user.is_admin:
            raise BhramanError(
                code=ErrorCode.FORBIDDEN,
                details={"reason": "Only users can book packages"},
            )

        booking = self._new_booking(data, user_id=user.user_id)
        return BookingCreated(booking_id=booking.booking_id, status=booking.status)

    def admin_create_booking(self, data: AdminBookingCreate) -> BookingDetail:
        """Create a pending booking on behalf of a user.

        Raises:
            BhramanError: USER_NOT_FOUND if user_id is given but unknown,
                plus the validation errors of create_booking.
        """
        if data.user_id and self.db.get_item(self.USERS_TABLE, {"user_id": data.user_id}) is None:
            raise BhramanError(
                code=ErrorCode.USER_NOT_FOUND, details={"user_id": data.user_id}
            )
        booking = self._new_booking(data, user_id=data.user_id)
        return self.resolve([booking])[0]

    def _new_booking(self, data: BookingCreate, user_id: str | None) -> Booking:
        validate_phone(data.contact_info.phone)

        package = self.catalog.get_package(data.package_id)
        if package is None:
            raise BhramanError(
                code=ErrorCode.PACKAGE_NOT_FOUND, details={"package_id": data.package_id}
            )
        if data.number_of_people > package.max_group_size:
            raise BhramanError(
                code=ErrorCode.CAPACITY_EXCEEDED,
                details={
                    "requested": str(data.number_of_people),
                    "maximum": str(package.max_group_size),
                },
            )

        now = dt.datetime.now(dt.UTC)
        booking = Booking(
            booking_id=str(uuid.uuid4()),
            package_id=package.package_id,
            user_id=user_id,
            start_date=data.start_date,
            number_of_people=data.number_of_people,
            total_amount=round(data.number_of_people * package.unit_price, 2),
            contact_info=data.contact_info,
            special_requests=data.special_requests,
            status=BookingStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        self.db.put_item(
            self.BOOKINGS_TABLE,
            self._booking_to_item(booking),
            condition_expression="attribute_not_exists(booking_id)",
        )
        log_booking_operation(
            logger,
            "booking_created",
            booking_id=booking.booking_id,
            package_id=booking.package_id,
            user_id=user_id,
            status=booking.status.value,
            total_amount=booking.total_amount,
        )
        return booking

    # Reads

    def get_stored(self, booking_id: str) -> Booking:
        """Load a stored booking without resolving references.

        Raises:
            BhramanError: BOOKING_NOT_FOUND
        """
        item = self.db.get_item(self.BOOKINGS_TABLE, {"booking_id": booking_id})
        if item is None:
            raise BhramanError(
                code=ErrorCode.BOOKING_NOT_FOUND, details={"booking_id": booking_id}
            )
        return self._item_to_booking(item)

    def get_booking(self, booking_id: str) -> BookingDetail:
        """Get a booking with its package and user resolved.

        Dangling references produce "Unknown Package" and the embedded contact
        details instead of an error.
        """
        return self.resolve([self.get_stored(booking_id)])[0]

    def get_booking_for_user(self, user: User, booking_id: str) -> BookingDetail:
        """Owner-only read of a booking.

        Raises:
            BhramanError: BOOKING_NOT_FOUND, NOT_OWNER
        """
        booking = self.get_stored(booking_id)
        if booking.user_id != user.user_id:
            raise BhramanError(code=ErrorCode.NOT_OWNER, details={"booking_id": booking_id})
        return self.resolve([booking])[0]

    def list_user_bookings(self, user_id: str) -> list[Booking]:
        items = self.db.query_by_gsi(
            table=self.BOOKINGS_TABLE,
            index_name="user_id-index",
            partition_key_name="user_id",
            partition_key_value=user_id,
        )
        bookings = [self._item_to_booking(item) for item in items]
        bookings.sort(key=lambda b: b.created_at, reverse=True)
        return bookings

    def list_bookings_for_user(self, user: User) -> list[BookingDetail]:
        """A customer's bookings, newest first."""
        return self.resolve(self.list_user_bookings(user.user_id))

    def list_all(self) -> list[Booking]:
        return [self._item_to_booking(item) for item in self.db.scan(self.BOOKINGS_TABLE)]

    def list_bookings(
        self,
        page: int = 1,
        limit: int = 10,
        status: str | None = None,
        payment_status: str | None = None,
        search: str | None = None,
    ) -> Page[BookingDetail]:
        """Admin listing, newest first.

        Status filters outside their enums are ignored. Search is a
        case-insensitive substring match over contact name, e-mail and phone.
        """
        bookings = self.list_all()

        if status in {s.value for s in BookingStatus}:
            bookings = [b for b in bookings if b.status.value == status]
        if payment_status in {s.value for s in PaymentStatus}:
            bookings = [b for b in bookings if b.payment_status.value == payment_status]
        if search:
            needle = search.lower()
            bookings = [
                b
                for b in bookings
                if needle in b.contact_info.name.lower()
                or needle in b.contact_info.email.lower()
                or needle in b.contact_info.phone.lower()
            ]

        bookings.sort(key=lambda b: b.created_at, reverse=True)
        result = paginate(bookings, page, limit)
        return Page[BookingDetail](
            data=self.resolve(result.data), pagination=result.pagination
        )

    def list_payments_for_user(self, user: User) -> list[PaymentRecord]:
        """Payment history derived from a customer's bookings.

        Includes bookings whose payment completed or was refunded, or that
        carry an external payment ID.
        """
        bookings = [
            b
            for b in self.list_user_bookings(user.user_id)
            if b.payment_status in (PaymentStatus.COMPLETED, PaymentStatus.REFUNDED)
            or b.payment_id
        ]
        return [
            PaymentRecord(
                id=b.payment_id or f"PAY-{b.booking_id}",
                booking_id=b.booking_id,
                package_name=detail.package_name,
                amount=b.total_amount,
                status=b.payment_status,
                date=b.updated_at,
                payment_method="Online Payment" if b.payment_id else "Direct Payment",
            )
            for b, detail in zip(bookings, self.resolve(bookings))
        ]

    # Admin mutations

    def update_booking(self, booking_id: str, patch: BookingUpdate) -> BookingDetail:
        """Apply an admin patch and return the re-resolved booking.

        Every check runs before anything is written.

        Raises:
            BhramanError: BOOKING_NOT_FOUND, INVALID_STATUS,
                INVALID_PAYMENT_STATUS, INVALID_TRANSITION, INVALID_PHONE,
                CAPACITY_EXCEEDED
        """
        booking = self.get_stored(booking_id)
        fields: dict[str, Any] = {}

        if patch.status is not None:
            try:
                status = BookingStatus(patch.status)
            except ValueError:
                raise BhramanError(
                    code=ErrorCode.INVALID_STATUS, details={"status": str(patch.status)}
                ) from None
            if not can_transition(booking.status, status):
                raise BhramanError(
                    code=ErrorCode.INVALID_TRANSITION,
                    details={"from": booking.status.value, "to": status.value},
                )
            fields["status"] = status.value

        if patch.payment_status is not None:
            try:
                payment_status = PaymentStatus(patch.payment_status)
            except ValueError:
                raise BhramanError(
                    code=ErrorCode.INVALID_PAYMENT_STATUS,
                    details={"payment_status": str(patch.payment_status)},
                ) from None
            if not can_transition_payment(booking.payment_status, payment_status):
                raise BhramanError(
                    code=ErrorCode.INVALID_TRANSITION,
                    details={
                        "from": booking.payment_status.value,
                        "to": payment_status.value,
                    },
                )
            fields["payment_status"] = payment_status.value

        if patch.contact_info is not None:
            validate_phone(patch.contact_info.phone)
            fields["contact_info"] = patch.contact_info.model_dump()

        if patch.number_of_people is not None:
            package = self.catalog.get_package(booking.package_id) if booking.package_id else None
            if package is not None and patch.number_of_people > package.max_group_size:
                raise BhramanError(
                    code=ErrorCode.CAPACITY_EXCEEDED,
                    details={
                        "requested": str(patch.number_of_people),
                        "maximum": str(package.max_group_size),
                    },
                )
            fields["number_of_people"] = patch.number_of_people

        if patch.start_date is not None:
            fields["start_date"] = patch.start_date.isoformat()
        if patch.payment_id is not None:
            fields["payment_id"] = patch.payment_id
        if patch.special_requests is not None:
            fields["special_requests"] = patch.special_requests

        updated = self._save_fields(booking_id, fields)
        log_booking_operation(
            logger,
            "booking_updated",
            booking_id=booking_id,
            status=updated.status.value,
            payment_status=updated.payment_status.value,
            updated_fields=sorted(fields),
        )
        return self.resolve([updated])[0]

    def complete_payment(self, booking_id: str, payment_id: str | None = None) -> BookingDetail:
        """Mark a pending payment as completed.

        Raises:
            BhramanError: BOOKING_NOT_FOUND, INVALID_TRANSITION if the payment
                is not pending.
        """
        booking = self.get_stored(booking_id)
        if booking.payment_status != PaymentStatus.PENDING:
            raise BhramanError(
                code=ErrorCode.INVALID_TRANSITION,
                details={
                    "from": booking.payment_status.value,
                    "to": PaymentStatus.COMPLETED.value,
                },
            )

        fields: dict[str, Any] = {"payment_status": PaymentStatus.COMPLETED.value}
        if payment_id:
            fields["payment_id"] = payment_id
        updated = self._save_fields(booking_id, fields)
        log_booking_operation(
            logger,
            "payment_completed",
            booking_id=booking_id,
            payment_status=updated.payment_status.value,
            payment_id=payment_id,
        )
        return self.resolve([updated])[0]

    def delete_booking(self, booking_id: str) -> None:
        """Hard delete. Package and user are left untouched.

        Raises:
            BhramanError: BOOKING_NOT_FOUND
        """
        self.get_stored(booking_id)
        self.db.delete_item(self.BOOKINGS_TABLE, {"booking_id": booking_id})
        log_booking_operation(logger, "booking_deleted", booking_id=booking_id)

    def send_confirmation(self, booking_id: str) -> str:
        """Acknowledge a confirmation e-mail request. Nothing is sent.

        Raises:
            BhramanError: BOOKING_NOT_FOUND
        """
        detail = self.get_booking(booking_id)
        log_booking_operation(
            logger,
            "confirmation_requested",
            booking_id=booking_id,
            status=detail.status.value,
            delivered=False,
        )
        return f"Confirmation email queued for {detail.customer_email}"

    # Reference resolution

    def resolve(self, bookings: list[Booking]) -> list[BookingDetail]:
        """Resolve package and user references for a batch of bookings."""
        package_ids = {b.package_id for b in bookings if b.package_id}
        user_ids = {b.user_id for b in bookings if b.user_id}

        packages = self.catalog.get_summaries(package_ids) if package_ids else {}
        users: dict[str, BookingUser] = {}
        if user_ids:
            for item in self.db.batch_get(
                self.USERS_TABLE, [{"user_id": uid} for uid in user_ids]
            ):
                users[item["user_id"]] = BookingUser(
                    user_id=item["user_id"],
                    name=item.get("name", ""),
                    email=item.get("email", ""),
                    phone=item.get("phone"),
                )

        details = []
        for booking in bookings:
            package_ref = ref_from_id(booking.package_id)
            if isinstance(package_ref, UnresolvedRef):
                summary = packages.get(package_ref.id)
                package_ref = (
                    ResolvedPackageRef(package=summary)
                    if summary
                    else MissingRef(id=package_ref.id)
                )

            user_ref = ref_from_id(booking.user_id)
            if isinstance(user_ref, UnresolvedRef):
                found = users.get(user_ref.id)
                user_ref = ResolvedUserRef(user=found) if found else MissingRef(id=user_ref.id)

            name, email = customer_identity(
                user_ref, booking.contact_info.name, booking.contact_info.email
            )
            details.append(
                BookingDetail(
                    booking_id=booking.booking_id,
                    package=package_ref,
                    user=user_ref,
                    package_name=package_name(package_ref),
                    customer_name=name,
                    customer_email=email,
                    start_date=booking.start_date,
                    number_of_people=booking.number_of_people,
                    total_amount=booking.total_amount,
                    contact_info=booking.contact_info,
                    special_requests=booking.special_requests,
                    status=booking.status,
                    payment_status=booking.payment_status,
                    payment_id=booking.payment_id,
                    created_at=booking.created_at,
                    updated_at=booking.updated_at,
                )
            )
        return details

    # Persistence helpers

    def _save_fields(self, booking_id: str, fields: dict[str, Any]) -> Booking:
        fields = {**fields, "updated_at": dt.datetime.now(dt.UTC).isoformat()}
        attrs = self.db.update_fields(
            self.BOOKINGS_TABLE,
            {"booking_id": booking_id},
            fields,
            condition_expression="attribute_exists(booking_id)",
        )
        if attrs is None:
            raise BhramanError(
                code=ErrorCode.BOOKING_NOT_FOUND, details={"booking_id": booking_id}
            )
        return self._item_to_booking(attrs)

    def _booking_to_item(self, booking: Booking) -> dict[str, Any]:
        """Convert Booking model to DynamoDB item.

        Null references are omitted; user_id is a GSI key.
        """
        item: dict[str, Any] = {
            "booking_id": booking.booking_id,
            "start_date": booking.start_date.isoformat(),
            "number_of_people": booking.number_of_people,
            "total_amount": booking.total_amount,
            "contact_info": booking.contact_info.model_dump(),
            "status": booking.status.value,
            "payment_status": booking.payment_status.value,
            "created_at": booking.created_at.isoformat(),
            "updated_at": booking.updated_at.isoformat(),
        }
        if booking.package_id:
            item["package_id"] = booking.package_id
        if booking.user_id:
            item["user_id"] = booking.user_id
        if booking.special_requests:
            item["special_requests"] = booking.special_requests
        if booking.payment_id:
            item["payment_id"] = booking.payment_id
        return item

    def _item_to_booking(self, item: dict[str, Any]) -> Booking:
        """Convert DynamoDB item to Booking model."""
        return Booking(
            booking_id=item["booking_id"],
            package_id=item.get("package_id"),
            user_id=item.get("user_id"),
            start_date=dt.date.fromisoformat(item["start_date"]),
            number_of_people=item["number_of_people"],
            total_amount=item["total_amount"],
            contact_info=ContactInfo(**item["contact_info"]),
            special_requests=item.get("special_requests"),
            status=BookingStatus(item["status"]),
            payment_status=PaymentStatus(item["payment_status"]),
            payment_id=item.get("payment_id"),
            created_at=dt.datetime.fromisoformat(item["created_at"]),
            updated_at=dt.datetime.fromisoformat(item["updated_at"]),
        )
