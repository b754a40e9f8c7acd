"""Admin booking management endpoints.

Provides REST endpoints for:
- GET /admin/bookings - List bookings with filters and pagination
- POST /admin/bookings - Create a booking on behalf of a customer
- GET /admin/bookings/{booking_id} - Get a booking
- PATCH /admin/bookings/{booking_id} - Update status, payment or details
- DELETE /admin/bookings/{booking_id} - Delete a booking
- POST /admin/bookings/{booking_id}/complete-payment - Mark payment completed
- POST /admin/bookings/{booking_id}/send-confirmation - Acknowledge a confirmation request

Every route is gated by require_admin, which runs before any service call.
"""

from fastapi import APIRouter, Depends, Query

from bhraman.models import AdminBookingCreate, BookingDetail, BookingUpdate, Page
from bhraman.services.bookings import BookingService
from bhraman_api.dependencies import get_booking_service
from bhraman_api.models.bookings import CompletePaymentRequest
from bhraman_api.models.common import DataResponse, MessageDataResponse, MessageResponse
from bhraman_api.security import require_admin

router = APIRouter(
    prefix="/admin/bookings",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Admin access required"},
    },
)


@router.get(
    "",
    summary="List bookings",
    description="""
List all bookings, newest first.

**Filters:**
- `status`: pending, confirmed, cancelled or completed
- `payment_status`: pending, completed, failed or refunded
- `search`: substring of contact name, e-mail or phone

Unknown filter values are ignored.
""",
    response_model=Page[BookingDetail],
)
def list_bookings(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    status: str | None = Query(default=None),
    payment_status: str | None = Query(default=None),
    search: str | None = Query(default=None),
    service: BookingService = Depends(get_booking_service),
) -> Page[BookingDetail]:
    return service.list_bookings(
        page=page,
        limit=limit,
        status=status,
        payment_status=payment_status,
        search=search,
    )


@router.post(
    "",
    summary="Create booking for a customer",
    response_model=MessageDataResponse[BookingDetail],
    status_code=201,
    responses={
        201: {"description": "Booking created"},
        400: {"description": "Validation error, unknown package or capacity exceeded"},
    },
)
def create_booking(
    request: AdminBookingCreate,
    service: BookingService = Depends(get_booking_service),
) -> MessageDataResponse[BookingDetail]:
    detail = service.admin_create_booking(request)
    return MessageDataResponse[BookingDetail](
        message="Booking created successfully", data=detail
    )


@router.get(
    "/{booking_id}",
    summary="Get booking",
    response_model=DataResponse[BookingDetail],
    responses={404: {"description": "Booking not found"}},
)
def get_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
) -> DataResponse[BookingDetail]:
    return DataResponse[BookingDetail](data=service.get_booking(booking_id))


@router.patch(
    "/{booking_id}",
    summary="Update booking",
    description="""
Partially update a booking.

**Status transitions:**
- pending -> confirmed, cancelled
- confirmed -> completed
- cancelled and completed are final

Payment may move from pending to completed, and from any state to failed
or refunded. Changing the number of people re-checks the package capacity
but does not recompute the total amount.

**Errors:**
- 400 for unknown status values, invalid phone or capacity exceeded
- 409 for transitions that are not allowed
""",
    response_model=MessageDataResponse[BookingDetail],
    responses={
        400: {"description": "Invalid status, phone or group size"},
        404: {"description": "Booking not found"},
        409: {"description": "Transition not allowed"},
    },
)
def update_booking(
    booking_id: str,
    request: BookingUpdate,
    service: BookingService = Depends(get_booking_service),
) -> MessageDataResponse[BookingDetail]:
    detail = service.update_booking(booking_id, request)
    return MessageDataResponse[BookingDetail](
        message="Booking updated successfully", data=detail
    )


@router.delete(
    "/{booking_id}",
    summary="Delete booking",
    response_model=MessageResponse,
    responses={404: {"description": "Booking not found"}},
)
def delete_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
) -> MessageResponse:
    service.delete_booking(booking_id)
    return MessageResponse(message="Booking deleted successfully")


@router.post(
    "/{booking_id}/complete-payment",
    summary="Complete payment",
    description="Mark a pending payment as completed, optionally recording a payment reference.",
    response_model=MessageDataResponse[BookingDetail],
    responses={
        404: {"description": "Booking not found"},
        409: {"description": "Payment is not pending"},
    },
)
def complete_payment(
    booking_id: str,
    request: CompletePaymentRequest | None = None,
    service: BookingService = Depends(get_booking_service),
) -> MessageDataResponse[BookingDetail]:
    payment_id = request.payment_id if request else None
    detail = service.complete_payment(booking_id, payment_id=payment_id)
    return MessageDataResponse[BookingDetail](
        message="Payment marked as completed", data=detail
    )


@router.post(
    "/{booking_id}/send-confirmation",
    summary="Send booking confirmation",
    description="""
Acknowledge a request to e-mail the booking confirmation to the customer.

No e-mail is delivered; the request is logged.
""",
    response_model=MessageResponse,
    responses={404: {"description": "Booking not found"}},
)
def send_confirmation(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
) -> MessageResponse:
    return MessageResponse(message=service.send_confirmation(booking_id))
