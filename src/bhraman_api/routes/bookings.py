"""Customer booking endpoints.

Provides REST endpoints for:
- POST /bookings - Create a booking for the caller
- GET /bookings - List the caller's bookings
- GET /bookings/{booking_id} - Get one of the caller's bookings

Admins are refused on these routes and use /admin/bookings instead.
"""

from fastapi import APIRouter, Depends

from bhraman.models import BookingCreate, BookingCreated, BookingDetail, User
from bhraman.services.bookings import BookingService
from bhraman_api.dependencies import get_booking_service
from bhraman_api.models.common import DataResponse
from bhraman_api.security import require_customer

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post(
    "",
    summary="Create booking",
    description="""
Create a booking for the authenticated customer.

**Requires authentication.** Admins get 403.

The total amount is the number of people times the package's effective
price at creation time. New bookings start as `pending` with payment
`pending`.

**Errors:**
- 400 when the package does not exist, the group exceeds the package's
  maximum size, or the contact phone has fewer than 10 digits
""",
    response_model=BookingCreated,
    status_code=201,
    responses={
        201: {"description": "Booking created"},
        400: {"description": "Validation error, unknown package or capacity exceeded"},
        401: {"description": "Not authenticated"},
        403: {"description": "Admins cannot create customer bookings"},
    },
)
def create_booking(
    request: BookingCreate,
    user: User = Depends(require_customer),
    service: BookingService = Depends(get_booking_service),
) -> BookingCreated:
    return service.create_booking(user, request)


@router.get(
    "",
    summary="List my bookings",
    description="List the caller's bookings, newest first, with resolved package details.",
    response_model=DataResponse[list[BookingDetail]],
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Admins have no customer bookings"},
    },
)
def list_my_bookings(
    user: User = Depends(require_customer),
    service: BookingService = Depends(get_booking_service),
) -> DataResponse[list[BookingDetail]]:
    return DataResponse[list[BookingDetail]](data=service.list_bookings_for_user(user))


@router.get(
    "/{booking_id}",
    summary="Get my booking",
    response_model=DataResponse[BookingDetail],
    responses={
        200: {"description": "Booking found"},
        401: {"description": "Not authenticated"},
        403: {"description": "Booking belongs to another user"},
        404: {"description": "Booking not found"},
    },
)
def get_my_booking(
    booking_id: str,
    user: User = Depends(require_customer),
    service: BookingService = Depends(get_booking_service),
) -> DataResponse[BookingDetail]:
    return DataResponse[BookingDetail](data=service.get_booking_for_user(user, booking_id))
