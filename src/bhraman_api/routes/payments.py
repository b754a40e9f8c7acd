"""Customer payment history endpoint."""

from fastapi import APIRouter, Depends

from bhraman.models import PaymentRecord, User
from bhraman.services.bookings import BookingService
from bhraman_api.dependencies import get_booking_service
from bhraman_api.models.common import DataResponse
from bhraman_api.security import require_customer

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get(
    "",
    summary="List my payments",
    description="""
Payment history derived from the caller's bookings.

**Requires authentication.** Admins get 403.

There is no separate payment store: each booking yields one record with
ID `PAY-<booking_id>`.
""",
    response_model=DataResponse[list[PaymentRecord]],
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Admins have no customer payments"},
    },
)
def list_my_payments(
    user: User = Depends(require_customer),
    service: BookingService = Depends(get_booking_service),
) -> DataResponse[list[PaymentRecord]]:
    return DataResponse[list[PaymentRecord]](data=service.list_payments_for_user(user))
