"""API models for booking endpoints."""

from pydantic import BaseModel, Field


class CompletePaymentRequest(BaseModel):
    """Optional external payment reference recorded with the payment."""

    payment_id: str | None = Field(
        default=None,
        max_length=200,
        description="External payment/transaction ID",
        examples=["pay_29QQoUBi66xm2f"],
    )
