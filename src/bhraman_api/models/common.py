"""Shared API request/response models.

Reads return ``{data}``, mutations return ``{message, data}`` and deletes
return ``{message}``. Errors use ErrorResponse from bhraman.models.errors.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from bhraman.models.errors import ERROR_MESSAGES, ERROR_RECOVERY, ErrorCode

T = TypeVar("T")

__all__ = [
    "DataResponse",
    "MessageDataResponse",
    "MessageResponse",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
    "format_validation_errors",
]


class DataResponse(BaseModel, Generic[T]):
    """Envelope for reads."""

    data: T


class MessageDataResponse(BaseModel, Generic[T]):
    """Envelope for creates and updates."""

    message: str
    data: T


class MessageResponse(BaseModel):
    """Envelope for deletes and actions without a payload."""

    message: str = Field(..., description="Human-readable result message")


class ValidationErrorDetail(BaseModel):
    """Detail of a single validation error."""

    model_config = ConfigDict(strict=True)

    loc: list[str | int] = Field(
        ...,
        description="Path to the field that failed validation",
        examples=[["body", "contact_info", "email"]],
    )
    msg: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Field required"],
    )
    type: str = Field(
        ...,
        description="Error type identifier",
        examples=["missing"],
    )


class ValidationErrorResponse(BaseModel):
    """Response format for request validation errors (HTTP 400)."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: str = ErrorCode.VALIDATION_FAILED.value
    message: str = ERROR_MESSAGES[ErrorCode.VALIDATION_FAILED]
    recovery: str = ERROR_RECOVERY[ErrorCode.VALIDATION_FAILED]
    details: list[ValidationErrorDetail] = Field(default_factory=list)


def format_validation_errors(errors: Any) -> ValidationErrorResponse:
    """Convert Pydantic validation errors to ValidationErrorResponse.

    Args:
        errors: Sequence of error dicts from RequestValidationError.errors()

    Returns:
        ValidationErrorResponse ready for JSON serialization.
    """
    details = [
        ValidationErrorDetail(
            loc=[str(loc) for loc in error.get("loc", [])],
            msg=str(error.get("msg", "")),
            type=str(error.get("type", "")),
        )
        for error in errors
    ]
    return ValidationErrorResponse(details=details)
