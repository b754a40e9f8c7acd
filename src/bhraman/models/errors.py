"""Standard error codes for the Bhraman booking backend.

All services raise BhramanError with one of these codes. The HTTP layer
maps codes to status codes and renders ErrorResponse bodies.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes."""

    # Validation errors (ERR_VAL_*)
    VALIDATION_FAILED = "ERR_VAL_001"
    INVALID_PHONE = "ERR_VAL_002"
    CAPACITY_EXCEEDED = "ERR_VAL_003"
    PACKAGE_NOT_FOUND = "ERR_VAL_004"
    INVALID_STATUS = "ERR_VAL_005"
    INVALID_PAYMENT_STATUS = "ERR_VAL_006"
    INVALID_ROLE = "ERR_VAL_007"
    INVALID_PRICE = "ERR_VAL_008"
    PHONE_IN_USE = "ERR_VAL_009"

    # Authentication / authorization errors (ERR_AUTH_*)
    AUTH_REQUIRED = "ERR_AUTH_001"
    ADMIN_REQUIRED = "ERR_AUTH_002"
    FORBIDDEN = "ERR_AUTH_003"
    NOT_OWNER = "ERR_AUTH_004"

    # Lookup errors (ERR_NF_*)
    BOOKING_NOT_FOUND = "ERR_NF_001"
    PACKAGE_MISSING = "ERR_NF_002"
    USER_NOT_FOUND = "ERR_NF_003"
    HOME_CONFIG_NOT_FOUND = "ERR_NF_004"

    # State and conflict errors (ERR_STATE_*)
    INVALID_TRANSITION = "ERR_STATE_001"
    EMAIL_IN_USE = "ERR_STATE_002"

    # Upstream errors (ERR_DB_*)
    DATABASE_UNAVAILABLE = "ERR_DB_001"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.VALIDATION_FAILED: "Request validation failed",
    ErrorCode.INVALID_PHONE: "Contact phone number must contain at least 10 digits",
    ErrorCode.CAPACITY_EXCEEDED: "Number of people exceeds the package's maximum group size",
    ErrorCode.PACKAGE_NOT_FOUND: "The selected package does not exist",
    ErrorCode.INVALID_STATUS: "Invalid booking status",
    ErrorCode.INVALID_PAYMENT_STATUS: "Invalid payment status",
    ErrorCode.INVALID_ROLE: "Invalid role",
    ErrorCode.INVALID_PRICE: "Discounted price cannot be greater than the price",
    ErrorCode.PHONE_IN_USE: "This phone number is already registered to another account",
    ErrorCode.AUTH_REQUIRED: "Authentication required to perform this action",
    ErrorCode.ADMIN_REQUIRED: "Forbidden: Admin access required",
    ErrorCode.FORBIDDEN: "You are not allowed to perform this action",
    ErrorCode.NOT_OWNER: "Forbidden: This booking does not belong to you",
    ErrorCode.BOOKING_NOT_FOUND: "Booking not found",
    ErrorCode.PACKAGE_MISSING: "Package not found",
    ErrorCode.USER_NOT_FOUND: "User not found",
    ErrorCode.HOME_CONFIG_NOT_FOUND: "Home configuration not found",
    ErrorCode.INVALID_TRANSITION: "This status change is not allowed for the booking",
    ErrorCode.EMAIL_IN_USE: "This e-mail address is already registered to another account",
    ErrorCode.DATABASE_UNAVAILABLE: "The database is temporarily unavailable",
}

# Recovery suggestions for API clients
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.VALIDATION_FAILED: "Check the request fields and try again",
    ErrorCode.INVALID_PHONE: "Provide a phone number with at least 10 digits",
    ErrorCode.CAPACITY_EXCEEDED: "Reduce the number of people or pick another package",
    ErrorCode.PACKAGE_NOT_FOUND: "Pick a package from the catalog",
    ErrorCode.INVALID_STATUS: "Use one of: pending, confirmed, cancelled, completed",
    ErrorCode.INVALID_PAYMENT_STATUS: "Use one of: pending, completed, failed, refunded",
    ErrorCode.INVALID_ROLE: "Use one of: user, admin",
    ErrorCode.INVALID_PRICE: "Lower the discounted price or raise the price",
    ErrorCode.PHONE_IN_USE: "Use a different phone number",
    ErrorCode.AUTH_REQUIRED: "Sign in and retry the request",
    ErrorCode.ADMIN_REQUIRED: "Sign in with an administrator account",
    ErrorCode.FORBIDDEN: "This action is not available for your account",
    ErrorCode.NOT_OWNER: "Open the booking from your own dashboard",
    ErrorCode.BOOKING_NOT_FOUND: "Verify the booking ID",
    ErrorCode.PACKAGE_MISSING: "Verify the package ID or slug",
    ErrorCode.USER_NOT_FOUND: "Verify the user ID",
    ErrorCode.HOME_CONFIG_NOT_FOUND: "Ask an administrator to configure the home page",
    ErrorCode.INVALID_TRANSITION: "Reload the booking and check its current status",
    ErrorCode.EMAIL_IN_USE: "Sign in with the account that owns this e-mail address",
    ErrorCode.DATABASE_UNAVAILABLE: "Please try again later",
}


class ErrorResponse(BaseModel):
    """Standard error body returned by the API."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "ErrorResponse":
        """Create an ErrorResponse from an error code.

        Args:
            code: The error code
            details: Optional additional context about the error

        Returns:
            An ErrorResponse with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class BhramanError(Exception):
    """Exception raised by domain services.

    Converted to an ErrorResponse by the API exception handlers.
    """

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code
        self.message = ERROR_MESSAGES[code]
        self.recovery = ERROR_RECOVERY[code]
        self.details = details
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse."""
        return ErrorResponse.from_code(self.code, self.details)
