"""FastAPI exception handlers for converting BhramanError to HTTP responses.

The ErrorCode-to-HTTP status mapping follows REST conventions:
- 400 Bad Request: Validation/business rule violations
- 401 Unauthorized: Authentication required
- 403 Forbidden: Authorization failures
- 404 Not Found: Resource not found
- 409 Conflict: Status change not allowed, or e-mail owned by another account
- 503 Service Unavailable: Database unreachable or cooling down

Any other exception becomes a generic 500, so nothing escapes to the
transport layer.

Usage:
    from bhraman_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from bhraman.models.errors import BhramanError, ErrorCode
from bhraman.utils.logging import get_logger
from bhraman_api.models.common import format_validation_errors

logger = get_logger(__name__)

# Map ErrorCode to HTTP status codes
ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    # Authentication errors -> 401 Unauthorized
    ErrorCode.AUTH_REQUIRED: HTTP_401_UNAUTHORIZED,
    # Authorization errors -> 403 Forbidden
    ErrorCode.ADMIN_REQUIRED: HTTP_403_FORBIDDEN,
    ErrorCode.FORBIDDEN: HTTP_403_FORBIDDEN,
    ErrorCode.NOT_OWNER: HTTP_403_FORBIDDEN,
    # Not found errors -> 404 Not Found
    ErrorCode.BOOKING_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.PACKAGE_MISSING: HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.HOME_CONFIG_NOT_FOUND: HTTP_404_NOT_FOUND,
    # State and conflict errors -> 409 Conflict
    ErrorCode.INVALID_TRANSITION: HTTP_409_CONFLICT,
    ErrorCode.EMAIL_IN_USE: HTTP_409_CONFLICT,
    # Upstream errors -> 503 Service Unavailable
    ErrorCode.DATABASE_UNAVAILABLE: HTTP_503_SERVICE_UNAVAILABLE,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode.

    Validation codes (ERR_VAL_*) are not listed and fall back to 400.
    """
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def bhraman_error_handler(request: Request, exc: BhramanError) -> JSONResponse:
    """Convert a domain error to its JSON error body and status code."""
    status_code = get_http_status_for_error(exc.code)
    if status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "request_failed",
            extra={"path": request.url.path, "error_code": exc.code.value},
        )
    return JSONResponse(
        status_code=status_code,
        content=exc.to_error_response().model_dump(mode="json"),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as 400 with per-field details."""
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=format_validation_errors(exc.errors()).model_dump(mode="json"),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with a generic error response.

    The traceback is logged; the client only sees a generic message.
    """
    logger.exception("Unhandled exception on %s: %s", request.url.path, exc)

    error_response = {
        "success": False,
        "error_code": "ERR_INTERNAL",
        "message": "An unexpected error occurred",
        "recovery": "Please try again later or contact support",
        "details": None,
    }

    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(BhramanError, bhraman_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
