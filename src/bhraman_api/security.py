"""Caller identity and role dependencies.

Trust Model:
- API Gateway validates the identity provider JWT (Cognito authorizer)
- After validation it injects x-user-sub / x-user-email / x-user-name headers
- REST APIs with a Cognito User Pools authorizer expose the claims in
  event.requestContext.authorizer.claims instead (available through Mangum)
- The backend trusts these values since they come from API Gateway, not the client

Dependencies, from weakest to strongest:
- get_identity: Identity or None, never raises
- require_identity: 401 without identity
- get_current_user: lazily creates the User for the identity
- require_customer: 403 for admins (customer-only surfaces)
- require_admin: 401/403 via the AuthorizationGate, stamps last_login
"""

from typing import Any

from fastapi import Depends, Request

from bhraman.models import BhramanError, ErrorCode, Identity, User
from bhraman.services.authorization import AuthorizationGate
from bhraman.services.users import UserDirectory
from bhraman.utils.logging import get_logger
from bhraman_api.dependencies import get_authorization_gate, get_user_directory

logger = get_logger(__name__)


def _get_header_case_insensitive(request: Request, header_name: str) -> str | None:
    """Extract header value with case-insensitive lookup.

    HTTP headers are case-insensitive per RFC 7230.
    """
    for name, value in request.headers.items():
        if name.lower() == header_name.lower():
            return value.strip() if value else None
    return None


def _get_claims(request: Request) -> dict[str, Any]:
    """Authorizer claims from the Lambda event, if running behind API Gateway."""
    event = request.scope.get("aws.event") or {}
    claims = event.get("requestContext", {}).get("authorizer", {}).get("claims", {})
    return claims or {}


def get_identity(request: Request) -> Identity | None:
    """Resolve the caller identity from gateway headers or authorizer claims.

    Returns:
        Identity, or None for anonymous requests
    """
    claims = _get_claims(request)

    external_id = _get_header_case_insensitive(request, "x-user-sub") or claims.get("sub")
    if not external_id:
        return None

    email = _get_header_case_insensitive(request, "x-user-email") or claims.get("email")
    name = _get_header_case_insensitive(request, "x-user-name") or claims.get("name")
    if not name and (claims.get("given_name") or claims.get("family_name")):
        name = f"{claims.get('given_name', '')} {claims.get('family_name', '')}".strip()
    picture = _get_header_case_insensitive(request, "x-user-picture") or claims.get("picture")

    logger.debug(
        "auth_identity_extracted",
        extra={"external_id": external_id[:8] + "...", "path": request.url.path},
    )
    return Identity(
        external_id=external_id,
        email=email or None,
        name=name or None,
        profile_image=picture or None,
    )


def require_identity(identity: Identity | None = Depends(get_identity)) -> Identity:
    """Require an authenticated caller.

    Raises:
        BhramanError: AUTH_REQUIRED (401)
    """
    if identity is None:
        logger.warning("auth_identity_missing")
        raise BhramanError(code=ErrorCode.AUTH_REQUIRED)
    return identity


def get_current_user(
    identity: Identity = Depends(require_identity),
    users: UserDirectory = Depends(get_user_directory),
) -> User:
    """The stored user for the caller, created on first request."""
    return users.get_or_create(identity)


def require_customer(user: User = Depends(get_current_user)) -> User:
    """Require a non-admin user for customer surfaces.

    Raises:
        BhramanError: FORBIDDEN (403) for admins
    """
    if user.is_admin:
        raise BhramanError(
            code=ErrorCode.FORBIDDEN,
            details={"reason": "Only users can access bookings"},
        )
    return user


def require_admin(
    identity: Identity | None = Depends(get_identity),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> User:
    """Gate for every admin route. Runs before the handler body.

    Raises:
        BhramanError: AUTH_REQUIRED (401), ADMIN_REQUIRED (403)
    """
    return gate.require_admin(identity)
