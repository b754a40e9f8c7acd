"""Admin authorization gate.

Authorization is role-only: every admin holds every permission, and the
stored ``permissions`` list is advisory.
"""

from typing import TYPE_CHECKING

from bhraman.models import BhramanError, ErrorCode, Identity, User
from bhraman.utils.logging import get_logger

if TYPE_CHECKING:
    from .users import UserDirectory

logger = get_logger(__name__)


def has_permission(user: User | None, permission: str) -> bool:
    """Check a named permission.

    Admins are granted everything; other users only what their list names.
    """
    if user is None:
        return False
    if user.is_admin:
        return True
    return permission in user.permissions


class AuthorizationGate:
    """Decides whether a caller may use the admin surface."""

    def __init__(self, users: "UserDirectory") -> None:
        self.users = users

    def is_admin(self, identity: Identity | None) -> bool:
        """True when the identity resolves to a stored admin user. No side effects."""
        user = self.users.resolve(identity)
        return user is not None and user.is_admin

    def require_admin(self, identity: Identity | None) -> User:
        """Authorize an admin request and stamp last_login.

        Rejection happens before any state is touched.

        Args:
            identity: Resolved caller identity, or None if unauthenticated

        Returns:
            The admin user, with last_login updated

        Raises:
            BhramanError: AUTH_REQUIRED without identity, ADMIN_REQUIRED if
                the identity is unknown or not an admin.
        """
        if identity is None:
            logger.warning("admin_access_unauthenticated")
            raise BhramanError(code=ErrorCode.AUTH_REQUIRED)

        user = self.users.resolve(identity)
        if user is None or not user.is_admin:
            logger.warning(
                "admin_access_denied",
                extra={
                    "external_id": identity.external_id[:8] + "...",
                    "role": user.role.value if user else None,
                },
            )
            raise BhramanError(code=ErrorCode.ADMIN_REQUIRED)

        return self.users.touch_last_login(user)
