"""User directory: maps identity provider subjects to application users."""

import datetime as dt
import uuid
from collections import Counter
from typing import TYPE_CHECKING, Any

from boto3.dynamodb.conditions import Attr

from bhraman.models import (
    BhramanError,
    ErrorCode,
    Identity,
    Page,
    User,
    UserDetail,
    UserRole,
    UserSummary,
    paginate,
)
from bhraman.models.references import UNKNOWN_PACKAGE
from bhraman.models.user import UserBookingSummary
from bhraman.utils.logging import get_logger, mask_email

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService

logger = get_logger(__name__)

# Sort keys accepted by the admin user list; created_at sorts newest first.
USER_SORT_FIELDS = {"name", "email", "role", "created_at"}
RECENT_BOOKINGS_LIMIT = 5


class UserDirectory:
    """Lookup, lazy creation and admin management of users."""

    USERS_TABLE = "users"
    BOOKINGS_TABLE = "bookings"
    PACKAGES_TABLE = "packages"

    def __init__(self, db: "DynamoDBService") -> None:
        """Initialize user directory.

        Args:
            db: DynamoDB service instance
        """
        self.db = db

    # Lookups

    def get_user(self, user_id: str) -> User | None:
        item = self.db.get_item(self.USERS_TABLE, {"user_id": user_id})
        return self._item_to_user(item) if item else None

    def get_by_external_id(self, external_id: str) -> User | None:
        """Get a user by identity provider subject using GSI."""
        results = self.db.query_by_gsi(
            table=self.USERS_TABLE,
            index_name="external_id-index",
            partition_key_name="external_id",
            partition_key_value=external_id,
        )
        return self._item_to_user(results[0]) if results else None

    def get_by_email(self, email: str) -> User | None:
        """Get a user by (lower-cased) e-mail using GSI."""
        results = self.db.query_by_gsi(
            table=self.USERS_TABLE,
            index_name="email-index",
            partition_key_name="email",
            partition_key_value=email.strip().lower(),
        )
        return self._item_to_user(results[0]) if results else None

    def resolve(self, identity: Identity | None) -> User | None:
        """Resolve an identity to its stored user without creating one."""
        if identity is None:
            return None
        return self.get_by_external_id(identity.external_id)

    # Creation and self-service

    def create_user(
        self,
        external_id: str,
        email: str,
        name: str,
        *,
        role: UserRole = UserRole.USER,
        permissions: list[str] | None = None,
        profile_image: str | None = None,
        phone: str | None = None,
        last_login: dt.datetime | None = None,
        created_at: dt.datetime | None = None,
    ) -> User:
        """Create and store a new user.

        Args:
            external_id: Identity provider subject
            email: E-mail address (stored lower-cased)
            name: Full name
            role: Initial role
            permissions: Advisory permission names
            profile_image: Avatar URL
            phone: Phone number
            last_login: Last admin login, carried over by migrations
            created_at: Original creation time, carried over by migrations

        Returns:
            The stored user

        Raises:
            BhramanError: EMAIL_IN_USE if another user already has the e-mail.
        """
        owner = self.get_by_email(email)
        if owner is not None:
            logger.warning(
                "user_email_conflict",
                extra={"user_id": owner.user_id, "email_masked": mask_email(owner.email)},
            )
            raise BhramanError(
                code=ErrorCode.EMAIL_IN_USE, details={"reason": "email already registered"}
            )

        now = dt.datetime.now(dt.UTC)
        user = User(
            user_id=str(uuid.uuid4()),
            external_id=external_id,
            email=email.strip().lower(),
            name=name,
            phone=phone or None,
            profile_image=profile_image,
            role=role,
            permissions=permissions or [],
            last_login=last_login,
            created_at=created_at or now,
            updated_at=now,
        )
        self.db.put_item(
            self.USERS_TABLE,
            self._user_to_item(user),
            condition_expression="attribute_not_exists(user_id)",
        )
        logger.info(
            "user_created",
            extra={
                "user_id": user.user_id,
                "email_masked": mask_email(user.email),
                "role": user.role.value,
            },
        )
        return user

    def get_or_create(self, identity: Identity) -> User:
        """Return the user for an identity, creating it on first sight.

        Users are matched by subject only. An e-mail already owned by another
        subject is never taken over.

        Raises:
            BhramanError: AUTH_REQUIRED if the identity carries no e-mail and
                no user exists yet; EMAIL_IN_USE if another user owns the e-mail.
        """
        user = self.get_by_external_id(identity.external_id)
        if user is not None:
            return user

        if not identity.email:
            logger.warning(
                "user_email_claim_missing",
                extra={"external_id": identity.external_id[:8] + "..."},
            )
            raise BhramanError(
                code=ErrorCode.AUTH_REQUIRED,
                details={"reason": "email claim missing"},
            )

        name = identity.name or identity.email.split("@")[0]
        return self.create_user(
            external_id=identity.external_id,
            email=identity.email,
            name=name,
            profile_image=identity.profile_image,
        )

    def update_profile(
        self,
        identity: Identity,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> User:
        """Update the caller's own name and phone.

        Missing name parts keep the current value. An empty phone leaves the
        stored phone untouched.

        Raises:
            BhramanError: PHONE_IN_USE if another user already has the phone.
        """
        user = self.get_or_create(identity)

        current_first, _, current_last = user.name.partition(" ")
        name = f"{first_name or current_first} {last_name or current_last}".strip()
        fields: dict[str, Any] = {"name": name}

        if phone:
            phone = phone.strip()
            holders = self.db.scan(self.USERS_TABLE, filter_expression=Attr("phone").eq(phone))
            if any(h["user_id"] != user.user_id for h in holders):
                raise BhramanError(code=ErrorCode.PHONE_IN_USE)
            fields["phone"] = phone

        updated = self._save_fields(user.user_id, fields)
        logger.info(
            "user_profile_updated",
            extra={"user_id": user.user_id, "updated_fields": sorted(fields)},
        )
        return updated

    def touch_last_login(self, user: User) -> User:
        """Stamp last_login on an admin-gated request."""
        now = dt.datetime.now(dt.UTC)
        attrs = self.db.update_fields(
            self.USERS_TABLE,
            {"user_id": user.user_id},
            {"last_login": now.isoformat()},
            condition_expression="attribute_exists(user_id)",
        )
        return self._item_to_user(attrs) if attrs else user.model_copy(update={"last_login": now})

    # Admin management

    def list_users(
        self,
        search: str | None = None,
        role: str | None = None,
        sort: str = "name",
        page: int = 1,
        limit: int = 10,
    ) -> Page[UserSummary]:
        """List users with search, role filter, sort and per-user booking counts.

        Args:
            search: Case-insensitive substring of name or e-mail
            role: user/admin, or None/"all" for every role
            sort: name, email, role or created_at (newest first)
            page: 1-based page number
            limit: Page size

        Returns:
            Page of UserSummary rows
        """
        users = [self._item_to_user(item) for item in self.db.scan(self.USERS_TABLE)]

        if search:
            needle = search.lower()
            users = [u for u in users if needle in u.name.lower() or needle in u.email.lower()]
        if role and role != "all":
            users = [u for u in users if u.role.value == role]

        sort_key = sort if sort in USER_SORT_FIELDS else "name"
        if sort_key == "created_at":
            users.sort(key=lambda u: u.created_at, reverse=True)
        elif sort_key == "role":
            users.sort(key=lambda u: u.role.value)
        else:
            users.sort(key=lambda u: str(getattr(u, sort_key)).lower())

        counts = Counter(
            item.get("user_id") for item in self.db.scan(self.BOOKINGS_TABLE)
        )
        summaries = [
            UserSummary(**self._summary_fields(u), booking_count=counts.get(u.user_id, 0))
            for u in users
        ]
        return paginate(summaries, page, limit)

    def get_user_detail(self, user_id: str, all_bookings: bool = False) -> UserDetail:
        """Admin view of a user with recent (or all) bookings.

        Bookings whose package no longer exists are shown as "Unknown Package".

        Raises:
            BhramanError: USER_NOT_FOUND
        """
        user = self.get_user(user_id)
        if user is None:
            raise BhramanError(code=ErrorCode.USER_NOT_FOUND, details={"user_id": user_id})

        bookings = self.db.query_by_gsi(
            table=self.BOOKINGS_TABLE,
            index_name="user_id-index",
            partition_key_name="user_id",
            partition_key_value=user_id,
        )
        bookings.sort(key=lambda b: b["created_at"], reverse=True)
        shown = bookings if all_bookings else bookings[:RECENT_BOOKINGS_LIMIT]

        package_ids = {b["package_id"] for b in shown if b.get("package_id")}
        packages = self.db.batch_get(
            self.PACKAGES_TABLE, [{"package_id": pid} for pid in package_ids]
        )
        titles = {p["package_id"]: p["title"] for p in packages}

        return UserDetail(
            **self._summary_fields(user),
            booking_count=len(bookings),
            bookings=[
                UserBookingSummary(
                    booking_id=b["booking_id"],
                    package_name=titles.get(b.get("package_id") or "", UNKNOWN_PACKAGE),
                    start_date=b["start_date"],
                    status=b["status"],
                    total_amount=b["total_amount"],
                    created_at=dt.datetime.fromisoformat(b["created_at"]),
                )
                for b in shown
            ],
        )

    def set_role(self, user_id: str, role: str) -> User:
        """Promote or demote a user.

        Raises:
            BhramanError: INVALID_ROLE for values other than user/admin,
                USER_NOT_FOUND if the user does not exist.
        """
        try:
            new_role = UserRole(role)
        except ValueError:
            raise BhramanError(
                code=ErrorCode.INVALID_ROLE, details={"role": str(role)}
            ) from None

        if self.get_user(user_id) is None:
            raise BhramanError(code=ErrorCode.USER_NOT_FOUND, details={"user_id": user_id})

        user = self._save_fields(user_id, {"role": new_role.value})
        logger.info("user_role_changed", extra={"user_id": user_id, "role": new_role.value})
        return user

    def delete_user(self, user_id: str) -> None:
        """Hard-delete a user. Their bookings keep a dangling user_id.

        Raises:
            BhramanError: USER_NOT_FOUND
        """
        if self.get_user(user_id) is None:
            raise BhramanError(code=ErrorCode.USER_NOT_FOUND, details={"user_id": user_id})
        self.db.delete_item(self.USERS_TABLE, {"user_id": user_id})
        logger.info("user_deleted", extra={"user_id": user_id})

    # Persistence helpers

    def _save_fields(self, user_id: str, fields: dict[str, Any]) -> User:
        fields = {**fields, "updated_at": dt.datetime.now(dt.UTC).isoformat()}
        attrs = self.db.update_fields(
            self.USERS_TABLE,
            {"user_id": user_id},
            fields,
            condition_expression="attribute_exists(user_id)",
        )
        if attrs is None:
            raise BhramanError(code=ErrorCode.USER_NOT_FOUND, details={"user_id": user_id})
        return self._item_to_user(attrs)

    @staticmethod
    def _summary_fields(user: User) -> dict[str, Any]:
        return {
            "user_id": user.user_id,
            "external_id": user.external_id,
            "name": user.name,
            "email": user.email,
            "phone": user.phone,
            "profile_image": user.profile_image,
            "role": user.role,
            "created_at": user.created_at,
            "updated_at": user.updated_at,
        }

    def _user_to_item(self, user: User) -> dict[str, Any]:
        """Convert User model to DynamoDB item.

        Optional attributes are omitted when unset; GSI key attributes must
        never be stored as null.
        """
        item: dict[str, Any] = {
            "user_id": user.user_id,
            "external_id": user.external_id,
            "email": user.email,
            "name": user.name,
            "role": user.role.value,
            "permissions": user.permissions,
            "created_at": user.created_at.isoformat(),
            "updated_at": user.updated_at.isoformat(),
        }
        if user.phone:
            item["phone"] = user.phone
        if user.profile_image:
            item["profile_image"] = user.profile_image
        if user.last_login:
            item["last_login"] = user.last_login.isoformat()
        return item

    def _item_to_user(self, item: dict[str, Any]) -> User:
        """Convert DynamoDB item to User model."""
        return User(
            user_id=item["user_id"],
            external_id=item["external_id"],
            email=item["email"],
            name=item.get("name", ""),
            phone=item.get("phone") or None,
            profile_image=item.get("profile_image"),
            role=UserRole(item.get("role", UserRole.USER.value)),
            permissions=list(item.get("permissions", [])),
            last_login=(
                dt.datetime.fromisoformat(item["last_login"])
                if item.get("last_login")
                else None
            ),
            created_at=dt.datetime.fromisoformat(item["created_at"]),
            updated_at=dt.datetime.fromisoformat(item["updated_at"]),
        )
