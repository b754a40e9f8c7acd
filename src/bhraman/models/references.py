"""Tagged references from a booking to its package and user.

A stored booking only carries ids, and either id may be null or point at a
deleted record. Read paths turn the stored id into one of three variants
and must handle every variant:

- ``unresolved``: an id is stored but has not been looked up yet
- ``resolved``: the referenced record was found
- ``missing``: no id is stored, or the id no longer resolves
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .package import PackageSummary

UNKNOWN_PACKAGE = "Unknown Package"


class BookingUser(BaseModel):
    """Compact user projection embedded in booking reads."""

    user_id: str
    name: str
    email: str
    phone: str | None = None


class UnresolvedRef(BaseModel):
    kind: Literal["unresolved"] = "unresolved"
    id: str


class MissingRef(BaseModel):
    kind: Literal["missing"] = "missing"
    id: str | None = Field(default=None, description="Dangling id, if one was stored")


class ResolvedPackageRef(BaseModel):
    kind: Literal["resolved"] = "resolved"
    package: PackageSummary


class ResolvedUserRef(BaseModel):
    kind: Literal["resolved"] = "resolved"
    user: BookingUser


PackageRef = Annotated[
    Union[UnresolvedRef, ResolvedPackageRef, MissingRef],
    Field(discriminator="kind"),
]
UserRef = Annotated[
    Union[UnresolvedRef, ResolvedUserRef, MissingRef],
    Field(discriminator="kind"),
]


def ref_from_id(ref_id: str | None) -> UnresolvedRef | MissingRef:
    """Build the initial reference for a stored id."""
    if ref_id:
        return UnresolvedRef(id=ref_id)
    return MissingRef()


def package_name(ref: UnresolvedRef | ResolvedPackageRef | MissingRef) -> str:
    """Display name for a package reference, with a placeholder fallback."""
    if ref.kind == "resolved":
        return ref.package.title
    return UNKNOWN_PACKAGE


def customer_identity(
    ref: UnresolvedRef | ResolvedUserRef | MissingRef,
    contact_name: str,
    contact_email: str,
) -> tuple[str, str]:
    """Customer name and e-mail for a user reference.

    Falls back to the contact details embedded in the booking when the user
    is not resolved.
    """
    if ref.kind == "resolved":
        return ref.user.name, ref.user.email
    return contact_name, contact_email
