"""Travel package models for the catalog."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class ItineraryDay(BaseModel):
    """One day of a package itinerary."""

    day: int = Field(..., ge=1, description="Day number (1-based)")
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    image: str | None = Field(default=None, description="Optional image URL")


class Package(BaseModel):
    """A sellable travel package."""

    package_id: str = Field(..., description="Unique package ID (UUID)")
    slug: str = Field(..., description="Unique URL slug derived from the title")
    title: str
    description: str
    short_description: str
    location: str
    duration: int = Field(..., ge=1, description="Duration in days")
    price: float = Field(..., ge=0, description="Price per person")
    discounted_price: float | None = Field(
        default=None, ge=0, description="Optional discounted price per person"
    )
    max_group_size: int = Field(..., ge=1, description="Maximum people per booking")
    images: list[str] = Field(default_factory=list, description="Ordered image URLs")
    inclusions: list[str] = Field(default_factory=list)
    exclusions: list[str] = Field(default_factory=list)
    itinerary: list[ItineraryDay] = Field(default_factory=list)
    featured: bool = False
    created_at: datetime
    updated_at: datetime

    @property
    def unit_price(self) -> float:
        """Price charged per person: the discounted price when one is set."""
        if self.discounted_price is not None:
            return self.discounted_price
        return self.price


class PackageCreate(BaseModel):
    """Data required to create a package. The slug is derived, never supplied."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    short_description: str = Field(..., min_length=1, max_length=500)
    location: str = Field(..., min_length=1)
    duration: int = Field(..., ge=1)
    price: float = Field(..., gt=0)
    discounted_price: float | None = Field(default=None, ge=0)
    max_group_size: int = Field(..., ge=1)
    images: list[str] = Field(..., min_length=1)
    inclusions: list[str] = Field(default_factory=list)
    exclusions: list[str] = Field(default_factory=list)
    itinerary: list[ItineraryDay] = Field(default_factory=list)
    featured: bool = False

    @model_validator(mode="after")
    def _strip_title(self) -> "PackageCreate":
        self.title = self.title.strip()
        self.location = self.location.strip()
        return self


class PackageUpdate(BaseModel):
    """Partial package update. Only provided fields change."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    short_description: str | None = Field(default=None, max_length=500)
    location: str | None = None
    duration: int | None = Field(default=None, ge=1)
    price: float | None = Field(default=None, gt=0)
    discounted_price: float | None = Field(default=None, ge=0)
    max_group_size: int | None = Field(default=None, ge=1)
    images: list[str] | None = None
    inclusions: list[str] | None = None
    exclusions: list[str] | None = None
    itinerary: list[ItineraryDay] | None = None
    featured: bool | None = None


class PackageSummary(BaseModel):
    """Compact package projection embedded in booking reads."""

    package_id: str
    title: str
    slug: str
    location: str | None = None
    duration: int | None = None
    price: float | None = None
    images: list[str] = Field(default_factory=list)
