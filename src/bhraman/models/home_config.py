"""Site content configuration: a singleton document of home page sections."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

HOME_CONFIG_ID = "home"

# Top-level sections merged individually by a partial update.
SECTION_NAMES: tuple[str, ...] = (
    "site_settings",
    "hero_section",
    "featured_packages_section",
    "testimonials_section",
    "about_section",
    "contact_section",
    "seo",
)


class SocialMediaLink(BaseModel):
    platform: str
    url: str
    icon: str


class SiteSettings(BaseModel):
    logo: str = ""
    social_media_links: list[SocialMediaLink] = Field(default_factory=list)


class HeroSection(BaseModel):
    heading: str
    subheading: str
    background_image: str
    cta_text: str
    cta_link: str


class FeaturedPackagesSection(BaseModel):
    heading: str
    subheading: str
    package_ids: list[str] = Field(default_factory=list)


class Testimonial(BaseModel):
    name: str
    location: str
    image: str | None = None
    rating: int = Field(..., ge=1, le=5)
    text: str


class TestimonialsSection(BaseModel):
    heading: str
    subheading: str
    testimonials: list[Testimonial] = Field(default_factory=list)


class AboutSection(BaseModel):
    heading: str
    content: str
    image: str


class ContactSection(BaseModel):
    heading: str
    subheading: str
    email: str
    phone: str
    address: str
    working_hours: str | None = None


class SEO(BaseModel):
    title: str
    description: str
    keywords: list[str] = Field(default_factory=list)


class HomeConfigUpdate(BaseModel):
    """Partial update: each provided section is merged into the stored one.

    Sections are loose dicts so a single field can be patched; the merged
    document is validated as a whole. Lists inside a section (testimonials,
    keywords, package IDs) are replaced, not appended to.
    """

    site_settings: dict[str, Any] | None = None
    hero_section: dict[str, Any] | None = None
    featured_packages_section: dict[str, Any] | None = None
    testimonials_section: dict[str, Any] | None = None
    about_section: dict[str, Any] | None = None
    contact_section: dict[str, Any] | None = None
    seo: dict[str, Any] | None = None


class HomeConfig(BaseModel):
    """The stored home page configuration."""

    config_id: str = HOME_CONFIG_ID
    site_settings: SiteSettings
    hero_section: HeroSection
    featured_packages_section: FeaturedPackagesSection
    testimonials_section: TestimonialsSection
    about_section: AboutSection
    contact_section: ContactSection
    seo: SEO
    created_at: datetime
    updated_at: datetime


def default_home_config_sections() -> dict[str, dict]:
    """Default content used when no configuration exists yet."""
    return {
        "site_settings": {"logo": "", "social_media_links": []},
        "hero_section": {
            "heading": "Explore the Beauty of India",
            "subheading": "Discover amazing travel experiences",
            "background_image": "/images/default-hero.jpg",
            "cta_text": "Explore Packages",
            "cta_link": "/packages",
        },
        "featured_packages_section": {
            "heading": "Featured Packages",
            "subheading": "Our most popular travel experiences",
            "package_ids": [],
        },
        "testimonials_section": {
            "heading": "What Our Customers Say",
            "subheading": "Read testimonials from our satisfied travelers",
            "testimonials": [],
        },
        "about_section": {
            "heading": "About Us",
            "content": (
                "We are a travel company dedicated to providing exceptional "
                "travel experiences in India."
            ),
            "image": "/images/default-about.jpg",
        },
        "contact_section": {
            "heading": "Contact Us",
            "subheading": "Get in touch with our team",
            "email": "contact@example.com",
            "phone": "+91 1234567890",
            "address": "New Delhi, India",
        },
        "seo": {
            "title": "Bhraman - Explore India",
            "description": "Discover amazing travel experiences in India",
            "keywords": ["travel", "india", "tourism", "packages"],
        },
    }
