"""Unit tests for the home page configuration document."""

import pytest

from bhraman.models import BhramanError, ErrorCode, HomeConfigUpdate
from bhraman.services.home_config import HomeConfigService


class TestReads:
    def test_public_read_does_not_create(self, home_config: HomeConfigService) -> None:
        with pytest.raises(BhramanError) as exc_info:
            home_config.get_public()

        assert exc_info.value.code == ErrorCode.HOME_CONFIG_NOT_FOUND

    def test_admin_read_creates_defaults_once(self, home_config: HomeConfigService) -> None:
        first = home_config.get_or_create()
        second = home_config.get_or_create()

        assert first.hero_section.heading == "Explore the Beauty of India"
        assert first.seo.title == "Bhraman - Explore India"
        assert second.created_at == first.created_at
        assert home_config.get_public().config_id == "home"


class TestUpdate:
    def test_merges_single_field_and_keeps_other_sections(
        self, home_config: HomeConfigService
    ) -> None:
        before = home_config.get_or_create()

        updated = home_config.update(HomeConfigUpdate(hero_section={"heading": "Namaste"}))

        assert updated.hero_section.heading == "Namaste"
        assert updated.hero_section.cta_text == before.hero_section.cta_text
        assert updated.seo == before.seo
        assert updated.about_section == before.about_section
        assert updated.updated_at > before.updated_at
        assert home_config.get_public().hero_section.heading == "Namaste"

    def test_lists_are_replaced(self, home_config: HomeConfigService) -> None:
        updated = home_config.update(
            HomeConfigUpdate(
                seo={"keywords": ["himalaya"]},
                testimonials_section={
                    "testimonials": [
                        {
                            "name": "Meera",
                            "location": "Pune",
                            "rating": 5,
                            "text": "Wonderful trip",
                        }
                    ]
                },
            )
        )

        assert updated.seo.keywords == ["himalaya"]
        assert updated.testimonials_section.testimonials[0].rating == 5
        assert updated.testimonials_section.heading == "What Our Customers Say"

    def test_invalid_merged_document_is_rejected(self, home_config: HomeConfigService) -> None:
        with pytest.raises(BhramanError) as exc_info:
            home_config.update(
                HomeConfigUpdate(
                    testimonials_section={
                        "testimonials": [
                            {"name": "Meera", "location": "Pune", "rating": 9, "text": "!"}
                        ]
                    }
                )
            )

        assert exc_info.value.code == ErrorCode.VALIDATION_FAILED
        assert home_config.get_public().testimonials_section.testimonials == []
