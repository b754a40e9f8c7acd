"""Site content configuration service (singleton document)."""

import datetime as dt
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from bhraman.models import BhramanError, ErrorCode, HomeConfig, HomeConfigUpdate
from bhraman.models.home_config import (
    HOME_CONFIG_ID,
    SECTION_NAMES,
    default_home_config_sections,
)
from bhraman.utils.logging import get_logger

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService

logger = get_logger(__name__)


class HomeConfigService:
    """Reads and merges the home page configuration."""

    HOME_CONFIG_TABLE = "home-config"

    def __init__(self, db: "DynamoDBService") -> None:
        self.db = db

    def _load(self) -> HomeConfig | None:
        item = self.db.get_item(self.HOME_CONFIG_TABLE, {"config_id": HOME_CONFIG_ID})
        return HomeConfig(**item) if item else None

    def get_public(self) -> HomeConfig:
        """Public read. Never creates the document.

        Raises:
            BhramanError: HOME_CONFIG_NOT_FOUND
        """
        config = self._load()
        if config is None:
            raise BhramanError(code=ErrorCode.HOME_CONFIG_NOT_FOUND)
        return config

    def get_or_create(self) -> HomeConfig:
        """Admin read. Creates the default document on first access."""
        config = self._load()
        if config is not None:
            return config

        now = dt.datetime.now(dt.UTC)
        config = HomeConfig(created_at=now, updated_at=now, **default_home_config_sections())
        created = self.db.put_item(
            self.HOME_CONFIG_TABLE,
            config.model_dump(mode="json", exclude_none=True),
            condition_expression="attribute_not_exists(config_id)",
        )
        if not created:
            # Another request created it first
            return self._load() or config
        logger.info("home_config_created")
        return config

    def update(self, patch: HomeConfigUpdate) -> HomeConfig:
        """Merge each provided section into the stored document.

        Sections absent from the patch are left unchanged. Within a section,
        provided keys overwrite stored ones, so list fields are replaced
        wholesale.

        Raises:
            BhramanError: VALIDATION_FAILED if the merged document is invalid.
        """
        current = self.get_or_create().model_dump(mode="json")
        changes = patch.model_dump(exclude_none=True)

        merged: dict[str, Any] = dict(current)
        for section in SECTION_NAMES:
            if section in changes:
                merged[section] = {**current[section], **changes[section]}
        merged["updated_at"] = dt.datetime.now(dt.UTC).isoformat()

        try:
            config = HomeConfig(**merged)
        except ValidationError as e:
            raise BhramanError(
                code=ErrorCode.VALIDATION_FAILED,
                details={
                    ".".join(str(part) for part in err["loc"]): err["msg"]
                    for err in e.errors()
                },
            ) from e

        self.db.put_item(
            self.HOME_CONFIG_TABLE, config.model_dump(mode="json", exclude_none=True)
        )
        logger.info("home_config_updated", extra={"sections": sorted(changes)})
        return config
