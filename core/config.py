"""Journal configuration."""

import logging
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)
load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # Journal
    journal_file: str = Field(default="data/journal.json", alias="JOURNAL_FILE")
    journal_timezone: str = Field(default="UTC", alias="JOURNAL_TIMEZONE")

    # Periods
    week_start: Literal["sunday", "monday"] = Field(default="sunday", alias="WEEK_START")

    # Account sentinels
    all_accounts_id: str = Field(default="ALL", alias="ALL_ACCOUNTS_ID")
    unassigned_account_id: str = Field(default="-1", alias="UNASSIGNED_ACCOUNT_ID")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Web API
    api_host: str = Field(default="127.0.0.1", alias="API_HOST")
    api_port: int = Field(default=8080, alias="API_PORT")

    @property
    def tz(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.journal_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("[CONFIG] Unknown timezone %r, using UTC", self.journal_timezone)
            return ZoneInfo("UTC")

    @property
    def week_start_weekday(self) -> int:
        """Python weekday number (Monday=0) the calendar week starts on."""
        return 6 if self.week_start == "sunday" else 0


settings = Settings()
