"""Configuration for the calendar feed."""

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

try:
    from dotenv import load_dotenv
except ImportError:
    load_dotenv = None

_TRUE_VALUES = {"1", "true", "yes", "on"}


class FeedConfig(BaseModel):
    """Feed configuration with Pydantic validation."""

    # Token derivation
    calendar_secret: str | None = None
    max_users: int = Field(default=10000, ge=1)
    token_index: bool = Field(default=False)
    token_index_refresh: float = Field(default=30.0, ge=0)

    # Data source
    data_file: Path = Field(default=Path("data/schedule.json"))

    # Feed output
    base_url: str = Field(default="http://localhost:5000")
    timezone_rules: Literal["fixed", "tzdb"] = Field(default="fixed")
    upcoming_days: int = Field(default=7, ge=0)

    # Logging
    log_dir: Path = Field(default=Path("logs"))
    log_filename: str = Field(default="schedule_feed.log")

    @property
    def has_secret(self) -> bool:
        """True if a non-empty calendar secret is configured."""
        return bool(self.calendar_secret)

    @classmethod
    def from_env(cls) -> "FeedConfig":
        """Load configuration from environment variables and .env file."""
        if load_dotenv is not None:
            load_dotenv()

        config_dict = {}

        if "CALENDAR_SECRET" in os.environ:
            config_dict["calendar_secret"] = os.environ["CALENDAR_SECRET"]
        if "FEED_MAX_USERS" in os.environ:
            try:
                config_dict["max_users"] = int(os.environ["FEED_MAX_USERS"])
            except ValueError:
                pass  # Keep default if invalid
        if "FEED_TOKEN_INDEX" in os.environ:
            config_dict["token_index"] = (
                os.environ["FEED_TOKEN_INDEX"].strip().lower() in _TRUE_VALUES
            )
        if "FEED_TOKEN_INDEX_REFRESH" in os.environ:
            try:
                config_dict["token_index_refresh"] = float(os.environ["FEED_TOKEN_INDEX_REFRESH"])
            except ValueError:
                pass

        if "SCHEDULE_DATA_FILE" in os.environ:
            config_dict["data_file"] = Path(os.environ["SCHEDULE_DATA_FILE"])

        if "FEED_BASE_URL" in os.environ:
            config_dict["base_url"] = os.environ["FEED_BASE_URL"].rstrip("/")
        if "FEED_TIMEZONE_RULES" in os.environ:
            rules = os.environ["FEED_TIMEZONE_RULES"].strip().lower()
            if rules in ("fixed", "tzdb"):
                config_dict["timezone_rules"] = rules
        if "UPCOMING_DAYS" in os.environ:
            try:
                config_dict["upcoming_days"] = int(os.environ["UPCOMING_DAYS"])
            except ValueError:
                pass

        if "LOG_DIR" in os.environ:
            config_dict["log_dir"] = Path(os.environ["LOG_DIR"])
        if "LOG_FILENAME" in os.environ:
            config_dict["log_filename"] = os.environ["LOG_FILENAME"]

        return cls(**config_dict)
