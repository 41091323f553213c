"""Configuration loading for PriceWatch.

Settings live in ``~/.config/pricewatch/config.toml``. Every key is
optional; a missing or unreadable file yields the defaults.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "pricewatch"
CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = CONFIG_DIR / "pricewatch.db"


class DatabaseSettings(BaseModel):
    path: Path = DEFAULT_DB_PATH


class MonitorSettings(BaseModel):
    interval_seconds: int = Field(default=60, gt=0)
    retention_days: int = Field(default=7, gt=0)
    user_id: int = Field(default=1, description="Default user for CLI commands")


class WatchlistSettings(BaseModel):
    max_items: int = Field(default=25, gt=0)
    stale_after_seconds: int = Field(default=120, gt=0)


class TelegramSettings(BaseModel):
    bot_token: str = ""
    timeout_seconds: float = Field(default=10.0, gt=0)
    dry_run: bool = False


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(BaseModel):
    level: str = "INFO"

    @field_validator("level", mode="before")
    @classmethod
    def _check_level(cls, v):
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}")
        return level


class Settings(BaseModel):
    """Top-level PriceWatch settings."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    monitor: MonitorSettings = Field(default_factory=MonitorSettings)
    watchlist: WatchlistSettings = Field(default_factory=WatchlistSettings)
    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from a TOML file.

    ``TELEGRAM_BOT_TOKEN`` overrides the configured bot token.

    Args:
        path: Config file (defaults to ``~/.config/pricewatch/config.toml``).

    Returns:
        Settings, with defaults for anything not configured.
    """
    config_path = path or CONFIG_PATH
    data: dict = {}

    if config_path.exists():
        try:
            data = toml.load(config_path)
        except (toml.TomlDecodeError, OSError) as e:
            logger.warning("Could not read %s, using defaults: %s", config_path, e)
            data = {}

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        logger.warning("Invalid settings in %s, using defaults: %s", config_path, e)
        settings = Settings()

    env_token = os.environ.get("TELEGRAM_BOT_TOKEN")
    if env_token:
        settings = settings.model_copy(
            update={"telegram": settings.telegram.model_copy(update={"bot_token": env_token})}
        )
    return settings


def create_template_config(path: Optional[Path] = None) -> Path:
    """Create a template configuration file.

    Args:
        path: Where to write (defaults to ``~/.config/pricewatch/config.toml``).

    Returns:
        Path of the written file.
    """
    config_path = path or CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)

    template = {
        "database": {
            "path": str(DEFAULT_DB_PATH),
        },
        "monitor": {
            "interval_seconds": 60,
            "retention_days": 7,
            "user_id": 1,
        },
        "watchlist": {
            "max_items": 25,
            "stale_after_seconds": 120,
        },
        "telegram": {
            "bot_token": "",  # Leave empty to use TELEGRAM_BOT_TOKEN env var
            "timeout_seconds": 10.0,
            "dry_run": False,
        },
        "logging": {
            "level": "INFO",
        },
    }

    with open(config_path, "w") as f:
        toml.dump(template, f)

    return config_path
