"""
Runtime configuration loaded from BATTWATCH_* environment variables.

Command line options override the environment. Out-of-range values are
reset to their defaults with a warning instead of aborting, so the status
engine can rely on 0 <= critical_level <= low_level <= 100.
"""

import logging

from pydantic import ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .messages import ICON_TYPES

logger = logging.getLogger(__name__)

DEFAULT_UPDATE_INTERVAL = 5
DEFAULT_LOW_LEVEL = 20
DEFAULT_CRITICAL_LEVEL = 5


class ConfigError(Exception):
    """Settings could not be parsed (e.g. a non-numeric level)."""


class Settings(BaseSettings):
    """
    Battery monitor settings.

    Attributes:
        update_interval: Seconds between status updates.
        low_level: Low battery level, in percent.
        critical_level: Critical battery level, in percent.
        command_low_level: Command to run when the low level is reached.
        command_critical_level: Command to run when the critical level is reached.
        command_left_click: Command to run from the tray icon.
        icon_type: standard, notification or symbolic; None picks automatically.
        hide_notification: Do not show desktop notifications.
        debug: Log debug information.
    """

    update_interval: int = DEFAULT_UPDATE_INTERVAL
    low_level: int = DEFAULT_LOW_LEVEL
    critical_level: int = DEFAULT_CRITICAL_LEVEL
    command_low_level: str | None = None
    command_critical_level: str | None = None
    command_left_click: str | None = None
    icon_type: str | None = None
    hide_notification: bool = False
    debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="BATTWATCH_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @model_validator(mode="after")
    def _normalize(self) -> "Settings":
        if self.update_interval <= 0:
            logger.warning(
                "Invalid update interval! It has been reset to default (%d seconds)",
                DEFAULT_UPDATE_INTERVAL,
            )
            self.update_interval = DEFAULT_UPDATE_INTERVAL

        if not 0 <= self.low_level <= 100:
            logger.warning(
                "Invalid low level! It has been reset to default (%d percent)", DEFAULT_LOW_LEVEL
            )
            self.low_level = DEFAULT_LOW_LEVEL

        if not 0 <= self.critical_level <= 100:
            logger.warning(
                "Invalid critical level! It has been reset to default (%d percent)",
                DEFAULT_CRITICAL_LEVEL,
            )
            self.critical_level = DEFAULT_CRITICAL_LEVEL

        if self.critical_level > self.low_level:
            logger.warning(
                "Critical level is higher than low level! They have been reset to default"
            )
            self.low_level = DEFAULT_LOW_LEVEL
            self.critical_level = DEFAULT_CRITICAL_LEVEL

        if self.icon_type is not None and self.icon_type not in ICON_TYPES:
            logger.warning("Unknown icon type: %s", self.icon_type)
            self.icon_type = None

        return self


def load_settings(**overrides) -> Settings:
    """Settings from the environment with non-None overrides applied."""
    try:
        return Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        raise ConfigError(str(e)) from e
