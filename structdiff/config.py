"""
Engine settings with environment variable support.

    STRUCTDIFF_MAX_DEPTH       deepest nesting compared before DepthLimitError
    STRUCTDIFF_DETECT_CYCLES   raise CyclicInputError on self-referencing input
    STRUCTDIFF_COPY_VALUES     copy every value placed into a partition
    STRUCTDIFF_LOG_LEVEL       level of the "structdiff" logger
"""

import logging
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core import DEFAULT_MAX_DEPTH, PartitionError

logger = logging.getLogger(__name__)


class ConfigurationError(PartitionError):
    """Raised when engine settings are invalid."""
    pass


class Settings(BaseSettings):
    """Partition engine settings."""

    # Comparison guards
    MAX_DEPTH: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)
    DETECT_CYCLES: bool = True

    # Partition values never alias the input trees when set
    COPY_VALUES: bool = True

    # NOTSET defers to whatever the host application configured
    LOG_LEVEL: str = "NOTSET"

    model_config = SettingsConfigDict(env_prefix="STRUCTDIFF_")

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _check_log_level(cls, value: Any) -> str:
        level = str(value).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    def __repr__(self) -> str:
        return (
            f"Settings(MAX_DEPTH={self.MAX_DEPTH}, DETECT_CYCLES={self.DETECT_CYCLES}, "
            f"COPY_VALUES={self.COPY_VALUES}, LOG_LEVEL='{self.LOG_LEVEL}')"
        )


def load_settings(**overrides: Any) -> Settings:
    """
    Build settings from the environment, with keyword overrides on top.

    Override names are case-insensitive (``max_depth=10`` works).

    Raises:
        ConfigurationError: If a value fails validation
    """
    try:
        loaded = Settings(**{key.upper(): value for key, value in overrides.items()})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid structdiff settings: {e}") from e

    logger.debug(f"Settings: {loaded!r}")
    return loaded


def apply_log_level(loaded: Settings) -> None:
    """Set the level of the package logger from settings."""
    logging.getLogger("structdiff").setLevel(loaded.LOG_LEVEL)


settings = load_settings()
