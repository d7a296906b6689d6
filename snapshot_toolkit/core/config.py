"""
Configuration management

Centralized settings using Pydantic BaseSettings for type-safe configuration
with environment variable support.

All variables share the SNAPSHOT_ prefix, e.g. SNAPSHOT_REFERENCE_IMAGE_DIR.
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from snapshot_toolkit.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

REFERENCE_DIR_ENV_VAR = "SNAPSHOT_REFERENCE_IMAGE_DIR"


class Settings(BaseSettings):
    """
    Snapshot settings with environment variable support

    Settings can be overridden via environment variables:
    - SNAPSHOT_REFERENCE_IMAGE_DIR=/path/to/reference/images
    - SNAPSHOT_RECORD_MODE=true
    - SNAPSHOT_FAILURE_IMAGE_DIR=/tmp/snapshot-failures
    - SNAPSHOT_CHANNEL_TOLERANCE=0
    """

    # Reference images (root; suffixes are appended to this path)
    reference_image_dir: Path | None = None

    # Behaviour
    record_mode: bool = False
    fail_in_record_mode: bool = True
    channel_tolerance: int = Field(default=0, ge=0, le=255)

    # Failure artifacts (reference/failed/diff images)
    failure_image_dir: Path | None = None

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SNAPSHOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("reference_image_dir", "failure_image_dir", mode="before")
    @classmethod
    def blank_path_is_unset(cls, v):
        """Treat empty strings from the environment as unset"""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def require_reference_image_dir(self) -> Path:
        """
        Get the reference image root, failing if it is not configured

        Returns:
            Reference image root directory

        Raises:
            ConfigurationError: If SNAPSHOT_REFERENCE_IMAGE_DIR is not set
        """
        if self.reference_image_dir is None:
            raise ConfigurationError(
                "Missing value for reference image directory",
                recovery_hint=f"Set {REFERENCE_DIR_ENV_VAR} in your environment or .env file",
            )
        return self.reference_image_dir


# Singleton pattern for settings
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get snapshot settings (singleton)

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        logger.debug(f"Loaded settings: reference_image_dir={_settings.reference_image_dir}")
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment"""
    global _settings
    _settings = None
