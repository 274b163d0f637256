"""
Shared settings plumbing.

Every config section reads the same .env file under its own ASKDOC_*
prefix; env_config() builds that model_config so sections only declare
their prefix.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "ASKDOC_"


def env_config(section: str = "") -> SettingsConfigDict:
    """
    Build the model_config for a settings section.

    Args:
        section: Section name appended to the ASKDOC_ prefix ("" for root)

    Returns:
        SettingsConfigDict: .env-backed, case-insensitive, ignoring unknown keys
    """
    prefix = f"{ENV_PREFIX}{section.upper()}_" if section else ENV_PREFIX
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix=prefix,
        case_sensitive=False,
        extra="ignore",
    )


class RootSettings(BaseSettings):
    """Process-wide options read from unprefixed ASKDOC_* variables."""

    model_config = env_config()

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
