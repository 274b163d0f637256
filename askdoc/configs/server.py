"""
HTTP server and admin access configuration.

Dependencies: pydantic, pydantic_settings
System role: Listener address, public URL, CORS allow-list and admin API key
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from askdoc.configs.base import env_config


class ServerSettings(BaseSettings):
    """HTTP listener configuration."""

    model_config = env_config("server")

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8080, description="Bind port")
    base_url: str = Field(
        default="http://localhost:8080",
        description="Public URL used when a request carries no Host header",
    )
    allow_origins: list[str] = Field(
        default=["*"],
        description="CORS origin allow-list; '*' allows any origin",
    )

    @property
    def address(self) -> str:
        """Return host:port listener address."""
        return f"{self.host}:{self.port}"


class AdminSettings(BaseSettings):
    """Admin API authentication."""

    model_config = env_config("admin")

    api_key: str = Field(
        default="",
        description="Shared secret for /api/admin; empty disables auth",
    )


class RateLimitSettings(BaseSettings):
    """Advisory rate limit defaults (stored per site, not enforced)."""

    model_config = env_config("rate_limit")

    enabled: bool = Field(default=True, description="Rate limiting toggle")
    requests_per_hour: int = Field(default=100, description="Default requests/hour per site")
