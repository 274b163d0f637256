"""
Database and file storage configuration settings.

Manages the SQLite metadata database location and the directory
where uploaded originals are kept.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from askdoc.configs.base import env_config


class DatabaseSettings(BaseSettings):
    """SQLite metadata database configuration."""

    model_config = env_config("database")

    path: str = Field(default="./data/askdoc.db", description="SQLite database file")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    @property
    def async_database_url(self) -> str:
        """
        Construct async SQLite connection URL.

        Returns:
            str: SQLAlchemy aiosqlite URL; ':memory:' is passed through
        """
        if self.path == ":memory:":
            return "sqlite+aiosqlite:///:memory:"
        return f"sqlite+aiosqlite:///{Path(self.path).expanduser()}"


class StorageSettings(BaseSettings):
    """Uploaded document storage."""

    model_config = env_config("storage")

    documents: str = Field(
        default="./data/documents",
        description="Root directory for uploaded originals ({root}/{collection_id}/{doc_id}{ext})",
    )
