"""
Tests for environment-driven settings.
"""

import pytest
from pydantic import ValidationError

from askdoc.configs import Settings
from askdoc.configs.base import env_config
from askdoc.configs.database import DatabaseSettings
from askdoc.configs.rag import RAGSettings
from askdoc.configs.server import ServerSettings


def test_env_config_prefixes() -> None:
    assert env_config()["env_prefix"] == "ASKDOC_"
    assert env_config("rate_limit")["env_prefix"] == "ASKDOC_RATE_LIMIT_"


def test_sections_should_read_prefixed_environment(monkeypatch) -> None:
    # Arrange
    monkeypatch.setenv("ASKDOC_SERVER_PORT", "9090")
    monkeypatch.setenv("ASKDOC_ADMIN_API_KEY", "s3cret")
    monkeypatch.setenv("ASKDOC_LOG_LEVEL", "DEBUG")

    # Act
    settings = Settings()

    # Assert
    assert settings.server.port == 9090
    assert settings.server.address == "0.0.0.0:9090"
    assert settings.admin.api_key == "s3cret"
    assert settings.log_level == "DEBUG"


def test_defaults() -> None:
    settings = ServerSettings()
    assert settings.allow_origins == ["*"]
    assert Settings().rate_limit.requests_per_hour == 100


class TestDatabaseSettings:
    """Test suite for database URL construction."""

    def test_memory_url(self) -> None:
        assert DatabaseSettings(path=":memory:").async_database_url == "sqlite+aiosqlite:///:memory:"

    def test_file_url(self, tmp_path) -> None:
        url = DatabaseSettings(path=str(tmp_path / "a.db")).async_database_url
        assert url == f"sqlite+aiosqlite:///{tmp_path / 'a.db'}"


class TestRAGSettings:
    """Test suite for index type validation."""

    def test_index_type_is_normalized(self) -> None:
        assert RAGSettings(index_type="FLAT").index_type == "flat"

    def test_unknown_index_type_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RAGSettings(index_type="ivf")
