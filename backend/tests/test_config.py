"""
Quizo Backend — Settings Tests
===============================

What:  Tests for environment-driven configuration and startup validation.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.config import Settings


class TestSettings:

    def test_defaults_match_service_limits(self):
        s = Settings(database_url="sqlite+aiosqlite:///x.db")

        assert s.rate_limit_requests == 100
        assert s.rate_limit_window == 900
        assert s.slow_down_after == 50
        assert s.slow_down_delay_ms == 100

    def test_cors_origins_split_and_trimmed(self):
        s = Settings(cors_origins=" https://a.example , https://b.example ,")

        assert s.cors_origins_list == ["https://a.example", "https://b.example"]

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_log_level_rejected(self):
        with pytest.raises(PydanticValidationError):
            Settings(log_level="LOUD")

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_REQUESTS", "7")

        assert Settings().rate_limit_requests == 7

    def test_is_sqlite(self):
        assert Settings(database_url="sqlite+aiosqlite:///x.db").is_sqlite
        assert not Settings(database_url="postgresql+asyncpg://u:p@h/db").is_sqlite


class TestProductionValidation:

    def test_valid_configuration_passes(self):
        Settings(
            database_url="postgresql+asyncpg://u:p@h/db",
            cors_origins="https://quizo-frontend.vercel.app",
        ).validate_required_for_production()

    def test_sync_driver_rejected(self):
        s = Settings(database_url="postgresql://u:p@h/db")

        with pytest.raises(ValueError, match="async driver"):
            s.validate_required_for_production()

    def test_empty_cors_rejected(self):
        s = Settings(database_url="sqlite+aiosqlite:///x.db", cors_origins=" , ")

        with pytest.raises(ValueError, match="CORS_ORIGINS"):
            s.validate_required_for_production()
