"""Tests for configuration classes."""

import os
import pytest
from dataclasses import FrozenInstanceError
from unittest.mock import patch

from config import (
    AppConfig,
    CORSConfig,
    GameConfig,
    LoggingConfig,
    RateLimitConfig,
    SecurityConfig,
    _parse_cors_origins,
)


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_cors_default_origins(self):
        """Test that default CORS origins are set correctly."""
        with patch.dict(os.environ, {}, clear=True):
            assert CORSConfig().allowed_origins == ["http://localhost:8000"]

    def test_cors_parses_origins_with_whitespace(self):
        """Origins are split on commas and stripped."""
        env_origins = "  http://example.com  ,  http://localhost:3000  ,"
        with patch.dict(os.environ, {"CORS_ORIGINS": env_origins}):
            assert _parse_cors_origins() == ["http://example.com", "http://localhost:3000"]


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_rate_limit_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = RateLimitConfig()
            assert config.enabled is True
            assert config.requests_per_minute == 60

    def test_rate_limit_from_env(self):
        with patch.dict(
            os.environ,
            {"RATE_LIMIT_ENABLED": "FALSE", "RATE_LIMIT_RPM": "120"},
        ):
            config = RateLimitConfig()
            assert config.enabled is False
            assert config.requests_per_minute == 120


class TestSecurityConfig:
    """Tests for SecurityConfig class."""

    def test_secret_key_auto_generates(self):
        with patch.dict(os.environ, {}, clear=True):
            assert len(SecurityConfig().secret_key) > 0

    def test_secret_key_from_env(self):
        with patch.dict(os.environ, {"SECRET_KEY": "my-super-secret-key-12345"}):
            assert SecurityConfig().secret_key == "my-super-secret-key-12345"


class TestGameConfig:
    """Tests for GameConfig class."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = GameConfig()
            assert config.auto_restart_seconds == 7.0
            assert config.seed is None

    def test_from_env(self):
        with patch.dict(os.environ, {"AUTO_RESTART_SECONDS": "0", "GAME_SEED": "1234"}):
            config = GameConfig()
            assert config.auto_restart_seconds == 0.0
            assert config.seed == 1234

    def test_blank_seed_is_unseeded(self):
        with patch.dict(os.environ, {"GAME_SEED": "  "}):
            assert GameConfig().seed is None


class TestLoggingConfig:
    """Tests for LoggingConfig class."""

    def test_level_uppercased(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            assert LoggingConfig().level == "DEBUG"

    def test_default_level(self):
        with patch.dict(os.environ, {}, clear=True):
            assert LoggingConfig().level == "INFO"


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_nested_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig()
            assert config.port == 8000
            assert config.session_ttl == 3600
            assert isinstance(config.game, GameConfig)
            assert isinstance(config.logging, LoggingConfig)

    def test_frozen(self):
        config = AppConfig()
        with pytest.raises(FrozenInstanceError):
            config.port = 9000
