"""Tests for configuration classes."""

import os
from unittest.mock import patch

import pytest


class TestGameConfig:
    """Tests for GameConfig class."""

    def test_game_defaults(self):
        """Test default table settings."""
        with patch.dict(os.environ, {}, clear=True):
            from config import GameConfig

            config = GameConfig()

            assert config.num_decks == 2
            assert config.min_bet == 5
            assert config.starting_balance == 500
            assert config.dealer_hits_soft_17 is True
            assert config.max_rounds == 100

    def test_game_env_overrides(self):
        """Test table settings are read from the environment."""
        env = {
            "ARENA_NUM_DECKS": "6",
            "ARENA_MIN_BET": "25",
            "ARENA_STARTING_BALANCE": "1000",
            "ARENA_HIT_SOFT_17": "false",
            "ARENA_MAX_ROUNDS": "none",
        }
        with patch.dict(os.environ, env):
            from config import GameConfig

            config = GameConfig()

            assert config.num_decks == 6
            assert config.min_bet == 25
            assert config.starting_balance == 1000
            assert config.dealer_hits_soft_17 is False
            assert config.max_rounds is None

    def test_to_rules_overrides(self):
        """Test per-game overrides replace defaults and None keeps them."""
        with patch.dict(os.environ, {}, clear=True):
            from config import GameConfig

            rules = GameConfig().to_rules(min_bet=10, max_rounds=None)

            assert rules.min_bet == 10
            assert rules.max_rounds == 100
            assert rules.num_decks == 2

    def test_to_rules_validates(self):
        """Test invalid overrides are rejected by the rules."""
        from config import GameConfig

        with pytest.raises(ValueError):
            GameConfig().to_rules(num_decks=0)


class TestLLMConfig:
    """Tests for LLMConfig class."""

    def test_llm_defaults(self):
        """Test endpoint defaults."""
        with patch.dict(os.environ, {}, clear=True):
            from config import LLMConfig

            config = LLMConfig()

            assert config.api_key is None
            assert config.base_url == "https://openrouter.ai/api/v1"
            assert config.temperature == 0.7
            assert config.max_retries == 2

    def test_llm_env(self):
        """Test the API key is read from the environment."""
        with patch.dict(os.environ, {"OPENROUTER_API_KEY": "sk-test", "LLM_TIMEOUT": "5"}):
            from config import LLMConfig

            config = LLMConfig()

            assert config.api_key == "sk-test"
            assert config.timeout == 5.0


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_cors_default_origins(self):
        """Test that default CORS origins are set correctly."""
        with patch.dict(os.environ, {}, clear=True):
            from config import CORSConfig

            config = CORSConfig()

            assert "http://localhost:8000" in config.allowed_origins

    def test_cors_parses_origins_with_whitespace(self):
        """Test that CORS origins handles whitespace correctly."""
        env_origins = "  http://example.com  ,  http://localhost:3000  "
        with patch.dict(os.environ, {"CORS_ORIGINS": env_origins}):
            from config import _parse_cors_origins

            origins = _parse_cors_origins()

            assert origins == ["http://example.com", "http://localhost:3000"]


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_rate_limit_defaults(self):
        """Test default rate limit values."""
        with patch.dict(os.environ, {}, clear=True):
            from config import RateLimitConfig

            config = RateLimitConfig()

            assert config.enabled is True
            assert config.requests_per_minute == 60
            assert config.games_per_minute == 10

    def test_rate_limit_disabled(self):
        """Test rate limiting can be disabled."""
        with patch.dict(os.environ, {"RATE_LIMIT_ENABLED": "false"}):
            from config import RateLimitConfig

            assert RateLimitConfig().enabled is False


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_app_defaults(self):
        """Test application defaults."""
        with patch.dict(os.environ, {}, clear=True):
            from config import AppConfig

            config = AppConfig()

            assert config.debug is False
            assert config.log_level == "INFO"
            assert config.results_dir == "Results"
            assert config.game.min_bet == 5
