"""
Tests for configuration management in `bptracker/config.py`.

Covers:
- Environment parsing and debug defaults
- Logging level coercion to the expected Literal
- Store backend selection and URL/key validation
- Display timezone validation
- get_config cache behavior
- AppConfig validation (debug only allowed in development)
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from bptracker.config import (
    AppConfig,
    DisplayConfig,
    LoggingConfig,
    StoreConfig,
    get_config,
    load_config_from_env,
)


@pytest.fixture(autouse=True)
def clear_config_cache() -> Iterator[None]:
    """Ensure get_config cache is cleared before and after each test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ENVIRONMENT",
        "LOG_LEVEL",
        "STORE_BACKEND",
        "LOCAL_DATA_DIR",
        "LOCAL_STORAGE_KEY",
        "API_BASE_URL",
        "API_TIMEOUT_SECONDS",
        "DISPLAY_TIMEZONE",
        "DEFAULT_WINDOW_DAYS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_config_dev_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")

    config = load_config_from_env()

    assert config.environment == "development"
    assert config.debug is True
    assert config.logging.format == "console"
    assert config.store.backend == "local"
    assert config.store.local_storage_key == "bloodPressureReadings"
    assert config.store.api_base_url == "http://127.0.0.1:8078"
    assert config.display.timezone == "UTC"
    assert config.display.default_window_days == 3


def test_production_uses_json_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "prod")

    config = load_config_from_env()

    assert config.environment == "production"
    assert config.debug is False
    assert config.logging.format == "json"


def test_logging_level_literal_coercion(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "staging")

    # Unknown level should coerce to INFO
    monkeypatch.setenv("LOG_LEVEL", "unknown")
    config = load_config_from_env()
    assert config.logging.level == "INFO"

    # Known level should pass through
    monkeypatch.setenv("LOG_LEVEL", "error")
    config = load_config_from_env()
    assert config.logging.level == "ERROR"


@pytest.mark.parametrize(
    "raw,expected",
    [("remote", "remote"), ("API", "remote"), ("local", "local"), ("anything", "local")],
)
def test_store_backend_parsing(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: str
) -> None:
    monkeypatch.setenv("STORE_BACKEND", raw)

    config = load_config_from_env()

    assert config.store.backend == expected


def test_remote_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORE_BACKEND", "remote")
    monkeypatch.setenv("API_BASE_URL", "https://bp.example.com/")
    monkeypatch.setenv("API_TIMEOUT_SECONDS", "2.5")

    config = load_config_from_env()

    assert config.store.api_base_url == "https://bp.example.com"  # trailing slash trimmed
    assert config.store.api_timeout_seconds == 2.5


def test_invalid_base_url_rejected() -> None:
    with pytest.raises(ValueError, match="http"):
        StoreConfig(api_base_url="ftp://example.com")


def test_storage_key_cannot_be_a_path() -> None:
    with pytest.raises(ValueError, match="path separators"):
        StoreConfig(local_storage_key="../escape")


def test_display_timezone_validation() -> None:
    assert DisplayConfig(timezone="Europe/Kyiv").tzinfo.key == "Europe/Kyiv"

    with pytest.raises(ValueError, match="Unknown timezone"):
        DisplayConfig(timezone="Mars/Olympus_Mons")


def test_window_days_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEFAULT_WINDOW_DAYS", "0")

    with pytest.raises(ValueError):
        load_config_from_env()


def test_get_config_cache() -> None:
    # First call populates cache
    c1 = get_config()
    c2 = get_config()
    assert c1 is c2  # same object due to lru_cache


def test_app_config_debug_only_in_dev_validation() -> None:
    with pytest.raises(ValueError, match="debug mode is only allowed"):
        AppConfig(
            environment="production",
            debug=True,
            store=StoreConfig(),
            display=DisplayConfig(),
            logging=LoggingConfig(),
        )
