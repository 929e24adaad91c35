"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Backend choice (local cache vs remote API) is configuration, not code
"""

import os
from functools import lru_cache
from typing import Literal, cast
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_STORAGE_KEY = "bloodPressureReadings"
DEFAULT_API_BASE_URL = "http://127.0.0.1:8078"


class StoreConfig(BaseModel):
    """Which persistence backend is active and how to reach it."""

    backend: Literal["local", "remote"] = Field(
        default="local", description="Active store adapter variant"
    )

    # Local variant
    local_data_dir: str = Field(
        default="./data", description="Directory holding the local key-value files"
    )
    local_storage_key: str = Field(
        default=DEFAULT_STORAGE_KEY,
        min_length=1,
        description="Key under which the serialized reading array is stored",
    )

    # Remote variant
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, description="Readings API base URL")
    api_timeout_seconds: float = Field(
        default=10.0, gt=0.0, description="Timeout for a single API request"
    )

    @field_validator("api_base_url")
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("API base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("local_storage_key")
    def validate_storage_key(cls, v: str) -> str:
        if os.sep in v or (os.altsep and os.altsep in v):
            raise ValueError("Storage key must not contain path separators")
        return v


class DisplayConfig(BaseModel):
    """Presentation-facing defaults consumed by the trend aggregator."""

    timezone: str = Field(default="UTC", description="IANA timezone for chart labels")
    default_window_days: int = Field(default=3, gt=0, description="Default trend window")

    @field_validator("timezone")
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Component configs
    store: StoreConfig = Field(default_factory=StoreConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    def _backend_to_literal(val: str) -> Literal["local", "remote"]:
        v = val.strip().lower()
        if v in {"remote", "api", "http"}:
            return "remote"
        return "local"

    # Detect environment
    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    store_config = StoreConfig(
        backend=_backend_to_literal(os.getenv("STORE_BACKEND", "local")),
        local_data_dir=os.getenv("LOCAL_DATA_DIR", "./data"),
        local_storage_key=os.getenv("LOCAL_STORAGE_KEY", DEFAULT_STORAGE_KEY),
        api_base_url=os.getenv("API_BASE_URL", DEFAULT_API_BASE_URL),
        api_timeout_seconds=float(os.getenv("API_TIMEOUT_SECONDS", "10.0")),
    )

    display_config = DisplayConfig(
        timezone=os.getenv("DISPLAY_TIMEZONE", "UTC"),
        default_window_days=int(os.getenv("DEFAULT_WINDOW_DAYS", "3")),
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        store=store_config,
        display=display_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


# Development helpers
def print_config_summary() -> None:
    """Print configuration summary for debugging."""
    config = get_config()

    print("\nCONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level}")

    print("\nSTORE CONFIGURATION")
    print(f"Backend: {config.store.backend}")
    if config.store.backend == "remote":
        print(f"API Base URL: {config.store.api_base_url}")
        print(f"Timeout: {config.store.api_timeout_seconds}s")
    else:
        print(f"Data Dir: {config.store.local_data_dir}")
        print(f"Storage Key: {config.store.local_storage_key}")

    print("\nDISPLAY CONFIGURATION")
    print(f"Timezone: {config.display.timezone}")
    print(f"Default Window: {config.display.default_window_days} days")
