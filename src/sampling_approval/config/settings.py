"""
Pydantic Settings Configuration
===============================

Type-safe configuration for the sampling approval coordinator.
Validates values at startup and fails fast with clear error messages.
"""

from importlib import metadata
from pathlib import Path
from typing import Optional

import pydantic
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sampling_approval.core.exceptions import ConfigurationError


def _project_version() -> str:
    """Resolve the project version from package metadata."""
    try:
        return metadata.version("sampling-approval")
    except metadata.PackageNotFoundError:
        return "0.0.0-dev"


_CHANGEME_PREFIXES = ("changeme", "change-me", "your_", "your-", "placeholder")


def _is_placeholder(value: str) -> bool:
    """Return True if value looks like an unfilled template placeholder."""
    v = value.lower()
    return any(v.startswith(p) or p in v for p in _CHANGEME_PREFIXES)


class ServiceConfig(BaseModel):
    """Permission service the confirmations are submitted to"""
    base_url: str = Field("http://127.0.0.1:3000", description="Permission service base URL")
    confirm_path: str = Field("/confirm", description="Path of the confirmation endpoint")
    secret_key: Optional[str] = Field(None, description="Value sent in the X-Secret-Key header")
    timeout_seconds: Optional[float] = Field(
        None, gt=0, description="HTTP timeout; null waits indefinitely"
    )
    principal_type: str = Field("Extension", description="Principal reported with each confirmation")

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator('confirm_path')
    @classmethod
    def validate_confirm_path(cls, v: str) -> str:
        return v if v.startswith("/") else f"/{v}"

    @field_validator('secret_key')
    @classmethod
    def validate_secret_key(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and _is_placeholder(v):
            raise ValueError(
                "secret_key is still set to a placeholder value. "
                "Set the key the permission service was started with."
            )
        return v

    model_config = ConfigDict(extra='allow')


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: str = Field("INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    format: str = Field("json", description="Log format (json, text)")

    @field_validator('level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(sorted(valid_levels))}")
        return v_upper

    @field_validator('format')
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    model_config = ConfigDict(extra='allow')


class Settings(BaseSettings):
    """
    Main settings with type validation.

    Configuration is loaded from:
    1. YAML config file (if provided)
    2. Environment variables with SAMPLING_APPROVAL_ prefix (override)
    3. Default values (fallback)

    Environment variable mapping uses double-underscore nesting:
      SAMPLING_APPROVAL_SERVICE__BASE_URL
      SAMPLING_APPROVAL_SERVICE__SECRET_KEY
      SAMPLING_APPROVAL_LOGGING__LEVEL
    """

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    version: str = Field(default_factory=_project_version, description="Project version")

    model_config = SettingsConfigDict(
        env_prefix='SAMPLING_APPROVAL_',
        env_nested_delimiter='__',
        extra='allow',
        validate_assignment=True,
    )

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "Settings":
        """
        Load settings from a YAML file.

        Raises:
            FileNotFoundError: If config file doesn't exist
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables only."""
        return cls()

    def redacted(self) -> dict:
        """Settings as a plain dict with the service secret masked"""
        data = self.model_dump(mode="json")
        if data["service"].get("secret_key"):
            data["service"]["secret_key"] = "[REDACTED]"
        return data


def load_settings(config_path: Optional[str | Path] = None) -> Settings:
    """
    Load and validate settings.

    Args:
        config_path: Optional path to YAML config file

    Raises:
        ConfigurationError: If configuration is invalid
    """
    try:
        if config_path:
            return Settings.from_yaml(config_path)
        return Settings.from_env()
    except pydantic.ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e.error_count()} error(s)",
            details={"errors": e.errors(include_url=False)},
        ) from e
