"""Controller connection and cache settings."""

import math
import os
from dotenv import load_dotenv
from pathlib import Path
from pydantic import BaseModel, Field, field_validator
from unifi_monitor.utils.errors import ConfigurationError


class Settings(BaseModel):
    """UniFi monitor settings.

    The controller URL and API key may be absent: an unconfigured monitor is
    still constructible and reports ConfigurationError when it first fetches.
    """

    api_url: str | None = Field(default=None, description='Controller site API root')
    api_key: str | None = Field(default=None, description='Controller API key', repr=False)
    verify_ssl: bool = Field(default=False, description='Verify SSL certificate')
    timeout: float = Field(default=10.0, description='Request timeout in seconds')
    devices_ttl: float = Field(default=30.0, description='Device snapshot TTL in seconds')
    clients_ttl: float = Field(default=60.0, description='Client snapshot TTL in seconds')

    @field_validator('api_url')
    @classmethod
    def _normalize_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().rstrip('/')
        return value or None

    @field_validator('api_key')
    @classmethod
    def _normalize_key(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator('timeout')
    @classmethod
    def _clamp_timeout(cls, value: float) -> float:
        return max(1.0, min(value, 300.0))

    @field_validator('devices_ttl', 'clients_ttl')
    @classmethod
    def _non_negative_ttl(cls, value: float) -> float:
        return max(0.0, value)

    @property
    def is_configured(self) -> bool:
        """Check if both endpoint and credential are set."""
        return bool(self.api_url and self.api_key)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> 'Settings':
        """Load settings from environment variables.

        Supports:
        - UNIFI_API_URL or UNIFI_URL for the controller site API root
        - UNIFI_API_KEY or UNIFI_CONSOLE_API_TOKEN for the API key
        - UNIFI_VERIFY_SSL, UNIFI_TIMEOUT
        - UNIFI_DEVICES_TTL, UNIFI_CLIENTS_TTL

        Args:
            env_file: Optional .env file loaded before reading the environment.
                      Existing environment variables take precedence.

        Raises:
            ConfigurationError: If a numeric variable is not a finite number
        """
        if env_file is not None:
            load_dotenv(env_file, override=False)

        return cls(
            api_url=os.environ.get('UNIFI_API_URL') or os.environ.get('UNIFI_URL'),
            api_key=os.environ.get('UNIFI_API_KEY') or os.environ.get('UNIFI_CONSOLE_API_TOKEN'),
            verify_ssl=os.environ.get('UNIFI_VERIFY_SSL', 'false').lower() == 'true',
            timeout=_env_float('UNIFI_TIMEOUT', 10.0),
            devices_ttl=_env_float('UNIFI_DEVICES_TTL', 30.0),
            clients_ttl=_env_float('UNIFI_CLIENTS_TTL', 60.0),
        )


def _env_float(name: str, default: float) -> float:
    """Read a numeric environment variable, ConfigurationError when malformed."""
    raw = os.environ.get(name, '').strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(
            f'{name} must be a number of seconds, got {raw!r}',
            suggestion=f'Set {name} to a number such as {default:g}, or unset it',
        ) from None
    if not math.isfinite(value):
        raise ConfigurationError(
            f'{name} must be finite, got {raw!r}',
            suggestion=f'Set {name} to a number such as {default:g}, or unset it',
        )
    return value
