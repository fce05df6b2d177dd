"""Migration configuration loaded from the environment."""

import os
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError

DEFAULT_BATCH_SIZE = 50
DEFAULT_RATE_LIMIT_PER_SECOND = 5
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_BATCH_DELAY_SECONDS = 1.0

# Config field -> environment variable
ENV_VARS = {
    "source_base_url": "ZOHO_BASE_URL",
    "source_api_key": "ZOHO_API_KEY",
    "destination_base_url": "TWENTY_BASE_URL",
    "destination_api_key": "TWENTY_API_KEY",
    "batch_size": "BATCH_SIZE",
    "rate_limit_per_second": "RATE_LIMIT_PER_SECOND",
    "request_timeout": "REQUEST_TIMEOUT",
    "batch_delay_seconds": "BATCH_DELAY_SECONDS",
    "dry_run": "DRY_RUN",
}


class MigrationConfig(BaseModel):
    """Validated settings for one migration run."""

    source_base_url: str
    source_api_key: str = Field(min_length=1)
    destination_base_url: str
    destination_api_key: str = Field(min_length=1)
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, gt=0)
    rate_limit_per_second: int = Field(default=DEFAULT_RATE_LIMIT_PER_SECOND, gt=0)
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    batch_delay_seconds: float = Field(default=DEFAULT_BATCH_DELAY_SECONDS, ge=0)
    dry_run: bool = False

    @field_validator("source_base_url", "destination_base_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        parsed = urlparse(value.strip())
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("must be an absolute http(s) URL")
        return value.strip().rstrip("/")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MigrationConfig":
        """
        Build a config from environment variables.

        Blank values are treated as unset so defaults apply.

        Raises:
            ConfigError: naming every variable that is missing or invalid
        """
        environ = os.environ if environ is None else environ

        values: Dict[str, Any] = {}
        for field_name, env_name in ENV_VARS.items():
            raw = environ.get(env_name)
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()

        return cls.from_dict(values)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MigrationConfig":
        """Create from dictionary representation, raising ConfigError on failure."""
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(_describe_errors(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary safe to log (API keys masked)."""
        data = self.model_dump()
        data["source_api_key"] = _mask(self.source_api_key)
        data["destination_api_key"] = _mask(self.destination_api_key)
        return data


def _describe_errors(error: ValidationError) -> list:
    messages = []
    for item in error.errors():
        field_name = str(item["loc"][0]) if item.get("loc") else "config"
        env_name = ENV_VARS.get(field_name, field_name)
        messages.append(f"{env_name}: {item['msg']}")
    return messages


def _mask(secret: str) -> str:
    if len(secret) <= 4:
        return "****"
    return f"{secret[:2]}****{secret[-2:]}"
