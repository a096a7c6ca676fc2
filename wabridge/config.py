"""Runtime configuration for the relay bridge."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_WEBHOOK_URL = "http://localhost:3000/api/whatsapp-webhook"
DEFAULT_STORE_PATH = "wa-session.db"
DEFAULT_REQUEST_TIMEOUT = 15.0
DEFAULT_FALLBACK_REPLY = (
    "Sorry, something went wrong on our server. Please try again later."
)

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class RelayConfig(BaseModel):
    """All recognized options; the bridge has no other runtime configuration."""

    model_config = ConfigDict(frozen=True)

    webhook_url: str = DEFAULT_WEBHOOK_URL
    store_path: str = DEFAULT_STORE_PATH
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    log_level: str = "INFO"
    fallback_reply: str = Field(default=DEFAULT_FALLBACK_REPLY, min_length=1)

    @field_validator("webhook_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"webhook_url must be an http(s) URL: {value!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls) -> RelayConfig:
        """Create RelayConfig from environment variables, falling back to defaults."""
        return cls(
            webhook_url=os.environ.get("WEBHOOK_URL") or DEFAULT_WEBHOOK_URL,
            store_path=os.environ.get("SESSION_STORE_PATH") or DEFAULT_STORE_PATH,
            request_timeout=float(
                os.environ.get("WEBHOOK_TIMEOUT") or DEFAULT_REQUEST_TIMEOUT,
            ),
            log_level=os.environ.get("LOG_LEVEL") or "INFO",
            fallback_reply=os.environ.get("FALLBACK_REPLY") or DEFAULT_FALLBACK_REPLY,
        )

    def with_overrides(self, **overrides: object) -> RelayConfig:
        """Return a copy with the non-None overrides applied and re-validated."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return RelayConfig.model_validate(values)
