"""
Runtime settings for the chat relay.

Settings are read from environment variables once at startup and validated
with pydantic, so a malformed value stops the process before it binds a port.
"""

import os
from typing import Literal, Mapping

from pydantic import BaseModel, Field, field_validator

from .defaults import (
    DEFAULT_CORS_ORIGINS,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_PENDING_FRAMES,
    DEFAULT_PORT,
    DEFAULT_SSE_PING_SECONDS,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Environment variable -> settings field
ENV_VARS = {
    "HOST": "host",
    "PORT": "port",
    "CORS_ORIGINS": "cors_origins",
    "LOG_LEVEL": "log_level",
    "LOG_FILE": "log_file",
    "MAX_PENDING_FRAMES": "max_pending_frames",
    "SSE_PING_SECONDS": "sse_ping_seconds",
}


class Settings(BaseModel):
    """Server configuration."""

    host: str = Field(default=DEFAULT_HOST, description="Interface to bind")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Port to listen on")
    cors_origins: list[str] = Field(
        default_factory=lambda: [DEFAULT_CORS_ORIGINS],
        description="Allowed CORS origins",
    )
    log_level: LogLevel = Field(default=DEFAULT_LOG_LEVEL, description="Root log level")
    log_file: str | None = Field(
        default=None,
        description="Also write logs to this file when set",
    )
    max_pending_frames: int = Field(
        default=DEFAULT_MAX_PENDING_FRAMES,
        ge=1,
        description="Frames buffered per stream before it is dropped",
    )
    sse_ping_seconds: int = Field(
        default=DEFAULT_SSE_PING_SECONDS,
        ge=1,
        description="Interval between keep-alive comments on open streams",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value: object) -> object:
        # CORS_ORIGINS="https://a.example,https://b.example"
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build settings from environment variables.

    Args:
        environ: Mapping to read from, defaults to os.environ

    Raises:
        pydantic.ValidationError: If a variable holds an invalid value
    """
    env = os.environ if environ is None else environ
    values = {field: env[var] for var, field in ENV_VARS.items() if env.get(var)}
    return Settings.model_validate(values)
