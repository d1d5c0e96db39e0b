"""Reader configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class RetryConfig(BaseSettings):
    """Backoff for re-opening a byte source, driven by Tenacity."""

    model_config = {"env_prefix": "RETRY_"}

    max_attempts: int = Field(default=3, ge=1, description="Maximum open attempts")
    initial_wait_seconds: float = Field(
        default=0.5,
        description="Initial backoff wait in seconds",
    )
    max_wait_seconds: float = Field(
        default=5.0,
        description="Maximum backoff wait in seconds",
    )
    multiplier: float = Field(default=2.0, description="Exponential backoff multiplier")


class MboxConfig(BaseSettings):
    """Settings for reading mbox archives from the command line."""

    model_config = {"env_prefix": "MBOX_"}

    strict: bool = Field(
        default=False,
        description="Treat a non-envelope line where a message is expected as an error",
    )
    chunk_size: int = Field(
        default=8192,
        gt=0,
        description="Buffer size in bytes used when streaming bodies",
    )
    log_level: str = Field(default="INFO", description="Root log level name")
    log_json: bool = Field(
        default=False,
        description="Emit JSON log lines instead of console output",
    )

    retry: RetryConfig = Field(default_factory=RetryConfig)
