"""Configuration management for shortlink."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=3001,
        description="Port to listen on"
    )

    # Short link settings
    base_url: str = Field(
        default="http://localhost:3001",
        description="Base URL for generating short links"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short links (e.g., '/s' for /s/abc123)"
    )

    short_code_length: int = Field(
        default=8,
        ge=3,
        le=20,
        description="Starting length for generated short codes"
    )

    max_collision_retries: int = Field(
        default=5,
        ge=1,
        description="Generated codes tried per length before the length grows"
    )

    default_validity_minutes: int = Field(
        default=30,
        ge=1,
        le=10080,
        description="Validity applied when a create request omits it"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
