"""
Application settings using Pydantic.

Provides environment-based configuration loading with STRATA_ prefix.
"""

import json
from functools import lru_cache
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

SUPPORTED_REGIONS = ["us-east-1", "us-west-2"]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="STRATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Deployment target
    environment: str | None = None
    regions: Annotated[list[str], NoDecode] = list(SUPPORTED_REGIONS)
    home_region: str = "us-east-1"

    @field_validator("regions", mode="before")
    @classmethod
    def split_regions(cls, v: Any) -> Any:
        """Accept STRATA_REGIONS as a JSON list or as comma-separated codes."""
        if not isinstance(v, str):
            return v
        if v.lstrip().startswith("["):
            return json.loads(v)
        return [part.strip() for part in v.split(",") if part.strip()]

    # Pulumi control plane
    pulumi_binary: str = "pulumi"
    backend_url: str | None = None
    work_dir: str = ".strata"
    aws_plugin_version: str = "6.66.2"

    # Stack execution
    stack_timeout_seconds: int = 1800
    max_concurrency: int = 0

    # Logging
    log_level: str = "INFO"
    log_json: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
