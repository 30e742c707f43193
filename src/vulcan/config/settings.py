"""
Configuration settings for Vulcan.

Uses pydantic-settings for type-safe configuration from environment variables
(prefix ``VULCAN_``) or a ``.env`` file. These values seed the paging
configuration; mappings and rules are code, not settings.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Vulcan configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VULCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paging
    page_parameter: str = Field(
        default="page",
        min_length=1,
        description="Request parameter holding the 1-based page number",
    )
    count_parameter: str = Field(
        default="count",
        min_length=1,
        description="Request parameter holding the page size",
    )
    sort_parameter: str = Field(
        default="_sort",
        min_length=1,
        description="Request parameter holding the CSV sort specification",
    )
    default_count: int = Field(
        default=10,
        ge=0,
        description="Page size used when the request does not specify one",
    )
    max_count: int = Field(
        default=20,
        ge=0,
        description="Largest page size honored; larger requests are reduced to this",
    )
    count_zero_means_count_only: bool = Field(
        default=True,
        description="Treat count=0 as a request for the total only (otherwise reject it)",
    )
    base_url: str | None = Field(
        default=None,
        description="Base URL for paging links (default: the request URL)",
    )

    # MongoDB (optional, for MongoQueryExecutor)
    mongodb_uri: SecretStr | None = Field(
        default=None,
        description="MongoDB connection URI",
    )
    mongodb_database: str = Field(
        default="vulcan",
        description="MongoDB database name",
    )
    mongodb_collection: str | None = Field(
        default=None,
        description="MongoDB collection searched by the executor",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level used by the CLI and the HTTP adapter",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
