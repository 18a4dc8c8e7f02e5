"""Shared configuration management using pydantic-settings."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from src.shared.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class SharedConfig(BaseSettings):
    """Base configuration shared across all services."""
    log_level: str = Field(default="info", validation_alias="LOG_LEVEL")
    database_path: str = Field(
        default="./data/service.db", validation_alias="DATABASE_PATH"
    )

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class QualityGatesConfig(SharedConfig):
    """Configuration for the Quality Gates service."""
    database_path: str = Field(
        default="./data/quality_gates.db", validation_alias="DATABASE_PATH"
    )
    default_page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=1,
        le=MAX_PAGE_SIZE,
        validation_alias="DEFAULT_PAGE_SIZE",
    )
    max_page_size: int = Field(
        default=MAX_PAGE_SIZE,
        ge=1,
        le=MAX_PAGE_SIZE,
        validation_alias="MAX_PAGE_SIZE",
    )
