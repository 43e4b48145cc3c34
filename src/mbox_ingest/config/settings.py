"""Application settings using Pydantic Settings."""

import codecs
from functools import lru_cache
from pathlib import Path
from typing import Sequence

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..errors import ConfigurationError


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MBOX_INGEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Input
    mbox_files: list[str] = Field(
        default_factory=list,
        description="mbox files to process, as a JSON list",
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of the mbox files",
    )
    encoding_errors: str = Field(
        default="replace",
        description="Codec error handler for bytes that do not decode",
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./data/mbox_ingest.db",
        description="Database connection URL",
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Root log level",
    )

    @field_validator("encoding")
    @classmethod
    def check_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError:
            raise ValueError(f"unknown encoding: {value}")
        return value

    @field_validator("encoding_errors")
    @classmethod
    def check_encoding_errors(cls, value: str) -> str:
        try:
            codecs.lookup_error(value)
        except LookupError:
            raise ValueError(f"unknown codec error handler: {value}")
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Raises:
        ConfigurationError: If the environment holds invalid settings.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


def resolve_mbox_files(
    paths: Sequence[Path | str] | None,
    settings: Settings | None = None,
) -> list[str]:
    """Pick the files to process.

    Paths given on the command line win over configured ones.

    Raises:
        ConfigurationError: If neither source names any file.
    """
    if paths:
        return [str(p) for p in paths]
    settings = settings or get_settings()
    if settings.mbox_files:
        return list(settings.mbox_files)
    raise ConfigurationError("You must specify at least one mbox file.")
