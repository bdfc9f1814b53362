"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BLOCKED_KEYWORD = "ullu"


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Mega Catalog", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=7000, alias="PORT")

    tmdb_api_key: str | None = Field(default=None, alias="TMDB_API_KEY")
    trakt_client_id: str | None = Field(
        default=None,
        alias="TRAKT_CLIENT_ID",
        validation_alias=AliasChoices("TRAKT_CLIENT_ID", "TRAKT_KEY"),
    )

    trakt_api_url: HttpUrl = Field(
        default="https://api.trakt.tv", alias="TRAKT_API_URL"
    )
    tmdb_api_url: HttpUrl = Field(
        default="https://api.themoviedb.org/3", alias="TMDB_API_URL"
    )
    tmdb_image_url: HttpUrl = Field(
        default="https://image.tmdb.org/t/p", alias="TMDB_IMAGE_URL"
    )

    catalog_page_size: int = Field(
        default=20, alias="CATALOG_PAGE_SIZE", ge=1, le=100
    )
    enrichment_concurrency: int = Field(
        default=0, alias="ENRICHMENT_CONCURRENCY", ge=0
    )
    blocked_keyword: str = Field(
        default=DEFAULT_BLOCKED_KEYWORD, alias="BLOCKED_KEYWORD"
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )
    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("tmdb_api_key", "trakt_client_id", mode="before")
    @classmethod
    def _strip_blank_keys(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("blocked_keyword", mode="before")
    @classmethod
    def _normalise_blocked_keyword(cls, value: object) -> object:
        if value is None:
            return DEFAULT_BLOCKED_KEYWORD
        if isinstance(value, str):
            cleaned = value.strip().lower()
            return cleaned or DEFAULT_BLOCKED_KEYWORD
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def image_base_url(self) -> str:
        """Return the TMDB image host without a trailing slash."""

        return str(self.tmdb_image_url).rstrip("/")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", frozen=True
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
