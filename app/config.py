"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="CineTrail", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    catalog_api_url: HttpUrl = Field(
        default="https://movie-api.sayrz.com/api", alias="CATALOG_API_URL"
    )
    image_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w500", alias="IMAGE_BASE_URL"
    )
    backdrop_base_url: str = Field(
        default="https://image.tmdb.org/t/p/w1280", alias="BACKDROP_BASE_URL"
    )
    video_embed_url: str = Field(
        default="https://www.youtube.com/embed", alias="VIDEO_EMBED_URL"
    )
    video_site: str = Field(default="YouTube", alias="VIDEO_SITE")

    watch_region: str = Field(default="DE", alias="WATCH_REGION")
    request_timeout: float = Field(default=15.0, alias="REQUEST_TIMEOUT", gt=0)

    max_sessions: int = Field(default=500, alias="MAX_SESSIONS", gt=0)
    session_idle_seconds: float = Field(
        default=3600.0, alias="SESSION_IDLE_SECONDS", gt=0
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("image_base_url", "backdrop_base_url", "video_embed_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        """Host addresses are joined with paths that carry their own slash."""

        cleaned = value.strip().rstrip("/")
        if not cleaned.startswith("http"):
            raise ValueError("Media host addresses must be absolute http(s) URLs")
        return cleaned

    @field_validator("watch_region", mode="before")
    @classmethod
    def _normalise_region(cls, value: object) -> str:
        """Region codes are two-letter ISO 3166-1 identifiers."""

        if value is None:
            return "DE"
        region = str(value).strip().upper()
        if not region:
            return "DE"
        if len(region) != 2 or not region.isalpha():
            raise ValueError("WATCH_REGION must be a two-letter country code")
        return region

    @property
    def catalog_base_url(self) -> str:
        """Return the catalog API root without a trailing slash."""

        return str(self.catalog_api_url).rstrip("/")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
