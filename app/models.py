"""Pydantic models describing catalog API payloads."""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

MediaType = Literal["collection", "movie"]


class SearchHit(BaseModel):
    """A single entry of the catalog's mixed search results."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str | None = Field(
        default=None, validation_alias=AliasChoices("name", "title")
    )
    poster_path: str | None = None
    release_date: str | None = None
    first_air_date: str | None = None
    vote_average: float | None = None
    media_type: str = "movie"

    @property
    def is_collection(self) -> bool:
        return self.media_type == "collection"


class SearchResponse(BaseModel):
    results: list[SearchHit] = Field(default_factory=list)

    @field_validator("results", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return value or []


class CollectionPart(BaseModel):
    """A movie belonging to a collection."""

    id: int
    title: str = "Untitled"
    release_date: str | None = None
    poster_path: str | None = None


class Collection(BaseModel):
    """A movie series as returned by the collection endpoint."""

    id: int
    name: str = "Untitled"
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    parts: list[CollectionPart] = Field(default_factory=list)

    @field_validator("parts", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return value or []


class Genre(BaseModel):
    name: str


class WatchProvider(BaseModel):
    provider_name: str


class RegionProviders(BaseModel):
    """Streaming, purchase and rental offers for one region."""

    flatrate: list[WatchProvider] = Field(default_factory=list)
    buy: list[WatchProvider] = Field(default_factory=list)
    rent: list[WatchProvider] = Field(default_factory=list)

    @field_validator("flatrate", "buy", "rent", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return value or []

    def is_empty(self) -> bool:
        return not (self.flatrate or self.buy or self.rent)


class WatchProviders(BaseModel):
    results: dict[str, RegionProviders] = Field(default_factory=dict)


class Video(BaseModel):
    type: str | None = None
    site: str | None = None
    key: str | None = None


class VideoList(BaseModel):
    results: list[Video] = Field(default_factory=list)


class MovieDetails(BaseModel):
    """Full movie payload including appended providers and videos."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str = "Untitled"
    tagline: str | None = None
    overview: str | None = None
    release_date: str | None = None
    genres: list[Genre] | None = None
    runtime: int | None = None
    vote_average: float | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    watch_providers: WatchProviders | None = Field(
        default=None, alias="watch/providers"
    )
    videos: VideoList | None = None

    def providers_for(self, region: str) -> RegionProviders | None:
        """Return the provider offers for ``region`` if the catalog has any."""

        if self.watch_providers is None:
            return None
        return self.watch_providers.results.get(region)

    def find_trailer_key(self, site: str) -> str | None:
        """Return the key of the first trailer hosted on ``site``."""

        if self.videos is None:
            return None
        for video in self.videos.results:
            if video.type == "Trailer" and video.site == site and video.key:
                return video.key
        return None


class TrailerLookup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    trailer_key: str | None = Field(default=None, alias="trailerKey")
