"""Typed intents emitted by the rendered page and consumed by the session."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Intent(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class SubmitSearch(_Intent):
    type: Literal["submit-search"] = "submit-search"
    query: str = ""


class QuickSearch(_Intent):
    """A suggestion chip: fill the search input and search right away."""

    type: Literal["quick-search"] = "quick-search"
    term: str


class SelectCollection(_Intent):
    type: Literal["select-collection"] = "select-collection"
    collection_id: int = Field(alias="collectionId")


class SelectMovie(_Intent):
    type: Literal["select-movie"] = "select-movie"
    movie_id: int = Field(alias="movieId")
    origin_series_id: int | None = Field(default=None, alias="originSeriesId")


class PlayTrailer(_Intent):
    type: Literal["play-trailer"] = "play-trailer"
    video_key: str = Field(alias="videoKey")


class ShowMovieTrailer(_Intent):
    """Play a trailer given either a movie id or a ready video key."""

    type: Literal["show-movie-trailer"] = "show-movie-trailer"
    target: int | str
    is_movie_id: bool = Field(default=True, alias="isMovieId")


class GoBack(_Intent):
    type: Literal["go-back"] = "go-back"
    series_id: int | None = Field(default=None, alias="seriesId")


class BackToResults(_Intent):
    type: Literal["back-to-results"] = "back-to-results"


class NewSearch(_Intent):
    type: Literal["new-search"] = "new-search"


class CloseAlert(_Intent):
    type: Literal["close-alert"] = "close-alert"


class CloseTrailer(_Intent):
    type: Literal["close-trailer"] = "close-trailer"


class DismissOverlay(_Intent):
    """A click on an overlay's backdrop."""

    type: Literal["dismiss-overlay"] = "dismiss-overlay"
    overlay: Literal["alert", "trailer"]


class Cancel(_Intent):
    """The escape gesture: closes every dismissible overlay."""

    type: Literal["cancel"] = "cancel"


Intent = Annotated[
    Union[
        SubmitSearch,
        QuickSearch,
        SelectCollection,
        SelectMovie,
        PlayTrailer,
        ShowMovieTrailer,
        GoBack,
        BackToResults,
        NewSearch,
        CloseAlert,
        CloseTrailer,
        DismissOverlay,
        Cancel,
    ],
    Field(discriminator="type"),
]

intent_adapter: TypeAdapter[Intent] = TypeAdapter(Intent)


def parse_intent(payload: object) -> Intent:
    """Validate a raw JSON payload into an intent."""

    return intent_adapter.validate_python(payload)
