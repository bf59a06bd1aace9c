"""View data handed to rendering, and the mappings that produce it."""

from __future__ import annotations

from datetime import date
from typing import Literal, Sequence

from pydantic import BaseModel, Field

from .config import Settings
from .intents import GoBack, SelectCollection, SelectMovie, ShowMovieTrailer
from .models import Collection, CollectionPart, MovieDetails, SearchHit
from .state import ViewState
from .utils import (
    build_image_url,
    display_year,
    format_rating,
    format_runtime,
    join_names,
    parse_release_date,
    release_year,
)

SERIES_POSTER_PLACEHOLDER = (
    "https://via.placeholder.com/250x375/2c2c34/a9a9b2?text=No+Image"
)
PART_POSTER_PLACEHOLDER = (
    "https://via.placeholder.com/100x150/2c2c34/a9a9b2?text=No+Image"
)
MOVIE_POSTER_PLACEHOLDER = (
    "https://via.placeholder.com/300x450/2c2c34/a9a9b2?text=No+Poster"
)

NO_RESULTS_MESSAGE = "No movie series or movies found for this query."
SEARCH_FAILED_MESSAGE = "Failed to load search results."
NO_PROVIDERS_MESSAGE = "Streaming information not available for your region."

LoadStatus = Literal["loading", "ready", "empty", "failed"]


class ResultCard(BaseModel):
    id: int
    title: str
    poster_url: str
    year: str
    rating: str
    media_type: str
    label: str
    intent: SelectCollection | SelectMovie


class ResultsView(BaseModel):
    query: str = ""
    count: int = 0
    status: LoadStatus = "loading"
    message: str | None = "Searching for movies..."
    cards: list[ResultCard] = Field(default_factory=list)

    @property
    def heading(self) -> str:
        return f'Search Results for "{self.query}"'


class SeriesHeader(BaseModel):
    name: str
    overview: str
    poster_url: str
    backdrop_url: str | None = None
    part_count: int


class SeriesEntry(BaseModel):
    movie_id: int
    title: str
    poster_url: str
    release_year: str
    trailer_intent: ShowMovieTrailer
    details_intent: SelectMovie


class SeriesDetailView(BaseModel):
    series_id: int
    status: LoadStatus = "loading"
    message: str | None = "Loading series details..."
    header: SeriesHeader | None = None
    entries: list[SeriesEntry] = Field(default_factory=list)


class ProviderSummary(BaseModel):
    stream: str | None = None
    buy: str | None = None
    rent: str | None = None
    message: str | None = None

    @property
    def available(self) -> bool:
        return bool(self.stream or self.buy or self.rent)


class BackTarget(BaseModel):
    """Where the movie page's back action leads."""

    view: ViewState
    series_id: int | None = None
    label: str

    @classmethod
    def for_origin(cls, series_id: int | None) -> "BackTarget":
        if series_id is not None:
            return cls(
                view=ViewState.SERIES_DETAIL,
                series_id=series_id,
                label="← Back to Series",
            )
        return cls(view=ViewState.RESULTS, label="← Back to Results")

    def intent(self) -> GoBack:
        return GoBack(series_id=self.series_id)


class MovieDetailView(BaseModel):
    movie_id: int
    status: LoadStatus = "loading"
    message: str | None = "Loading movie details..."
    back: BackTarget
    title: str = ""
    tagline: str = ""
    overview: str = ""
    release_date: str = "Unknown"
    genres: str = "Unknown"
    rating: str = "N/A"
    runtime: str = "Unknown"
    poster_url: str = MOVIE_POSTER_PLACEHOLDER
    backdrop_url: str | None = None
    providers: ProviderSummary = Field(default_factory=ProviderSummary)
    trailer_key: str | None = None


def build_result_cards(hits: Sequence[SearchHit], settings: Settings) -> list[ResultCard]:
    """Map search hits to cards, dropping those without a poster.

    Source order is kept; there is no re-sorting.
    """

    cards: list[ResultCard] = []
    for hit in hits:
        poster_url = build_image_url(hit.poster_path, settings.image_base_url)
        if poster_url is None:
            continue
        intent: SelectCollection | SelectMovie
        if hit.is_collection:
            intent = SelectCollection(collection_id=hit.id)
        else:
            intent = SelectMovie(movie_id=hit.id)
        cards.append(
            ResultCard(
                id=hit.id,
                title=hit.title or "Untitled",
                poster_url=poster_url,
                year=display_year(hit.release_date, hit.first_air_date),
                rating=format_rating(hit.vote_average),
                media_type=hit.media_type,
                label="Series" if hit.is_collection else "Movie",
                intent=intent,
            )
        )
    return cards


def sort_parts(parts: Sequence[CollectionPart]) -> list[CollectionPart]:
    """Order parts by release date; undated parts come first.

    A bare year such as ``"1999"`` sorts as the first day of that year.
    """

    def key(part: CollectionPart) -> date:
        parsed = parse_release_date(part.release_date)
        if parsed is not None:
            return parsed
        year = release_year(part.release_date)
        if year is not None and year >= date.min.year:
            return date(year, 1, 1)
        return date.min

    return sorted(parts, key=key)


def build_series_view(collection: Collection, settings: Settings) -> SeriesDetailView:
    parts = sort_parts(collection.parts)
    header = SeriesHeader(
        name=collection.name,
        overview=collection.overview
        or "No description available for this series.",
        poster_url=build_image_url(collection.poster_path, settings.image_base_url)
        or SERIES_POSTER_PLACEHOLDER,
        backdrop_url=build_image_url(
            collection.backdrop_path, settings.backdrop_base_url
        ),
        part_count=len(parts),
    )
    entries = [
        SeriesEntry(
            movie_id=part.id,
            title=part.title,
            poster_url=build_image_url(part.poster_path, settings.image_base_url)
            or PART_POSTER_PLACEHOLDER,
            release_year=display_year(part.release_date),
            trailer_intent=ShowMovieTrailer(target=part.id, is_movie_id=True),
            details_intent=SelectMovie(
                movie_id=part.id, origin_series_id=collection.id
            ),
        )
        for part in parts
    ]
    return SeriesDetailView(
        series_id=collection.id,
        status="ready",
        message=None,
        header=header,
        entries=entries,
    )


def summarize_providers(movie: MovieDetails, region: str) -> ProviderSummary:
    offers = movie.providers_for(region)
    if offers is None or offers.is_empty():
        return ProviderSummary(message=NO_PROVIDERS_MESSAGE)
    return ProviderSummary(
        stream=join_names(p.provider_name for p in offers.flatrate) or None,
        buy=join_names(p.provider_name for p in offers.buy) or None,
        rent=join_names(p.provider_name for p in offers.rent) or None,
    )


def build_movie_view(
    movie: MovieDetails, series_id: int | None, settings: Settings
) -> MovieDetailView:
    genres = "Unknown"
    if movie.genres is not None:
        genres = join_names(genre.name for genre in movie.genres)
    return MovieDetailView(
        movie_id=movie.id,
        status="ready",
        message=None,
        back=BackTarget.for_origin(series_id),
        title=movie.title,
        tagline=movie.tagline or "",
        overview=movie.overview or "No description available.",
        release_date=movie.release_date or "Unknown",
        genres=genres,
        rating=format_rating(movie.vote_average),
        runtime=format_runtime(movie.runtime),
        poster_url=build_image_url(movie.poster_path, settings.image_base_url)
        or MOVIE_POSTER_PLACEHOLDER,
        backdrop_url=build_image_url(movie.backdrop_path, settings.backdrop_base_url),
        providers=summarize_providers(movie, settings.watch_region),
        trailer_key=movie.find_trailer_key(settings.video_site),
    )


class RenderedViews:
    """The latest view data for each main view of a session."""

    def __init__(self) -> None:
        self.results: ResultsView | None = None
        self.series: SeriesDetailView | None = None
        self.movie: MovieDetailView | None = None

    def clear(self) -> None:
        self.results = None
        self.series = None
        self.movie = None
