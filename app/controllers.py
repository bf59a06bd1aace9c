"""Controllers orchestrating catalog lookups, view transitions and overlays."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import quote

from .config import Settings
from .errors import (
    CatalogNetworkError,
    CatalogNotFoundError,
    EmptyResultError,
    MissingDataError,
    QueryValidationError,
)
from .services.catalog import CatalogSource
from .state import (
    FlowKind,
    FlowTracker,
    NavigationContext,
    OverlayManager,
    Severity,
    ViewRouter,
    ViewState,
)
from .views import (
    NO_RESULTS_MESSAGE,
    SEARCH_FAILED_MESSAGE,
    BackTarget,
    MovieDetailView,
    RenderedViews,
    ResultsView,
    SeriesDetailView,
    build_movie_view,
    build_result_cards,
    build_series_view,
)

logger = logging.getLogger(__name__)

SEARCH_ERROR_ALERT = (
    "An error occurred while fetching search results. Please try again later."
)
COLLECTION_NOT_FOUND = "This collection could not be found."
COLLECTION_NETWORK_ERROR = "Network response was not ok for series details."
EMPTY_COLLECTION = "No movies found for this series."
MOVIE_LOAD_ERROR = "Could not load movie details."
NO_TRAILER = "No trailer found for this movie."
TRAILER_LOAD_ERROR = "Could not load trailer."


@dataclass(slots=True)
class FlowOutcome:
    """What a flow left behind: the active view and navigation context.

    ``applied`` is false when the flow was rejected up front or its
    response arrived after a newer flow had superseded it.
    """

    view: ViewState
    context: NavigationContext
    applied: bool = True


class AlertController:
    """Alert dialog content and dismissal."""

    def __init__(self, overlays: OverlayManager):
        self._overlays = overlays

    def show_alert(
        self, message: str, severity: Severity = "info", title: str = "Notice"
    ) -> None:
        self._overlays.show_alert(message, severity=severity, title=title)

    def close_alert(self) -> None:
        self._overlays.close_alert()


class _FlowController:
    def __init__(
        self,
        catalog: CatalogSource,
        router: ViewRouter,
        overlays: OverlayManager,
        flows: FlowTracker,
        views: RenderedViews,
        alerts: AlertController,
        settings: Settings,
    ):
        self._catalog = catalog
        self._router = router
        self._overlays = overlays
        self._flows = flows
        self._views = views
        self._alerts = alerts
        self._settings = settings

    def _owns(self, kind: FlowKind, generation: int, view: ViewState) -> bool:
        """Whether the flow is still the latest of its kind and its view is showing."""

        return self._flows.is_current(kind, generation) and self._router.active is view

    def _stale(self, kind: FlowKind, generation: int, context: NavigationContext) -> FlowOutcome:
        logger.debug("Discarding stale %s response (generation %s)", kind.value, generation)
        return FlowOutcome(view=self._router.active, context=context, applied=False)


class SearchController(_FlowController):
    async def handle_search(
        self, query: str | None, context: NavigationContext
    ) -> FlowOutcome:
        """Search the catalog and render the results view."""

        try:
            query = self._validate(query)
        except QueryValidationError as exc:
            self._alerts.show_alert(exc.message, severity="error")
            return FlowOutcome(view=self._router.active, context=context, applied=False)

        generation = self._flows.begin(FlowKind.SEARCH)
        try:
            self._router.show(ViewState.RESULTS)
            self._views.results = ResultsView(query=query)
            try:
                response = await self._catalog.search(query)
            except CatalogNetworkError as exc:
                if not self._owns(FlowKind.SEARCH, generation, ViewState.RESULTS):
                    return self._stale(FlowKind.SEARCH, generation, context)
                logger.warning("Search for %r failed: %s", query, exc)
                self._alerts.show_alert(SEARCH_ERROR_ALERT, severity="error")
                self._views.results = ResultsView(
                    query=query, status="failed", message=SEARCH_FAILED_MESSAGE
                )
                return FlowOutcome(view=self._router.active, context=context)

            if not self._owns(FlowKind.SEARCH, generation, ViewState.RESULTS):
                return self._stale(FlowKind.SEARCH, generation, context)

            cards = build_result_cards(response.results, self._settings)
            if cards:
                self._views.results = ResultsView(
                    query=query, count=len(cards), status="ready", message=None, cards=cards
                )
            else:
                self._views.results = ResultsView(
                    query=query, status="empty", message=NO_RESULTS_MESSAGE
                )
            logger.info("Search for %r rendered %s result(s)", query, len(cards))
            return FlowOutcome(view=self._router.active, context=context)
        finally:
            self._flows.finish(FlowKind.SEARCH, generation)

    @staticmethod
    def _validate(query: str | None) -> str:
        if not query or not query.strip():
            raise QueryValidationError("Please enter a search term")
        return query.strip()


class SeriesDetailController(_FlowController):
    async def get_series_details(
        self, series_id: int, context: NavigationContext
    ) -> FlowOutcome:
        """Load a collection and render its ordered entries."""

        series_context = context.with_series(series_id)
        generation = self._flows.begin(FlowKind.SERIES)
        try:
            self._router.show(ViewState.SERIES_DETAIL)
            self._views.series = SeriesDetailView(series_id=series_id)
            try:
                collection = await self._catalog.get_collection(series_id)
                if not self._owns(FlowKind.SERIES, generation, ViewState.SERIES_DETAIL):
                    return self._stale(FlowKind.SERIES, generation, context)
                if not collection.parts:
                    raise EmptyResultError(EMPTY_COLLECTION)
            except EmptyResultError as exc:
                logger.info("Collection %s has no parts", series_id)
                self._alerts.show_alert(exc.message)
                self._router.show(ViewState.RESULTS)
                return FlowOutcome(view=self._router.active, context=context.cleared())
            except CatalogNetworkError as exc:
                if not self._owns(FlowKind.SERIES, generation, ViewState.SERIES_DETAIL):
                    return self._stale(FlowKind.SERIES, generation, context)
                reason = (
                    COLLECTION_NOT_FOUND
                    if isinstance(exc, CatalogNotFoundError)
                    else COLLECTION_NETWORK_ERROR
                )
                logger.warning("Collection %s failed to load: %s", series_id, exc)
                self._alerts.show_alert(
                    f"Could not load series details: {reason}", severity="error"
                )
                self._router.show(ViewState.RESULTS)
                return FlowOutcome(view=self._router.active, context=context.cleared())

            self._views.series = build_series_view(collection, self._settings)
            return FlowOutcome(view=self._router.active, context=series_context)
        finally:
            self._flows.finish(FlowKind.SERIES, generation)


class MovieDetailController(_FlowController):
    async def get_movie_details(
        self,
        movie_id: int,
        series_id: int | None,
        context: NavigationContext,
    ) -> FlowOutcome:
        """Load a movie and render it with a back target for its origin."""

        movie_context = (
            context.with_series(series_id) if series_id is not None else context.cleared()
        )
        back = BackTarget.for_origin(series_id)
        generation = self._flows.begin(FlowKind.MOVIE)
        try:
            self._router.show(ViewState.MOVIE_DETAIL)
            self._views.movie = MovieDetailView(movie_id=movie_id, back=back)
            try:
                movie = await self._catalog.get_movie(movie_id)
            except CatalogNetworkError as exc:
                if not self._owns(FlowKind.MOVIE, generation, ViewState.MOVIE_DETAIL):
                    return self._stale(FlowKind.MOVIE, generation, context)
                logger.warning("Movie %s failed to load: %s", movie_id, exc)
                self._alerts.show_alert(MOVIE_LOAD_ERROR, severity="error")
                self._router.show(back.view)
                return FlowOutcome(view=self._router.active, context=movie_context)

            if not self._owns(FlowKind.MOVIE, generation, ViewState.MOVIE_DETAIL):
                return self._stale(FlowKind.MOVIE, generation, context)

            self._views.movie = build_movie_view(movie, series_id, self._settings)
            return FlowOutcome(view=self._router.active, context=movie_context)
        finally:
            self._flows.finish(FlowKind.MOVIE, generation)


class TrailerController(_FlowController):
    def embed_url(self, video_key: str) -> str:
        return f"{self._settings.video_embed_url}/{quote(video_key, safe='')}?autoplay=1"

    def play_trailer(self, video_key: str) -> None:
        self._overlays.open_trailer(video_key, self.embed_url(video_key))

    async def show_movie_trailer(self, target: int | str, is_movie_id: bool = True) -> bool:
        """Open the trailer for a movie id, or for a ready video key.

        Returns whether the trailer overlay was opened.
        """

        if not is_movie_id:
            self.play_trailer(str(target))
            return True

        try:
            movie_id = int(target)
        except (TypeError, ValueError):
            self._alerts.show_alert(NO_TRAILER)
            return False

        generation = self._flows.begin(FlowKind.TRAILER, show_loading=False)
        try:
            try:
                key = await self._catalog.get_trailer_key(movie_id)
                if not self._flows.is_current(FlowKind.TRAILER, generation):
                    return False
                if not key:
                    raise MissingDataError(NO_TRAILER)
            except MissingDataError as exc:
                self._alerts.show_alert(exc.message)
                return False
            except CatalogNetworkError as exc:
                if not self._flows.is_current(FlowKind.TRAILER, generation):
                    return False
                logger.warning("Trailer lookup for %s failed: %s", target, exc)
                self._alerts.show_alert(TRAILER_LOAD_ERROR, severity="error")
                return False
        finally:
            self._flows.finish(FlowKind.TRAILER, generation)

        self.play_trailer(key)
        return True

    def close_trailer(self) -> None:
        self._overlays.close_trailer()
