"""Per-browser session wiring intents to controllers."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from .config import Settings
from .controllers import (
    AlertController,
    FlowOutcome,
    MovieDetailController,
    SearchController,
    SeriesDetailController,
    TrailerController,
)
from .intents import (
    BackToResults,
    Cancel,
    CloseAlert,
    CloseTrailer,
    DismissOverlay,
    GoBack,
    Intent,
    NewSearch,
    PlayTrailer,
    QuickSearch,
    SelectCollection,
    SelectMovie,
    ShowMovieTrailer,
    SubmitSearch,
)
from .services.catalog import CatalogSource
from .state import (
    FlowKind,
    FlowTracker,
    NavigationContext,
    OverlayManager,
    ViewRouter,
    ViewState,
)
from .views import RenderedViews

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[None]]


class BrowserSession:
    """State machine for one browser: views, overlays and navigation context.

    Every user action arrives as an :mod:`app.intents` value through
    :meth:`dispatch`. Flow controllers receive the current
    :class:`NavigationContext` and hand back the one to keep; a response
    that lost the race to a newer flow leaves the context untouched.
    """

    def __init__(self, catalog: CatalogSource, settings: Settings):
        self.settings = settings
        self.router = ViewRouter()
        self.overlays = OverlayManager()
        self.flows = FlowTracker(self.overlays)
        self.views = RenderedViews()
        self.context = NavigationContext()
        self.search_input = ""

        self.alerts = AlertController(self.overlays)
        deps = (
            catalog,
            self.router,
            self.overlays,
            self.flows,
            self.views,
            self.alerts,
            settings,
        )
        self.search = SearchController(*deps)
        self.series = SeriesDetailController(*deps)
        self.movies = MovieDetailController(*deps)
        self.trailers = TrailerController(*deps)

        self._handlers: dict[type, Handler] = {
            SubmitSearch: self._on_submit_search,
            QuickSearch: self._on_quick_search,
            SelectCollection: self._on_select_collection,
            SelectMovie: self._on_select_movie,
            PlayTrailer: self._on_play_trailer,
            ShowMovieTrailer: self._on_show_movie_trailer,
            GoBack: self._on_go_back,
            BackToResults: self._on_back_to_results,
            NewSearch: self._on_new_search,
            CloseAlert: self._on_close_alert,
            CloseTrailer: self._on_close_trailer,
            DismissOverlay: self._on_dismiss_overlay,
            Cancel: self._on_cancel,
        }

    @property
    def active_view(self) -> ViewState:
        return self.router.active

    async def dispatch(self, intent: Intent) -> None:
        handler = self._handlers.get(type(intent))
        if handler is None:
            raise TypeError(f"Unsupported intent: {type(intent).__name__}")
        logger.debug("Dispatching %s", intent.type)
        await handler(intent)

    def _adopt(self, outcome: FlowOutcome) -> None:
        if outcome.applied:
            self.context = outcome.context

    async def _on_submit_search(self, intent: SubmitSearch) -> None:
        self.search_input = intent.query
        self._adopt(await self.search.handle_search(intent.query, self.context))

    async def _on_quick_search(self, intent: QuickSearch) -> None:
        self.search_input = intent.term
        self._adopt(await self.search.handle_search(intent.term, self.context))

    async def _on_select_collection(self, intent: SelectCollection) -> None:
        self._adopt(
            await self.series.get_series_details(intent.collection_id, self.context)
        )

    async def _on_select_movie(self, intent: SelectMovie) -> None:
        self._adopt(
            await self.movies.get_movie_details(
                intent.movie_id, intent.origin_series_id, self.context
            )
        )

    async def _on_play_trailer(self, intent: PlayTrailer) -> None:
        self.trailers.play_trailer(intent.video_key)

    async def _on_show_movie_trailer(self, intent: ShowMovieTrailer) -> None:
        await self.trailers.show_movie_trailer(intent.target, intent.is_movie_id)

    async def _on_go_back(self, intent: GoBack) -> None:
        if intent.series_id is not None:
            self._adopt(
                await self.series.get_series_details(intent.series_id, self.context)
            )
        else:
            self._return_to_results()

    async def _on_back_to_results(self, intent: BackToResults) -> None:
        self._return_to_results()

    def _return_to_results(self) -> None:
        # A detail lookup still in flight belongs to the view being left.
        self.flows.invalidate(FlowKind.SERIES, FlowKind.MOVIE)
        self.router.show(ViewState.RESULTS)

    async def _on_new_search(self, intent: NewSearch) -> None:
        # Responses still in flight belong to the abandoned navigation.
        self.flows.invalidate_all()
        self.context = self.context.cleared()
        self.search_input = ""
        self.router.show(ViewState.SEARCH)

    async def _on_close_alert(self, intent: CloseAlert) -> None:
        self.alerts.close_alert()

    async def _on_close_trailer(self, intent: CloseTrailer) -> None:
        self.trailers.close_trailer()

    async def _on_dismiss_overlay(self, intent: DismissOverlay) -> None:
        if intent.overlay == "alert":
            self.alerts.close_alert()
        else:
            self.trailers.close_trailer()

    async def _on_cancel(self, intent: Cancel) -> None:
        self.alerts.close_alert()
        self.trailers.close_trailer()

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-compatible picture of everything rendering needs."""

        alert = self.overlays.alert
        trailer = self.overlays.trailer
        results = self.views.results
        series = self.views.series
        movie = self.views.movie

        payload: dict[str, Any] = {
            "view": self.router.active.value,
            "visibility": {
                view.value: visible for view, visible in self.router.visibility().items()
            },
            "scrollTop": self.router.scroll_top,
            "searchInput": self.search_input,
            "context": {"currentSeriesId": self.context.current_series_id},
            "overlays": {
                "loading": self.overlays.loading,
                "alert": None
                if alert is None
                else {
                    "message": alert.message,
                    "title": alert.title,
                    "severity": alert.severity,
                },
                "trailer": None
                if trailer is None
                else {"videoKey": trailer.video_key, "embedUrl": trailer.embed_url},
            },
            "results": None,
            "series": None,
            "movie": None,
        }
        if results is not None:
            payload["results"] = {
                "heading": results.heading,
                **results.model_dump(mode="json", by_alias=True),
            }
        if series is not None:
            payload["series"] = series.model_dump(mode="json", by_alias=True)
        if movie is not None:
            payload["movie"] = {
                **movie.model_dump(mode="json", by_alias=True),
                "backIntent": movie.back.intent().model_dump(mode="json", by_alias=True),
            }
        return payload
