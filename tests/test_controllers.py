"""Flow controller behaviour: loading, rendering, and error-to-alert mapping."""

from __future__ import annotations

import asyncio

from app.errors import CatalogNotFoundError
from app.session import BrowserSession
from app.state import NavigationContext, ViewState
from app.views import NO_RESULTS_MESSAGE, SEARCH_FAILED_MESSAGE

MATRIX_RESULTS = {
    "results": [
        {
            "id": 2344,
            "name": "The Matrix Collection",
            "poster_path": "/collection.jpg",
            "media_type": "collection",
        },
        {
            "id": 603,
            "title": "The Matrix",
            "poster_path": None,
            "release_date": "1999-03-31",
            "vote_average": 8.2,
            "media_type": "movie",
        },
    ]
}


def test_blank_query_alerts_without_network(catalog, settings) -> None:
    session = BrowserSession(catalog, settings)

    outcome = asyncio.run(session.search.handle_search("   ", NavigationContext()))

    assert not outcome.applied
    assert catalog.calls == []
    assert session.overlays.alert is not None
    assert session.overlays.alert.message == "Please enter a search term"
    assert session.overlays.alert.severity == "error"
    assert session.router.active is ViewState.SEARCH
    assert not session.overlays.loading


def test_search_filters_posterless_items(catalog, settings) -> None:
    catalog.searches["Matrix"] = MATRIX_RESULTS
    session = BrowserSession(catalog, settings)

    asyncio.run(session.search.handle_search("Matrix", NavigationContext()))

    results = session.views.results
    assert results is not None
    assert results.status == "ready"
    assert len(results.cards) == 1
    assert results.count == 1
    assert results.cards[0].title == "The Matrix Collection"
    assert results.heading == 'Search Results for "Matrix"'
    assert session.router.active is ViewState.RESULTS
    assert not session.overlays.loading
    assert session.overlays.alert is None


def test_search_shows_placeholder_while_pending(catalog, settings) -> None:
    catalog.searches["Dune"] = {"results": []}
    gate = asyncio.Event()
    catalog.gates[("search", "Dune")] = gate
    session = BrowserSession(catalog, settings)

    async def runner() -> None:
        task = asyncio.create_task(
            session.search.handle_search("Dune", NavigationContext())
        )
        await asyncio.sleep(0)
        assert session.router.active is ViewState.RESULTS
        assert session.overlays.loading
        assert session.views.results is not None
        assert session.views.results.status == "loading"
        assert session.views.results.count == 0
        assert session.views.results.query == "Dune"
        gate.set()
        await task

    asyncio.run(runner())

    assert session.views.results.status == "empty"
    assert session.views.results.message == NO_RESULTS_MESSAGE
    assert not session.overlays.loading


def test_search_failure_alerts_and_renders_inline_message(catalog, settings) -> None:
    session = BrowserSession(catalog, settings)

    asyncio.run(session.search.handle_search("Offline", NavigationContext()))

    assert session.overlays.alert is not None
    assert session.overlays.alert.severity == "error"
    assert "fetching search results" in session.overlays.alert.message
    assert session.views.results.status == "failed"
    assert session.views.results.message == SEARCH_FAILED_MESSAGE
    assert session.views.results.cards == []
    assert not session.overlays.loading


def test_series_details_sorted_and_context_recorded(catalog, settings) -> None:
    catalog.collections[2344] = {
        "id": 2344,
        "name": "The Matrix Collection",
        "overview": "The complete saga.",
        "backdrop_path": "/backdrop.jpg",
        "parts": [
            {"id": 605, "title": "Revolutions", "release_date": "2003-11-05"},
            {"id": 603, "title": "The Matrix", "release_date": "1999-03-31"},
            {"id": 624860, "title": "Resurrections", "release_date": None},
        ],
    }
    session = BrowserSession(catalog, settings)

    outcome = asyncio.run(
        session.series.get_series_details(2344, NavigationContext())
    )

    assert outcome.applied
    assert outcome.context.current_series_id == 2344
    assert outcome.view is ViewState.SERIES_DETAIL
    view = session.views.series
    assert view is not None and view.header is not None
    assert [entry.movie_id for entry in view.entries] == [624860, 603, 605]
    assert view.header.backdrop_url == "https://image.tmdb.org/t/p/w1280/backdrop.jpg"
    assert not session.overlays.loading


def test_empty_collection_returns_to_results(catalog, settings) -> None:
    catalog.collections[9485] = {"id": 9485, "name": "Fast", "parts": []}
    session = BrowserSession(catalog, settings)
    session.router.show(ViewState.RESULTS)

    outcome = asyncio.run(
        session.series.get_series_details(9485, NavigationContext())
    )

    assert session.router.active is ViewState.RESULTS
    assert session.overlays.alert is not None
    assert session.overlays.alert.message == "No movies found for this series."
    assert session.overlays.alert.severity == "info"
    assert outcome.context.current_series_id is None
    assert not session.overlays.loading


def test_collection_not_found_message(catalog, settings) -> None:
    catalog.collections[1] = CatalogNotFoundError("missing")
    session = BrowserSession(catalog, settings)

    asyncio.run(session.series.get_series_details(1, NavigationContext()))

    assert session.router.active is ViewState.RESULTS
    assert session.overlays.alert.message == (
        "Could not load series details: This collection could not be found."
    )
    assert session.overlays.alert.severity == "error"


def test_collection_network_error_message(catalog, settings) -> None:
    session = BrowserSession(catalog, settings)

    asyncio.run(session.series.get_series_details(77, NavigationContext()))

    assert session.router.active is ViewState.RESULTS
    assert session.overlays.alert.message == (
        "Could not load series details: Network response was not ok for series details."
    )


def test_movie_details_render_with_direct_trailer_key(catalog, settings) -> None:
    catalog.movies[603] = {
        "id": 603,
        "title": "The Matrix",
        "genres": [{"name": "Action"}, {"name": "Science Fiction"}],
        "watch/providers": {
            "results": {"DE": {"flatrate": [{"provider_name": "Netflix"}]}}
        },
        "videos": {"results": [{"type": "Trailer", "site": "YouTube", "key": "abc123"}]},
    }
    session = BrowserSession(catalog, settings)

    asyncio.run(session.movies.get_movie_details(603, 2344, NavigationContext()))

    view = session.views.movie
    assert view is not None
    assert view.trailer_key == "abc123"
    assert view.genres == "Action, Science Fiction"
    assert view.providers.stream == "Netflix"
    assert view.back.view is ViewState.SERIES_DETAIL
    assert view.back.series_id == 2344
    assert ("trailer", 603) not in catalog.calls


def test_movie_failure_returns_to_origin(catalog, settings) -> None:
    session = BrowserSession(catalog, settings)

    asyncio.run(session.movies.get_movie_details(1, 2344, NavigationContext()))
    assert session.router.active is ViewState.SERIES_DETAIL
    assert session.overlays.alert.message == "Could not load movie details."

    asyncio.run(session.movies.get_movie_details(1, None, NavigationContext()))
    assert session.router.active is ViewState.RESULTS
    assert not session.overlays.loading


def test_show_movie_trailer_resolves_key(catalog, settings) -> None:
    catalog.trailers[603] = "vKQi3bBA1y8"
    session = BrowserSession(catalog, settings)

    opened = asyncio.run(session.trailers.show_movie_trailer(603, True))

    assert opened
    assert session.overlays.trailer is not None
    assert session.overlays.trailer.embed_url == (
        "https://www.youtube.com/embed/vKQi3bBA1y8?autoplay=1"
    )


def test_show_movie_trailer_without_key_alerts(catalog, settings) -> None:
    catalog.trailers[603] = None
    session = BrowserSession(catalog, settings)

    opened = asyncio.run(session.trailers.show_movie_trailer(603, True))

    assert not opened
    assert session.overlays.trailer is None
    assert session.overlays.alert.message == "No trailer found for this movie."


def test_show_movie_trailer_lookup_failure(catalog, settings) -> None:
    session = BrowserSession(catalog, settings)

    opened = asyncio.run(session.trailers.show_movie_trailer(404, True))

    assert not opened
    assert session.overlays.alert.message == "Could not load trailer."


def test_show_trailer_with_video_key_skips_lookup(catalog, settings) -> None:
    session = BrowserSession(catalog, settings)

    asyncio.run(session.trailers.show_movie_trailer("abc123", False))

    assert catalog.calls == []
    assert session.overlays.trailer.video_key == "abc123"


def test_close_trailer_clears_embed(catalog, settings) -> None:
    session = BrowserSession(catalog, settings)
    session.trailers.close_trailer()
    assert session.overlays.trailer is None

    session.trailers.play_trailer("abc123")
    session.trailers.close_trailer()
    assert session.overlays.trailer is None
