"""Pytest configuration and test helpers."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any

import pytest


# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where ``app`` sits
# at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.config import Settings  # noqa: E402
from app.errors import CatalogNetworkError  # noqa: E402
from app.models import Collection, MovieDetails, SearchResponse  # noqa: E402


class FakeCatalog:
    """In-memory catalog source recording every lookup.

    Each table maps a lookup argument to either a raw payload or an
    exception instance to raise. ``gates`` holds optional events a lookup
    waits on before answering, which lets tests finish requests out of order.
    """

    def __init__(self) -> None:
        self.searches: dict[str, Any] = {}
        self.collections: dict[int, Any] = {}
        self.movies: dict[int, Any] = {}
        self.trailers: dict[int, Any] = {}
        self.gates: dict[tuple[str, Any], asyncio.Event] = {}
        self.calls: list[tuple[str, Any]] = []

    async def _answer(self, kind: str, key: Any, table: dict[Any, Any]) -> Any:
        self.calls.append((kind, key))
        gate = self.gates.get((kind, key))
        if gate is not None:
            await gate.wait()
        if key not in table:
            raise CatalogNetworkError("HTTP error! status: 500", status_code=500)
        value = table[key]
        if isinstance(value, Exception):
            raise value
        return value

    async def search(self, query: str) -> SearchResponse:
        payload = await self._answer("search", query, self.searches)
        return SearchResponse.model_validate(payload)

    async def get_collection(self, collection_id: int) -> Collection:
        payload = await self._answer("collection", collection_id, self.collections)
        return Collection.model_validate(payload)

    async def get_movie(self, movie_id: int) -> MovieDetails:
        payload = await self._answer("movie", movie_id, self.movies)
        return MovieDetails.model_validate(payload)

    async def get_trailer_key(self, movie_id: int) -> str | None:
        return await self._answer("trailer", movie_id, self.trailers)


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()
