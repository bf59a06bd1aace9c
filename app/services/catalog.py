"""Client for the remote movie-catalog API."""

from __future__ import annotations

import logging
from typing import Any, Protocol, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..errors import CatalogNetworkError, CatalogNotFoundError
from ..models import Collection, MovieDetails, SearchResponse, TrailerLookup

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class CatalogSource(Protocol):
    """The four read-only lookups the controllers depend on."""

    async def search(self, query: str) -> SearchResponse: ...

    async def get_collection(self, collection_id: int) -> Collection: ...

    async def get_movie(self, movie_id: int) -> MovieDetails: ...

    async def get_trailer_key(self, movie_id: int) -> str | None: ...


class CatalogClient:
    """Thin wrapper around the catalog HTTP API.

    Every method either returns a parsed model or raises
    :class:`CatalogNetworkError`; a 404 raises the
    :class:`CatalogNotFoundError` subclass so callers can word it
    differently. Timeouts come from the supplied ``httpx.AsyncClient`` and
    surface as transport failures.
    """

    def __init__(self, http_client: httpx.AsyncClient):
        self._client = http_client

    async def search(self, query: str) -> SearchResponse:
        """Search movies and collections matching ``query``."""

        return await self._get("/search", SearchResponse, params={"query": query})

    async def get_collection(self, collection_id: int) -> Collection:
        """Fetch a collection with its parts."""

        return await self._get(f"/collection/{collection_id}", Collection)

    async def get_movie(self, movie_id: int) -> MovieDetails:
        """Fetch a movie with its providers and videos."""

        return await self._get(f"/movie/{movie_id}", MovieDetails)

    async def get_trailer_key(self, movie_id: int) -> str | None:
        """Resolve the video key of a movie's trailer, if the catalog has one."""

        lookup = await self._get(f"/movie/{movie_id}/trailer", TrailerLookup)
        key = (lookup.trailer_key or "").strip()
        return key or None

    async def _get(
        self,
        path: str,
        model: type[ModelT],
        *,
        params: dict[str, Any] | None = None,
    ) -> ModelT:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("Catalog request %s failed with status %s", path, status)
            if status == 404:
                raise CatalogNotFoundError(
                    f"Catalog resource {path} not found", original_exception=exc
                ) from exc
            raise CatalogNetworkError(
                f"HTTP error! status: {status}",
                status_code=status,
                original_exception=exc,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "Catalog request %s failed: %s", path, exc.__class__.__name__
            )
            raise CatalogNetworkError(
                f"Could not reach the catalog: {exc.__class__.__name__}",
                original_exception=exc,
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Unexpected non-JSON catalog response for %s", path)
            raise CatalogNetworkError(
                "Catalog returned an unreadable response",
                status_code=response.status_code,
                original_exception=exc,
            ) from exc

        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Unexpected catalog response structure for %s", path)
            raise CatalogNetworkError(
                "Catalog returned an unexpected response",
                status_code=response.status_code,
                original_exception=exc,
            ) from exc
