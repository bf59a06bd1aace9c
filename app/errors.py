"""Exception hierarchy shared by the catalog client and the controllers."""

from __future__ import annotations


class CineTrailError(Exception):
    """Base class for failures surfaced to the user as an alert."""

    def __init__(self, message: str, *, original_exception: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception


class QueryValidationError(CineTrailError):
    """The search input was empty; raised before any network call."""


class CatalogNetworkError(CineTrailError):
    """Non-success status or transport failure talking to the catalog."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(message, original_exception=original_exception)
        self.status_code = status_code


class CatalogNotFoundError(CatalogNetworkError):
    """The catalog answered 404 for the requested resource."""

    def __init__(self, message: str, *, original_exception: Exception | None = None):
        super().__init__(
            message, status_code=404, original_exception=original_exception
        )


class EmptyResultError(CineTrailError):
    """A lookup succeeded but returned nothing worth rendering."""


class MissingDataError(CineTrailError):
    """A required piece of data (e.g. a trailer key) was not available."""
