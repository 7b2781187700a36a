"""Catalog error taxonomy and message normalization."""

from __future__ import annotations

DEFAULT_ERROR_MESSAGE = "Something went wrong"


class CatalogError(Exception):
    """Base class for catalog browsing failures."""


class FetchError(CatalogError):
    """Raised when the remote service returns a non-success status or bad payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(FetchError):
    """Raised when a detail fetch targets a product that does not exist."""

    def __init__(
        self,
        message: str = "Product not found",
        *,
        status_code: int | None = 404,
    ) -> None:
        super().__init__(message, status_code=status_code)


def normalize_error(failure: object, fallback: str = DEFAULT_ERROR_MESSAGE) -> str:
    """Return a display string for an arbitrary failure value."""

    if isinstance(failure, BaseException):
        return str(failure) or fallback
    if isinstance(failure, str):
        return failure
    return fallback
