from __future__ import annotations


class PaginationError(ValueError):
    """Base class for errors raised by the pagination engine itself.

    Failures of the page fetcher (HTTP errors and so on) are not wrapped in
    this; they reach the caller unchanged.
    """


class MalformedPageError(PaginationError):
    """A page envelope does not have the shape the configuration describes."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)
