"""Cursor state machine that steps through a paginated endpoint one page at a time."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from pagewalk.core.pagination.config import PaginationConfig
from pagewalk.core.pagination.errors import MalformedPageError
from pagewalk.core.pagination.protocols import PageFetcher

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


def _cursor_text(value: Any) -> str | None:
    """Render a non-string cursor the way it reads in the JSON body.

    ``false`` and numeric zero mean no cursor.
    """
    if isinstance(value, (bool, int, float)) and not value:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


class PageStep(BaseModel):
    """Result of one advance: the page and what it says about the next one.

    Args:
        elements: Elements of this page, in array order
        next_cursor: Cursor to send with the following fetch (None if absent)
        is_exhausted: True iff the page was empty
    """

    model_config = {"frozen": True}

    elements: list[Any]
    next_cursor: str | None
    is_exhausted: bool


def decode_envelope(envelope: Any, config: PaginationConfig) -> PageStep:
    """Pull elements and next cursor out of a raw page envelope.

    Lenient mode (default): a missing or null data field is an empty page and a
    non-string cursor is sent as its JSON text (``true``, ``2``). Strict mode
    rejects both. A non-mapping envelope or a non-list data field is rejected
    in either mode.

    Raises:
        MalformedPageError: If the envelope does not fit the configuration
    """
    if not isinstance(envelope, Mapping):
        raise MalformedPageError(
            f"Page envelope must be a mapping, got {type(envelope).__name__}"
        )

    data = envelope.get(config.data_field, _MISSING)
    if data is _MISSING or data is None:
        if config.strict:
            raise MalformedPageError(
                f"Page envelope has no '{config.data_field}' list", field=config.data_field
            )
        elements: list[Any] = []
    elif isinstance(data, (list, tuple)):
        elements = list(data)
    else:
        raise MalformedPageError(
            f"Field '{config.data_field}' must be a list, got {type(data).__name__}",
            field=config.data_field,
        )

    raw_next = envelope.get(config.next_field)
    if raw_next is None or isinstance(raw_next, str):
        next_cursor = raw_next
    elif config.strict:
        raise MalformedPageError(
            f"Field '{config.next_field}' must be a string, got {type(raw_next).__name__}",
            field=config.next_field,
        )
    else:
        next_cursor = _cursor_text(raw_next)

    return PageStep(elements=elements, next_cursor=next_cursor, is_exhausted=not elements)


class CursorAdvancer:
    """Mutable cursor state for a single pass over a paginated endpoint.

    Starts ACTIVE with no cursor and turns EXHAUSTED, for good, on the first
    empty page. A missing cursor does not end the pass; only an empty page does.
    """

    def __init__(self, fetch_page: PageFetcher, config: PaginationConfig) -> None:
        self._fetch_page = fetch_page
        self._config = config
        self._cursor: str | None = None
        self._exhausted = False
        self._advancing = False
        self._pages_fetched = 0

    @property
    def cursor(self) -> str | None:
        return self._cursor

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def pages_fetched(self) -> int:
        return self._pages_fetched

    async def advance(self) -> PageStep:
        """Fetch the next page with the current cursor.

        Returns:
            The decoded page; ``is_exhausted`` is set when it was empty

        Raises:
            RuntimeError: If already exhausted, or if another advance is in flight
            MalformedPageError: If the envelope does not fit the configuration
        """
        if self._exhausted:
            raise RuntimeError("CursorAdvancer is exhausted")
        if self._advancing:
            raise RuntimeError("CursorAdvancer is already advancing")

        self._advancing = True
        try:
            envelope = await self._fetch_page(self._cursor)
        finally:
            self._advancing = False

        step = decode_envelope(envelope, self._config)
        self._pages_fetched += 1
        self._cursor = step.next_cursor

        if step.is_exhausted:
            self._exhausted = True
            logger.debug("Pagination exhausted", extra={"pages_fetched": self._pages_fetched})
        else:
            logger.debug(
                "Page received",
                extra={
                    "page": self._pages_fetched,
                    "elements": len(step.elements),
                    "has_next_cursor": bool(step.next_cursor),
                },
            )
        return step


class PageIterator(Generic[T]):
    """Async iterator over pages; single use.

    Each ``__anext__`` awaits exactly one fetch and returns that page's
    elements. Iteration stops at the first empty page, after which no more
    fetches are made.
    """

    def __init__(self, fetch_page: PageFetcher, config: PaginationConfig) -> None:
        self._advancer = CursorAdvancer(fetch_page, config)

    @property
    def advancer(self) -> CursorAdvancer:
        return self._advancer

    def __aiter__(self) -> PageIterator[T]:
        return self

    async def __anext__(self) -> list[T]:
        if self._advancer.exhausted:
            raise StopAsyncIteration
        step = await self._advancer.advance()
        if step.is_exhausted:
            raise StopAsyncIteration
        return step.elements
