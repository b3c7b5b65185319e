"""Re-iterable paginated sequence with lazy aggregate operations."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Generic, TypeVar

from pagewalk.core.pagination.config import NEXT_CURSOR, SKIP_OFFSET, PaginationConfig
from pagewalk.core.pagination.cursor import PageIterator
from pagewalk.core.pagination.fetchers import http_page_fetcher
from pagewalk.core.pagination.protocols import JsonClient, PageFetcher

T = TypeVar("T")
R = TypeVar("R")


class PaginatedSequence(Generic[T]):
    """A remote paginated collection consumed as one logical sequence.

    The sequence holds no cursor state: every ``iterate()`` (or ``async for``)
    starts a fresh pass from the first page, so one sequence can be walked any
    number of times, including concurrently. Pages are fetched lazily, one
    request per page, and the aggregate operations stop fetching as soon as
    they have their answer.

    Errors raised by the page fetcher, predicates or mappers propagate
    unchanged; nothing is retried and partial results are not returned.

    Args:
        fetch_page: Async callable returning the envelope for a cursor
        config: Envelope field names (defaults: data/next, ?next=)

    Example:
        >>> users = PaginatedSequence.from_get_using_next(client, "/v1/users")
        >>> admin = await users.find_first(lambda u: u["role"] == "admin")
        >>> everyone = await users.all()
    """

    def __init__(self, fetch_page: PageFetcher, config: PaginationConfig | None = None) -> None:
        self._fetch_page = fetch_page
        self._config = config or PaginationConfig()

    @property
    def config(self) -> PaginationConfig:
        return self._config

    @classmethod
    def from_using(
        cls, client: JsonClient, base_path: str, config: PaginationConfig
    ) -> PaginatedSequence[T]:
        """Paginate ``base_path`` over HTTP with the given field configuration."""
        return cls(http_page_fetcher(client, base_path, config), config)

    @classmethod
    def from_get_using_next(cls, client: JsonClient, base_path: str) -> PaginatedSequence[T]:
        """Paginate an endpoint that takes its cursor back as ``?next=``."""
        return cls.from_using(client, base_path, NEXT_CURSOR)

    @classmethod
    def from_get_using_skip(cls, client: JsonClient, base_path: str) -> PaginatedSequence[T]:
        """Paginate an endpoint that takes its cursor back as ``?$skip=``."""
        return cls.from_using(client, base_path, SKIP_OFFSET)

    def iterate(self) -> PageIterator[T]:
        """Start a new, independent pass over the pages."""
        return PageIterator(self._fetch_page, self._config)

    def __aiter__(self) -> PageIterator[T]:
        return self.iterate()

    async def elements(self) -> AsyncIterator[T]:
        """Yield single elements across all pages, in order."""
        async for page in self:
            for element in page:
                yield element

    async def find_first(self, predicate: Callable[[T], bool]) -> T | None:
        """Return the first element matching ``predicate``, or None.

        No page after the one holding the match is fetched.
        """
        async for page in self:
            for element in page:
                if predicate(element):
                    return element
        return None

    async def find_first_async(self, predicate: Callable[[T], Awaitable[bool]]) -> T | None:
        """Like ``find_first`` with an async predicate.

        The predicate is awaited for one element at a time, in order.
        """
        async for page in self:
            for element in page:
                if await predicate(element):
                    return element
        return None

    async def flat_map_not_null(
        self, mapper: Callable[[T], Awaitable[R | None]], limit: int | None = None
    ) -> list[R]:
        """Map every element, dropping None results.

        Args:
            mapper: Async mapper; returning None filters the element out
            limit: Stop once this many results are collected, without looking
                at the rest of the page or fetching further pages. None means
                no limit; 0 is rejected rather than read as "unlimited"

        Returns:
            Mapped results in encounter order

        Raises:
            ValueError: If ``limit`` is not None and less than 1
        """
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be a positive integer, got {limit}")

        result: list[R] = []
        async for page in self:
            for element in page:
                mapped = await mapper(element)
                if mapped is not None:
                    result.append(mapped)
                    if limit is not None and len(result) >= limit:
                        return result
        return result

    async def all(self) -> list[T]:
        """Fetch every page and return all elements in order.

        Built on ``flat_map_not_null`` with an identity mapper, so null
        elements in a page are left out of the result. Memory grows with the
        size of the remote collection.
        """

        async def identity(element: T) -> T:
            return element

        return await self.flat_map_not_null(identity)
