"""Protocols for the collaborators of the pagination engine."""

from collections.abc import Mapping
from typing import Any, Protocol


class PageFetcher(Protocol):
    """Fetches one page envelope for a cursor (async).

    Any ``async def fetch(cursor: str | None) -> Mapping[str, Any]`` satisfies
    this protocol. Implementations:
    - Receive None on the first call and the previous page's cursor afterwards
    - Perform exactly one remote call per invocation
    - Raise on transport or status errors rather than return a bad envelope
    """

    async def __call__(self, cursor: str | None) -> Mapping[str, Any]:
        """Fetch the page that starts at ``cursor``.

        Args:
            cursor: Opaque cursor from the previous page, None for the first page

        Returns:
            Raw page envelope
        """
        ...


class JsonClient(Protocol):
    """The slice of an HTTP client the HTTP page fetcher needs."""

    async def get_json(self, path: str) -> Any:
        """GET ``path`` and return the decoded JSON body."""
        ...
