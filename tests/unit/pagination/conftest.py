"""Shared fixtures for pagination tests."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import pytest


class ScriptedFetcher:
    """Page fetcher that replays a fixed list of envelopes in call order.

    Records every cursor it is called with. Once the script runs out it
    returns empty pages. ``fail_on`` makes the n-th call (1-indexed) raise
    ``error`` instead.
    """

    def __init__(
        self,
        pages: list[Mapping[str, Any]],
        *,
        fail_on: int | None = None,
        error: BaseException | None = None,
    ) -> None:
        self.pages = pages
        self.fail_on = fail_on
        self.error = error or RuntimeError("fetch failed")
        self.calls: list[str | None] = []

    async def __call__(self, cursor: str | None) -> Mapping[str, Any]:
        self.calls.append(cursor)
        n = len(self.calls)
        if self.fail_on is not None and n == self.fail_on:
            raise self.error
        if n > len(self.pages):
            return {"data": [], "next": None}
        return self.pages[n - 1]


class CursorKeyedFetcher:
    """Page fetcher that answers by cursor, like a real stateless API."""

    def __init__(self, pages: Mapping[str | None, Mapping[str, Any]]) -> None:
        self.pages = pages
        self.calls: list[str | None] = []

    async def __call__(self, cursor: str | None) -> Mapping[str, Any]:
        self.calls.append(cursor)
        return self.pages.get(cursor, {"data": [], "next": None})


@pytest.fixture
def scripted_fetcher() -> Callable[..., ScriptedFetcher]:
    """Factory for ScriptedFetcher instances."""
    return ScriptedFetcher


@pytest.fixture
def keyed_fetcher() -> CursorKeyedFetcher:
    """Three-page API: [1, 2] -c1-> [3, 4] -c2-> [5] -c3-> []."""
    return CursorKeyedFetcher(
        {
            None: {"data": [1, 2], "next": "c1"},
            "c1": {"data": [3, 4], "next": "c2"},
            "c2": {"data": [5], "next": "c3"},
        }
    )
