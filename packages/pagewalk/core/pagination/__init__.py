"""Lazy iteration over cursor-paginated REST endpoints.

Key pieces:
- PaginatedSequence: re-iterable sequence with find_first / flat_map_not_null / all
- PageIterator / CursorAdvancer: one pass over the pages, one fetch per step
- PaginationConfig: where the data and cursor live in each envelope
- http_page_fetcher: PageFetcher backed by an HTTP client
"""

from pagewalk.core.pagination.config import NEXT_CURSOR, SKIP_OFFSET, PaginationConfig
from pagewalk.core.pagination.cursor import CursorAdvancer, PageIterator, PageStep, decode_envelope
from pagewalk.core.pagination.errors import MalformedPageError, PaginationError
from pagewalk.core.pagination.fetchers import http_page_fetcher
from pagewalk.core.pagination.protocols import JsonClient, PageFetcher
from pagewalk.core.pagination.sequence import PaginatedSequence

__all__ = [
    # Core
    "PaginatedSequence",
    "PageIterator",
    "CursorAdvancer",
    "PageStep",
    "decode_envelope",
    # Configuration
    "PaginationConfig",
    "NEXT_CURSOR",
    "SKIP_OFFSET",
    # Collaborators
    "PageFetcher",
    "JsonClient",
    "http_page_fetcher",
    # Errors
    "PaginationError",
    "MalformedPageError",
]
