from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pagewalk.core.api.http.utils import append_query_parameter, encode_uri_component
from pagewalk.core.pagination.config import PaginationConfig
from pagewalk.core.pagination.protocols import JsonClient, PageFetcher

logger = logging.getLogger(__name__)


def http_page_fetcher(
    client: JsonClient, base_path: str, config: PaginationConfig
) -> PageFetcher:
    """Build a PageFetcher that GETs ``base_path`` with the cursor as a query parameter.

    The first call (no cursor) requests ``base_path`` unchanged. Later calls
    append ``<query_parameter>=<cursor>`` with ``?`` or ``&`` depending on
    whether ``base_path`` already has a query string. Both name and value are
    percent-encoded.

    Args:
        client: Anything with ``async get_json(path)``, normally AsyncApiClient
        base_path: Endpoint path relative to the client's base URL
        config: Pagination field configuration

    Returns:
        Async callable suitable for PaginatedSequence
    """
    encoded_parameter = encode_uri_component(config.query_parameter)

    async def fetch(cursor: str | None) -> Mapping[str, Any]:
        logger.debug("Fetching page", extra={"base_path": base_path, "cursor": cursor})

        path = base_path
        if cursor:
            path = append_query_parameter(base_path, encoded_parameter, cursor)

        body = await client.get_json(path)

        data = body.get(config.data_field) if isinstance(body, Mapping) else None
        logger.debug(
            "Fetched page",
            extra={
                "path": path,
                "cursor": cursor,
                "elements": len(data) if isinstance(data, list) else None,
            },
        )
        return body

    return fetch
