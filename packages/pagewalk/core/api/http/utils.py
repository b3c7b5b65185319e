"""URL and response helpers for the HTTP client."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import parse_qsl, quote, urljoin, urlsplit

# Characters JavaScript's encodeURIComponent leaves alone besides A-Z a-z 0-9 and "-_.~"
_URI_COMPONENT_SAFE = "!*'()"


def join_url(base_url: str, path: str) -> str:
    """Join base URL and request path.

    The base is always treated as a directory, so ``join_url("https://h/api", "/v1/x")``
    gives ``https://h/api/v1/x`` rather than dropping ``/api``.
    """
    base = base_url if base_url.endswith("/") else base_url + "/"
    return urljoin(base, path.lstrip("/"))


def encode_uri_component(value: str) -> str:
    """Percent-encode a single query-string component.

    Everything except unreserved characters is escaped, including ``&``,
    ``=``, ``/``, ``?``, ``#``, ``+`` and spaces (as ``%20``).
    """
    return quote(value, safe=_URI_COMPONENT_SAFE)


def append_query_parameter(path: str, encoded_name: str, value: str) -> str:
    """Append ``name=value`` to a path that may already carry a query string.

    Args:
        path: Request path, with or without ``?...``
        encoded_name: Parameter name, already percent-encoded
        value: Raw parameter value, encoded here

    Returns:
        Path with the parameter appended using ``?`` or ``&``
    """
    separator = "&" if "?" in path else "?"
    return f"{path}{separator}{encoded_name}={encode_uri_component(value)}"


def merge_query_params(url: str, params: Mapping[str, str]) -> str:
    """Add parameters to a URL without rewriting the query it already carries.

    Names already present in the URL keep their existing value; the rest are
    appended percent-encoded, so a cursor or filter baked into the path
    reaches the server byte for byte.
    """
    present = {name for name, _ in parse_qsl(urlsplit(url).query, keep_blank_values=True)}
    for name, value in params.items():
        if name not in present:
            url = append_query_parameter(url, encode_uri_component(name), value)
    return url


def safe_snippet(content: bytes, limit: int) -> str:
    """Decode at most ``limit`` bytes of a body for error messages."""
    if not content:
        return ""
    return content[:limit].decode("utf-8", errors="replace")


def get_request_id(headers: Mapping[str, str]) -> str | None:
    """Find a request ID in common tracing headers (case-insensitive)."""
    lowered = {k.lower(): v for k, v in headers.items()}
    for key in ("x-request-id", "x-correlation-id", "request-id", "trace-id"):
        if key in lowered:
            return lowered[key]
    return None
