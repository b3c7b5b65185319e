"""Test suite for pagewalk.

Test Structure:
- unit/api/http/: AsyncApiClient and HTTP helpers (httpx.MockTransport, no network)
- unit/pagination/: cursor state machine, PaginatedSequence, HTTP page fetcher
- unit/config/: config models and JSON/YAML loading
- unit/utils/: logging setup
- conftest.py: Shared fixtures
"""
