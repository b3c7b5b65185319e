from __future__ import annotations

from pydantic import BaseModel, Field


class PaginationConfig(BaseModel):
    """Where a paginated endpoint keeps its data and cursor.

    Args:
        query_parameter: Query parameter the cursor is sent back in
        data_field: Envelope key holding the page's elements
        next_field: Envelope key holding the next cursor (may be absent)
        strict: Raise MalformedPageError for a missing data field or a
            non-string cursor instead of treating them as empty/absent

    No check is made that ``query_parameter`` differs from parameters already
    in the base path; a colliding name is simply appended again.
    """

    model_config = {"frozen": True}

    query_parameter: str = Field(default="next", min_length=1)
    data_field: str = Field(default="data", min_length=1)
    next_field: str = Field(default="next", min_length=1)
    strict: bool = False


# Cursor handed back as ?next=<token>
NEXT_CURSOR = PaginationConfig(query_parameter="next")

# Offset handed back as ?$skip=<n>; the envelope still calls it "next"
SKIP_OFFSET = PaginationConfig(query_parameter="$skip")
