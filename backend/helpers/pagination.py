"""
Standardized page/limit parameters for consistent API pagination.
"""

from typing import Annotated

from fastapi import Query

# 1-based page number used by every paginated endpoint
PageNumber = Annotated[int, Query(ge=1, description="Page number (1-based)")]

# Admin panels, comments and profile listings
PageLimit = Annotated[
    int, Query(ge=1, le=50, description="Maximum number of records to return")
]

# Tag pickers load larger lists at once
TagListLimit = Annotated[
    int, Query(ge=1, le=200, description="Maximum number of tags to return")
]


def page_offset(page: int, limit: int) -> int:
    """Number of rows to skip for a 1-based page."""
    return (page - 1) * limit


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` rows, at least 1."""
    return max(1, -(-total // page_size))


def has_more(page: int, limit: int, total: int) -> bool:
    """Whether rows exist beyond the given page."""
    return page * limit < total
