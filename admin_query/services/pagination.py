from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def apply_pagination(records: Sequence[T], page: int, rows_per_page: int) -> list[T]:
    """Zero-based page slice; a page past the end is empty, not an error."""
    if page < 0:
        raise ValueError(f"Page must be zero or positive, got {page}")
    if rows_per_page <= 0:
        raise ValueError(f"Rows per page must be positive, got {rows_per_page}")
    start = page * rows_per_page
    return list(records[start : start + rows_per_page])


def page_count(total: int, rows_per_page: int) -> int:
    if rows_per_page <= 0:
        raise ValueError(f"Rows per page must be positive, got {rows_per_page}")
    return (max(total, 0) + rows_per_page - 1) // rows_per_page
