from __future__ import annotations

import math
from datetime import date, datetime, timezone
from decimal import Decimal
from functools import cmp_to_key
from typing import Any, Mapping, Sequence

SORT_ASC = "asc"
SORT_DESC = "desc"

# Kinds that cannot be compared directly are grouped in this order.
_KIND_NUMBER = 0
_KIND_TEXT = 1
_KIND_OTHER = 2


def _is_missing(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return value is None


def _sort_key(value: Any) -> tuple[int, Any]:
    if isinstance(value, (bool, int, float, Decimal)):
        return _KIND_NUMBER, float(value)
    if isinstance(value, datetime):
        parsed = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return _KIND_NUMBER, parsed.timestamp() * 1000
    if isinstance(value, date):
        return _KIND_NUMBER, datetime.combine(value, datetime.min.time(), tzinfo=timezone.utc).timestamp() * 1000
    if isinstance(value, str):
        return _KIND_TEXT, value
    return _KIND_OTHER, str(value)


def _compare_values(left: Any, right: Any) -> int:
    left_key, right_key = _sort_key(left), _sort_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def make_comparator(sort_by: str, sort_dir: str = SORT_ASC):
    """Record comparator; ``desc`` flips the order of values, never of ties.

    Missing values (None or NaN) always go last, whatever the direction.
    """
    if sort_dir not in {SORT_ASC, SORT_DESC}:
        raise ValueError(f"Unsupported sort direction: {sort_dir!r}")
    sign = -1 if sort_dir == SORT_DESC else 1

    def compare(left: Mapping[str, Any], right: Mapping[str, Any]) -> int:
        left_value, right_value = left.get(sort_by), right.get(sort_by)
        left_missing, right_missing = _is_missing(left_value), _is_missing(right_value)
        if left_missing or right_missing:
            return left_missing - right_missing
        return sign * _compare_values(left_value, right_value)

    return compare


def apply_sort(
    records: Sequence[Mapping[str, Any]],
    sort_by: str | None,
    sort_dir: str = SORT_ASC,
) -> Sequence[Mapping[str, Any]]:
    if not sort_by:
        return records
    return sorted(records, key=cmp_to_key(make_comparator(sort_by, sort_dir)))
