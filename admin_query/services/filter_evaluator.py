from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Sequence

from admin_query.core.config import settings
from admin_query.schemas.filters import FilterClause
from admin_query.services.filter_operators import (
    OP_CONTAINS,
    OP_ENDS_WITH,
    OP_EQUALS,
    OP_GREATER_THAN,
    OP_IS_AFTER,
    OP_IS_BEFORE,
    OP_IS_BLANK,
    OP_IS_PRESENT,
    OP_LESS_THAN,
    OP_NOT_CONTAINS,
    OP_NOT_EQUAL,
    OP_STARTS_WITH,
    UnknownOperatorError,
    resolve,
)

_LOG = logging.getLogger("admin_query.filters")

POLICY_SKIP = "skip"
POLICY_RAISE = "raise"
_POLICIES = {POLICY_SKIP, POLICY_RAISE}


class MissingFilterValueError(ValueError):
    def __init__(self, operator: str):
        super().__init__(f'Operator "{operator}" requires a value')
        self.operator = operator


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """Gate applied to the row value before every operator except blank/present.

    0, "" and NaN count as absent, so ``greaterThan 0`` never matches a row
    holding 0. Known quirk; callers rely on it.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if _is_number(value):
        return not (value == 0 or value != value)
    return True


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return float(value)
    if _is_number(value):
        number = float(value)
        return None if number != number else number
    if isinstance(value, (datetime, date)):
        return as_timestamp(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return None if number != number else number
    return None


def as_timestamp(value: Any) -> float | None:
    """Milliseconds since the epoch, the unit the dashboard records carry."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, datetime.min.time())
    elif _is_number(value):
        number = float(value)
        return None if number != number else number
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            if "T" not in text and " " not in text and len(text) == 10:
                parsed = datetime.combine(date.fromisoformat(text), datetime.min.time())
            else:
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp() * 1000


def _loose_equals(row: Any, value: Any) -> bool:
    if isinstance(row, str) and isinstance(value, str):
        return row == value
    if isinstance(row, (datetime, date)) or isinstance(value, (datetime, date)):
        left, right = as_timestamp(row), as_timestamp(value)
        return left is not None and left == right
    if _is_number(row) or _is_number(value) or isinstance(row, bool) or isinstance(value, bool):
        left, right = as_number(row), as_number(value)
        return left is not None and left == right
    return row == value


def _strict_equals(row: Any, value: Any) -> bool:
    if _is_number(row) and _is_number(value):
        return row == value
    return type(row) is type(value) and row == value


def _not_equal(row: Any, value: Any) -> bool:
    return not _strict_equals(row, value)


def _contains(row: Any, value: Any) -> bool:
    return _as_text(value).lower() in _as_text(row).lower()


def _ends_with(row: Any, value: Any) -> bool:
    return _as_text(row).endswith(_as_text(value))


def _starts_with(row: Any, value: Any) -> bool:
    return _as_text(row).startswith(_as_text(value))


def _not_contains(row: Any, value: Any) -> bool:
    return _as_text(value) not in _as_text(row)


def _greater_than(row: Any, value: Any) -> bool:
    left, right = as_number(row), as_number(value)
    return left is not None and right is not None and left > right


def _less_than(row: Any, value: Any) -> bool:
    left, right = as_number(row), as_number(value)
    return left is not None and right is not None and left < right


def _is_after(row: Any, value: Any) -> bool:
    left, right = as_timestamp(row), as_timestamp(value)
    return left is not None and right is not None and left > right


def _is_before(row: Any, value: Any) -> bool:
    left, right = as_timestamp(row), as_timestamp(value)
    return left is not None and right is not None and left < right


def _is_blank(row: Any, value: Any) -> bool:
    return row is None


def _is_present(row: Any, value: Any) -> bool:
    return row is not None


_CHECKS: dict[str, Callable[[Any, Any], bool]] = {
    OP_CONTAINS: _contains,
    OP_ENDS_WITH: _ends_with,
    OP_EQUALS: _loose_equals,
    OP_GREATER_THAN: _greater_than,
    OP_IS_AFTER: _is_after,
    OP_IS_BEFORE: _is_before,
    OP_IS_BLANK: _is_blank,
    OP_IS_PRESENT: _is_present,
    OP_LESS_THAN: _less_than,
    OP_NOT_CONTAINS: _not_contains,
    OP_NOT_EQUAL: _not_equal,
    OP_STARTS_WITH: _starts_with,
}

_UNGATED = {OP_IS_BLANK, OP_IS_PRESENT}


def _as_clause(raw: FilterClause | Mapping[str, Any]) -> FilterClause:
    if isinstance(raw, FilterClause):
        return raw
    return FilterClause.model_validate(raw)


def check_value(row_value: Any, operator: str | None, value: Any = None) -> bool:
    check = _CHECKS.get(str(operator or ""))
    if check is None:
        raise UnknownOperatorError(operator)
    if operator not in _UNGATED and value is None:
        raise MissingFilterValueError(operator)
    if operator not in _UNGATED and not is_truthy(row_value):
        return False
    return check(row_value, value)


def evaluate(record: Mapping[str, Any], clause: FilterClause | Mapping[str, Any]) -> bool:
    clause = _as_clause(clause)
    return check_value(record.get(clause.property), clause.operator, clause.value)


def resolve_policy(on_unknown_operator: str | None) -> str:
    policy = str(on_unknown_operator or settings.FILTER_ERROR_POLICY or POLICY_SKIP).strip().lower()
    if policy not in _POLICIES:
        raise ValueError(f"Unsupported unknown-operator policy: {policy!r}")
    return policy


def usable_clauses(
    filters: Iterable[FilterClause | Mapping[str, Any]],
    on_unknown_operator: str | None = None,
) -> list[FilterClause]:
    """Clauses that can be evaluated; the rest are skipped or raised per policy.

    A clause is unusable when its operator does not resolve, or when a valued
    operator carries no value.
    """
    policy = resolve_policy(on_unknown_operator)
    usable: list[FilterClause] = []
    for raw in filters:
        clause = _as_clause(raw)
        try:
            operator = resolve(clause.operator)
            if operator.arity != "none" and clause.value is None:
                raise MissingFilterValueError(operator.name)
        except (UnknownOperatorError, MissingFilterValueError) as exc:
            if policy == POLICY_RAISE:
                raise
            _LOG.warning(
                "Skipped unusable filter clause property=%s operator=%s reason=%s",
                clause.property or "-",
                clause.operator,
                exc,
            )
            continue
        usable.append(clause)
    return usable


def apply_filters(
    records: Sequence[Mapping[str, Any]],
    filters: Sequence[FilterClause | Mapping[str, Any]] | None = None,
    on_unknown_operator: str | None = None,
) -> Sequence[Mapping[str, Any]]:
    if not filters:
        return records
    clauses = usable_clauses(filters, on_unknown_operator)
    return [record for record in records if all(evaluate(record, clause) for clause in clauses)]
