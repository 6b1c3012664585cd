from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Sequence

from sqlalchemy import String, and_, asc, cast, desc, false, not_, nulls_last
from sqlalchemy.inspection import inspect as sa_inspect
from sqlalchemy.orm import Query, Session

from admin_query.schemas.filters import FilterClause
from admin_query.schemas.universal import QueryDescriptor, QueryResult
from admin_query.services.filter_evaluator import as_timestamp, usable_clauses
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
)
from admin_query.services.record_query import DEFAULT_QUERY_FIELD
from admin_query.services.resources import VIEW_ALL, ResourceDefinition
from admin_query.services.sorting import SORT_DESC

_LOG = logging.getLogger("admin_query.sql")

_NUMBER_TYPES = {int, float, Decimal}


class FilterValueError(ValueError):
    def __init__(self, column_key: str, kind: str):
        super().__init__(f'Invalid filter value for field "{column_key}" ({kind})')
        self.column_key = column_key
        self.kind = kind


def _coerce_bool_filter_value(column_key: str, value):
    if isinstance(value, bool):
        return value
    text = str(value or "").strip().lower()
    if text in {"1", "true", "yes", "y"}:
        return True
    if text in {"0", "false", "no", "n"}:
        return False
    raise FilterValueError(column_key, "boolean")


def _coerce_number_filter_value(column_key: str, value, python_type):
    if value is None:
        return None
    if python_type in {int, float} and isinstance(value, (int, float)) and not isinstance(value, bool):
        return python_type(value)
    if python_type is Decimal and isinstance(value, Decimal):
        return value
    text = str(value).strip()
    if not text:
        raise FilterValueError(column_key, "number")
    try:
        if python_type is int:
            return int(text)
        if python_type is float:
            return float(text)
        if python_type is Decimal:
            return Decimal(text)
        return python_type(text)
    except (ValueError, TypeError, InvalidOperation):
        raise FilterValueError(column_key, "number")


def _coerce_date_filter_value(column_key: str, value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise FilterValueError(column_key, "date")
    try:
        # Accept either YYYY-MM-DD or full ISO datetime and take its date part.
        if "T" in text or " " in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError:
        raise FilterValueError(column_key, "date")


def _coerce_datetime_filter_value(column_key: str, value):
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, datetime.min.time())
    else:
        text = str(value or "").strip()
        if not text:
            raise FilterValueError(column_key, "datetime")
        try:
            if "T" not in text and " " not in text and len(text) == 10:
                # Date-only filter value for timestamp columns -> start of the day.
                parsed = datetime.combine(date.fromisoformat(text), datetime.min.time())
            else:
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise FilterValueError(column_key, "datetime")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _column_python_type(column):
    try:
        return column.property.columns[0].type.python_type
    except (AttributeError, IndexError, NotImplementedError):
        return None


def _coerce_filter_value(column, value):
    python_type = _column_python_type(column)
    if python_type is None:
        return value
    if python_type is uuid.UUID:
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value or "").strip())
        except ValueError:
            raise FilterValueError(column.key, "uuid")
    if python_type is bool:
        return _coerce_bool_filter_value(column.key, value)
    if python_type in _NUMBER_TYPES:
        return _coerce_number_filter_value(column.key, value, python_type)
    if python_type is date:
        return _coerce_date_filter_value(column.key, value)
    if python_type is datetime:
        return _coerce_datetime_filter_value(column.key, value)
    if python_type is str and not isinstance(value, str):
        return str(value)
    return value


def _coerce_moment_filter_value(column, value):
    """Bound for isAfter/isBefore; integer columns hold epoch milliseconds."""
    python_type = _column_python_type(column)
    if python_type in _NUMBER_TYPES:
        moment = as_timestamp(value)
        if moment is None:
            raise FilterValueError(column.key, "date")
        return python_type(moment) if python_type is not Decimal else Decimal(str(moment))
    if python_type in {date, datetime}:
        return _coerce_filter_value(column, value)
    return str(value)


def _is_date_only_filter_literal(raw_value) -> bool:
    if isinstance(raw_value, date) and not isinstance(raw_value, datetime):
        return True
    if not isinstance(raw_value, str):
        return False
    text = raw_value.strip()
    if not text or "T" in text or " " in text:
        return False
    try:
        date.fromisoformat(text)
        return True
    except ValueError:
        return False


def _truthy_criterion(column, python_type):
    # Mirrors the in-memory gate: NULL, '' and 0 never satisfy a valued operator.
    if python_type is str:
        return and_(column.isnot(None), column != "")
    if python_type in _NUMBER_TYPES:
        return and_(column.isnot(None), column != 0)
    if python_type is bool:
        return column.is_(True)
    return column.isnot(None)


def _text_column(column, python_type):
    return column if python_type is str else cast(column, String)


def _clause_criterion(column, clause: FilterClause):
    op = clause.operator
    if op == OP_IS_BLANK:
        return column.is_(None)
    if op == OP_IS_PRESENT:
        return column.isnot(None)

    python_type = _column_python_type(column)
    gate = _truthy_criterion(column, python_type)
    raw = clause.value

    if op in {OP_CONTAINS, OP_ENDS_WITH, OP_NOT_CONTAINS, OP_STARTS_WITH}:
        text_col = _text_column(column, python_type)
        text = str(raw)
        if op == OP_CONTAINS:
            return and_(gate, text_col.icontains(text, autoescape=True))
        if op == OP_ENDS_WITH:
            return and_(gate, text_col.endswith(text, autoescape=True))
        if op == OP_STARTS_WITH:
            return and_(gate, text_col.startswith(text, autoescape=True))
        return and_(gate, not_(text_col.contains(text, autoescape=True)))

    if op in {OP_EQUALS, OP_NOT_EQUAL}:
        if python_type is datetime and _is_date_only_filter_literal(raw):
            day_start = _coerce_datetime_filter_value(column.key, raw)
            day_end = day_start + timedelta(days=1)
            day_expr = (column >= day_start) & (column < day_end)
            return and_(gate, day_expr if op == OP_EQUALS else ~day_expr)
        value = _coerce_filter_value(column, raw)
        return and_(gate, column == value if op == OP_EQUALS else column != value)

    if op in {OP_GREATER_THAN, OP_LESS_THAN}:
        number_type = python_type if python_type in _NUMBER_TYPES else float
        value = _coerce_number_filter_value(column.key, raw, number_type)
        return and_(gate, column > value if op == OP_GREATER_THAN else column < value)

    if op in {OP_IS_AFTER, OP_IS_BEFORE}:
        value = _coerce_moment_filter_value(column, raw)
        return and_(gate, column > value if op == OP_IS_AFTER else column < value)

    raise UnknownOperatorError(op)


def apply_filter_clauses(
    q: Query,
    model,
    filters: Sequence[FilterClause | Mapping[str, Any]],
    on_unknown_operator: str | None = None,
) -> Query:
    if not filters:
        return q
    for clause in usable_clauses(filters, on_unknown_operator):
        col = getattr(model, clause.property, None)
        if col is None:
            _LOG.debug("Skipped filter on unknown column model=%s field=%s", model.__name__, clause.property)
            continue
        q = q.filter(_clause_criterion(col, clause))
    return q


def apply_sort_clause(q: Query, model, sort_by: str | None, sort_dir: str = "asc") -> Query:
    if not sort_by:
        return q
    col = getattr(model, sort_by, None)
    if col is None:
        return q
    q = q.order_by(nulls_last(desc(col) if sort_dir == SORT_DESC else asc(col)))
    # Primary key keeps ties in insertion order for both directions.
    for pk in sa_inspect(model).primary_key:
        q = q.order_by(asc(pk))
    return q


def _row_to_dict(row: Any) -> dict[str, Any]:
    mapper = sa_inspect(type(row))
    return {column.key: getattr(row, column.key) for column in mapper.column_attrs}


def _apply_query_text(q: Query, model, query: str | None, query_field: str) -> Query:
    needle = str(query or "").strip()
    if not needle:
        return q
    col = getattr(model, query_field, None)
    if col is None:
        return q.filter(false())
    return q.filter(col.icontains(needle, autoescape=True))


def _apply_view(
    q: Query,
    model,
    view: str | None,
    resource: ResourceDefinition | None,
    strict: bool = False,
) -> Query:
    if not view or view == VIEW_ALL or resource is None:
        return q
    resource.view_predicate(view, strict=strict)
    if resource.view_field:
        col = getattr(model, resource.view_field, None)
        return q.filter(false()) if col is None else q.filter(col == view)
    if view not in resource.views:
        return q
    col = getattr(model, view, None)
    return q.filter(false()) if col is None else q.filter(col.is_(True))


def run_sql_query(
    session: Session,
    model,
    descriptor: QueryDescriptor | Mapping[str, Any] | None = None,
    resource: ResourceDefinition | None = None,
    *,
    on_unknown_operator: str | None = None,
    strict_views: bool = False,
) -> QueryResult:
    if descriptor is None:
        descriptor = QueryDescriptor()
    elif not isinstance(descriptor, QueryDescriptor):
        descriptor = QueryDescriptor.model_validate(descriptor)

    query_field = resource.query_field if resource is not None else DEFAULT_QUERY_FIELD
    q = session.query(model)
    q = _apply_query_text(q, model, descriptor.query, query_field)
    q = _apply_view(q, model, descriptor.view, resource, strict_views)
    q = apply_filter_clauses(q, model, descriptor.filters, on_unknown_operator)

    count = q.count()

    q = apply_sort_clause(q, model, descriptor.sort_by, descriptor.sort_dir)
    if descriptor.page is not None and descriptor.rows_per_page is not None:
        q = q.offset(descriptor.page * descriptor.rows_per_page).limit(descriptor.rows_per_page)
    return QueryResult(data=[_row_to_dict(row) for row in q.all()], count=count)
