from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from admin_query.schemas.universal import QueryDescriptor, QueryResult
from admin_query.services.filter_evaluator import apply_filters
from admin_query.services.pagination import apply_pagination
from admin_query.services.resources import VIEW_ALL, ResourceDefinition
from admin_query.services.sorting import apply_sort

_LOG = logging.getLogger("admin_query.query")

DEFAULT_QUERY_FIELD = "name"


def match_query(
    records: Sequence[Mapping[str, Any]],
    query: str | None,
    query_field: str = DEFAULT_QUERY_FIELD,
) -> Sequence[Mapping[str, Any]]:
    needle = str(query or "").strip().lower()
    if not needle:
        return records
    matched = []
    for record in records:
        value = record.get(query_field)
        if value is None:
            continue
        if needle in str(value).lower():
            matched.append(record)
    return matched


def match_view(
    records: Sequence[Mapping[str, Any]],
    view: str | None,
    resource: ResourceDefinition | None,
    strict: bool = False,
) -> Sequence[Mapping[str, Any]]:
    if not view or view == VIEW_ALL or resource is None:
        return records
    predicate = resource.view_predicate(view, strict=strict)
    return [record for record in records if predicate(record)]


def run_query(
    records: Sequence[Mapping[str, Any]],
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
    data = match_query(records, descriptor.query, query_field)
    data = match_view(data, descriptor.view, resource, strict_views)
    data = apply_filters(data, descriptor.filters, on_unknown_operator)

    count = len(data)

    if descriptor.sort_by:
        data = apply_sort(data, descriptor.sort_by, descriptor.sort_dir)
    if descriptor.page is not None and descriptor.rows_per_page is not None:
        data = apply_pagination(data, descriptor.page, descriptor.rows_per_page)

    _LOG.debug(
        "Query resource=%s total=%s count=%s returned=%s",
        resource.name if resource is not None else "-",
        len(records),
        count,
        len(data),
    )
    return QueryResult(data=list(data), count=count)
