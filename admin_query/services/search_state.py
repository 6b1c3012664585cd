from __future__ import annotations

from typing import Any, Mapping, Sequence

from admin_query.core.config import settings
from admin_query.schemas.filters import FilterClause
from admin_query.schemas.universal import QueryDescriptor
from admin_query.services.pagination import page_count
from admin_query.services.resources import VIEW_ALL
from admin_query.services.sorting import SORT_ASC, SORT_DESC


def default_descriptor() -> QueryDescriptor:
    return QueryDescriptor(
        filters=[],
        page=0,
        query="",
        rows_per_page=settings.DEFAULT_ROWS_PER_PAGE,
        sort_by=settings.DEFAULT_SORT_BY,
        sort_dir=settings.DEFAULT_SORT_DIR,
        view=VIEW_ALL,
    )


class SearchStateController:
    """Query descriptor of one list page; every change except paging returns to page 0."""

    def __init__(self, initial: QueryDescriptor | None = None):
        self._state = (initial or default_descriptor()).model_copy(deep=True)

    @property
    def state(self) -> QueryDescriptor:
        return self._state.model_copy(deep=True)

    def _update(self, **changes: Any) -> QueryDescriptor:
        self._state = self._state.model_copy(update=changes)
        return self.state

    def apply_filters(self, filters: Sequence[FilterClause | Mapping[str, Any]]) -> QueryDescriptor:
        clauses = [
            item.model_copy(deep=True) if isinstance(item, FilterClause) else FilterClause.model_validate(item)
            for item in filters
        ]
        return self._update(page=0, filters=clauses)

    def clear_filters(self) -> QueryDescriptor:
        return self._update(page=0, filters=[])

    def change_page(self, page: int) -> QueryDescriptor:
        if page < 0:
            raise ValueError(f"Page must be zero or positive, got {page}")
        return self._update(page=page)

    def change_rows_per_page(self, rows_per_page: int) -> QueryDescriptor:
        if rows_per_page <= 0:
            raise ValueError(f"Rows per page must be positive, got {rows_per_page}")
        return self._update(page=0, rows_per_page=rows_per_page)

    def change_query(self, query: str) -> QueryDescriptor:
        return self._update(page=0, query=query)

    def change_view(self, view: str) -> QueryDescriptor:
        return self._update(page=0, view=view)

    def change_sort(self, sort_by: str) -> QueryDescriptor:
        # Clicking the active ascending column flips it; anything else starts ascending.
        if self._state.sort_by == sort_by and self._state.sort_dir == SORT_ASC:
            sort_dir = SORT_DESC
        else:
            sort_dir = SORT_ASC
        return self._update(page=0, sort_by=sort_by, sort_dir=sort_dir)

    def page_count(self, total: int) -> int:
        return page_count(total, self._state.rows_per_page or settings.DEFAULT_ROWS_PER_PAGE)
