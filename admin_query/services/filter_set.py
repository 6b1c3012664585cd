from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from admin_query.schemas.filters import FilterClause, FilterOperator, FilterProperty
from admin_query.services.filter_operators import all_operators

_LOG = logging.getLogger("admin_query.filter_set")


class InvalidFilterSetError(ValueError):
    pass


def empty_clause() -> FilterClause:
    return FilterClause(property="", operator=None, value=None)


def validate_clause(clause: FilterClause, operators: Mapping[str, FilterOperator]) -> bool:
    if not clause.operator or not clause.property:
        return False
    operator = operators.get(clause.operator)
    if operator is None:
        return False
    # Blank/present checks must not carry a value, every other operator needs one.
    if operator.arity == "none":
        return clause.value is None
    return clause.value is not None


class FilterSetController:
    """Editing session for the clauses of one filter dialog.

    Mutators return ``True`` when the change was applied and ``False`` when it
    was rejected; a rejected call leaves the clauses untouched.
    """

    def __init__(
        self,
        operators: Iterable[FilterOperator] | None = None,
        properties: Iterable[FilterProperty] = (),
        initial_filters: Sequence[FilterClause | Mapping[str, Any]] | None = None,
    ):
        self._operators = {op.name: op for op in (all_operators() if operators is None else operators)}
        self._properties = {prop.name: prop for prop in properties}
        self._filters: list[FilterClause] = []
        self.reset(initial_filters)

    def reset(self, initial_filters: Sequence[FilterClause | Mapping[str, Any]] | None = None) -> None:
        if initial_filters:
            self._filters = [
                item.model_copy(deep=True) if isinstance(item, FilterClause) else FilterClause.model_validate(item)
                for item in initial_filters
            ]
        else:
            self._filters = [empty_clause()]

    @property
    def filters(self) -> list[FilterClause]:
        return [clause.model_copy(deep=True) for clause in self._filters]

    @property
    def is_valid(self) -> bool:
        return all(validate_clause(clause, self._operators) for clause in self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def _has_index(self, index: int) -> bool:
        return 0 <= index < len(self._filters)

    def add_clause(self, at_index: int) -> bool:
        self._filters.insert(at_index, empty_clause())
        return True

    def remove_clause(self, at_index: int) -> bool:
        if not self._has_index(at_index):
            return False
        if len(self._filters) == 1:
            self._filters = [empty_clause()]
            return True
        del self._filters[at_index]
        return True

    def set_property(self, at_index: int, name: str) -> bool:
        if not self._has_index(at_index) or name not in self._properties:
            _LOG.debug("Rejected filter property index=%s property=%s", at_index, name)
            return False
        # A new property invalidates the previously chosen operator and value.
        self._filters[at_index] = FilterClause(property=name, operator=None, value=None)
        return True

    def set_operator(self, at_index: int, name: str) -> bool:
        if not self._has_index(at_index) or name not in self._operators:
            _LOG.debug("Rejected filter operator index=%s operator=%s", at_index, name)
            return False
        prop = self._properties.get(self._filters[at_index].property)
        if prop is None or name not in prop.operators:
            _LOG.debug(
                "Rejected filter operator index=%s operator=%s property=%s",
                at_index,
                name,
                self._filters[at_index].property or "-",
            )
            return False
        self._filters[at_index] = self._filters[at_index].model_copy(update={"operator": name})
        return True

    def set_value(self, at_index: int, value: Any) -> bool:
        if not self._has_index(at_index):
            return False
        self._filters[at_index] = self._filters[at_index].model_copy(update={"value": value})
        return True

    def clear_all(self) -> None:
        self._filters = [empty_clause()]

    def applicable_filters(self) -> list[FilterClause]:
        if not self.is_valid:
            raise InvalidFilterSetError("Filter set has incomplete clauses")
        return self.filters
