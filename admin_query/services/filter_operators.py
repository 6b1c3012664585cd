from __future__ import annotations

from admin_query.schemas.filters import FilterOperator

OP_CONTAINS = "contains"
OP_ENDS_WITH = "endsWith"
OP_EQUALS = "equals"
OP_GREATER_THAN = "greaterThan"
OP_IS_AFTER = "isAfter"
OP_IS_BEFORE = "isBefore"
OP_IS_BLANK = "isBlank"
OP_IS_PRESENT = "isPresent"
OP_LESS_THAN = "lessThan"
OP_NOT_CONTAINS = "notContains"
OP_NOT_EQUAL = "notEqual"
OP_STARTS_WITH = "startsWith"


class UnknownOperatorError(LookupError):
    def __init__(self, name: str | None):
        super().__init__(f"Unknown filter operator: {name!r}")
        self.name = name


_CATALOGUE: tuple[FilterOperator, ...] = (
    FilterOperator(name=OP_CONTAINS, label="contains", value_kind="string"),
    FilterOperator(name=OP_ENDS_WITH, label="ends with", value_kind="string"),
    FilterOperator(name=OP_EQUALS, label="equals", value_kind="string"),
    FilterOperator(name=OP_GREATER_THAN, label="greater than", value_kind="number"),
    FilterOperator(name=OP_IS_AFTER, label="is after", value_kind="date"),
    FilterOperator(name=OP_IS_BEFORE, label="is before", value_kind="date"),
    FilterOperator(name=OP_IS_BLANK, label="is blank", arity="none"),
    FilterOperator(name=OP_IS_PRESENT, label="is present", arity="none"),
    FilterOperator(name=OP_LESS_THAN, label="less than", value_kind="number"),
    FilterOperator(name=OP_NOT_CONTAINS, label="not contains", value_kind="string"),
    FilterOperator(name=OP_NOT_EQUAL, label="not equal", value_kind="string"),
    FilterOperator(name=OP_STARTS_WITH, label="starts with", value_kind="string"),
)

_BY_NAME: dict[str, FilterOperator] = {op.name: op for op in _CATALOGUE}


def all_operators() -> list[FilterOperator]:
    return list(_CATALOGUE)


def is_registered(name: str | None) -> bool:
    return bool(name) and name in _BY_NAME


def resolve(name: str | None) -> FilterOperator:
    operator = _BY_NAME.get(str(name or ""))
    if operator is None:
        raise UnknownOperatorError(name)
    return operator


def operators_for_kind(kind: str | None) -> list[str]:
    """Operator names a property of the given kind should offer.

    Blank/present checks are offered for every kind. ``None`` yields the
    untyped operators only.
    """
    if kind == "number":
        names = [OP_EQUALS, OP_GREATER_THAN, OP_LESS_THAN, OP_NOT_EQUAL]
    elif kind == "date":
        names = [OP_IS_AFTER, OP_IS_BEFORE]
    elif kind == "string":
        names = [op.name for op in _CATALOGUE if op.value_kind == "string" and op.name != OP_NOT_EQUAL]
    else:
        names = []
    return names + [OP_IS_BLANK, OP_IS_PRESENT]
