from pydantic import BaseModel, ConfigDict
from typing import Any, List, Literal, Optional

Arity = Literal["none", "unary"]
ValueKind = Literal["string", "number", "date"]


class FilterOperator(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    arity: Arity = "unary"
    value_kind: Optional[ValueKind] = None


class FilterProperty(BaseModel):
    name: str
    label: str
    operators: List[str] = []


class FilterClause(BaseModel):
    property: str = ""
    operator: Optional[str] = None
    value: Any = None
