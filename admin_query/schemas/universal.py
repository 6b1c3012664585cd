from pydantic import BaseModel, Field
from typing import Any, List, Literal, Optional

from admin_query.schemas.filters import FilterClause

Dir = Literal["asc", "desc"]


class QueryDescriptor(BaseModel):
    query: Optional[str] = None
    view: Optional[str] = None
    filters: List[FilterClause] = []
    sort_by: Optional[str] = None
    sort_dir: Dir = "asc"
    page: Optional[int] = Field(default=None, ge=0)
    rows_per_page: Optional[int] = Field(default=None, gt=0)


class QueryResult(BaseModel):
    data: List[Any] = []
    count: int = 0
