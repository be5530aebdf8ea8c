"""Filter predicate types shared by the evaluator and the URL codec."""

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class FilterVariant(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    RANGE = "range"
    DATE_RANGE = "dateRange"
    BOOLEAN = "boolean"
    SELECT = "select"
    MULTI_SELECT = "multiSelect"


class JoinOperator(str, Enum):
    AND = "and"
    OR = "or"


FilterValue = Union[str, list[str]]


class ColumnFilter(BaseModel):
    """One active predicate: column id, operator, value, declared variant."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    value: FilterValue
    variant: FilterVariant
    # Plain string so an unknown operator reaches the evaluator and fails open.
    operator: str
    filter_id: str = Field(alias="filterId")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
