"""
Shared data models for the filter engine.

Defines the filter tree a user builds (config -> groups -> conditions),
the catalog metadata types and the transient search result shape.
"""

import itertools
import random
import string
import time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldType(str, Enum):
    """Semantic type of a filterable field."""
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    SELECT = "select"
    RELATIONSHIP = "relationship"


class LogicalOperator(str, Enum):
    """Connector between a condition (or group) and the next one."""
    AND = "AND"
    OR = "OR"


class ValueArity(str, Enum):
    """How many values an operator consumes."""
    NONE = "none"
    SINGLE = "single"
    DOUBLE = "double"


class FilterOperator(str, Enum):
    """Comparison operators understood by the compiler."""
    # Text
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"
    # Number
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    BETWEEN = "between"
    NOT_BETWEEN = "not_between"
    # Date
    BEFORE = "before"
    AFTER = "after"
    ON_OR_BEFORE = "on_or_before"
    ON_OR_AFTER = "on_or_after"
    DATE_BETWEEN = "date_between"
    DATE_IS = "date_is"
    IS_TODAY = "is_today"
    IS_YESTERDAY = "is_yesterday"
    IS_THIS_WEEK = "is_this_week"
    IS_LAST_WEEK = "is_last_week"
    IS_THIS_MONTH = "is_this_month"
    IS_LAST_MONTH = "is_last_month"
    IS_THIS_YEAR = "is_this_year"
    IS_LAST_YEAR = "is_last_year"
    # Boolean
    IS_TRUE = "is_true"
    IS_FALSE = "is_false"


Scalar = Union[bool, int, float, str, None]
ConditionValue = Union[Scalar, List[Scalar]]


class _CamelModel(BaseModel):
    """Base for models exchanged with the UI in camelCase."""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)


class SelectOption(BaseModel):
    """One choice of a select-type field."""
    label: str
    value: str


class FilterField(_CamelModel):
    """One filterable attribute of one entity."""
    key: str
    label: str
    type: FieldType
    options: Optional[List[SelectOption]] = None
    related_entity: Optional[str] = Field(default=None, alias="relatedEntity")


class OperatorSpec(_CamelModel):
    """Catalog metadata for a single operator."""
    operator: FilterOperator
    label: str
    requires_value: bool = Field(alias="requiresValue")
    value_type: ValueArity = Field(alias="valueType")
    supported_types: List[FieldType] = Field(alias="supportedTypes")


class FilterCondition(_CamelModel):
    """A field/operator/value triple plus the connector to the next condition."""
    id: str
    field: str = ""
    operator: Optional[FilterOperator] = FilterOperator.EQUALS
    value: ConditionValue = ""
    logical_operator: LogicalOperator = Field(default=LogicalOperator.AND, alias="logicalOperator")

    @field_validator("operator", mode="before")
    @classmethod
    def blank_operator_is_missing(cls, v: Any) -> Any:
        """An empty operator is kept as missing so the validator can report it."""
        if v == "":
            return None
        return v

    @field_validator("logical_operator", mode="before")
    @classmethod
    def default_logical_operator(cls, v: Any) -> Any:
        if v is None or v == "":
            return LogicalOperator.AND
        return v

    @property
    def is_complete(self) -> bool:
        """True when both field and operator are set."""
        return bool(self.field) and self.operator is not None


class FilterGroup(_CamelModel):
    """Ordered conditions combined left-to-right, plus the connector to the next group."""
    id: str
    conditions: List[FilterCondition] = Field(default_factory=list)
    logical_operator: LogicalOperator = Field(default=LogicalOperator.AND, alias="logicalOperator")

    @field_validator("logical_operator", mode="before")
    @classmethod
    def default_logical_operator(cls, v: Any) -> Any:
        if v is None or v == "":
            return LogicalOperator.AND
        return v


class FilterConfig(_CamelModel):
    """The full group tree; the unit that gets validated, compiled and serialized."""
    groups: List[FilterGroup] = Field(default_factory=list)
    name: Optional[str] = None
    is_public: Optional[bool] = Field(default=None, alias="isPublic")


class ValidationResult(_CamelModel):
    """Outcome of a structural or type check."""
    is_valid: bool = Field(alias="isValid")
    errors: List[str] = Field(default_factory=list)


class SearchResult(_CamelModel):
    """One scored record inside an entity bucket."""
    entity_type: str = Field(alias="entityType")
    record: Dict[str, Any]
    relevance_score: int = Field(alias="relevanceScore")


class SortDirection(str, Enum):
    """Ordering direction for filtered results."""
    ASC = "asc"
    DESC = "desc"


class SortOrder(_CamelModel):
    """Single-field ordering applied to filtered results; missing values sort last."""
    field: str
    direction: SortDirection = SortDirection.ASC

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC


class Pagination(_CamelModel):
    """1-based page window over filtered results."""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=100, ge=1, le=500)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class FilterConfigurationError(ValueError):
    """Raised when a filter config cannot be compiled."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid filter configuration")


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------

_id_counter = itertools.count(1)
_ID_ALPHABET = string.ascii_lowercase + string.digits


def _new_id(prefix: str) -> str:
    """Timestamp + counter + random suffix; never repeats within a process."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{prefix}_{int(time.time() * 1000)}_{next(_id_counter)}{suffix}"


def new_condition() -> FilterCondition:
    """Return an empty condition with a fresh id."""
    return FilterCondition(
        id=_new_id("condition"),
        field="",
        operator=FilterOperator.EQUALS,
        value="",
        logical_operator=LogicalOperator.AND,
    )


def new_group() -> FilterGroup:
    """Return a group wrapping one empty condition."""
    return FilterGroup(
        id=_new_id("group"),
        conditions=[new_condition()],
        logical_operator=LogicalOperator.AND,
    )


def new_config() -> FilterConfig:
    """Return a config wrapping one empty group."""
    return FilterConfig(groups=[new_group()])
