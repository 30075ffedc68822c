"""Core interfaces and models for the filter engine."""

from filter_engine.core.models import (
    FieldType,
    FilterCondition,
    FilterConfig,
    FilterConfigurationError,
    FilterField,
    FilterGroup,
    FilterOperator,
    LogicalOperator,
    OperatorSpec,
    Pagination,
    SearchResult,
    SelectOption,
    SortDirection,
    SortOrder,
    ValidationResult,
    ValueArity,
    new_condition,
    new_config,
    new_group,
)

__all__ = [
    "FieldType",
    "FilterCondition",
    "FilterConfig",
    "FilterConfigurationError",
    "FilterField",
    "FilterGroup",
    "FilterOperator",
    "LogicalOperator",
    "OperatorSpec",
    "Pagination",
    "SearchResult",
    "SelectOption",
    "SortDirection",
    "SortOrder",
    "ValidationResult",
    "ValueArity",
    "new_condition",
    "new_config",
    "new_group",
]
