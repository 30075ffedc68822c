"""
Operator catalog.

Static metadata for every comparison operator: display label, value arity
and the field types it applies to.
"""

from typing import Dict, List

from filter_engine.core.models import FieldType, FilterOperator, OperatorSpec, ValueArity

_TEXT_LIKE = [FieldType.TEXT, FieldType.SELECT]
_NUMBER = [FieldType.NUMBER]
_DATE = [FieldType.DATE]
_BOOLEAN = [FieldType.BOOLEAN]


def _spec(operator: FilterOperator, label: str, arity: ValueArity, types: List[FieldType]) -> OperatorSpec:
    return OperatorSpec(
        operator=operator,
        label=label,
        requires_value=arity is not ValueArity.NONE,
        value_type=arity,
        supported_types=types,
    )


OPERATOR_CATALOG: Dict[FilterOperator, OperatorSpec] = {
    spec.operator: spec
    for spec in [
        # Text operators
        _spec(FilterOperator.EQUALS, "equals", ValueArity.SINGLE, _TEXT_LIKE),
        _spec(FilterOperator.NOT_EQUALS, "does not equal", ValueArity.SINGLE, _TEXT_LIKE),
        _spec(FilterOperator.CONTAINS, "contains", ValueArity.SINGLE, _TEXT_LIKE),
        _spec(FilterOperator.NOT_CONTAINS, "does not contain", ValueArity.SINGLE, _TEXT_LIKE),
        _spec(FilterOperator.STARTS_WITH, "starts with", ValueArity.SINGLE, _TEXT_LIKE),
        _spec(FilterOperator.ENDS_WITH, "ends with", ValueArity.SINGLE, _TEXT_LIKE),
        _spec(FilterOperator.IS_EMPTY, "is empty", ValueArity.NONE, _TEXT_LIKE),
        _spec(FilterOperator.IS_NOT_EMPTY, "is not empty", ValueArity.NONE, _TEXT_LIKE),
        # Number operators
        _spec(FilterOperator.GREATER_THAN, "greater than", ValueArity.SINGLE, _NUMBER),
        _spec(FilterOperator.LESS_THAN, "less than", ValueArity.SINGLE, _NUMBER),
        _spec(FilterOperator.GREATER_THAN_OR_EQUAL, "greater than or equal to", ValueArity.SINGLE, _NUMBER),
        _spec(FilterOperator.LESS_THAN_OR_EQUAL, "less than or equal to", ValueArity.SINGLE, _NUMBER),
        _spec(FilterOperator.BETWEEN, "between", ValueArity.DOUBLE, _NUMBER),
        _spec(FilterOperator.NOT_BETWEEN, "not between", ValueArity.DOUBLE, _NUMBER),
        # Date operators
        _spec(FilterOperator.BEFORE, "before", ValueArity.SINGLE, _DATE),
        _spec(FilterOperator.AFTER, "after", ValueArity.SINGLE, _DATE),
        _spec(FilterOperator.ON_OR_BEFORE, "on or before", ValueArity.SINGLE, _DATE),
        _spec(FilterOperator.ON_OR_AFTER, "on or after", ValueArity.SINGLE, _DATE),
        _spec(FilterOperator.DATE_BETWEEN, "between", ValueArity.DOUBLE, _DATE),
        _spec(FilterOperator.DATE_IS, "is", ValueArity.SINGLE, _DATE),
        _spec(FilterOperator.IS_TODAY, "is today", ValueArity.NONE, _DATE),
        _spec(FilterOperator.IS_YESTERDAY, "is yesterday", ValueArity.NONE, _DATE),
        _spec(FilterOperator.IS_THIS_WEEK, "is this week", ValueArity.NONE, _DATE),
        _spec(FilterOperator.IS_LAST_WEEK, "is last week", ValueArity.NONE, _DATE),
        _spec(FilterOperator.IS_THIS_MONTH, "is this month", ValueArity.NONE, _DATE),
        _spec(FilterOperator.IS_LAST_MONTH, "is last month", ValueArity.NONE, _DATE),
        _spec(FilterOperator.IS_THIS_YEAR, "is this year", ValueArity.NONE, _DATE),
        _spec(FilterOperator.IS_LAST_YEAR, "is last year", ValueArity.NONE, _DATE),
        # Boolean operators
        _spec(FilterOperator.IS_TRUE, "is true", ValueArity.NONE, _BOOLEAN),
        _spec(FilterOperator.IS_FALSE, "is false", ValueArity.NONE, _BOOLEAN),
    ]
}

RELATIVE_DATE_OPERATORS = frozenset({
    FilterOperator.IS_TODAY,
    FilterOperator.IS_YESTERDAY,
    FilterOperator.IS_THIS_WEEK,
    FilterOperator.IS_LAST_WEEK,
    FilterOperator.IS_THIS_MONTH,
    FilterOperator.IS_LAST_MONTH,
    FilterOperator.IS_THIS_YEAR,
    FilterOperator.IS_LAST_YEAR,
})


def get_operator_spec(operator: FilterOperator) -> OperatorSpec:
    """Return catalog metadata for an operator."""
    return OPERATOR_CATALOG[FilterOperator(operator)]


def operators_for(field_type: FieldType) -> List[OperatorSpec]:
    """
    List the operators applicable to a field type, in catalog order.

    Args:
        field_type: Semantic type of the field

    Returns:
        Operator specs whose supported types include ``field_type``
    """
    field_type = FieldType(field_type)
    return [spec for spec in OPERATOR_CATALOG.values() if field_type in spec.supported_types]


def supports(operator: FilterOperator, field_type: FieldType) -> bool:
    """Whether ``operator`` may be paired with a field of ``field_type``."""
    return FieldType(field_type) in get_operator_spec(operator).supported_types
