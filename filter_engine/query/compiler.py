"""
Filter compiler.

Turns a FilterConfig into a compiled predicate tree. A dedicated check pass
rejects unknown fields, operator/field-type mismatches and wrong value counts
before any predicate is built.
"""

import logging
from calendar import monthrange
from datetime import date, datetime, timedelta
from typing import Any, List, Optional, Tuple, Union

from filter_engine.catalog.fields import get_field, resolve_field_type, ENTITY_FIELDS
from filter_engine.catalog.operators import RELATIVE_DATE_OPERATORS, get_operator_spec
from filter_engine.core.models import (
    FieldType,
    FilterCondition,
    FilterConfig,
    FilterConfigurationError,
    FilterOperator,
    LogicalOperator,
    ValueArity,
)
from filter_engine.query.predicate import (
    ARITY_COUNTS,
    BooleanValue,
    DateValue,
    DateWindow,
    MatchAll,
    NumberValue,
    PredicateLeaf,
    PredicateNode,
    TextValue,
)

logger = logging.getLogger(__name__)

CompiledPredicate = Union[MatchAll, PredicateLeaf, PredicateNode]


def split_values(value: Any) -> List[Any]:
    """
    Normalize a raw condition value into a list of supplied values.

    ``None``, ``""`` and ``[]`` count as no value; a list counts its elements.
    """
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def parse_date(raw: Any) -> date:
    """Parse a calendar day from a date, datetime or ISO-8601 string."""
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        raise ValueError(f"'{raw}' is not a date")
    text = raw.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()


def _coerce(raw: Any, field_type: FieldType):
    """Wrap one raw value in the typed value matching ``field_type``."""
    if field_type in (FieldType.TEXT, FieldType.SELECT):
        if isinstance(raw, bool) or raw is None or isinstance(raw, (list, dict)):
            raise ValueError(f"'{raw}' is not a text value")
        return TextValue(value=str(raw))
    if field_type is FieldType.NUMBER:
        if isinstance(raw, bool) or raw is None:
            raise ValueError(f"'{raw}' is not a number")
        return NumberValue(value=float(raw.strip() if isinstance(raw, str) else raw))
    if field_type is FieldType.DATE:
        return DateValue(value=parse_date(raw))
    if field_type is FieldType.BOOLEAN:
        if isinstance(raw, str) and raw.lower() in ("true", "false"):
            return BooleanValue(value=raw.lower() == "true")
        if not isinstance(raw, bool):
            raise ValueError(f"'{raw}' is not a boolean")
        return BooleanValue(value=raw)
    raise ValueError(f"Unsupported field type '{field_type}'")


def _add_months(day: date, months: int) -> date:
    month_index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(month_index, 12)
    return date(year, month + 1, min(day.day, monthrange(year, month + 1)[1]))


def relative_window(operator: FilterOperator, today: date) -> DateWindow:
    """
    Resolve a relative date operator to a half-open calendar window.

    Weeks start on Monday; months and years follow calendar boundaries.
    """
    if operator is FilterOperator.IS_TODAY:
        return DateWindow(start=today, end=today + timedelta(days=1))
    if operator is FilterOperator.IS_YESTERDAY:
        return DateWindow(start=today - timedelta(days=1), end=today)

    monday = today - timedelta(days=today.weekday())
    if operator is FilterOperator.IS_THIS_WEEK:
        return DateWindow(start=monday, end=monday + timedelta(days=7))
    if operator is FilterOperator.IS_LAST_WEEK:
        return DateWindow(start=monday - timedelta(days=7), end=monday)

    first_of_month = today.replace(day=1)
    if operator is FilterOperator.IS_THIS_MONTH:
        return DateWindow(start=first_of_month, end=_add_months(first_of_month, 1))
    if operator is FilterOperator.IS_LAST_MONTH:
        return DateWindow(start=_add_months(first_of_month, -1), end=first_of_month)

    first_of_year = date(today.year, 1, 1)
    if operator is FilterOperator.IS_THIS_YEAR:
        return DateWindow(start=first_of_year, end=date(today.year + 1, 1, 1))
    if operator is FilterOperator.IS_LAST_YEAR:
        return DateWindow(start=date(today.year - 1, 1, 1), end=first_of_year)

    raise ValueError(f"'{operator.value}' is not a relative date operator")


class FilterCompiler:
    """
    Compiles filter configs for one entity.

    The entity's field registry supplies field types, so the same config can
    be checked and compiled without touching a live store.
    """

    def __init__(self, entity: str, today: Optional[date] = None):
        """
        Initialize filter compiler.

        Args:
            entity: Entity name whose field registry is used (e.g. "companies")
            today: Reference day for relative date operators; defaults to the
                current local date at compile time
        """
        self.entity = entity
        self.today = today

    def check(self, config: FilterConfig) -> List[str]:
        """
        Run the type and arity check pass.

        Conditions pruned by the compiler (missing field or operator) are skipped.

        Returns:
            List of human-readable errors; empty when the config compiles
        """
        if self.entity not in ENTITY_FIELDS:
            return [f"Unknown entity '{self.entity}'"]

        errors: List[str] = []
        for group_index, group in enumerate(config.groups, start=1):
            for condition_index, condition in enumerate(group.conditions, start=1):
                if not condition.is_complete:
                    continue
                try:
                    self._build_leaf(condition, date.today())
                except ValueError as e:
                    errors.append(f"Group {group_index}, Condition {condition_index}: {e}")
        return errors

    def compile(self, config: FilterConfig) -> CompiledPredicate:
        """
        Compile a config into a predicate tree.

        Raises:
            FilterConfigurationError: if the check pass reports any error
        """
        errors = self.check(config)
        if errors:
            logger.info("Rejected filter config for %s: %s", self.entity, errors)
            raise FilterConfigurationError(errors)

        today = self.today or date.today()
        group_predicates: List[Tuple[CompiledPredicate, LogicalOperator]] = []

        for group in config.groups:
            leaves = [
                (self._build_leaf(condition, today), condition.logical_operator)
                for condition in group.conditions
                if condition.is_complete
            ]
            if not leaves:
                continue
            group_predicates.append((_fold(leaves), group.logical_operator))

        if not group_predicates:
            return MatchAll()
        return _fold(group_predicates)

    def _build_leaf(self, condition: FilterCondition, today: date) -> PredicateLeaf:
        field = get_field(self.entity, condition.field)
        if field is None:
            raise ValueError(f"Unknown field '{condition.field}' for entity '{self.entity}'")

        field_type = resolve_field_type(field)
        operator = condition.operator
        spec = get_operator_spec(operator)
        if field_type not in spec.supported_types:
            raise ValueError(
                f"Operator '{operator.value}' is not supported for "
                f"{field_type.value} field '{field.key}'"
            )

        supplied = split_values(condition.value)
        if spec.value_type is ValueArity.NONE:
            supplied = []
        expected = ARITY_COUNTS[spec.value_type]
        if len(supplied) != expected:
            raise ValueError(
                f"Operator '{operator.value}' requires exactly {expected} "
                f"value(s), got {len(supplied)}"
            )

        try:
            values = [_coerce(raw, field_type) for raw in supplied]
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid value for field '{field.key}': {e}") from e

        window = relative_window(operator, today) if operator in RELATIVE_DATE_OPERATORS else None
        return PredicateLeaf(
            field=field.key,
            operator=operator,
            field_type=field_type,
            values=values,
            window=window,
        )


def _combine(connector: LogicalOperator, left: CompiledPredicate, right: CompiledPredicate) -> PredicateNode:
    kind = connector.value.lower()
    children: List[CompiledPredicate] = []
    for part in (left, right):
        if isinstance(part, PredicateNode) and part.kind == kind:
            children.extend(part.children)
        else:
            children.append(part)
    return PredicateNode(kind=kind, children=children)


def _fold(items: List[Tuple[CompiledPredicate, LogicalOperator]]) -> CompiledPredicate:
    """Combine predicates left-to-right; the last connector is unused."""
    result, connector = items[0]
    for predicate, next_connector in items[1:]:
        result = _combine(connector, result, predicate)
        connector = next_connector
    return result


def search_predicate(term: str, fields: List[str]) -> CompiledPredicate:
    """Case-insensitive substring match of ``term`` on any of ``fields``."""
    term = term.strip()
    if not term or not fields:
        return MatchAll()
    leaves: List[CompiledPredicate] = [
        PredicateLeaf(
            field=field,
            operator=FilterOperator.CONTAINS,
            field_type=FieldType.TEXT,
            values=[TextValue(value=term)],
        )
        for field in fields
    ]
    return leaves[0] if len(leaves) == 1 else PredicateNode(kind="or", children=leaves)


def restrict(predicate: CompiledPredicate, extra: CompiledPredicate) -> CompiledPredicate:
    """AND two predicates, treating ``MatchAll`` as the identity."""
    if isinstance(extra, MatchAll):
        return predicate
    if isinstance(predicate, MatchAll):
        return extra
    return _combine(LogicalOperator.AND, predicate, extra)


def compile_filters(config: FilterConfig, entity: str, today: Optional[date] = None) -> CompiledPredicate:
    """Compile ``config`` against ``entity``'s field registry."""
    return FilterCompiler(entity, today=today).compile(config)


def check_filters(config: FilterConfig, entity: str) -> List[str]:
    """Type and arity errors that would stop ``config`` from compiling."""
    return FilterCompiler(entity).check(config)
