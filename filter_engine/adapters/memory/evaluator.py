"""
In-memory predicate evaluator.

Executes a compiled predicate against plain dictionary records.
"""

from datetime import date, timedelta
from typing import Any, Dict, Optional

from filter_engine.core.models import FieldType, FilterOperator as Op
from filter_engine.core.records import resolve_path
from filter_engine.query.compiler import parse_date
from filter_engine.query.predicate import MatchAll, PredicateLeaf, PredicateNode


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_date(value)
    except (TypeError, ValueError):
        return None


class PredicateEvaluator:
    """
    Evaluates compiled predicates in memory.

    Text comparisons are case-insensitive; missing values never satisfy a
    positive comparison.
    """

    def matches(self, predicate, record: Dict[str, Any]) -> bool:
        """
        Check whether a record satisfies a predicate.

        Args:
            predicate: Compiled predicate tree
            record: Record as a (possibly nested) dictionary

        Returns:
            True if the record matches
        """
        if isinstance(predicate, MatchAll):
            return True
        if isinstance(predicate, PredicateNode):
            results = (self.matches(child, record) for child in predicate.children)
            return all(results) if predicate.kind == "and" else any(results)
        return self._match_leaf(predicate, record)

    def _match_leaf(self, leaf: PredicateLeaf, record: Dict[str, Any]) -> bool:
        actual = resolve_path(record, leaf.field)

        if leaf.field_type in (FieldType.TEXT, FieldType.SELECT):
            return self._match_text(leaf, actual)
        if leaf.field_type is FieldType.NUMBER:
            return self._match_number(leaf, _as_number(actual))
        if leaf.field_type is FieldType.DATE:
            return self._match_date(leaf, _as_date(actual))
        if leaf.operator is Op.IS_TRUE:
            return actual is True
        if leaf.operator is Op.IS_FALSE:
            return actual is False
        return False

    def _match_text(self, leaf: PredicateLeaf, actual: Any) -> bool:
        blank = actual is None or str(actual).strip() == ""
        if leaf.operator is Op.IS_EMPTY:
            return blank
        if leaf.operator is Op.IS_NOT_EMPTY:
            return not blank

        expected = leaf.values[0].value.lower()
        text = "" if actual is None else str(actual).lower()
        if leaf.operator is Op.NOT_EQUALS:
            return actual is None or text != expected
        if leaf.operator is Op.NOT_CONTAINS:
            return actual is None or expected not in text
        if actual is None:
            return False
        if leaf.operator is Op.EQUALS:
            return text == expected
        if leaf.operator is Op.CONTAINS:
            return expected in text
        if leaf.operator is Op.STARTS_WITH:
            return text.startswith(expected)
        if leaf.operator is Op.ENDS_WITH:
            return text.endswith(expected)
        return False

    def _match_number(self, leaf: PredicateLeaf, actual: Optional[float]) -> bool:
        if actual is None:
            return False
        values = leaf.raw_values
        if leaf.operator is Op.GREATER_THAN:
            return actual > values[0]
        if leaf.operator is Op.LESS_THAN:
            return actual < values[0]
        if leaf.operator is Op.GREATER_THAN_OR_EQUAL:
            return actual >= values[0]
        if leaf.operator is Op.LESS_THAN_OR_EQUAL:
            return actual <= values[0]
        low, high = min(values), max(values)
        if leaf.operator is Op.BETWEEN:
            return low <= actual <= high
        if leaf.operator is Op.NOT_BETWEEN:
            return actual < low or actual > high
        return False

    def _match_date(self, leaf: PredicateLeaf, actual: Optional[date]) -> bool:
        if actual is None:
            return False
        if leaf.window is not None:
            return leaf.window.start <= actual < leaf.window.end

        values = leaf.raw_values
        if leaf.operator is Op.BEFORE:
            return actual < values[0]
        if leaf.operator is Op.AFTER:
            return actual > values[0]
        if leaf.operator is Op.ON_OR_BEFORE:
            return actual <= values[0]
        if leaf.operator is Op.ON_OR_AFTER:
            return actual >= values[0]
        if leaf.operator is Op.DATE_IS:
            return actual == values[0]
        if leaf.operator is Op.DATE_BETWEEN:
            low, high = min(values), max(values)
            return low <= actual < high + timedelta(days=1)
        return False
