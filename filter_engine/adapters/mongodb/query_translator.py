"""
MongoDB query translator.

Converts compiled predicates to MongoDB filter documents.
"""

import re
from datetime import date, datetime, timedelta
from typing import Any, Dict

from filter_engine.core.models import FieldType, FilterOperator as Op
from filter_engine.query.predicate import MatchAll, PredicateLeaf, PredicateNode

_BLANK = r"^\s*$"


def _day(value: date, offset: int = 0) -> datetime:
    """Midnight at the start of ``value`` (+ ``offset`` days)."""
    shifted = value + timedelta(days=offset)
    return datetime(shifted.year, shifted.month, shifted.day)


class MongoQueryTranslator:
    """
    Translates compiled predicates to MongoDB query documents.

    Text comparisons become case-insensitive anchored regexes; date
    comparisons become half-open datetime ranges over whole days.
    """

    def translate(self, predicate) -> Dict[str, Any]:
        """
        Convert a predicate tree to a MongoDB filter.

        Args:
            predicate: Compiled predicate tree

        Returns:
            Filter document usable with ``Collection.find``
        """
        if isinstance(predicate, MatchAll):
            return {}
        if isinstance(predicate, PredicateNode):
            clauses = [self.translate(child) for child in predicate.children]
            return {f"${predicate.kind}": clauses}
        return self._translate_leaf(predicate)

    def _translate_leaf(self, leaf: PredicateLeaf) -> Dict[str, Any]:
        if leaf.field_type in (FieldType.TEXT, FieldType.SELECT):
            return self._translate_text(leaf)
        if leaf.field_type is FieldType.NUMBER:
            return self._translate_number(leaf)
        if leaf.field_type is FieldType.DATE:
            return self._translate_date(leaf)
        return {leaf.field: leaf.operator is Op.IS_TRUE}

    def _translate_text(self, leaf: PredicateLeaf) -> Dict[str, Any]:
        field = leaf.field
        if leaf.operator is Op.IS_EMPTY:
            return {"$or": [{field: None}, {field: {"$regex": _BLANK}}]}
        if leaf.operator is Op.IS_NOT_EMPTY:
            return {field: {"$ne": None, "$not": {"$regex": _BLANK}}}

        escaped = re.escape(leaf.values[0].value)
        if leaf.operator is Op.EQUALS:
            return {field: {"$regex": f"^{escaped}$", "$options": "i"}}
        elif leaf.operator is Op.NOT_EQUALS:
            return {field: {"$not": {"$regex": f"^{escaped}$", "$options": "i"}}}
        elif leaf.operator is Op.CONTAINS:
            return {field: {"$regex": escaped, "$options": "i"}}
        elif leaf.operator is Op.NOT_CONTAINS:
            return {field: {"$not": {"$regex": escaped, "$options": "i"}}}
        elif leaf.operator is Op.STARTS_WITH:
            return {field: {"$regex": f"^{escaped}", "$options": "i"}}
        elif leaf.operator is Op.ENDS_WITH:
            return {field: {"$regex": f"{escaped}$", "$options": "i"}}
        raise ValueError(f"Unsupported text operator '{leaf.operator.value}'")

    def _translate_number(self, leaf: PredicateLeaf) -> Dict[str, Any]:
        field = leaf.field
        values = leaf.raw_values
        if leaf.operator is Op.GREATER_THAN:
            return {field: {"$gt": values[0]}}
        elif leaf.operator is Op.LESS_THAN:
            return {field: {"$lt": values[0]}}
        elif leaf.operator is Op.GREATER_THAN_OR_EQUAL:
            return {field: {"$gte": values[0]}}
        elif leaf.operator is Op.LESS_THAN_OR_EQUAL:
            return {field: {"$lte": values[0]}}

        low, high = min(values), max(values)
        if leaf.operator is Op.BETWEEN:
            return {field: {"$gte": low, "$lte": high}}
        elif leaf.operator is Op.NOT_BETWEEN:
            return {"$or": [{field: {"$lt": low}}, {field: {"$gt": high}}]}
        raise ValueError(f"Unsupported number operator '{leaf.operator.value}'")

    def _translate_date(self, leaf: PredicateLeaf) -> Dict[str, Any]:
        field = leaf.field
        if leaf.window is not None:
            return {field: {"$gte": _day(leaf.window.start), "$lt": _day(leaf.window.end)}}

        values = leaf.raw_values
        if leaf.operator is Op.BEFORE:
            return {field: {"$lt": _day(values[0])}}
        elif leaf.operator is Op.AFTER:
            return {field: {"$gte": _day(values[0], 1)}}
        elif leaf.operator is Op.ON_OR_BEFORE:
            return {field: {"$lt": _day(values[0], 1)}}
        elif leaf.operator is Op.ON_OR_AFTER:
            return {field: {"$gte": _day(values[0])}}
        elif leaf.operator is Op.DATE_IS:
            return {field: {"$gte": _day(values[0]), "$lt": _day(values[0], 1)}}
        elif leaf.operator is Op.DATE_BETWEEN:
            low, high = min(values), max(values)
            return {field: {"$gte": _day(low), "$lt": _day(high, 1)}}
        raise ValueError(f"Unsupported date operator '{leaf.operator.value}'")
