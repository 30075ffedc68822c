"""Operator catalog and per-entity field registry."""

from typing import List

from filter_engine.catalog.fields import (
    ENTITY_FIELDS,
    entity_names,
    fields_for,
    get_field,
    resolve_field_type,
)
from filter_engine.catalog.operators import (
    OPERATOR_CATALOG,
    RELATIVE_DATE_OPERATORS,
    get_operator_spec,
    operators_for,
    supports,
)
from filter_engine.core.models import FilterField, OperatorSpec


def operators_for_field(field: FilterField) -> List[OperatorSpec]:
    """Operators valid for a concrete field, following relationships."""
    return operators_for(resolve_field_type(field))


__all__ = [
    "ENTITY_FIELDS",
    "OPERATOR_CATALOG",
    "RELATIVE_DATE_OPERATORS",
    "entity_names",
    "fields_for",
    "get_field",
    "get_operator_spec",
    "operators_for",
    "operators_for_field",
    "resolve_field_type",
    "supports",
]
