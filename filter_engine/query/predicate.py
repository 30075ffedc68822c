"""
Compiled predicate tree.

The filter compiler emits this tree; persistence adapters execute it.
Leaves carry typed values, internal nodes combine children with AND/OR.
"""

from datetime import date
from typing import Any, Dict, List, Literal, Optional, Union, Annotated

from pydantic import BaseModel, Field, TypeAdapter, model_validator

from filter_engine.catalog.operators import RELATIVE_DATE_OPERATORS, get_operator_spec
from filter_engine.core.models import FieldType, FilterOperator, ValueArity


class TextValue(BaseModel):
    """Value compared against text and select fields."""
    kind: Literal["text"] = "text"
    value: str


class NumberValue(BaseModel):
    """Value compared against number fields."""
    kind: Literal["number"] = "number"
    value: float


class DateValue(BaseModel):
    """Calendar day compared against date fields."""
    kind: Literal["date"] = "date"
    value: date


class BooleanValue(BaseModel):
    """Value compared against boolean fields."""
    kind: Literal["boolean"] = "boolean"
    value: bool


TypedValue = Annotated[
    Union[TextValue, NumberValue, DateValue, BooleanValue],
    Field(discriminator="kind"),
]

VALUE_KIND_FOR_TYPE: Dict[FieldType, str] = {
    FieldType.TEXT: "text",
    FieldType.SELECT: "text",
    FieldType.NUMBER: "number",
    FieldType.DATE: "date",
    FieldType.BOOLEAN: "boolean",
}

ARITY_COUNTS: Dict[ValueArity, int] = {
    ValueArity.NONE: 0,
    ValueArity.SINGLE: 1,
    ValueArity.DOUBLE: 2,
}


class DateWindow(BaseModel):
    """Half-open calendar range ``[start, end)`` resolved for a relative date operator."""
    start: date
    end: date


class MatchAll(BaseModel):
    """The universal predicate: no filtering."""
    kind: Literal["all"] = "all"


class PredicateLeaf(BaseModel):
    """A single field/operator/values comparison."""
    kind: Literal["leaf"] = "leaf"
    field: str
    operator: FilterOperator
    field_type: FieldType
    values: List[TypedValue] = Field(default_factory=list)
    window: Optional[DateWindow] = None

    @model_validator(mode="after")
    def check_operator(self) -> "PredicateLeaf":
        """Reject operator/type and arity mismatches at construction."""
        spec = get_operator_spec(self.operator)
        if self.field_type not in spec.supported_types:
            raise ValueError(
                f"Operator '{self.operator.value}' cannot be used with "
                f"{self.field_type.value} field '{self.field}'"
            )

        expected = ARITY_COUNTS[spec.value_type]
        if len(self.values) != expected:
            raise ValueError(
                f"Operator '{self.operator.value}' on field '{self.field}' expects "
                f"{expected} value(s), got {len(self.values)}"
            )

        kind = VALUE_KIND_FOR_TYPE.get(self.field_type)
        for v in self.values:
            if v.kind != kind:
                raise ValueError(
                    f"{v.kind} value used for {self.field_type.value} field '{self.field}'"
                )

        if self.operator in RELATIVE_DATE_OPERATORS and self.window is None:
            raise ValueError(f"Relative date operator '{self.operator.value}' requires a window")
        return self

    @property
    def raw_values(self) -> List[Any]:
        return [v.value for v in self.values]


class PredicateNode(BaseModel):
    """AND/OR combination of child predicates."""
    kind: Literal["and", "or"]
    children: List["Predicate"]


Predicate = Annotated[
    Union[MatchAll, PredicateLeaf, PredicateNode],
    Field(discriminator="kind"),
]

PredicateNode.model_rebuild()

_predicate_adapter = TypeAdapter(Predicate)


def predicate_from_dict(data: Dict[str, Any]) -> Union[MatchAll, PredicateLeaf, PredicateNode]:
    """Rebuild a predicate tree from its JSON-shaped form."""
    return _predicate_adapter.validate_python(data)


def predicate_to_dict(predicate: Union[MatchAll, PredicateLeaf, PredicateNode]) -> Dict[str, Any]:
    """JSON-shaped form of a predicate tree."""
    return predicate.model_dump(mode="json", exclude_none=True)
