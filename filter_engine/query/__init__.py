"""Filter pipeline: check, compile, serialize and describe filter configs."""

from filter_engine.query.codec import (
    DecodeResult,
    decode_filters,
    decode_filters_strict,
    encode_filters,
    filter_hash,
    has_valid_conditions,
    to_query_params,
)
from filter_engine.query.compiler import (
    FilterCompiler,
    check_filters,
    compile_filters,
    restrict,
    search_predicate,
)
from filter_engine.query.describer import describe_filters
from filter_engine.query.predicate import (
    MatchAll,
    PredicateLeaf,
    PredicateNode,
    predicate_from_dict,
    predicate_to_dict,
)
from filter_engine.query.validator import validate_filters

__all__ = [
    "DecodeResult",
    "FilterCompiler",
    "MatchAll",
    "PredicateLeaf",
    "PredicateNode",
    "check_filters",
    "compile_filters",
    "decode_filters",
    "decode_filters_strict",
    "describe_filters",
    "encode_filters",
    "filter_hash",
    "has_valid_conditions",
    "predicate_from_dict",
    "predicate_to_dict",
    "restrict",
    "search_predicate",
    "to_query_params",
    "validate_filters",
]
