"""
CRM Filter Engine - structured filters and relevance-ranked search.

Main entry points for building, checking, compiling and sharing filter
configs, and for searching several entity types at once.
"""

from filter_engine.core.models import FilterConfig, new_condition, new_config, new_group
from filter_engine.query import (
    FilterCompiler,
    compile_filters,
    decode_filters,
    encode_filters,
    validate_filters,
)
from filter_engine.search import SearchOrchestrator, score_relevance

__all__ = [
    "FilterCompiler",
    "FilterConfig",
    "SearchOrchestrator",
    "compile_filters",
    "decode_filters",
    "encode_filters",
    "new_condition",
    "new_config",
    "new_group",
    "score_relevance",
    "validate_filters",
]
