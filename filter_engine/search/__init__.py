"""Relevance-ranked, multi-entity search."""

from filter_engine.search.orchestrator import (
    EntityOutcome,
    SearchOrchestrator,
    SearchResponse,
    parse_entity_types,
    rank_records,
)
from filter_engine.search.scoring import score_relevance
from filter_engine.search.specs import ENTITY_SEARCH_SPECS, EntitySearchSpec, SortKey

__all__ = [
    "ENTITY_SEARCH_SPECS",
    "EntityOutcome",
    "EntitySearchSpec",
    "SearchOrchestrator",
    "SearchResponse",
    "SortKey",
    "parse_entity_types",
    "rank_records",
    "score_relevance",
]
