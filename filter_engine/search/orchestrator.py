"""
Search orchestrator.

Fans a free-text query out to one repository per entity type, scores the
candidates and returns one ranked bucket per entity.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from filter_engine.core.interfaces import IEntityRepository
from filter_engine.core.models import SearchResult
from filter_engine.core.records import resolve_path, sort_key
from filter_engine.search.scoring import score_relevance
from filter_engine.search.specs import ENTITY_SEARCH_SPECS, EntitySearchSpec, SEARCHABLE_ENTITIES

logger = logging.getLogger(__name__)


class EntityOutcome(BaseModel):
    """Result of one entity's search task: either a bucket or an error."""
    entity: str
    results: List[SearchResult] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SearchResponse(BaseModel):
    """Per-entity ranked buckets plus the entity types that failed."""
    model_config = ConfigDict(populate_by_name=True)

    query: str
    entities: List[str]
    results: Dict[str, List[SearchResult]]
    total_results: int = Field(alias="totalResults")
    errors: Dict[str, str] = Field(default_factory=dict)
    search_time: float = Field(default=0.0, alias="searchTime")


def parse_entity_types(raw: Optional[str]) -> List[str]:
    """
    Parse a comma-separated entity subset.

    Missing input means every searchable entity; unknown names are dropped
    silently and duplicates collapse.
    """
    if not raw:
        return list(SEARCHABLE_ENTITIES)

    entities: List[str] = []
    for name in raw.split(","):
        name = name.strip().lower()
        if name in ENTITY_SEARCH_SPECS and name not in entities:
            entities.append(name)
    return entities


def rank_records(query: str, records: Sequence[Dict[str, Any]], spec: EntitySearchSpec) -> List[SearchResult]:
    """
    Score records and order them by score, then by the entity's tie-breakers.
    """
    scored = [
        SearchResult(
            entity_type=spec.entity_type,
            record=record,
            relevance_score=score_relevance(query, [resolve_path(record, f) for f in spec.score_fields]),
        )
        for record in records
    ]

    # Stable multi-pass sort: least significant key first.
    for key in reversed(spec.tie_breakers):
        present = [r for r in scored if resolve_path(r.record, key.field) is not None]
        missing = [r for r in scored if resolve_path(r.record, key.field) is None]
        present.sort(key=lambda r: sort_key(resolve_path(r.record, key.field)), reverse=key.descending)
        scored = present + missing

    scored.sort(key=lambda r: r.relevance_score, reverse=True)
    return scored


class SearchOrchestrator:
    """
    Coordinates multi-entity search.

    Each requested entity type runs as its own task; a failing repository
    only marks its own entity as failed.
    """

    def __init__(
        self,
        repositories: Mapping[str, IEntityRepository],
        specs: Optional[Mapping[str, EntitySearchSpec]] = None,
    ):
        """
        Initialize search orchestrator.

        Args:
            repositories: Repository per entity type (e.g. "companies")
            specs: Search configuration per entity type
        """
        self.repositories = dict(repositories)
        self.specs = dict(specs or ENTITY_SEARCH_SPECS)

    async def search(
        self,
        query: str,
        entity_types: Optional[Sequence[str]] = None,
        limit: int = 20,
        include_related: bool = False,
    ) -> SearchResponse:
        """
        Search every requested entity type in parallel.

        Args:
            query: Free-text query
            entity_types: Entity types to search; defaults to all configured
            limit: Maximum results per entity type
            include_related: Keep related-record previews in the records

        Returns:
            SearchResponse with one bucket per successful entity type

        Raises:
            ValueError: if no valid entity type remains or the limit is invalid
        """
        if limit < 1:
            raise ValueError("Limit must be a positive integer")

        requested = list(entity_types) if entity_types is not None else list(self.specs)
        entities = [e for e in dict.fromkeys(requested) if e in self.specs]
        if not entities:
            raise ValueError("At least one valid entity type must be specified")

        started = time.perf_counter()
        tasks = [
            asyncio.create_task(self._search_entity(entity, query, limit, include_related))
            for entity in entities
        ]
        outcomes: List[EntityOutcome] = await asyncio.gather(*tasks)

        results = {o.entity: o.results for o in outcomes if o.ok}
        errors = {o.entity: o.error for o in outcomes if not o.ok}
        return SearchResponse(
            query=query,
            entities=entities,
            results=results,
            total_results=sum(len(bucket) for bucket in results.values()),
            errors=errors,
            search_time=round((time.perf_counter() - started) * 1000, 2),
        )

    async def _search_entity(
        self, entity: str, query: str, limit: int, include_related: bool
    ) -> EntityOutcome:
        """Run one entity search, turning any failure into a tagged outcome."""
        spec = self.specs[entity]
        repository = self.repositories.get(entity)
        if repository is None:
            return EntityOutcome(entity=entity, error=f"No repository configured for '{entity}'")

        try:
            records = await repository.search(query, spec.match_fields, limit, include_related)
            if not include_related:
                records = [
                    {k: v for k, v in record.items() if k not in spec.related_keys}
                    for record in records
                ]
            results = rank_records(query, records[:limit], spec)
        except Exception as e:
            logger.warning("Search failed for %s: %s", entity, e, exc_info=True)
            return EntityOutcome(entity=entity, error=str(e) or e.__class__.__name__)

        return EntityOutcome(entity=entity, results=results)
