"""
In-memory entity repository.

Holds records as dictionaries; useful for tests and for running the API
without a database.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from filter_engine.adapters.memory.evaluator import PredicateEvaluator
from filter_engine.core.models import SortOrder
from filter_engine.core.records import resolve_path, sort_key


class MemoryEntityRepository:
    """
    Entity repository backed by a list of records.

    Implements the IEntityRepository interface. Records flagged ``isDeleted``
    are never returned.
    """

    def __init__(self, records: Optional[Iterable[Dict[str, Any]]] = None):
        self.records: List[Dict[str, Any]] = list(records or [])
        self.evaluator = PredicateEvaluator()

    def add(self, record: Dict[str, Any]) -> None:
        self.records.append(record)

    def _live(self) -> List[Dict[str, Any]]:
        return [r for r in self.records if not r.get("isDeleted")]

    async def search(
        self,
        term: str,
        fields: Sequence[str],
        limit: int,
        include_related: bool = False,
    ) -> List[Dict[str, Any]]:
        needle = term.lower()
        matches = []
        for record in self._live():
            values = (resolve_path(record, f) for f in fields)
            if any(v is not None and needle in str(v).lower() for v in values):
                matches.append(dict(record))
                if len(matches) >= limit:
                    break
        return matches

    def _matching(self, predicate) -> List[Dict[str, Any]]:
        return [r for r in self._live() if self.evaluator.matches(predicate, r)]

    async def filter(
        self,
        predicate,
        limit: int = 100,
        offset: int = 0,
        sort: Optional[SortOrder] = None,
    ) -> List[Dict[str, Any]]:
        matches = self._matching(predicate)
        if sort is not None:
            present = [r for r in matches if resolve_path(r, sort.field) is not None]
            missing = [r for r in matches if resolve_path(r, sort.field) is None]
            present.sort(key=lambda r: sort_key(resolve_path(r, sort.field)), reverse=sort.descending)
            matches = present + missing
        return [dict(r) for r in matches[offset:offset + limit]]

    async def count(self, predicate) -> int:
        return len(self._matching(predicate))
