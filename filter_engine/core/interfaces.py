"""
Abstract interfaces for persistence adapters.

These protocols define the contract that every entity repository must
implement to be used by the search orchestrator and the filter API.
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence

from filter_engine.core.models import SortOrder
from filter_engine.query.predicate import Predicate


class IEntityRepository(Protocol):
    """
    Read access to the records of one entity type.

    Implementations own the connection to the underlying store; the engine
    only hands them search terms or compiled predicates.
    """

    async def search(
        self,
        term: str,
        fields: Sequence[str],
        limit: int,
        include_related: bool = False,
    ) -> List[Dict[str, Any]]:
        """
        Fetch candidate records for a free-text search.

        Args:
            term: Raw search text
            fields: Record fields to substring-match (case-insensitive)
            limit: Maximum number of records to return
            include_related: Whether related-record previews should be loaded

        Returns:
            List of records as plain dictionaries
        """
        ...

    async def filter(
        self,
        predicate: Predicate,
        limit: int = 100,
        offset: int = 0,
        sort: Optional[SortOrder] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch records matching a compiled predicate.

        Args:
            predicate: Output of the filter compiler
            limit: Maximum number of records to return
            offset: Number of matching records to skip
            sort: Ordering applied before paging

        Returns:
            List of records as plain dictionaries
        """
        ...

    async def count(self, predicate: Predicate) -> int:
        """Number of records matching a compiled predicate."""
        ...
