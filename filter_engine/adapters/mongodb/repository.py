"""
MongoDB entity repository.

Runs free-text searches and compiled predicates against one collection.
"""

import asyncio
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection

from filter_engine.adapters.mongodb.query_translator import MongoQueryTranslator
from filter_engine.core.models import SortOrder

_NOT_DELETED = {"isDeleted": {"$ne": True}}


class MongoEntityRepository:
    """
    Entity repository backed by a MongoDB collection.

    Implements the IEntityRepository interface. pymongo is synchronous, so
    queries run in a worker thread to keep the event loop free.
    """

    def __init__(self, collection: Collection):
        """
        Initialize MongoDB entity repository.

        Args:
            collection: Collection holding the entity's documents
        """
        self.collection = collection
        self.translator = MongoQueryTranslator()

    @classmethod
    def for_entities(
        cls, mongo_uri: str, database_name: str, entities: Iterable[str]
    ) -> Dict[str, "MongoEntityRepository"]:
        """
        Create one repository per entity collection sharing a single client.

        Args:
            mongo_uri: MongoDB connection URI
            database_name: Name of the database
            entities: Entity names, used as collection names
        """
        database = MongoClient(mongo_uri)[database_name]
        return {entity: cls(database[entity]) for entity in entities}

    async def search(
        self,
        term: str,
        fields: Sequence[str],
        limit: int,
        include_related: bool = False,
    ) -> List[Dict[str, Any]]:
        pattern = re.escape(term)
        query = {
            **_NOT_DELETED,
            "$or": [{field: {"$regex": pattern, "$options": "i"}} for field in fields],
        }
        return await asyncio.to_thread(self._find, query, limit)

    async def filter(
        self,
        predicate,
        limit: int = 100,
        offset: int = 0,
        sort: Optional[SortOrder] = None,
    ) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._find, self._filter_query(predicate), limit, offset, sort)

    async def count(self, predicate) -> int:
        return await asyncio.to_thread(self.collection.count_documents, self._filter_query(predicate))

    def _filter_query(self, predicate) -> Dict[str, Any]:
        return {"$and": [_NOT_DELETED, self.translator.translate(predicate)]}

    def _find(
        self,
        query: Dict[str, Any],
        limit: int,
        offset: int = 0,
        sort: Optional[SortOrder] = None,
    ) -> List[Dict[str, Any]]:
        cursor = self.collection.find(query)
        if sort is not None:
            cursor = cursor.sort(sort.field, DESCENDING if sort.descending else ASCENDING)
        if offset:
            cursor = cursor.skip(offset)
        documents = list(cursor.limit(limit))

        # Convert ObjectId to string for JSON serialization
        for doc in documents:
            if "_id" in doc:
                doc["_id"] = str(doc["_id"])
        return documents
