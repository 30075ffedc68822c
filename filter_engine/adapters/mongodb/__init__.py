"""MongoDB adapter for the filter engine."""

from filter_engine.adapters.mongodb.query_translator import MongoQueryTranslator
from filter_engine.adapters.mongodb.repository import MongoEntityRepository

__all__ = ["MongoQueryTranslator", "MongoEntityRepository"]
