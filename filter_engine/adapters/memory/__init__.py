"""In-memory adapter for the filter engine."""

from filter_engine.adapters.memory.evaluator import PredicateEvaluator
from filter_engine.adapters.memory.repository import MemoryEntityRepository

__all__ = ["PredicateEvaluator", "MemoryEntityRepository"]
