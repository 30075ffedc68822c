"""
Helpers for reading plain dictionary records.
"""

from datetime import date, datetime
from typing import Any, Dict, Tuple


def resolve_path(record: Dict[str, Any], path: str) -> Any:
    """Read a dotted path such as ``company.name`` or ``_count.deals``."""
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def sort_key(value: Any) -> Tuple[int, Any]:
    """
    Total ordering key for values of mixed types.

    Numbers sort before strings (case-insensitive), then dates, booleans and
    anything else by its text form. Callers place ``None`` themselves.
    """
    if isinstance(value, bool):
        return (3, value)
    if isinstance(value, (int, float)):
        return (0, value)
    if isinstance(value, str):
        return (1, value.casefold())
    if isinstance(value, (date, datetime)):
        return (2, value.isoformat())
    return (4, str(value))
