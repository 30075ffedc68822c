"""
Human-readable summaries of filter configs.
"""

from typing import List, Sequence

from filter_engine.catalog.operators import get_operator_spec
from filter_engine.core.models import FilterConfig, FilterField


def describe_filters(config: FilterConfig, fields: Sequence[FilterField]) -> str:
    """
    Render a config as a sentence, e.g. ``Status equals "ACTIVE" AND (...)``.

    Args:
        config: Filter config to describe
        fields: Field registry used to look up labels

    Returns:
        Description string, or "No filters applied"
    """
    labels = {f.key: f.label for f in fields}
    parts: List[str] = []
    connector = None

    for group in config.groups:
        conditions = [c for c in group.conditions if c.is_complete]
        if not conditions:
            continue

        if connector is not None:
            parts.append(connector.value)
        connector = group.logical_operator

        rendered = []
        previous = None
        for condition in conditions:
            text = f"{labels.get(condition.field, condition.field)} {get_operator_spec(condition.operator).label}"
            if isinstance(condition.value, list):
                if condition.value:
                    text += " " + " and ".join(str(v) for v in condition.value)
            elif condition.value not in (None, ""):
                text += f' "{condition.value}"'
            if previous is not None:
                text = f"{previous.logical_operator.value} {text}"
            rendered.append(text)
            previous = condition

        if len(rendered) > 1:
            parts.append(f"({' '.join(rendered)})")
        else:
            parts.append(rendered[0])

    return " ".join(parts) if parts else "No filters applied"
