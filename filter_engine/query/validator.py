"""
Structural validation of filter configs.

Findings are returned as data; callers decide whether to block a save or apply.
"""

from typing import List

from filter_engine.core.models import FilterConfig, ValidationResult


def validate_filters(config: FilterConfig) -> ValidationResult:
    """
    Check that a config has groups, conditions, fields and operators.

    Every violation is collected; the check never raises.

    Args:
        config: Filter config to inspect

    Returns:
        ValidationResult with one message per violation
    """
    errors: List[str] = []

    if not config.groups:
        errors.append("At least one filter group is required")
        return ValidationResult(is_valid=False, errors=errors)

    for group_index, group in enumerate(config.groups, start=1):
        if not group.conditions:
            errors.append(f"Group {group_index} must have at least one condition")
            continue

        for condition_index, condition in enumerate(group.conditions, start=1):
            location = f"Group {group_index}, Condition {condition_index}"
            if not condition.field:
                errors.append(f"{location}: Field is required")
            if condition.operator is None:
                errors.append(f"{location}: Operator is required")

    return ValidationResult(is_valid=not errors, errors=errors)
