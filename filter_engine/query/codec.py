"""
Compact codec for shareable filter links.

A config is pruned the same way the compiler prunes it, compressed to short
keys, and carried as an unpadded URL-safe base64 token.
"""

import base64
import binascii
import hashlib
import json
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel

from filter_engine.core.models import FilterConfig, new_config

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class DecodeResult(BaseModel):
    """Outcome of a strict decode."""
    ok: bool
    config: Optional[FilterConfig] = None
    error: Optional[str] = None


def _compress(config: FilterConfig) -> Dict[str, Any]:
    groups = []
    for group in config.groups:
        conditions = [
            {
                "id": condition.id,
                "f": condition.field,
                "o": condition.operator.value,
                "v": condition.value,
                "l": condition.logical_operator.value,
            }
            for condition in group.conditions
            if condition.is_complete
        ]
        if conditions:
            groups.append({"id": group.id, "c": conditions, "l": group.logical_operator.value})

    return {"v": SCHEMA_VERSION, "g": groups, "n": config.name, "p": config.is_public}


def _expand(compressed: Dict[str, Any]) -> FilterConfig:
    return FilterConfig(
        groups=[
            {
                "id": group["id"],
                "conditions": [
                    {
                        "id": condition["id"],
                        "field": condition["f"],
                        "operator": condition["o"],
                        "value": condition.get("v"),
                        "logical_operator": condition.get("l"),
                    }
                    for condition in group.get("c") or []
                ],
                "logical_operator": group.get("l"),
            }
            for group in compressed.get("g") or []
        ],
        name=compressed.get("n"),
        is_public=compressed.get("p"),
    )


def encode_filters(config: FilterConfig) -> str:
    """
    Encode a config as a URL-safe token.

    Conditions missing a field or operator are dropped, then groups left
    without conditions.
    """
    payload = json.dumps(_compress(config), separators=(",", ":"), ensure_ascii=False)
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")


def decode_filters_strict(token: Optional[str]) -> DecodeResult:
    """
    Decode a token, reporting failures instead of hiding them.

    An absent token is not a failure: it decodes to a fresh empty config.
    """
    if not token:
        return DecodeResult(ok=True, config=new_config())

    try:
        padded = token + "=" * (-len(token) % 4)
        data = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
        if not isinstance(data, dict):
            raise ValueError("payload is not an object")
        version = data.get("v")
        if version != SCHEMA_VERSION:
            raise ValueError(f"unsupported schema version {version!r}")
        config = _expand(data)
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError, AttributeError, RecursionError) as e:
        # ValidationError and JSONDecodeError are ValueErrors; deep nesting exhausts the parser stack
        return DecodeResult(ok=False, error=f"Invalid filter token: {e}")

    return DecodeResult(ok=True, config=config)


def decode_filters(token: Optional[str]) -> FilterConfig:
    """
    Decode a token, falling back to a fresh empty config on any failure.
    """
    result = decode_filters_strict(token)
    if not result.ok:
        logger.warning("Discarding undecodable filter token: %s", result.error)
        return new_config()
    return result.config


def has_valid_conditions(config: FilterConfig) -> bool:
    """True when at least one condition has both field and operator."""
    return any(condition.is_complete for group in config.groups for condition in group.conditions)


def filter_hash(config: FilterConfig) -> str:
    """Stable 16-character key for caching results of a config."""
    canonical = json.dumps(_compress(config), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def to_query_params(config: FilterConfig) -> Dict[str, str]:
    """Query parameters carrying a config, or nothing when no condition is usable."""
    if not has_valid_conditions(config):
        return {}
    return {"filters": encode_filters(config), "filterHash": filter_hash(config)}
