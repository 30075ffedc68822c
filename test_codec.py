"""
Tests for the compact filter codec.
"""

import base64
import json

from filter_engine.core.models import FilterCondition, FilterConfig, FilterGroup, LogicalOperator
from filter_engine.query import (
    decode_filters,
    decode_filters_strict,
    encode_filters,
    filter_hash,
    has_valid_conditions,
    to_query_params,
)


def _full_config():
    return FilterConfig(
        groups=[
            FilterGroup(id="g1", logical_operator="OR", conditions=[
                FilterCondition(id="c1", field="status", operator="equals", value="ACTIVE", logical_operator="OR"),
                FilterCondition(id="c2", field="_count.deals", operator="between", value=[1, 5.5]),
            ]),
            FilterGroup(id="g2", conditions=[
                FilterCondition(id="c3", field="createdAt", operator="is_this_week", value=None),
                FilterCondition(id="c4", field="isPrimary", operator="is_true", value=True),
            ]),
        ],
        name="Hot accounts",
        is_public=True,
    )


def _raw_token(payload) -> str:
    return base64.urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")


def test_round_trip_preserves_complete_config():
    config = _full_config()
    assert decode_filters(encode_filters(config)) == config


def test_single_condition_round_trip():
    config = FilterConfig(groups=[
        FilterGroup(id="g1", conditions=[
            FilterCondition(id="c1", field="status", operator="equals", value="ACTIVE"),
        ]),
    ])
    decoded = decode_filters(encode_filters(config))

    condition = decoded.groups[0].conditions[0]
    assert (condition.field, condition.operator.value, condition.value) == ("status", "equals", "ACTIVE")
    assert condition.logical_operator is LogicalOperator.AND
    assert decoded.name is None
    assert decoded.is_public is None


def test_incomplete_conditions_and_empty_groups_are_dropped():
    config = FilterConfig(groups=[
        FilterGroup(id="g1", conditions=[
            FilterCondition(id="c1", field="", operator="equals", value="x"),
            FilterCondition(id="c2", field="name", operator="contains", value="acme"),
        ]),
        FilterGroup(id="g2", conditions=[
            FilterCondition(id="c3", field="name", operator=None, value="x"),
        ]),
    ])
    decoded = decode_filters(encode_filters(config))

    assert [g.id for g in decoded.groups] == ["g1"]
    assert [c.id for c in decoded.groups[0].conditions] == ["c2"]


def test_token_is_url_safe():
    token = encode_filters(FilterConfig(groups=[
        FilterGroup(id="g1", conditions=[
            FilterCondition(id="c1", field="name", operator="contains", value="??>>~~ üñí"),
        ]),
    ]))
    assert not set(token) & set("+/= ")


def test_corrupted_token_falls_back_to_empty_config():
    config = decode_filters("%%%not-a-token")
    assert len(config.groups) == 1
    assert config.groups[0].conditions[0].field == ""


def test_strict_decode_reports_failures():
    result = decode_filters_strict("bm90IGpzb24")  # "not json"
    assert result.ok is False
    assert result.config is None
    assert result.error.startswith("Invalid filter token")


def test_strict_decode_rejects_foreign_payloads():
    assert not decode_filters_strict(_raw_token([1, 2, 3])).ok
    assert not decode_filters_strict(_raw_token({"v": 1, "g": [{"c": [{"f": "name"}]}]})).ok
    assert not decode_filters_strict(_raw_token({"v": 1, "g": [{"id": "g", "c": [
        {"id": "c", "f": "name", "o": "resembles", "v": "x"},
    ]}]})).ok


def test_strict_decode_rejects_other_schema_versions():
    token = _raw_token({"v": 2, "g": []})
    result = decode_filters_strict(token)
    assert not result.ok
    assert "version" in result.error


def test_absent_token_is_a_fresh_config():
    result = decode_filters_strict("")
    assert result.ok
    assert len(result.config.groups) == 1


def test_query_params_only_for_usable_configs():
    assert to_query_params(FilterConfig(groups=[])) == {}

    config = _full_config()
    params = to_query_params(config)
    assert has_valid_conditions(config)
    assert decode_filters(params["filters"]) == config
    assert params["filterHash"] == filter_hash(config)


def test_filter_hash_is_stable_and_discriminating():
    config = _full_config()
    assert filter_hash(config) == filter_hash(_full_config())
    assert len(filter_hash(config)) == 16

    changed = _full_config()
    changed.groups[0].conditions[0].value = "INACTIVE"
    assert filter_hash(changed) != filter_hash(config)


def test_deeply_nested_payload_is_rejected():
    token = base64.urlsafe_b64encode(("[" * 200000 + "]" * 200000).encode()).decode().rstrip("=")

    result = decode_filters_strict(token)
    assert not result.ok
    assert result.error.startswith("Invalid filter token")

    config = decode_filters(token)
    assert len(config.groups) == 1
    assert config.groups[0].conditions[0].field == ""
