"""
Tests for human-readable filter descriptions.
"""

from filter_engine.catalog import fields_for
from filter_engine.core.models import FilterCondition, FilterConfig, FilterGroup
from filter_engine.query import describe_filters


def test_operators_use_catalog_labels():
    config = FilterConfig(groups=[
        FilterGroup(id="g1", logical_operator="OR", conditions=[
            FilterCondition(id="c1", field="status", operator="not_equals", value="ACTIVE", logical_operator="OR"),
            FilterCondition(id="c2", field="_count.deals", operator="between", value=[1, 5]),
        ]),
        FilterGroup(id="g2", conditions=[
            FilterCondition(id="c3", field="createdAt", operator="is_this_week", value=None),
        ]),
    ])

    assert describe_filters(config, fields_for("companies")) == (
        '(Status does not equal "ACTIVE" OR Number of Deals between 1 and 5) OR Created Date is this week'
    )


def test_nothing_to_describe():
    config = FilterConfig(groups=[
        FilterGroup(id="g1", conditions=[FilterCondition(id="c1", field="", operator="equals", value="x")]),
    ])
    assert describe_filters(config, fields_for("companies")) == "No filters applied"
