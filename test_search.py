"""
Tests for relevance scoring and the multi-entity search orchestrator.
"""

import asyncio

import pytest

from filter_engine.adapters.memory import MemoryEntityRepository
from filter_engine.search import (
    ENTITY_SEARCH_SPECS,
    SearchOrchestrator,
    parse_entity_types,
    rank_records,
    score_relevance,
)


class FailingRepository:
    async def search(self, term, fields, limit, include_related=False):
        raise ConnectionError("database unavailable")

    async def filter(self, predicate, limit=100):
        raise ConnectionError("database unavailable")


def _repositories():
    return {
        "companies": MemoryEntityRepository([
            {"id": "co1", "name": "Acme Corp", "industry": "Manufacturing", "contacts": [{"id": "ct1"}]},
            {"id": "co2", "name": "Acme", "industry": "Retail", "deals": [{"id": "d1"}]},
            {"id": "co3", "name": "Globex", "industry": "Energy"},
            {"id": "co4", "name": "Acme Old", "isDeleted": True},
        ]),
        "contacts": MemoryEntityRepository([
            {"id": "ct1", "firstName": "Wile", "lastName": "Coyote", "email": "wile@acme.com"},
            {"id": "ct2", "firstName": "Road", "lastName": "Runner", "email": "road@example.com"},
        ]),
        "deals": MemoryEntityRepository([
            {"id": "d1", "title": "Acme rockets", "value": 1000},
            {"id": "d2", "title": "Acme anvils", "value": 5000},
        ]),
        "activities": MemoryEntityRepository([]),
    }


def test_score_tiers():
    assert score_relevance("acme", ["Acme"]) == 100
    assert score_relevance("acme", ["Acme Corp"]) == 50
    assert score_relevance("acme", ["The Acme Corp"]) == 25
    assert score_relevance("acme", ["Globex"]) == 0


def test_scores_add_up_across_fields():
    assert score_relevance("tech", ["Biotech Labs", "Fintech"]) == 50
    assert score_relevance("acme", ["Acme", "Acme Corp", None]) == 150


def test_null_values_are_skipped():
    assert score_relevance("acme", [None, None]) == 0


def test_exact_match_ranks_before_prefix_match():
    response = asyncio.run(SearchOrchestrator(_repositories()).search("Acme", ["companies"]))

    bucket = response.results["companies"]
    assert [r.record["name"] for r in bucket] == ["Acme", "Acme Corp"]
    assert [r.relevance_score for r in bucket] == [100, 50]
    assert all(r.entity_type == "company" for r in bucket)


def test_equal_scores_fall_back_to_tie_breakers():
    companies = rank_records("zz", [{"name": "beta"}, {"name": "Alpha"}, {"name": None}], ENTITY_SEARCH_SPECS["companies"])
    assert [r.record["name"] for r in companies] == ["Alpha", "beta", None]

    contacts = rank_records("zz", [
        {"firstName": "Bo", "lastName": "Smith"},
        {"firstName": "Al", "lastName": "Smith"},
        {"firstName": "Cy", "lastName": "Adams"},
    ], ENTITY_SEARCH_SPECS["contacts"])
    assert [(r.record["lastName"], r.record["firstName"]) for r in contacts] == [
        ("Adams", "Cy"), ("Smith", "Al"), ("Smith", "Bo"),
    ]

    deals = rank_records("acme", [{"title": "Acme", "value": 10}, {"title": "Acme", "value": 99}], ENTITY_SEARCH_SPECS["deals"])
    assert [r.record["value"] for r in deals] == [99, 10]


def test_contacts_score_through_company_name():
    ranked = rank_records("acme", [
        {"firstName": "A", "lastName": "B", "company": {"name": "Acme"}},
        {"firstName": "C", "lastName": "D"},
    ], ENTITY_SEARCH_SPECS["contacts"])
    assert [r.relevance_score for r in ranked] == [100, 0]


def test_all_entities_by_default():
    response = asyncio.run(SearchOrchestrator(_repositories()).search("acme"))

    assert response.entities == ["companies", "contacts", "deals", "activities"]
    assert set(response.results) == {"companies", "contacts", "deals", "activities"}
    assert response.results["activities"] == []
    assert response.total_results == 2 + 1 + 2
    assert response.errors == {}
    assert response.search_time >= 0


def test_deleted_records_are_not_found():
    response = asyncio.run(SearchOrchestrator(_repositories()).search("Acme Old", ["companies"]))
    assert response.results["companies"] == []


def test_failing_entity_does_not_sink_the_search():
    repositories = _repositories()
    repositories["contacts"] = FailingRepository()

    response = asyncio.run(SearchOrchestrator(repositories).search("acme", ["companies", "contacts"]))

    assert "contacts" not in response.results
    assert "database unavailable" in response.errors["contacts"]
    assert len(response.results["companies"]) == 2
    assert response.total_results == 2


def test_missing_repository_is_reported():
    repositories = _repositories()
    del repositories["deals"]

    response = asyncio.run(SearchOrchestrator(repositories).search("acme", ["deals"]))
    assert response.results == {}
    assert "deals" in response.errors


def test_unknown_entities_are_ignored():
    response = asyncio.run(SearchOrchestrator(_repositories()).search("acme", ["deals", "widgets", "deals"]))
    assert response.entities == ["deals"]


def test_no_valid_entity_is_an_error():
    with pytest.raises(ValueError, match="At least one valid entity type"):
        asyncio.run(SearchOrchestrator(_repositories()).search("acme", ["widgets"]))


def test_limit_must_be_positive():
    with pytest.raises(ValueError):
        asyncio.run(SearchOrchestrator(_repositories()).search("acme", limit=0))


def test_limit_caps_each_bucket():
    response = asyncio.run(SearchOrchestrator(_repositories()).search("acme", ["companies", "deals"], limit=1))
    assert len(response.results["companies"]) == 1
    assert len(response.results["deals"]) == 1


def test_related_previews_are_stripped_unless_requested():
    orchestrator = SearchOrchestrator(_repositories())

    plain = asyncio.run(orchestrator.search("acme", ["companies"]))
    assert all("contacts" not in r.record and "deals" not in r.record for r in plain.results["companies"])

    related = asyncio.run(orchestrator.search("acme", ["companies"], include_related=True))
    records = {r.record["id"]: r.record for r in related.results["companies"]}
    assert records["co1"]["contacts"] == [{"id": "ct1"}]
    assert records["co2"]["deals"] == [{"id": "d1"}]


def test_response_serializes_with_camel_case_keys():
    response = asyncio.run(SearchOrchestrator(_repositories()).search("acme", ["companies"]))
    payload = response.model_dump(by_alias=True)

    assert {"totalResults", "searchTime"} <= set(payload)
    assert payload["results"]["companies"][0]["relevanceScore"] == 100
    assert payload["results"]["companies"][0]["entityType"] == "company"


def test_parse_entity_types():
    assert parse_entity_types(None) == ["companies", "contacts", "deals", "activities"]
    assert parse_entity_types("") == ["companies", "contacts", "deals", "activities"]
    assert parse_entity_types(" Deals,contacts,deals,bogus ") == ["deals", "contacts"]
    assert parse_entity_types("bogus") == []


class StaticRepository:
    def __init__(self, records):
        self.records = records

    async def search(self, term, fields, limit, include_related=False):
        return list(self.records)

    async def filter(self, predicate, limit=100, offset=0, sort=None):
        return list(self.records)

    async def count(self, predicate):
        return len(self.records)


def test_mixed_type_tie_breakers_still_rank():
    repositories = _repositories()
    repositories["deals"] = MemoryEntityRepository([
        {"id": "d1", "title": "Acme", "value": "1000"},
        {"id": "d2", "title": "Acme", "value": 500},
        {"id": "d3", "title": "Acme", "value": None},
    ])

    response = asyncio.run(SearchOrchestrator(repositories).search("acme", ["companies", "deals"]))

    assert response.errors == {}
    assert [r.record["id"] for r in response.results["deals"]] == ["d1", "d2", "d3"]
    assert len(response.results["companies"]) == 2


def test_failure_while_ranking_is_isolated():
    repositories = _repositories()
    repositories["deals"] = StaticRepository(["not a record"])

    response = asyncio.run(SearchOrchestrator(repositories).search("acme", ["companies", "deals"]))

    assert "deals" in response.errors
    assert "deals" not in response.results
    assert [r.record["name"] for r in response.results["companies"]] == ["Acme", "Acme Corp"]
