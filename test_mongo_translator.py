"""
Tests for the MongoDB query translator and repository.
"""

import asyncio
from datetime import date, datetime

from pymongo import DESCENDING

from filter_engine.adapters.mongodb import MongoEntityRepository, MongoQueryTranslator
from filter_engine.core.models import FilterCondition, FilterConfig, FilterGroup, SortOrder
from filter_engine.query import compile_filters, restrict, search_predicate

TODAY = date(2024, 5, 15)


def _translate(entity, *conditions, logical="AND"):
    config = FilterConfig(groups=[
        FilterGroup(id="g1", conditions=[
            FilterCondition(id=f"c{i}", field=field, operator=operator, value=value, logical_operator=logical)
            for i, (field, operator, value) in enumerate(conditions, 1)
        ]),
    ])
    return MongoQueryTranslator().translate(compile_filters(config, entity, today=TODAY))


class FakeCursor:
    def __init__(self, documents):
        self.documents = documents
        self.sorted_by = None
        self.skipped = 0

    def sort(self, key, direction):
        self.sorted_by = (key, direction)
        self.documents = sorted(self.documents, key=lambda d: d[key], reverse=direction == DESCENDING)
        return self

    def skip(self, n):
        self.skipped = n
        return self

    def limit(self, n):
        return iter(self.documents[self.skipped:self.skipped + n])


class FakeCollection:
    def __init__(self, documents):
        self.documents = documents
        self.queries = []

    def find(self, query):
        self.queries.append(query)
        self.cursor = FakeCursor([dict(d) for d in self.documents])
        return self.cursor

    def count_documents(self, query):
        self.queries.append(query)
        return len(self.documents)


def test_match_all_is_empty_filter():
    assert MongoQueryTranslator().translate(compile_filters(FilterConfig(groups=[]), "companies")) == {}


def test_text_operators_are_case_insensitive_regexes():
    assert _translate("companies", ("name", "equals", "Acme (US)")) == {
        "name": {"$regex": r"^Acme\ \(US\)$", "$options": "i"},
    }
    assert _translate("companies", ("name", "starts_with", "ac")) == {"name": {"$regex": "^ac", "$options": "i"}}
    assert _translate("companies", ("name", "not_contains", "x")) == {
        "name": {"$not": {"$regex": "x", "$options": "i"}},
    }


def test_is_empty_matches_missing_and_blank():
    assert _translate("companies", ("website", "is_empty", "")) == {
        "$or": [{"website": None}, {"website": {"$regex": r"^\s*$"}}],
    }


def test_number_ranges():
    assert _translate("deals", ("value", "greater_than", "1000")) == {"value": {"$gt": 1000.0}}
    assert _translate("deals", ("value", "between", [500, 100])) == {"value": {"$gte": 100.0, "$lte": 500.0}}
    assert _translate("deals", ("value", "not_between", [100, 500])) == {
        "$or": [{"value": {"$lt": 100.0}}, {"value": {"$gt": 500.0}}],
    }


def test_dates_cover_whole_days():
    assert _translate("companies", ("createdAt", "after", "2024-01-31")) == {
        "createdAt": {"$gte": datetime(2024, 2, 1)},
    }
    assert _translate("companies", ("createdAt", "date_is", "2024-03-01")) == {
        "createdAt": {"$gte": datetime(2024, 3, 1), "$lt": datetime(2024, 3, 2)},
    }
    assert _translate("companies", ("createdAt", "date_between", ["2024-01-01", "2024-01-31"])) == {
        "createdAt": {"$gte": datetime(2024, 1, 1), "$lt": datetime(2024, 2, 1)},
    }


def test_relative_dates_use_resolved_window():
    assert _translate("companies", ("createdAt", "is_this_week", None)) == {
        "createdAt": {"$gte": datetime(2024, 5, 13), "$lt": datetime(2024, 5, 20)},
    }


def test_booleans():
    assert _translate("contacts", ("isPrimary", "is_false", None)) == {"isPrimary": False}


def test_connectors_become_logical_operators():
    query = _translate("companies", ("status", "equals", "ACTIVE"), ("_count.deals", "less_than", 2), logical="OR")
    assert query == {"$or": [
        {"status": {"$regex": "^ACTIVE$", "$options": "i"}},
        {"_count.deals": {"$lt": 2.0}},
    ]}


def test_repository_filter_excludes_deleted_and_stringifies_ids():
    collection = FakeCollection([{"_id": 42, "name": "Acme"}, {"_id": 43, "name": "Acme Two"}])
    repository = MongoEntityRepository(collection)
    config = FilterConfig(groups=[
        FilterGroup(id="g1", conditions=[FilterCondition(id="c1", field="name", operator="contains", value="acme")]),
    ])

    records = asyncio.run(repository.filter(compile_filters(config, "companies"), limit=1))

    assert records == [{"_id": "42", "name": "Acme"}]
    assert collection.queries[0] == {"$and": [
        {"isDeleted": {"$ne": True}},
        {"name": {"$regex": "acme", "$options": "i"}},
    ]}


def test_repository_search_matches_any_field():
    collection = FakeCollection([])
    asyncio.run(MongoEntityRepository(collection).search("a.b", ["name", "city"], 10))

    assert collection.queries[0] == {
        "isDeleted": {"$ne": True},
        "$or": [
            {"name": {"$regex": r"a\.b", "$options": "i"}},
            {"city": {"$regex": r"a\.b", "$options": "i"}},
        ],
    }


def test_repository_filter_sorts_pages_and_counts():
    collection = FakeCollection([{"_id": i, "value": v} for i, v in enumerate([10, 30, 20])])
    repository = MongoEntityRepository(collection)
    match_all = compile_filters(FilterConfig(groups=[]), "deals")

    records = asyncio.run(repository.filter(match_all, limit=1, offset=1, sort=SortOrder(field="value", direction="desc")))

    assert records == [{"_id": "2", "value": 20}]
    assert collection.cursor.sorted_by == ("value", DESCENDING)
    assert asyncio.run(repository.count(match_all)) == 3
    assert collection.queries[-1] == {"$and": [{"isDeleted": {"$ne": True}}, {}]}


def test_free_text_search_is_anded_with_filters():
    config = FilterConfig(groups=[
        FilterGroup(id="g1", conditions=[FilterCondition(id="c1", field="status", operator="equals", value="ACTIVE")]),
    ])
    predicate = restrict(compile_filters(config, "companies"), search_predicate(" acme ", ["name", "city"]))

    assert MongoQueryTranslator().translate(predicate) == {"$and": [
        {"status": {"$regex": "^ACTIVE$", "$options": "i"}},
        {"$or": [
            {"name": {"$regex": "acme", "$options": "i"}},
            {"city": {"$regex": "acme", "$options": "i"}},
        ]},
    ]}


def test_blank_search_adds_nothing():
    match_all = compile_filters(FilterConfig(groups=[]), "companies")
    assert MongoQueryTranslator().translate(restrict(match_all, search_predicate("  ", ["name"]))) == {}


def test_entity_repositories_share_one_client(monkeypatch):
    created = []

    class FakeClient:
        def __init__(self, uri):
            created.append(uri)

        def __getitem__(self, database_name):
            return {entity: FakeCollection([]) for entity in ["companies", "contacts", "deals"]}

    monkeypatch.setattr("filter_engine.adapters.mongodb.repository.MongoClient", FakeClient)

    repositories = MongoEntityRepository.for_entities("mongodb://db:27017", "crm", ["companies", "contacts", "deals"])

    assert created == ["mongodb://db:27017"]
    assert list(repositories) == ["companies", "contacts", "deals"]
    assert all(isinstance(r.collection, FakeCollection) for r in repositories.values())
