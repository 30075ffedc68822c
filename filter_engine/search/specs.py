"""
Per-entity search configuration.

Which fields the repository substring-matches, which fields feed the
relevance score, how ties are broken and which keys hold related previews.
"""

from typing import Dict, List

from pydantic import BaseModel, Field


class SortKey(BaseModel):
    """Secondary ordering applied among equal scores."""
    field: str
    descending: bool = False


class EntitySearchSpec(BaseModel):
    """Search behaviour of one entity type."""
    entity_type: str
    match_fields: List[str]
    score_fields: List[str]
    tie_breakers: List[SortKey] = Field(default_factory=list)
    related_keys: List[str] = Field(default_factory=list)


ENTITY_SEARCH_SPECS: Dict[str, EntitySearchSpec] = {
    "companies": EntitySearchSpec(
        entity_type="company",
        match_fields=["name", "industry", "website", "city", "state", "country"],
        score_fields=["name", "industry", "website", "city"],
        tie_breakers=[SortKey(field="name")],
        related_keys=["contacts", "deals"],
    ),
    "contacts": EntitySearchSpec(
        entity_type="contact",
        match_fields=["firstName", "lastName", "email", "phone", "mobilePhone", "jobTitle", "department"],
        score_fields=["firstName", "lastName", "email", "jobTitle", "company.name"],
        tie_breakers=[SortKey(field="lastName"), SortKey(field="firstName")],
        related_keys=["deals"],
    ),
    "deals": EntitySearchSpec(
        entity_type="deal",
        match_fields=["title", "description", "source"],
        score_fields=["title", "description", "source", "company.name"],
        tie_breakers=[SortKey(field="value", descending=True)],
        related_keys=["activities"],
    ),
    "activities": EntitySearchSpec(
        entity_type="activity",
        match_fields=["subject", "description", "location"],
        score_fields=["subject", "description", "location", "company.name"],
        tie_breakers=[SortKey(field="createdAt", descending=True)],
    ),
}

SEARCHABLE_ENTITIES: List[str] = list(ENTITY_SEARCH_SPECS)
