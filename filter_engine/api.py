"""
FastAPI REST API for the CRM filter engine.

Exposes the field/operator catalog, filter validation, compilation and
shareable-link encoding, and relevance-ranked multi-entity search.
"""

import logging
import math
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from filter_engine.adapters.memory import MemoryEntityRepository
from filter_engine.adapters.mongodb import MongoEntityRepository
from filter_engine.catalog import ENTITY_FIELDS, fields_for, operators_for, operators_for_field
from filter_engine.core.interfaces import IEntityRepository
from filter_engine.core.models import FieldType, FilterConfig, FilterConfigurationError, Pagination, SortOrder
from filter_engine.query import (
    compile_filters,
    check_filters,
    decode_filters,
    decode_filters_strict,
    describe_filters,
    encode_filters,
    predicate_to_dict,
    restrict,
    search_predicate,
    to_query_params,
    validate_filters,
)
from filter_engine.search import ENTITY_SEARCH_SPECS, SearchOrchestrator, SearchResponse, parse_entity_types

load_dotenv()

logger = logging.getLogger(__name__)

# Default configuration from environment
DEFAULT_MONGO_URI = os.getenv("MONGO_URI", "")
DEFAULT_DATABASE = os.getenv("MONGO_DATABASE", "crm")
SEARCH_DEFAULT_LIMIT = int(os.getenv("SEARCH_DEFAULT_LIMIT", "20"))
SEARCH_MAX_LIMIT = int(os.getenv("SEARCH_MAX_LIMIT", "50"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

app = FastAPI(
    title="CRM Filter Engine API",
    description="Structured filters, shareable filter links and multi-entity search",
    version="1.0.0",
)


class FilterRequest(BaseModel):
    """A filter config targeted at one entity."""
    entity: str = Field(..., description="Entity name, e.g. 'companies'")
    config: FilterConfig


class ApplyRequest(FilterRequest):
    """Filter config plus optional free-text search, ordering and paging."""
    search: Optional[str] = Field(None, max_length=100, description="Free-text search over the entity's search fields")
    sort: Optional[SortOrder] = None
    pagination: Pagination = Field(default_factory=Pagination)


@lru_cache(maxsize=1)
def get_repositories() -> Dict[str, IEntityRepository]:
    """Create or get cached repositories, one per entity."""
    if DEFAULT_MONGO_URI:
        return MongoEntityRepository.for_entities(DEFAULT_MONGO_URI, DEFAULT_DATABASE, ENTITY_FIELDS)
    logger.info("MONGO_URI not set; serving from empty in-memory repositories")
    return {entity: MemoryEntityRepository() for entity in ENTITY_FIELDS}


def _bad_request(message: str, errors: Optional[List[str]] = None) -> HTTPException:
    return HTTPException(status_code=400, detail={"message": message, "errors": errors or []})


def _require_entity(entity: str) -> None:
    if entity not in ENTITY_FIELDS:
        raise _bad_request("Invalid entity type", [f"Unknown entity '{entity}'"])


@app.get("/search", response_model=SearchResponse)
async def search(
    q: str = Query(..., min_length=1, max_length=100, description="Search query"),
    entities: Optional[str] = Query(None, description="Comma-separated entity types"),
    limit: int = Query(SEARCH_DEFAULT_LIMIT, ge=1, le=SEARCH_MAX_LIMIT),
    include_related: bool = Query(False, alias="includeRelated"),
    repositories: Dict[str, IEntityRepository] = Depends(get_repositories),
):
    """
    Global search across companies, contacts, deals and activities.

    Returns one ranked bucket per entity type; entity types whose repository
    failed are listed under ``errors``.
    """
    entity_types = parse_entity_types(entities)
    if not entity_types:
        raise _bad_request("At least one valid entity type must be specified")

    orchestrator = SearchOrchestrator(repositories)
    return await orchestrator.search(q, entity_types, limit=limit, include_related=include_related)


@app.get("/filter/config")
async def filter_config(entity: Optional[str] = Query(None)) -> Dict[str, Any]:
    """Fields and applicable operators for the filter builder UI."""
    if entity is not None:
        _require_entity(entity)
    entities = [entity] if entity else list(ENTITY_FIELDS)

    config = {}
    for name in entities:
        fields = fields_for(name)
        config[name] = {
            "fields": [f.model_dump(mode="json", by_alias=True, exclude_none=True) for f in fields],
            "operators": {f.key: [spec.operator.value for spec in operators_for_field(f)] for f in fields},
        }

    return {
        "config": config,
        "operators": {
            t.value: [spec.model_dump(mode="json", by_alias=True) for spec in operators_for(t)]
            for t in FieldType
            if t is not FieldType.RELATIONSHIP
        },
    }


@app.post("/filter/validate")
async def validate(request: FilterRequest) -> Dict[str, Any]:
    """Structural and type checks; findings are returned, never raised."""
    _require_entity(request.entity)
    result = validate_filters(request.config)
    errors = result.errors + check_filters(request.config, request.entity)
    return {"isValid": not errors, "errors": errors}


@app.post("/filter/compile")
async def compile_config(request: FilterRequest) -> Dict[str, Any]:
    """Compile a config into its predicate tree."""
    _require_entity(request.entity)
    try:
        predicate = compile_filters(request.config, request.entity)
    except FilterConfigurationError as e:
        raise _bad_request("Invalid filter configuration", e.errors)

    return {
        "entity": request.entity,
        "predicate": predicate_to_dict(predicate),
        "description": describe_filters(request.config, fields_for(request.entity)),
    }


@app.post("/filter/encode")
async def encode(config: FilterConfig) -> Dict[str, Any]:
    """Encode a config as a shareable ``filters`` token."""
    return {"token": encode_filters(config), "params": to_query_params(config)}


@app.get("/filter/decode")
async def decode(
    filters: Optional[str] = Query(None, description="Encoded filter token"),
    strict: bool = Query(False, description="Report undecodable tokens instead of resetting"),
) -> Dict[str, Any]:
    """Decode a ``filters`` token back into a config."""
    if strict:
        result = decode_filters_strict(filters)
        if not result.ok:
            raise _bad_request("Invalid filter token", [result.error])
        config = result.config
    else:
        config = decode_filters(filters)
    return config.model_dump(mode="json", by_alias=True)


@app.post("/filter/apply")
async def apply(
    request: ApplyRequest,
    repositories: Dict[str, IEntityRepository] = Depends(get_repositories),
) -> Dict[str, Any]:
    """
    Compile a config and run it against the entity's repository.

    An optional free-text ``search`` narrows the filtered records further;
    results are ordered by ``sort`` and returned one page at a time.
    """
    _require_entity(request.entity)
    try:
        predicate = compile_filters(request.config, request.entity)
    except FilterConfigurationError as e:
        raise _bad_request("Invalid filter configuration", e.errors)

    if request.search:
        predicate = restrict(predicate, search_predicate(request.search, ENTITY_SEARCH_SPECS[request.entity].match_fields))

    repository = repositories[request.entity]
    page = request.pagination
    records = await repository.filter(predicate, limit=page.limit, offset=page.offset, sort=request.sort)
    total = await repository.count(predicate)

    return {
        "entity": request.entity,
        "count": len(records),
        "records": records,
        "meta": {
            "page": page.page,
            "limit": page.limit,
            "total": total,
            "totalPages": math.ceil(total / page.limit),
        },
    }


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    port = int(os.getenv("API_PORT", "8000"))
    host = os.getenv("API_HOST", "0.0.0.0")

    uvicorn.run(app, host=host, port=port)
