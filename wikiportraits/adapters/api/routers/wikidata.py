# wikiportraits/adapters/api/routers/wikidata.py
import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, status

from wikiportraits.adapters.api.dependencies import (
    CurrentUser,
    domain_http_error,
    read_limit,
    unexpected_http_error,
    write_limit,
)
from wikiportraits.adapters.api.schemas import CreateClaimRequest, CreateEntitiesRequest, CreateEntityRequest
from wikiportraits.core.domain.exceptions import DomainError
from wikiportraits.core.ports.wikidata_gateway import IWikidataGateway
from wikiportraits.core.use_cases import CreateClaim, CreateEntity, GetEntitySummary, SearchArtists, SearchWikidata
from wikiportraits.shared.container import Container

logger = structlog.get_logger()

router = APIRouter(prefix="/wikidata", tags=["Wikidata"])


# --- Reads ---


@router.get("/get-entity", dependencies=[read_limit("wikidata-get-entity")])
@inject
async def get_entity(
    id: str = Query(...),
    use_case: GetEntitySummary = Depends(Provide[Container.get_entity_summary_use_case]),
):
    try:
        return await use_case.execute(id)
    except DomainError as e:
        raise domain_http_error(e, "wikidata_get_entity")
    except Exception as e:
        raise unexpected_http_error(e, "wikidata_get_entity", "Failed to fetch entity")


@router.get("/search", dependencies=[read_limit("wikidata-search")])
@inject
async def search(
    q: str = Query(""),
    limit: int = Query(10, ge=1),
    use_case: SearchWikidata = Depends(Provide[Container.search_wikidata_use_case]),
):
    try:
        return await use_case.execute(q, limit=limit)
    except DomainError as e:
        raise domain_http_error(e, "wikidata_search")
    except Exception as e:
        raise unexpected_http_error(e, "wikidata_search", "Search failed")


@router.get("/artist-search", dependencies=[read_limit("wikidata-artist-search")])
@inject
async def artist_search(
    q: str = Query(""),
    lang: str = Query("en"),
    limit: int = Query(10, ge=1, le=50),
    use_case: SearchArtists = Depends(Provide[Container.search_artists_use_case]),
):
    try:
        return await use_case.execute(q, language=lang, limit=limit)
    except DomainError as e:
        raise domain_http_error(e, "artist_search")
    except Exception as e:
        raise unexpected_http_error(e, "artist_search", "Failed to search Wikidata for artists")


@router.get("/get-claim", dependencies=[read_limit("wikidata-get-claim")])
@inject
async def get_claim(
    entityId: str = Query(""),
    propertyId: str = Query(""),
    wikidata: IWikidataGateway = Depends(Provide[Container.wikidata_gateway]),
):
    if not entityId or not propertyId:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required parameters")
    try:
        return await wikidata.get_claims(entityId, propertyId)
    except DomainError as e:
        raise domain_http_error(e, "wikidata_get_claim")
    except Exception as e:
        raise unexpected_http_error(e, "wikidata_get_claim", "Failed to fetch claim")


# --- Writes ---


@router.post("/create-claim", dependencies=[write_limit("wikidata-create-claim")])
@inject
async def create_claim(
    body: CreateClaimRequest,
    user: CurrentUser,
    use_case: CreateClaim = Depends(Provide[Container.create_claim_use_case]),
):
    try:
        return await use_case.execute(user, body.entityId, body.propertyId, body.value)
    except DomainError as e:
        raise domain_http_error(e, "create_claim")
    except Exception as e:
        raise unexpected_http_error(e, "create_claim", "Failed to create claim")


@router.post("/create-entity")
@inject
async def create_entity(
    body: CreateEntityRequest,
    user: CurrentUser,
    use_case: CreateEntity = Depends(Provide[Container.create_entity_use_case]),
):
    """Creates one item, from a typed `entity` or from raw `entityData`."""
    if body.entity is None and not body.entityData:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Entity data is required")
    try:
        if body.entity is not None:
            return await use_case.execute(user, body.entity)
        return await use_case.execute_raw(user, body.entityData)
    except DomainError as e:
        raise domain_http_error(e, "create_entity")
    except Exception as e:
        raise unexpected_http_error(e, "create_entity", "Failed to create entity")


@router.patch("/create-entity")
@inject
async def create_entities(
    body: CreateEntitiesRequest,
    user: CurrentUser,
    use_case: CreateEntity = Depends(Provide[Container.create_entity_use_case]),
):
    """Creates several items in one go; failures are reported per item."""
    try:
        return await use_case.execute_batch(user, body.entities)
    except DomainError as e:
        raise domain_http_error(e, "create_entities")
    except Exception as e:
        raise unexpected_http_error(e, "create_entities", "Failed to create entities")
