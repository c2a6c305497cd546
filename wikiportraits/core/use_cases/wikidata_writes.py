# wikiportraits/core/use_cases/wikidata_writes.py
from typing import Any, Dict, List

import structlog

from wikiportraits.core.domain import entity_builders
from wikiportraits.core.domain import wikidata as wd
from wikiportraits.core.domain.exceptions import DomainError, InvalidRequestError, UnexpectedResponseError
from wikiportraits.core.domain.models import CreatedEntity, PendingEntity, WikimediaCredentials
from wikiportraits.core.ports.wikidata_gateway import IWikidataGateway
from wikiportraits.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)


class CreateClaim:
    """
    Use Case: Adds one statement to a Wikidata item.
    Form values are converted first: YYYY-MM-DD on a time property becomes
    a day-precision time, "Q..." becomes an item reference.
    """

    def __init__(self, wikidata: IWikidataGateway):
        self.wikidata = wikidata

    async def execute(self, auth: WikimediaCredentials, entity_id: str, property_id: str, value: Any) -> Dict[str, Any]:
        with tracer.start_as_current_span("use_case.create_claim") as span:
            span.set_attribute("app.entity_id", entity_id or "")
            span.set_attribute("app.property_id", property_id or "")

            if not entity_id or not property_id or value in (None, ""):
                raise InvalidRequestError("entityId, propertyId and value are required")

            try:
                token = await self.wikidata.get_csrf_token(auth)
                result = await self.wikidata.create_claim(
                    auth, token, entity_id, property_id, entity_builders.format_claim_value(property_id, value)
                )
                logger.info("claim_created", entity_id=entity_id, property_id=property_id)
                return result

            except DomainError:
                raise
            except Exception as e:
                logger.error("claim_creation_failed", entity_id=entity_id, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected claim creation failure: {str(e)}")


class CreateEntity:
    """
    Use Case: Creates new Wikidata items.

    `execute` builds the item from a `PendingEntity` (band, band member or
    photographer). `execute_raw` sends ready-made Wikibase JSON.
    `execute_batch` creates several items one after the other and reports
    per-item success.
    """

    def __init__(self, wikidata: IWikidataGateway):
        self.wikidata = wikidata

    async def execute(self, auth: WikimediaCredentials, entity: PendingEntity) -> CreatedEntity:
        with tracer.start_as_current_span("use_case.create_entity") as span:
            span.set_attribute("app.entity_type", entity.type)

            data = entity_builders.build_entity(entity)
            logger.info("entity_creation_started", type=entity.type, name=entity.name, user=auth.username)

            try:
                created = await self._create(auth, data, f"Created {entity.type.replace('_', ' ')} via WikiPortraits")
                logger.info("entity_created", qid=created["id"], type=entity.type)
                return CreatedEntity(
                    wikidataId=created["id"],
                    entity=created,
                    message=entity_builders.creation_message(entity),
                    wikidataUrl=wd.entity_url(created["id"]),
                )

            except DomainError:
                raise
            except Exception as e:
                logger.error("entity_creation_failed", name=entity.name, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected entity creation failure: {str(e)}")

    async def execute_raw(self, auth: WikimediaCredentials, data: Dict[str, Any]) -> Dict[str, Any]:
        with tracer.start_as_current_span("use_case.create_entity_raw"):
            if not data:
                raise InvalidRequestError("Entity data is required")
            try:
                created = await self._create(auth, data, "Created item via WikiPortraits")
                logger.info("entity_created", qid=created["id"])
                return {
                    "success": True,
                    "entityId": created["id"],
                    "entity": created,
                    "message": "Wikidata entity created successfully",
                }
            except DomainError:
                raise
            except Exception as e:
                logger.error("entity_creation_failed", error=str(e), exc_info=True)
                raise DomainError(f"Unexpected entity creation failure: {str(e)}")

    async def execute_batch(self, auth: WikimediaCredentials, entities: List[PendingEntity]) -> Dict[str, Any]:
        if not entities:
            raise InvalidRequestError("Entities array is required")

        results = []
        for entity in entities:
            entity_id = entity.data.get("id")
            try:
                created = await self.execute(auth, entity)
                results.append({"entityId": entity_id, **created.model_dump()})
            except DomainError as e:
                results.append({"entityId": entity_id, "success": False, "error": e.message})

        successful = sum(1 for r in results if r["success"])
        logger.info("entity_batch_finished", total=len(entities), successful=successful)
        return {
            "success": True,
            "results": results,
            "total": len(entities),
            "successful": successful,
            "failed": len(entities) - successful,
        }

    async def _create(self, auth: WikimediaCredentials, data: Dict[str, Any], summary: str) -> Dict[str, Any]:
        token = await self.wikidata.get_csrf_token(auth)
        created = await self.wikidata.create_entity(auth, token, data, summary)
        if not created or not created.get("id"):
            raise UnexpectedResponseError("Unexpected response format from Wikidata API")
        return created
