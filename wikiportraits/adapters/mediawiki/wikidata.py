# wikiportraits/adapters/mediawiki/wikidata.py
import json
from typing import Any, Dict, List, Optional

import structlog

from wikiportraits.adapters.mediawiki.client import MediaWikiClient
from wikiportraits.core.domain.exceptions import UnexpectedResponseError
from wikiportraits.core.domain.models import WikimediaCredentials
from wikiportraits.shared.config import settings

logger = structlog.get_logger()

# wbgetentities accepts at most 50 ids per request
MAX_IDS_PER_REQUEST = 50


class WikidataAdapter:
    """Reads and writes Wikidata items through the Wikibase Action API modules."""

    def __init__(self, client: Optional[MediaWikiClient] = None):
        self.client = client or MediaWikiClient(settings.WIKIDATA_API_URL)

    async def search_entities(self, query: str, limit: int = 10, language: str = "en") -> List[Dict[str, Any]]:
        payload = await self.client.query({
            "action": "wbsearchentities",
            "search": query,
            "language": language,
            "uselang": language,
            "type": "item",
            "limit": limit,
        })
        return payload.get("search") or []

    async def get_entities(
        self,
        ids: List[str],
        props: str = "labels|descriptions|claims|aliases|sitelinks",
        languages: str = "en",
    ) -> Dict[str, Dict[str, Any]]:
        found: Dict[str, Dict[str, Any]] = {}
        unique_ids = list(dict.fromkeys(i for i in ids if i))

        for start in range(0, len(unique_ids), MAX_IDS_PER_REQUEST):
            chunk = unique_ids[start:start + MAX_IDS_PER_REQUEST]
            payload = await self.client.query({
                "action": "wbgetentities",
                "ids": "|".join(chunk),
                "props": props,
                "languages": languages,
            })
            for entity_id, entity in (payload.get("entities") or {}).items():
                if "missing" not in entity:
                    found[entity_id] = entity

        return found

    async def get_entity(self, entity_id: str) -> Optional[Dict[str, Any]]:
        entities = await self.get_entities([entity_id])
        return entities.get(entity_id)

    async def get_claims(self, entity_id: str, property_id: str) -> Dict[str, Any]:
        payload = await self.client.query({
            "action": "wbgetclaims",
            "entity": entity_id,
            "property": property_id,
        })
        return payload.get("claims") or {}

    async def search_by_statement(self, property_id: str, value: str, limit: int = 50) -> List[str]:
        payload = await self.client.query({
            "action": "query",
            "list": "search",
            "srsearch": f"haswbstatement:{property_id}={value}",
            "srnamespace": 0,
            "srlimit": limit,
        })
        hits = (payload.get("query") or {}).get("search") or []
        return [hit["title"] for hit in hits if hit.get("title")]

    async def get_csrf_token(self, auth: WikimediaCredentials) -> str:
        return await self.client.get_csrf_token(auth)

    async def create_claim(
        self,
        auth: WikimediaCredentials,
        token: str,
        entity_id: str,
        property_id: str,
        value: Any,
    ) -> Dict[str, Any]:
        payload = await self.client.post(auth, {
            "action": "wbcreateclaim",
            "entity": entity_id,
            "property": property_id,
            "snaktype": "value",
            "value": json.dumps(value),
            "token": token,
        })
        if not payload.get("claim"):
            raise UnexpectedResponseError("Unexpected response format from Wikidata API")
        return payload

    async def create_entity(
        self,
        auth: WikimediaCredentials,
        token: str,
        data: Dict[str, Any],
        summary: str,
    ) -> Dict[str, Any]:
        payload = await self.client.post(auth, {
            "action": "wbeditentity",
            "new": "item",
            "data": json.dumps(data),
            "summary": summary,
            "token": token,
        })
        entity = payload.get("entity") or {}
        logger.info("wikidata_entity_saved", qid=entity.get("id"))
        return entity

    async def health_check(self) -> bool:
        try:
            await self.client.query({"action": "query", "meta": "siteinfo"})
            return True
        except Exception as e:
            logger.error("wikidata_health_check_failed", error=str(e))
            return False
