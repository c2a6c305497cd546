# wikiportraits/core/ports/wikidata_gateway.py
from typing import Any, Dict, List, Optional, Protocol

from wikiportraits.core.domain.models import WikimediaCredentials


class IWikidataGateway(Protocol):
    """
    Port for the Wikidata Action API.
    Implementations:
    - WikidataAdapter (httpx, www.wikidata.org)
    """

    async def search_entities(self, query: str, limit: int = 10, language: str = "en") -> List[Dict[str, Any]]:
        """Raw `search` hits of wbsearchentities."""
        ...

    async def get_entities(
        self,
        ids: List[str],
        props: str = "labels|descriptions|claims|aliases|sitelinks",
        languages: str = "en",
    ) -> Dict[str, Dict[str, Any]]:
        """wbgetentities, keyed by id. Missing entities are left out."""
        ...

    async def get_entity(self, entity_id: str) -> Optional[Dict[str, Any]]:
        ...

    async def get_claims(self, entity_id: str, property_id: str) -> Dict[str, Any]:
        """The `claims` map of wbgetclaims."""
        ...

    async def search_by_statement(self, property_id: str, value: str, limit: int = 50) -> List[str]:
        """Ids of items carrying the statement `property_id = value` (haswbstatement search)."""
        ...

    async def get_csrf_token(self, auth: WikimediaCredentials) -> str:
        ...

    async def create_claim(
        self,
        auth: WikimediaCredentials,
        token: str,
        entity_id: str,
        property_id: str,
        value: Any,
    ) -> Dict[str, Any]:
        """wbcreateclaim with snaktype=value; `value` is already in datavalue form."""
        ...

    async def create_entity(
        self,
        auth: WikimediaCredentials,
        token: str,
        data: Dict[str, Any],
        summary: str,
    ) -> Dict[str, Any]:
        """wbeditentity new=item; returns the created `entity` object."""
        ...

    async def health_check(self) -> bool:
        ...
