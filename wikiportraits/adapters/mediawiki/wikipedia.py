# wikiportraits/adapters/mediawiki/wikipedia.py
import re
from typing import Any, Dict, List

import structlog

from wikiportraits.adapters.mediawiki.client import MediaWikiClient
from wikiportraits.core.domain.exceptions import InvalidRequestError, UnexpectedResponseError
from wikiportraits.core.domain.models import WikimediaCredentials
from wikiportraits.shared.config import settings

logger = structlog.get_logger()

LANGUAGE_CODE = re.compile(r"[a-z]{2,3}(-[a-z]+)*")


class WikipediaAdapter:
    """
    Any language edition of Wikipedia. One `MediaWikiClient` is kept per
    language so each edition gets its own circuit breaker.
    """

    def __init__(self):
        self._clients: Dict[str, MediaWikiClient] = {}

    def client(self, lang: str = "en") -> MediaWikiClient:
        # lang ends up in the API host name
        if not LANGUAGE_CODE.fullmatch(lang or ""):
            raise InvalidRequestError(f"Invalid Wikipedia language code: {lang!r}")
        if lang not in self._clients:
            self._clients[lang] = MediaWikiClient(settings.wikipedia_api_url(lang))
        return self._clients[lang]

    async def opensearch(self, query: str, limit: int = 10, lang: str = "en") -> List[Dict[str, str]]:
        payload = await self.client(lang).query({
            "action": "opensearch",
            "search": query,
            "limit": limit,
            "namespace": 0,
        })
        # [query, [titles], [descriptions], [urls]]
        if not isinstance(payload, list) or len(payload) < 4:
            raise UnexpectedResponseError("Unexpected opensearch response")
        _, titles, descriptions, urls = payload[:4]
        return [
            {
                "title": title,
                "description": descriptions[i] if i < len(descriptions) else "",
                "url": urls[i] if i < len(urls) else "",
            }
            for i, title in enumerate(titles)
        ]

    async def search_articles(self, query: str, lang: str = "en", limit: int = 10) -> List[Dict[str, Any]]:
        payload = await self.client(lang).query({
            "action": "query",
            "list": "search",
            "srsearch": query,
            "srlimit": limit,
        })
        return (payload.get("query") or {}).get("search") or []

    async def get_page_summaries(self, titles: List[str], lang: str = "en") -> Dict[str, Dict[str, Any]]:
        if not titles:
            return {}
        payload = await self.client(lang).query({
            "action": "query",
            "titles": "|".join(titles),
            "prop": "extracts|categories",
            "exintro": 1,
            "explaintext": 1,
            "exsectionformat": "plain",
            "cllimit": "max",
        })
        summaries: Dict[str, Dict[str, Any]] = {}
        for page in (payload.get("query") or {}).get("pages") or []:
            if page.get("missing"):
                continue
            summaries[page["title"]] = {
                "extract": page.get("extract") or "",
                "categories": [c["title"] for c in page.get("categories") or []],
            }
        return summaries

    async def get_category_members(self, category: str, lang: str = "en", limit: int = 50) -> List[str]:
        if not category.startswith("Category:"):
            category = f"Category:{category}"
        payload = await self.client(lang).query({
            "action": "query",
            "list": "categorymembers",
            "cmtitle": category,
            "cmnamespace": 0,
            "cmlimit": min(limit, 500),
        })
        members = (payload.get("query") or {}).get("categorymembers") or []
        return [m["title"] for m in members]

    async def append_to_page(
        self,
        auth: WikimediaCredentials,
        lang: str,
        title: str,
        appendtext: str,
        summary: str,
    ) -> Dict[str, Any]:
        client = self.client(lang)
        token = await client.get_csrf_token(auth)
        payload = await client.post(auth, {
            "action": "edit",
            "title": title,
            "appendtext": appendtext,
            "summary": summary,
            "token": token,
        })
        logger.info("wikipedia_page_appended", lang=lang, title=title)
        return payload

    async def health_check(self) -> bool:
        try:
            await self.client("en").query({"action": "query", "meta": "siteinfo"})
            return True
        except Exception as e:
            logger.error("wikipedia_health_check_failed", error=str(e))
            return False
