# wikiportraits/adapters/mediawiki/commons.py
import json
from typing import Any, Dict, List, Optional

import structlog

from wikiportraits.adapters.cache import TTLCache
from wikiportraits.adapters.mediawiki.client import MediaWikiClient
from wikiportraits.core.domain.exceptions import (
    MediaWikiAPIError,
    TemplateExistsError,
    UnexpectedResponseError,
)
from wikiportraits.core.domain.models import WikimediaCredentials
from wikiportraits.shared.config import settings

logger = structlog.get_logger()

CATEGORY_PREFIX = "Category:"
FILE_NAMESPACE = 6
CATEGORY_NAMESPACE = 14


def _strip_category(title: str) -> str:
    return title[len(CATEGORY_PREFIX):] if title.startswith(CATEGORY_PREFIX) else title


def _first_page(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    pages = (payload.get("query") or {}).get("pages") or []
    return pages[0] if pages else None


def _is_missing(page: Optional[Dict[str, Any]]) -> bool:
    return page is None or bool(page.get("missing")) or bool(page.get("invalid"))


class CommonsAdapter:
    """
    Wikimedia Commons over the Action API.

    Category existence answers are cached for CATEGORY_CACHE_TTL_SEC; a
    category this adapter creates is evicted from the cache right away.
    """

    def __init__(self, client: Optional[MediaWikiClient] = None, cache: Optional[TTLCache] = None):
        self.client = client or MediaWikiClient(settings.COMMONS_API_URL)
        self.category_cache: TTLCache = cache if cache is not None else TTLCache(settings.CATEGORY_CACHE_TTL_SEC)

    # --- Existence checks ---

    async def category_exists(self, category_name: str) -> bool:
        name = _strip_category(category_name)
        cached = self.category_cache.get(name)
        if cached is not None:
            return cached

        try:
            exists = await self._title_exists(f"{CATEGORY_PREFIX}{name}")
        except Exception as e:
            logger.warning("category_check_failed", category=name, error=str(e))
            return False

        self.category_cache.set(name, exists)
        return exists

    async def page_exists(self, title: str) -> bool:
        try:
            return await self._title_exists(title)
        except Exception as e:
            logger.warning("page_check_failed", title=title, error=str(e))
            return False

    async def _title_exists(self, title: str) -> bool:
        payload = await self.client.query({"action": "query", "titles": title})
        return not _is_missing(_first_page(payload))

    # --- Pages ---

    async def get_page_content(self, title: str) -> Optional[str]:
        payload = await self.client.query({
            "action": "query",
            "titles": title,
            "prop": "revisions",
            "rvprop": "content",
            "rvslots": "main",
        })
        page = _first_page(payload)
        if _is_missing(page):
            return None
        revisions = page.get("revisions") or []
        if not revisions:
            return None
        return ((revisions[0].get("slots") or {}).get("main") or {}).get("content")

    async def get_page_id(self, title: str) -> Optional[int]:
        payload = await self.client.query({"action": "query", "titles": title})
        page = _first_page(payload)
        if _is_missing(page):
            return None
        return page.get("pageid")

    # --- Files ---

    async def search_files(self, query: str, limit: int = 20) -> List[Dict[str, Any]]:
        payload = await self.client.query({
            "action": "query",
            "generator": "search",
            "gsrsearch": query,
            "gsrnamespace": FILE_NAMESPACE,
            "gsrlimit": limit,
            "prop": "imageinfo",
            "iiprop": "url|size|mime",
            "iiurlwidth": 300,
        })
        pages = (payload.get("query") or {}).get("pages") or []
        results = []
        for page in sorted(pages, key=lambda p: p.get("index", 0)):
            info = (page.get("imageinfo") or [{}])[0]
            results.append({
                "title": page.get("title"),
                "pageid": page.get("pageid"),
                "url": info.get("url"),
                "thumbUrl": info.get("thumburl"),
                "descriptionUrl": info.get("descriptionurl"),
                "size": info.get("size"),
                "width": info.get("width"),
                "height": info.get("height"),
                "mime": info.get("mime"),
            })
        return results

    async def get_file_details(self, filename: str) -> Optional[Dict[str, Any]]:
        title = filename if filename.startswith("File:") else f"File:{filename}"
        payload = await self.client.query({
            "action": "query",
            "titles": title,
            "prop": "imageinfo|categories",
            "iiprop": "url|size|mime|timestamp|user|extmetadata|mediatype",
            "cllimit": "max",
        })
        page = _first_page(payload)
        if _is_missing(page) or not page.get("imageinfo"):
            return None
        return {
            "title": page.get("title"),
            "pageid": page.get("pageid"),
            "categories": [_strip_category(c["title"]) for c in page.get("categories") or []],
            **page["imageinfo"][0],
        }

    # --- Categories ---

    async def get_category_files(
        self, category_name: str, limit: int = 50, continue_token: Optional[str] = None
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "action": "query",
            "list": "categorymembers",
            "cmtitle": f"{CATEGORY_PREFIX}{_strip_category(category_name)}",
            "cmtype": "file",
            "cmlimit": limit,
        }
        if continue_token:
            params["cmcontinue"] = continue_token

        payload = await self.client.query(params)
        members = (payload.get("query") or {}).get("categorymembers") or []
        return {
            "files": [{"title": m.get("title"), "pageid": m.get("pageid")} for m in members],
            "continue": (payload.get("continue") or {}).get("cmcontinue"),
        }

    async def get_category_info(self, category_name: str) -> Optional[Dict[str, Any]]:
        payload = await self.client.query({
            "action": "query",
            "titles": f"{CATEGORY_PREFIX}{_strip_category(category_name)}",
            "prop": "categoryinfo|info",
        })
        page = _first_page(payload)
        if _is_missing(page):
            return None
        info = page.get("categoryinfo") or {}
        return {
            "title": page.get("title"),
            "pageid": page.get("pageid"),
            "size": info.get("size", 0),
            "pages": info.get("pages", 0),
            "files": info.get("files", 0),
            "subcats": info.get("subcats", 0),
            "lastModified": page.get("touched"),
        }

    async def get_parent_categories(self, category_name: str) -> List[str]:
        payload = await self.client.query({
            "action": "query",
            "titles": f"{CATEGORY_PREFIX}{_strip_category(category_name)}",
            "prop": "categories",
            "cllimit": "max",
        })
        page = _first_page(payload)
        if _is_missing(page):
            return []
        return [_strip_category(c["title"]) for c in page.get("categories") or []]

    async def get_subcategories(self, category_name: str, limit: int = 50) -> List[str]:
        payload = await self.client.query({
            "action": "query",
            "list": "categorymembers",
            "cmtitle": f"{CATEGORY_PREFIX}{_strip_category(category_name)}",
            "cmtype": "subcat",
            "cmlimit": limit,
        })
        members = (payload.get("query") or {}).get("categorymembers") or []
        return [_strip_category(m["title"]) for m in members]

    async def search_categories(self, query: str, limit: int = 10) -> List[str]:
        payload = await self.client.query({
            "action": "query",
            "list": "prefixsearch",
            "pssearch": query,
            "psnamespace": CATEGORY_NAMESPACE,
            "pslimit": limit,
        })
        hits = (payload.get("query") or {}).get("prefixsearch") or []
        return [_strip_category(h["title"]) for h in hits]

    # --- Structured data ---

    async def get_entity(self, entity_id: str, props: str = "claims") -> Optional[Dict[str, Any]]:
        payload = await self.client.query({"action": "wbgetentities", "ids": entity_id, "props": props})
        entity = (payload.get("entities") or {}).get(entity_id)
        if not entity or "missing" in entity:
            return None
        return entity

    # --- Writes ---

    async def get_csrf_token(self, auth: WikimediaCredentials) -> str:
        return await self.client.get_csrf_token(auth)

    async def get_user_info(self, auth: WikimediaCredentials) -> Dict[str, Any]:
        return await self.client.get_user_info(auth)

    async def upload(
        self,
        auth: WikimediaCredentials,
        token: str,
        filename: str,
        content: bytes,
        text: str,
        comment: str,
        ignore_warnings: bool = False,
    ) -> Dict[str, Any]:
        data = {
            "action": "upload",
            "filename": filename,
            "text": text,
            "comment": comment,
            "token": token,
        }
        if ignore_warnings:
            data["ignorewarnings"] = "1"

        payload = await self.client.post(
            auth,
            data,
            files={"file": (filename, content, "application/octet-stream")},
            timeout=settings.UPLOAD_TIMEOUT_SEC,
        )
        upload = payload.get("upload")
        if not upload:
            raise UnexpectedResponseError("Upload response missing upload data")
        return upload

    async def edit(
        self,
        auth: WikimediaCredentials,
        token: str,
        title: str,
        summary: str,
        text: Optional[str] = None,
        appendtext: Optional[str] = None,
        createonly: bool = False,
    ) -> Dict[str, Any]:
        data: Dict[str, Any] = {"action": "edit", "title": title, "summary": summary, "token": token}
        if text is not None:
            data["text"] = text
        if appendtext is not None:
            data["appendtext"] = appendtext
        if createonly:
            data["createonly"] = "1"

        try:
            payload = await self.client.post(auth, data)
        except MediaWikiAPIError as e:
            if createonly and e.code == "articleexists":
                raise TemplateExistsError(title)
            raise

        edit = payload.get("edit")
        if not edit:
            raise UnexpectedResponseError(f"Edit of {title} returned no result")

        if title.startswith(CATEGORY_PREFIX):
            self.category_cache.invalidate(_strip_category(title))
        return edit

    async def edit_entity(
        self,
        auth: WikimediaCredentials,
        token: str,
        entity_id: str,
        data: Dict[str, Any],
        summary: str,
    ) -> Dict[str, Any]:
        return await self.client.post(auth, {
            "action": "wbeditentity",
            "id": entity_id,
            "data": json.dumps(data),
            "summary": summary,
            "token": token,
        })

    async def health_check(self) -> bool:
        try:
            await self.client.query({"action": "query", "meta": "siteinfo"})
            return True
        except Exception as e:
            logger.error("commons_health_check_failed", error=str(e))
            return False
