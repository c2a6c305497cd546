# wikiportraits/core/use_cases/structured_data.py
"""
Structured data on Commons files: captions (MediaInfo labels) and
depicts (P180) statements. A file's MediaInfo entity id is ``M<pageid>``.
"""
from typing import Any, Dict, List

import structlog

from wikiportraits.core.domain import wikidata as wd
from wikiportraits.core.domain.exceptions import DomainError, InvalidRequestError, UnexpectedResponseError
from wikiportraits.core.domain.models import Caption, DepictsItem, WikimediaCredentials
from wikiportraits.core.ports.commons_gateway import ICommonsGateway
from wikiportraits.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)


def media_info_id(page_id: int) -> str:
    return f"M{page_id}"


def depicts_statement(qid: str) -> Dict[str, Any]:
    if not wd.is_qid(qid):
        raise InvalidRequestError(f"Invalid item id: {qid}")
    return {
        "mainsnak": {
            "snaktype": "value",
            "property": wd.P_DEPICTS,
            "datavalue": {
                "type": "wikibase-entityid",
                "value": {"numeric-id": int(qid.lstrip("Q")), "id": qid},
            },
        },
        "type": "statement",
        "rank": "normal",
    }


class UpdateCaptions:
    """Use Case: Sets the file captions, one label per language."""

    def __init__(self, commons: ICommonsGateway):
        self.commons = commons

    async def execute(self, auth: WikimediaCredentials, page_id: int, captions: List[Caption]) -> Dict[str, Any]:
        with tracer.start_as_current_span("use_case.update_captions") as span:
            span.set_attribute("app.page_id", page_id or 0)

            if not page_id or not captions:
                raise InvalidRequestError("pageId and captions are required")

            labels = {c.language: {"language": c.language, "value": c.text} for c in captions}
            languages = [c.language for c in captions]

            try:
                token = await self.commons.get_csrf_token(auth)
                result = await self.commons.edit_entity(
                    auth,
                    token,
                    media_info_id(page_id),
                    {"labels": labels},
                    f"Updated captions via WikiPortraits ({len(captions)} languages)",
                )
                if not result.get("success"):
                    raise UnexpectedResponseError("Unknown error updating captions")

                logger.info("captions_updated", page_id=page_id, languages=languages)
                return {
                    "success": True,
                    "message": f"Updated captions in {len(captions)} languages: {', '.join(languages)}",
                }

            except DomainError:
                raise
            except Exception as e:
                logger.error("captions_update_failed", page_id=page_id, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected caption update failure: {str(e)}")


class UpdateDepicts:
    """
    Use Case: Replaces the P180 statements of a file.

    The current P180 set is read first and nothing is written when it
    already matches. Only the P180 claims are sent, so other structured
    data (license, copyright status...) stays untouched.
    """

    def __init__(self, commons: ICommonsGateway):
        self.commons = commons

    async def execute(self, auth: WikimediaCredentials, page_id: int, depicts: List[DepictsItem]) -> Dict[str, Any]:
        with tracer.start_as_current_span("use_case.update_depicts") as span:
            span.set_attribute("app.page_id", page_id or 0)

            if not page_id or depicts is None:
                raise InvalidRequestError("pageId and depicts are required")

            mid = media_info_id(page_id)
            wanted = {d.qid for d in depicts}

            try:
                entity = await self.commons.get_entity(mid, props="claims")
                existing = set(wd.item_ids(entity or {}, wd.P_DEPICTS))

                if existing == wanted:
                    logger.info("depicts_unchanged", page_id=page_id)
                    return {"success": True, "message": "Depicts already up to date - no changes needed"}

                logger.info("depicts_update_needed", page_id=page_id, existing=sorted(existing), new=sorted(wanted))
                token = await self.commons.get_csrf_token(auth)
                result = await self.commons.edit_entity(
                    auth,
                    token,
                    mid,
                    {"claims": {wd.P_DEPICTS: [depicts_statement(d.qid) for d in depicts]}},
                    f"Updated depicts statements via WikiPortraits ({len(depicts)} entities)",
                )
                if not result.get("success"):
                    raise UnexpectedResponseError("Unknown error updating depicts")

                labels = ", ".join(d.label or d.qid for d in depicts)
                return {"success": True, "message": f"Updated depicts statements: {labels}"}

            except DomainError:
                raise
            except Exception as e:
                logger.error("depicts_update_failed", page_id=page_id, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected depicts update failure: {str(e)}")
