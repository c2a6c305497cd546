# wikiportraits/core/use_cases/edit_file_page.py
from typing import Any, Dict, Optional

import structlog

from wikiportraits.core.domain.exceptions import DomainError, InvalidRequestError, UnexpectedResponseError
from wikiportraits.core.domain.models import WikimediaCredentials
from wikiportraits.core.ports.commons_gateway import ICommonsGateway
from wikiportraits.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)

DEFAULT_EDIT_SUMMARY = "Updated categories and metadata via WikiPortraits"


class EditFilePage:
    """Use Case: Replaces the wikitext of an existing File: page."""

    def __init__(self, commons: ICommonsGateway):
        self.commons = commons

    async def execute(
        self,
        auth: WikimediaCredentials,
        filename: str,
        wikitext: str,
        summary: Optional[str] = None,
    ) -> Dict[str, Any]:
        title = filename if filename.startswith("File:") else f"File:{filename}"

        with tracer.start_as_current_span("use_case.edit_file_page") as span:
            span.set_attribute("app.title", title)

            if not filename or not wikitext:
                raise InvalidRequestError("filename and wikitext are required")

            try:
                token = await self.commons.get_csrf_token(auth)
                edit = await self.commons.edit(auth, token, title=title, summary=summary or DEFAULT_EDIT_SUMMARY, text=wikitext)
                if edit.get("result") != "Success":
                    raise UnexpectedResponseError("Unknown error during edit")

                logger.info("file_page_edited", title=title, revision=edit.get("newrevid"))
                return {
                    "success": True,
                    "message": "Page updated successfully",
                    "newRevisionId": edit.get("newrevid"),
                }

            except DomainError:
                raise
            except Exception as e:
                logger.error("file_page_edit_failed", title=title, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected edit failure: {str(e)}")
