# wikiportraits/core/use_cases/update_infobox.py
from typing import Any, Dict

import structlog

from wikiportraits.core.domain.exceptions import DomainError, InvalidRequestError
from wikiportraits.core.domain.models import WikimediaCredentials
from wikiportraits.core.ports.wikipedia_gateway import IWikipediaGateway
from wikiportraits.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)


class UpdateInfoboxImage:
    """Use Case: Appends an ``| image = ...`` line to a Wikipedia article."""

    def __init__(self, wikipedia: IWikipediaGateway):
        self.wikipedia = wikipedia

    async def execute(
        self, auth: WikimediaCredentials, lang: str, title: str, image: str, summary: str
    ) -> Dict[str, Any]:
        with tracer.start_as_current_span("use_case.update_infobox") as span:
            span.set_attribute("app.lang", lang or "")
            span.set_attribute("app.title", title or "")

            if not (lang and title and image and summary):
                raise InvalidRequestError("Missing required parameters")

            try:
                result = await self.wikipedia.append_to_page(auth, lang, title, f"| image = {image}\n", summary)
                logger.info("infobox_image_added", lang=lang, title=title, image=image)
                return result
            except DomainError:
                raise
            except Exception as e:
                logger.error("infobox_update_failed", lang=lang, title=title, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected infobox update failure: {str(e)}")
