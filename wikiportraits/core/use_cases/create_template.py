# wikiportraits/core/use_cases/create_template.py
from typing import Optional
from urllib.parse import quote

import structlog

from wikiportraits.core.domain.exceptions import DomainError, InvalidRequestError, TemplateExistsError
from wikiportraits.core.domain.models import TemplateCreationResult, WikimediaCredentials
from wikiportraits.core.ports.commons_gateway import ICommonsGateway
from wikiportraits.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)


def template_url(template_name: str) -> str:
    return f"https://commons.wikimedia.org/wiki/Template:{quote(template_name, safe='')}"


class CreateTemplate:
    """
    Use Case: Creates a Template: page on Commons without ever overwriting one.
    A template that already exists counts as success.
    """

    def __init__(self, commons: ICommonsGateway):
        self.commons = commons

    async def execute(
        self,
        auth: WikimediaCredentials,
        template_name: str,
        content: str,
        summary: Optional[str] = None,
    ) -> TemplateCreationResult:
        with tracer.start_as_current_span("use_case.create_template") as span:
            span.set_attribute("app.template", template_name or "")

            if not template_name or not content:
                raise InvalidRequestError("Template name and content are required")

            try:
                token = await self.commons.get_csrf_token(auth)
                edit = await self.commons.edit(
                    auth,
                    token,
                    title=f"Template:{template_name}",
                    summary=summary or f"Created WikiPortraits template for {template_name}",
                    text=content,
                    createonly=True,
                )
                logger.info("template_created", template=template_name, page_id=edit.get("pageid"))
                return TemplateCreationResult(
                    templateName=template_name,
                    templateUrl=template_url(template_name),
                    pageId=edit.get("pageid"),
                    message="Template created successfully",
                )

            except TemplateExistsError:
                logger.info("template_exists", template=template_name)
                return TemplateCreationResult(
                    templateName=template_name,
                    templateUrl=template_url(template_name),
                    message="Template already exists",
                    alreadyExists=True,
                )
            except DomainError:
                raise
            except Exception as e:
                logger.error("template_creation_failed", template=template_name, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected template creation failure: {str(e)}")
