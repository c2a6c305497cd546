# wikiportraits/core/use_cases/create_category.py
from typing import List

import structlog

from wikiportraits.core.domain.exceptions import DomainError, InvalidRequestError, UnexpectedResponseError
from wikiportraits.core.domain.models import (
    CategoryCreationInfo,
    CategoryCreationResult,
    WikimediaCredentials,
)
from wikiportraits.core.ports.commons_gateway import ICommonsGateway
from wikiportraits.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)

FOOTBALL_PLAYERS_BY_CLUB = "Association football players by club"


def category_page_text(info: CategoryCreationInfo) -> str:
    """Description paragraph followed by one [[Category:...]] line per parent."""
    lines: List[str] = []
    if info.description:
        lines.append(f"{info.description}\n")
    elif info.teamName:
        lines.append(f"Players of [[{info.teamName}]].\n")

    parents: List[str] = []
    if info.parentCategory:
        parents.append(info.parentCategory)
    parents.extend(info.additionalParents or [])
    if info.teamName:
        parents.extend([FOOTBALL_PLAYERS_BY_CLUB, info.teamName])

    seen = set()
    for parent in parents:
        if parent and parent not in seen:
            seen.add(parent)
            lines.append(f"[[Category:{parent}]]")
    return "\n".join(lines) + "\n"


def category_summary(info: CategoryCreationInfo) -> str:
    if info.teamName:
        return f"Created category for {info.teamName} players via WikiPortraits Uploader"
    return f"Created category {info.categoryName} via WikiPortraits Uploader"


class CreateCategory:
    """
    Use Case: Creates a Commons category page unless it already exists.
    An existing category is reported as such, not as an error.
    """

    def __init__(self, commons: ICommonsGateway):
        self.commons = commons

    async def execute(self, auth: WikimediaCredentials, info: CategoryCreationInfo) -> CategoryCreationResult:
        with tracer.start_as_current_span("use_case.create_category") as span:
            span.set_attribute("app.category", info.categoryName)

            if not info.categoryName:
                raise InvalidRequestError("Category name is required")

            try:
                if await self.commons.page_exists(f"Category:{info.categoryName}"):
                    logger.info("category_exists", category=info.categoryName)
                    return CategoryCreationResult(
                        categoryName=info.categoryName,
                        exists=True,
                        message="Category already exists",
                    )

                token = await self.commons.get_csrf_token(auth)
                edit = await self.commons.edit(
                    auth,
                    token,
                    title=f"Category:{info.categoryName}",
                    summary=category_summary(info),
                    text=category_page_text(info),
                )
                if edit.get("result") != "Success":
                    raise UnexpectedResponseError("Failed to create category page")

                logger.info("category_created", category=info.categoryName, page_id=edit.get("pageid"))
                return CategoryCreationResult(
                    categoryName=info.categoryName,
                    pageId=edit.get("pageid"),
                    newRevision=edit.get("newrevid"),
                    message="Category created successfully",
                )

            except DomainError:
                raise
            except Exception as e:
                logger.error("category_creation_failed", category=info.categoryName, error=str(e), exc_info=True)
                raise DomainError(f"Unexpected category creation failure: {str(e)}")
