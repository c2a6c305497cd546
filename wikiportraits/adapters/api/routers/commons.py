# wikiportraits/adapters/api/routers/commons.py
from typing import Optional

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from wikiportraits.adapters.api.dependencies import (
    CurrentUser,
    domain_http_error,
    read_limit,
    unexpected_http_error,
    write_limit,
)
from wikiportraits.adapters.api.schemas import (
    CreateCategoryRequest,
    CreateTemplateRequest,
    EditPageRequest,
    UpdateCaptionsRequest,
    UpdateDepictsRequest,
)
from wikiportraits.core.domain.exceptions import DomainError
from wikiportraits.core.domain.models import (
    CategoryCreationResult,
    TemplateCreationResult,
    UploadResult,
)
from wikiportraits.core.ports.commons_gateway import ICommonsGateway
from wikiportraits.core.use_cases import (
    CreateCategory,
    CreateTemplate,
    EditFilePage,
    UpdateCaptions,
    UpdateDepicts,
    UploadImage,
)
from wikiportraits.shared.container import Container

logger = structlog.get_logger()

router = APIRouter(prefix="/commons", tags=["Commons"])


# --- Writes ---


@router.post("/upload", response_model=UploadResult, dependencies=[write_limit("commons-upload")])
@inject
async def upload(
    user: CurrentUser,
    file: UploadFile = File(...),
    filename: str = Form(...),
    text: str = Form(""),
    comment: Optional[str] = Form(None),
    use_case: UploadImage = Depends(Provide[Container.upload_image_use_case]),
):
    """Uploads one image (multipart: file, filename, text, comment)."""
    content = await file.read()
    try:
        return await use_case.execute(user, filename, content, text=text, comment=comment or "")
    except DomainError as e:
        raise domain_http_error(e, "commons_upload")
    except Exception as e:
        raise unexpected_http_error(e, "commons_upload", "Failed to upload image")


@router.post("/create-category", response_model=CategoryCreationResult)
@inject
async def create_category(
    body: CreateCategoryRequest,
    user: CurrentUser,
    use_case: CreateCategory = Depends(Provide[Container.create_category_use_case]),
):
    if not body.categoryName.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category name is required")
    try:
        return await use_case.execute(user, body)
    except DomainError as e:
        raise domain_http_error(e, "create_category")
    except Exception as e:
        raise unexpected_http_error(e, "create_category", "Failed to create category")


@router.post("/edit-page", dependencies=[write_limit("commons-edit-page")])
@inject
async def edit_page(
    body: EditPageRequest,
    user: CurrentUser,
    use_case: EditFilePage = Depends(Provide[Container.edit_file_page_use_case]),
):
    try:
        return await use_case.execute(user, body.filename, body.wikitext, body.summary)
    except DomainError as e:
        raise domain_http_error(e, "edit_page")
    except Exception as e:
        raise unexpected_http_error(e, "edit_page", "Failed to edit page")


@router.post("/update-captions")
@inject
async def update_captions(
    body: UpdateCaptionsRequest,
    user: CurrentUser,
    use_case: UpdateCaptions = Depends(Provide[Container.update_captions_use_case]),
):
    try:
        return await use_case.execute(user, body.pageId, body.captions)
    except DomainError as e:
        raise domain_http_error(e, "update_captions")
    except Exception as e:
        raise unexpected_http_error(e, "update_captions", "Failed to update captions")


@router.post("/update-depicts", dependencies=[write_limit("commons-update-depicts")])
@inject
async def update_depicts(
    body: UpdateDepictsRequest,
    user: CurrentUser,
    use_case: UpdateDepicts = Depends(Provide[Container.update_depicts_use_case]),
):
    try:
        return await use_case.execute(user, body.pageId, body.depicts)
    except DomainError as e:
        raise domain_http_error(e, "update_depicts")
    except Exception as e:
        raise unexpected_http_error(e, "update_depicts", "Failed to update depicts")


@router.post("/create-template", response_model=TemplateCreationResult)
@inject
async def create_template(
    body: CreateTemplateRequest,
    user: CurrentUser,
    use_case: CreateTemplate = Depends(Provide[Container.create_template_use_case]),
):
    try:
        return await use_case.execute(user, body.templateName, body.content, body.summary)
    except DomainError as e:
        raise domain_http_error(e, "create_template")
    except Exception as e:
        raise unexpected_http_error(e, "create_template", "Failed to create template")


# --- Reads ---


@router.get("/category-exists", dependencies=[read_limit("commons-category-exists")])
@inject
async def category_exists(
    name: str = Query(..., min_length=1),
    commons: ICommonsGateway = Depends(Provide[Container.commons_gateway]),
):
    return {"category": name, "exists": await commons.category_exists(name)}


@router.get("/search-categories", dependencies=[read_limit("commons-search-categories")])
@inject
async def search_categories(
    q: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=50),
    commons: ICommonsGateway = Depends(Provide[Container.commons_gateway]),
):
    try:
        return {"query": q, "categories": await commons.search_categories(q, limit=limit)}
    except DomainError as e:
        raise domain_http_error(e, "search_categories")
    except Exception as e:
        raise unexpected_http_error(e, "search_categories", "Failed to search categories")


@router.get("/parent-categories", dependencies=[read_limit("commons-parent-categories")])
@inject
async def parent_categories(
    name: str = Query(..., min_length=1),
    commons: ICommonsGateway = Depends(Provide[Container.commons_gateway]),
):
    try:
        return {"category": name, "parents": await commons.get_parent_categories(name)}
    except DomainError as e:
        raise domain_http_error(e, "parent_categories")
    except Exception as e:
        raise unexpected_http_error(e, "parent_categories", "Failed to fetch parent categories")
