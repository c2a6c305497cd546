# wikiportraits/adapters/api/routers/wikitext.py
import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, status

from wikiportraits.adapters.api.dependencies import domain_http_error, unexpected_http_error
from wikiportraits.adapters.api.schemas import (
    CaptionsRequest,
    CommonsPageRequest,
    FilenameRequest,
    TemplateRequest,
)
from wikiportraits.core.domain.exceptions import DomainError
from wikiportraits.core.ports.commons_gateway import ICommonsGateway
from wikiportraits.core.wikitext import templates
from wikiportraits.core.wikitext.captions import DEFAULT_CAPTION_LANGUAGES, generate_multilingual_captions
from wikiportraits.core.wikitext.commons_page import generate_commons_wikitext
from wikiportraits.core.wikitext.descriptions import (
    generate_music_event_description,
    get_description_suggestions,
    is_description_complete,
)
from wikiportraits.core.wikitext.filenames import generate_commons_filename, generate_filename
from wikiportraits.shared.container import Container

logger = structlog.get_logger()

router = APIRouter(prefix="/wikitext", tags=["Wikitext"])


@router.post("/commons-page")
async def commons_page(body: CommonsPageRequest):
    return {"wikitext": generate_commons_wikitext(body.metadata, force_regenerate=body.forceRegenerate)}


@router.post("/filename")
@inject
async def filename(
    body: FilenameRequest,
    commons: ICommonsGateway = Depends(Provide[Container.commons_gateway]),
):
    if body.formData is None and body.metadata is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="formData or metadata is required")

    if body.formData is None:
        return {"filename": generate_filename(body.originalFilename, body.metadata, body.imageIndex)}

    try:
        name = await generate_commons_filename(
            body.originalFilename,
            body.formData,
            body.imageIndex,
            commons,
            existing_filenames=body.existingFilenames,
        )
    except DomainError as e:
        raise domain_http_error(e, "filename_generation")
    except Exception as e:
        raise unexpected_http_error(e, "filename_generation", "Failed to generate filename")
    return {"filename": name}


@router.post("/captions")
async def captions(body: CaptionsRequest):
    """Captions per language plus an English description and what is still missing for it."""
    languages = body.languages or list(DEFAULT_CAPTION_LANGUAGES)
    description = generate_music_event_description(body.formData)
    return {
        "captions": [
            c.model_dump() for c in generate_multilingual_captions(body.formData, body.location, body.date, languages)
        ],
        "description": description,
        "complete": is_description_complete(description),
        "suggestions": get_description_suggestions(body.formData),
    }


@router.post("/template")
async def template(body: TemplateRequest):
    return {
        "templateName": templates.generate_template_name(body.uploadType, body.musicEventData),
        "templateTitle": templates.generate_template_title(body.uploadType, body.musicEventData, body.language),
        "categoryName": templates.generate_category_name(body.uploadType, body.musicEventData),
        "accentColor": templates.generate_accent_color(body.uploadType),
        "content": templates.generate_template(body.uploadType, body.musicEventData, body.language),
    }


@router.get("/template/standard")
async def standard_template():
    return {
        "templateName": templates.get_standard_template_name(),
        "content": templates.generate_standard_wikiportraits_template(),
    }
