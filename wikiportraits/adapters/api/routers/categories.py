# wikiportraits/adapters/api/routers/categories.py
import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, status

from wikiportraits.adapters.api.dependencies import domain_http_error, unexpected_http_error
from wikiportraits.adapters.api.schemas import (
    GenerateCategoriesRequest,
    MusicCategoriesRequest,
    MusicCategoriesToCreateRequest,
    SoccerCategoriesRequest,
    WikiPortraitsCategoriesRequest,
)
from wikiportraits.core.categories import music, soccer
from wikiportraits.core.categories import wikiportraits as wp
from wikiportraits.core.categories.generator import (
    CategoryGenerator,
    CategoryPreferences,
    CategoryRule,
    GenerationContext,
)
from wikiportraits.core.domain.exceptions import DomainError
from wikiportraits.core.domain.models import CategoryGenerationResult
from wikiportraits.core.ports.commons_gateway import ICommonsGateway
from wikiportraits.core.use_cases import PlanEventCategories
from wikiportraits.shared.container import Container

logger = structlog.get_logger()

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.post("/music")
async def music_categories(body: MusicCategoriesRequest):
    """
    Categories for music event photos. With `selectedBand` the result is the
    per-image set for that band, otherwise the event-wide set.
    """
    if body.selectedBand and body.eventData:
        categories = music.generate_image_categories(body.eventData, body.selectedBand)
    else:
        categories = music.generate_music_categories(
            body.eventData,
            include_band=body.includeBand,
            include_event=body.includeEvent,
            include_wp_integration=body.includeWikiPortraits,
        )
    return {"categories": categories}


@router.post("/music/to-create")
@inject
async def music_categories_to_create(
    body: MusicCategoriesToCreateRequest,
    use_case: PlanEventCategories = Depends(Provide[Container.plan_event_categories_use_case]),
):
    try:
        plan = await use_case.execute(body.eventData, bands=body.bands, only_missing=body.onlyMissing)
        return {"categoriesToCreate": [info.model_dump(exclude_none=True) for info in plan]}
    except DomainError as e:
        raise domain_http_error(e, "category_plan")
    except Exception as e:
        raise unexpected_http_error(e, "category_plan", "Failed to plan categories")


@router.post("/soccer")
async def soccer_categories(body: SoccerCategoriesRequest):
    categories = soccer.generate_soccer_categories(
        body.matchData,
        body.selectedPlayers,
        include_player=body.includePlayer,
        include_team=body.includeTeam,
        include_match=body.includeMatch,
    )
    to_create = soccer.get_categories_to_create(body.matchData, body.selectedPlayers)
    return {
        "categories": categories,
        "categoriesToCreate": [info.model_dump(exclude_none=True) for info in to_create],
    }


@router.post("/generate", response_model=CategoryGenerationResult)
@inject
async def generate_categories(
    body: GenerateCategoriesRequest,
    generator: CategoryGenerator = Depends(Provide[Container.category_generator]),
):
    """Runs the rule engine over a form plus any Wikidata entities attached to it."""
    try:
        rules = [CategoryRule.from_dict(raw) for raw in body.rules or []]
    except (KeyError, ValueError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid category rule: {e}")

    prefs = body.preferences
    context = GenerationContext(
        form_data=body.formData,
        entity_data=body.entityData,
        workflow_config=body.workflowConfig or None,
        preferences=CategoryPreferences(
            language=prefs.language,
            include_year=prefs.includeYear,
            include_location=prefs.includeLocation,
            include_genre=prefs.includeGenre,
            max_auto_categories=prefs.maxAutoCategories,
        ),
    )
    try:
        return await generator.generate(context, rules)
    except DomainError as e:
        raise domain_http_error(e, "category_generation")
    except Exception as e:
        raise unexpected_http_error(e, "category_generation", "Failed to generate categories")


@router.post("/wikiportraits")
@inject
async def wikiportraits_categories(
    body: WikiPortraitsCategoriesRequest,
    commons: ICommonsGateway = Depends(Provide[Container.commons_gateway]),
):
    """The WikiPortraits tracking tree of an event; `onlyMissing` filters it against Commons."""
    event_name = wp.extract_event_name_without_year(body.eventName)
    tree = wp.generate_wikiportraits_categories(event_name, body.year, body.eventType)

    if body.onlyMissing:
        to_create = await wp.get_wikiportraits_categories_to_create(commons, event_name, body.year, body.eventType)
    else:
        to_create = tree["categoriesToCreate"]

    return {
        "mainCategory": tree["mainCategory"],
        "yearCategory": tree["yearCategory"],
        "typeCategory": tree["typeCategory"],
        "categoriesToCreate": [info.model_dump(exclude_none=True) for info in to_create],
    }
