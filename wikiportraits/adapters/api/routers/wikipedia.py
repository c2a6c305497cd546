# wikiportraits/adapters/api/routers/wikipedia.py
import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, status

from wikiportraits.adapters.api.dependencies import CurrentUser, domain_http_error, read_limit, unexpected_http_error
from wikiportraits.adapters.api.schemas import UpdateInfoboxRequest
from wikiportraits.core.domain.exceptions import DomainError
from wikiportraits.core.ports.wikipedia_gateway import IWikipediaGateway
from wikiportraits.core.use_cases import SearchMusicArticles, SearchTeamPlayers, SearchWikipedia, UpdateInfoboxImage
from wikiportraits.shared.container import Container

logger = structlog.get_logger()

router = APIRouter(prefix="/wikipedia", tags=["Wikipedia"])


@router.get("/search")
@inject
async def search(
    q: str = Query(""),
    category: str = Query("football"),
    limit: int = Query(10, ge=1, le=50),
    lang: str = Query("en"),
    use_case: SearchWikipedia = Depends(Provide[Container.search_wikipedia_use_case]),
):
    try:
        return await use_case.execute(q, category=category, limit=limit, lang=lang)
    except DomainError as e:
        raise domain_http_error(e, "wikipedia_search")
    except Exception as e:
        raise unexpected_http_error(e, "wikipedia_search", "Failed to search Wikipedia")


@router.get("/article-search")
@inject
async def article_search(
    search: str = Query(""),
    lang: str = Query("en"),
    wikipedia: IWikipediaGateway = Depends(Provide[Container.wikipedia_gateway]),
):
    """Full-text hits, returned as the bare `list=search` array."""
    if not search:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Search term is required")
    try:
        return await wikipedia.search_articles(search, lang=lang)
    except DomainError as e:
        raise domain_http_error(e, "wikipedia_article_search")
    except Exception as e:
        raise unexpected_http_error(e, "wikipedia_article_search", "Failed to fetch data from Wikipedia")


@router.get("/music-search", dependencies=[read_limit("wikipedia-music-search")])
@inject
async def music_search(
    q: str = Query(""),
    lang: str = Query("en"),
    limit: int = Query(10, ge=1, le=50),
    use_case: SearchMusicArticles = Depends(Provide[Container.search_music_articles_use_case]),
):
    try:
        return await use_case.execute(q, lang=lang, limit=limit)
    except DomainError as e:
        raise domain_http_error(e, "wikipedia_music_search")
    except Exception as e:
        raise unexpected_http_error(e, "wikipedia_music_search", "Failed to search Wikipedia for music artists")


@router.get("/team-players", dependencies=[read_limit("wikipedia-team-players")])
@inject
async def team_players(
    team: str = Query(""),
    limit: int = Query(30, ge=1, le=100),
    use_case: SearchTeamPlayers = Depends(Provide[Container.search_team_players_use_case]),
):
    """Squad members of a football team, from its Wikipedia player categories."""
    try:
        return await use_case.execute(team, limit=limit)
    except DomainError as e:
        raise domain_http_error(e, "wikipedia_team_players")
    except Exception as e:
        raise unexpected_http_error(e, "wikipedia_team_players", "Failed to fetch team players")


@router.post("/update-infobox")
@inject
async def update_infobox(
    body: UpdateInfoboxRequest,
    user: CurrentUser,
    use_case: UpdateInfoboxImage = Depends(Provide[Container.update_infobox_use_case]),
):
    try:
        return await use_case.execute(user, body.lang, body.title, body.image, body.summary)
    except DomainError as e:
        raise domain_http_error(e, "update_infobox")
    except Exception as e:
        raise unexpected_http_error(e, "update_infobox", "Failed to update infobox")
