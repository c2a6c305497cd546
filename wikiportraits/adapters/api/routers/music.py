# wikiportraits/adapters/api/routers/music.py
from typing import Optional

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query

from wikiportraits.adapters.api.dependencies import domain_http_error, read_limit, unexpected_http_error
from wikiportraits.core.domain.exceptions import DomainError
from wikiportraits.core.use_cases import GetBandMembers
from wikiportraits.shared.container import Container

logger = structlog.get_logger()

router = APIRouter(prefix="/music", tags=["Music"])


@router.get("/band-members", dependencies=[read_limit("music-band-members")])
@inject
async def band_members(
    bandId: Optional[str] = Query(None),
    bandName: Optional[str] = Query(None),
    use_case: GetBandMembers = Depends(Provide[Container.get_band_members_use_case]),
):
    """Members of a band for the band-performers step, by QID or by name."""
    try:
        return await use_case.execute(band_id=bandId, band_name=bandName)
    except DomainError as e:
        raise domain_http_error(e, "band_members")
    except Exception as e:
        raise unexpected_http_error(e, "band_members", "Failed to fetch band members")
