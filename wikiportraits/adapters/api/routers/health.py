# wikiportraits/adapters/api/routers/health.py
from typing import Dict

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response, status

from wikiportraits.core.ports.commons_gateway import ICommonsGateway
from wikiportraits.core.ports.wikidata_gateway import IWikidataGateway
from wikiportraits.core.ports.wikipedia_gateway import IWikipediaGateway
from wikiportraits.shared.config import settings
from wikiportraits.shared.container import Container

logger = structlog.get_logger()

router = APIRouter(prefix="/health", tags=["System"])


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_probe():
    """Returns 200 OK while the process is serving requests."""
    return {"status": "ok", "service": settings.APP_NAME}


@router.get("/ready", status_code=status.HTTP_200_OK)
@inject
async def readiness_probe(
    response: Response,
    commons: ICommonsGateway = Depends(Provide[Container.commons_gateway]),
    wikidata: IWikidataGateway = Depends(Provide[Container.wikidata_gateway]),
    wikipedia: IWikipediaGateway = Depends(Provide[Container.wikipedia_gateway]),
) -> Dict[str, str]:
    """
    Pings each Wikimedia API the service depends on.
    Returns 503 Service Unavailable if any of them is down.
    """
    health_status = {}
    for component, gateway in (("commons", commons), ("wikidata", wikidata), ("wikipedia", wikipedia)):
        health_status[component] = "down"
        try:
            if await gateway.health_check():
                health_status[component] = "up"
        except Exception as e:
            logger.error("health_check_failed", component=component, error=str(e))

    if not all(value == "up" for value in health_status.values()):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("readiness_probe_failed", status=health_status)

    return health_status
