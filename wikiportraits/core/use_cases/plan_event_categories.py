# wikiportraits/core/use_cases/plan_event_categories.py
from typing import Any, Dict, List, Optional

import structlog

from wikiportraits.core.categories import band, music
from wikiportraits.core.domain.dates import year_of
from wikiportraits.core.domain.exceptions import DomainError
from wikiportraits.core.domain.models import CategoryCreationInfo
from wikiportraits.core.ports.commons_gateway import ICommonsGateway
from wikiportraits.core.ports.wikidata_gateway import IWikidataGateway
from wikiportraits.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)


class PlanEventCategories:
    """
    Use Case: Lists the Commons categories an event upload needs.

    Combines the event hierarchy with the per-band hierarchies (band names
    checked for collisions with unrelated categories), keeps the first
    entry per name and, when `only_missing` is set, drops entries Commons
    already has or that are marked as not to be created.
    """

    def __init__(self, commons: ICommonsGateway, wikidata: IWikidataGateway):
        self.commons = commons
        self.wikidata = wikidata

    async def execute(
        self,
        event_data: Dict[str, Any],
        bands: Optional[List[Dict[str, str]]] = None,
        only_missing: bool = True,
    ) -> List[CategoryCreationInfo]:
        with tracer.start_as_current_span("use_case.plan_event_categories") as span:
            try:
                plan = music.get_categories_to_create(event_data)

                if bands:
                    _, year, event_name = self._event_identity(event_data)
                    structures = await band.get_all_band_category_structures(
                        bands, year, event_name, self.wikidata, self.commons
                    )
                    plan.extend(band.flatten_band_categories(structures))

                unique: Dict[str, CategoryCreationInfo] = {}
                for info in plan:
                    unique.setdefault(info.categoryName, info)
                planned = list(unique.values())
                span.set_attribute("app.planned", len(planned))

                if not only_missing:
                    return planned

                missing = []
                for info in planned:
                    if info.shouldCreate and not await self.commons.category_exists(info.categoryName):
                        missing.append(info)

                logger.info("category_plan_built", planned=len(planned), missing=len(missing))
                return missing

            except DomainError:
                raise
            except Exception as e:
                logger.error("category_plan_failed", error=str(e), exc_info=True)
                raise DomainError(f"Unexpected category planning failure: {str(e)}")

    @staticmethod
    def _event_identity(event_data: Dict[str, Any]):
        """(title, year, event category name) for any of the accepted event shapes."""
        if event_data.get("title") and not event_data.get("eventType"):
            return music.unified_event_name(event_data)
        festival = (event_data.get("festivalData") or {}).get("festival") or {}
        if festival.get("name"):
            year = str(festival.get("year") or "")
            return festival["name"], year, f"{festival['name']} {year}".strip()
        concert = (event_data.get("concertData") or {}).get("concert") or {}
        year = year_of(concert.get("date")) or ""
        name = concert.get("venue") or "Concert"
        return name, year, f"{name} {year}".strip()
