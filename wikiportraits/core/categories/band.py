# wikiportraits/core/categories/band.py
"""
Band categories with disambiguation.

A band's photos go into ``<band> at <event>``, which hangs below
``<band> in <year>`` < ``<band> by year`` < ``<band>``. The top category
name must not collide with an unrelated Commons category, so the band's
P373 wins when set, and an existing category linked to another item gets
the " (band)" suffix.
"""
import re
from typing import Dict, List, Tuple

import structlog

from wikiportraits.core.domain import wikidata as wd
from wikiportraits.core.domain.models import BandCategoryInfo, CategoryCreationInfo
from wikiportraits.core.ports.commons_gateway import ICommonsGateway
from wikiportraits.core.ports.wikidata_gateway import IWikidataGateway

logger = structlog.get_logger()

_INFOBOX_QID = re.compile(r"\{\{Wikidata\s+Infobox[^}]*\|([^}|]+)", re.IGNORECASE)


def infobox_qid(wikitext: str):
    """QID passed to {{Wikidata Infobox|...}} in a category page, if any."""
    match = _INFOBOX_QID.search(wikitext or "")
    return match.group(1).strip() if match else None


async def check_needs_disambiguation(
    category_name: str,
    expected_qid: str,
    wikidata: IWikidataGateway,
    commons: ICommonsGateway,
) -> Tuple[bool, str]:
    """
    Returns (needs_disambiguation, category_name_to_use).
    Any lookup failure errs on the side of disambiguating.
    """
    try:
        try:
            entity = await wikidata.get_entity(expected_qid)
        except Exception as e:
            logger.warning("band_p373_lookup_failed", qid=expected_qid, error=str(e))
            entity = None

        p373 = wd.first_claim_value(entity, wd.P_COMMONS_CATEGORY) if entity else None
        if p373:
            logger.debug("band_category_from_p373", qid=expected_qid, category=p373)
            return p373 != category_name, p373

        if not await commons.category_exists(category_name):
            return False, category_name

        content = await commons.get_page_content(f"Category:{category_name}") or ""
        found_qid = infobox_qid(content)
        if found_qid == expected_qid:
            return False, category_name

        logger.info("band_category_collision", category=category_name, expected=expected_qid, found=found_qid)
        return True, f"{category_name} (band)"

    except Exception as e:
        logger.error("band_disambiguation_check_failed", category=category_name, error=str(e))
        return True, f"{category_name} (band)"


async def generate_band_category_structure(
    band_name: str,
    band_qid: str,
    year: str,
    event_name: str,
    wikidata: IWikidataGateway,
    commons: ICommonsGateway,
) -> BandCategoryInfo:
    needs_disambiguation, main_category = await check_needs_disambiguation(
        band_name, band_qid, wikidata, commons
    )
    return BandCategoryInfo(
        bandName=band_name,
        bandQid=band_qid,
        mainCategory=main_category,
        needsDisambiguation=needs_disambiguation,
        year=year,
        eventName=event_name,
        categoriesToCreate=band_category_hierarchy(band_name, band_qid, main_category, year, event_name),
    )


def band_category_hierarchy(
    band_name: str, band_qid: str, main_category: str, year: str, event_name: str
) -> List[CategoryCreationInfo]:
    link = f"[[d:{band_qid}|{band_name}]]"
    by_year = f"{main_category} by year"
    in_year = f"{main_category} in {year}"
    return [
        CategoryCreationInfo(categoryName=main_category, description=f"{link}.", eventName=band_name),
        CategoryCreationInfo(
            categoryName=by_year,
            parentCategory=main_category,
            description=f"{link} by year.",
            eventName=band_name,
        ),
        CategoryCreationInfo(
            categoryName=in_year,
            parentCategory=by_year,
            description=f"{link} in {year}.",
            eventName=band_name,
        ),
        CategoryCreationInfo(
            categoryName=f"{band_name} at {event_name}",
            parentCategory=in_year,
            description=f"{link} performing at {event_name}.",
            eventName=band_name,
            additionalParents=[event_name],
        ),
    ]


async def get_all_band_category_structures(
    bands: List[Dict[str, str]],
    year: str,
    event_name: str,
    wikidata: IWikidataGateway,
    commons: ICommonsGateway,
) -> List[BandCategoryInfo]:
    return [
        await generate_band_category_structure(band["name"], band["qid"], year, event_name, wikidata, commons)
        for band in bands
    ]


def flatten_band_categories(structures: List[BandCategoryInfo]) -> List[CategoryCreationInfo]:
    """All categories of all bands, first occurrence of each name wins."""
    unique: Dict[str, CategoryCreationInfo] = {}
    for structure in structures:
        for category in structure.categoriesToCreate:
            unique.setdefault(category.categoryName, category)
    return list(unique.values())
