# wikiportraits/core/categories/wikiportraits.py
"""
The WikiPortraits project's own category tree.

    WikiPortraits
    ├── WikiPortraits in 2025
    │   └── WikiPortraits at 2025 Jærnåttå
    └── WikiPortraits at music events
        └── WikiPortraits at 2025 Jærnåttå

The year comes first in the event category so the year category sorts
chronologically.
"""
import re
from typing import Any, Dict, List

from wikiportraits.core.domain.models import CategoryCreationInfo
from wikiportraits.core.ports.commons_gateway import ICommonsGateway

WIKIPORTRAITS_LINK = "[[c:Commons:WikiPortraits|WikiPortraits]]"
EVENT_TYPES = ("music events", "concerts", "festivals")

_YEAR_SUFFIX = re.compile(r"\s*\d{4}\s*$")


def generate_wikiportraits_categories(
    event_name: str, year: str, event_type: str = "music events"
) -> Dict[str, Any]:
    main_category = get_wikiportraits_category_name(event_name, year)
    year_category = f"WikiPortraits in {year}"
    type_category = f"WikiPortraits at {event_type}"

    return {
        "mainCategory": main_category,
        "yearCategory": year_category,
        "typeCategory": type_category,
        "categoriesToCreate": [
            CategoryCreationInfo(
                categoryName=main_category,
                parentCategory=year_category,
                description=f"Images from [[{event_name}]] uploaded via {WIKIPORTRAITS_LINK}.",
                eventName=event_name,
                additionalParents=[type_category],
            ),
            CategoryCreationInfo(
                categoryName=year_category,
                parentCategory="WikiPortraits",
                description=f"Images uploaded via {WIKIPORTRAITS_LINK} in {year}.",
                eventName="WikiPortraits",
            ),
            CategoryCreationInfo(
                categoryName=type_category,
                parentCategory="WikiPortraits",
                description=f"Images from music events uploaded via {WIKIPORTRAITS_LINK}.",
                eventName="WikiPortraits",
            ),
        ],
    }


def get_wikiportraits_category_name(event_name: str, year: str) -> str:
    return f"WikiPortraits at {year} {event_name}"


def extract_event_name_without_year(full_event_name: str) -> str:
    """Strips a trailing year: "Jærnåttå 2025" -> "Jærnåttå"."""
    return _YEAR_SUFFIX.sub("", full_event_name).strip()


async def get_wikiportraits_categories_to_create(
    commons: ICommonsGateway,
    event_name: str,
    year: str,
    event_type: str = "music events",
) -> List[CategoryCreationInfo]:
    """Only the categories of the tree that Commons does not have yet."""
    info = generate_wikiportraits_categories(event_name, year, event_type)
    missing = []
    for category in info["categoriesToCreate"]:
        if not await commons.category_exists(category.categoryName):
            missing.append(category)
    return missing
