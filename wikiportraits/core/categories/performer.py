# wikiportraits/core/categories/performer.py
"""
Commons categories for individual performers (band members, solo artists).

Resolution order for a performer item:

1. P373 on the item, used as is.
2. The bare name, when Commons has no such category yet.
3. The bare name, when the existing category links to the same item (or to none).
4. A disambiguated name: "<name> (<occupation>)", "<name> (<nationality> musician)"
   or "<name> (musician)".
"""
from typing import Any, Dict, List, Optional

from wikiportraits.core.categories.band import infobox_qid
from wikiportraits.core.domain import wikidata as wd
from wikiportraits.core.domain.models import PerformerCategory
from wikiportraits.core.ports.commons_gateway import ICommonsGateway

Entity = Dict[str, Any]


def extract_commons_category(entity: Entity) -> Optional[str]:
    value = wd.first_claim_value(entity, wd.P_COMMONS_CATEGORY)
    return value if isinstance(value, str) else None


def get_occupation_for_disambiguation(entity: Entity) -> Optional[str]:
    occupations = wd.item_ids(entity, wd.P_OCCUPATION)
    if not occupations:
        return None
    for qid in occupations:
        if qid in wd.OCCUPATION_LABELS:
            return wd.OCCUPATION_LABELS[qid]
    return "musician"


def get_nationality_for_disambiguation(entity: Entity) -> Optional[str]:
    countries = wd.item_ids(entity, wd.P_COUNTRY_OF_CITIZENSHIP)
    return wd.NATIONALITY_ADJECTIVES.get(countries[0]) if countries else None


def get_disambiguated_category_name(performer_name: str, entity: Entity) -> str:
    occupation = get_occupation_for_disambiguation(entity)
    if occupation:
        return f"{performer_name} ({occupation})"
    nationality = get_nationality_for_disambiguation(entity)
    if nationality:
        return f"{performer_name} ({nationality} musician)"
    return f"{performer_name} (musician)"


def is_performer(entity: Entity) -> bool:
    return wd.is_human(entity)


async def get_performer_category(entity: Entity, commons: ICommonsGateway) -> PerformerCategory:
    name = wd.label(entity) or entity["id"]
    qid = entity["id"]

    def result(category: str, source: str, needs_creation: bool) -> PerformerCategory:
        return PerformerCategory(
            performerName=name,
            performerQid=qid,
            commonsCategory=category,
            source=source,
            needsCreation=needs_creation,
            description=f"[[d:{qid}|{name}]].",
        )

    p373 = extract_commons_category(entity)
    if p373:
        return result(p373, "p373", not await commons.category_exists(p373))

    if not await commons.category_exists(name):
        return result(name, "base", True)

    found_qid = infobox_qid(await commons.get_page_content(f"Category:{name}") or "")
    # A category without an infobox is most likely one we created earlier
    if found_qid is None or found_qid == qid:
        return result(name, "base", False)

    disambiguated = get_disambiguated_category_name(name, entity)
    return result(disambiguated, "disambiguated", not await commons.category_exists(disambiguated))


async def get_performer_categories(entities: List[Entity], commons: ICommonsGateway) -> List[PerformerCategory]:
    return [await get_performer_category(entity, commons) for entity in entities]


async def add_performer_categories_to_image(
    existing_categories: List[str], entities: List[Entity], commons: ICommonsGateway
) -> List[str]:
    categories = list(existing_categories)
    for info in await get_performer_categories(entities, commons):
        if info.commonsCategory not in categories:
            categories.append(info.commonsCategory)
    return categories


async def get_performer_category_names(entities: List[Entity], commons: ICommonsGateway) -> List[str]:
    return [info.commonsCategory for info in await get_performer_categories(entities, commons)]
