# wikiportraits/core/categories/music.py
"""
Commons category rules for music events.

Three input shapes are accepted, all plain dicts as posted by the wizard:

* unified events: ``{"title", "date", "commonsCategory", "categoryExists", "participants": [...]}``
* festivals: ``{"eventType": "festival", "festivalData": {"festival": {...}, "selectedBands": [...], ...}}``
* concerts: ``{"eventType": "concert", "concertData": {"concert": {...}, ...}}``

Every generator returns a sorted, de-duplicated list of category names
(without the ``Category:`` prefix) or a list of ``CategoryCreationInfo``.
"""
import re
from typing import Any, Dict, List, Optional
from urllib.parse import unquote

from wikiportraits.core.domain.dates import format_date_for_display, parse_date, year_of
from wikiportraits.core.domain.models import CategoryCreationInfo

WIKIPORTRAITS = "WikiPortraits"
WIKIPORTRAITS_CONCERTS = "WikiPortraits at Concerts"
WIKIPORTRAITS_MUSIC_EVENTS = "WikiPortraits at music events"
WIKIPORTRAITS_LINK = "[[c:Commons:WikiPortraits|WikiPortraits]]"

# Series whose parent categories already exist on Commons
WELL_KNOWN_SERIES = ("eurovision", "coachella", "glastonbury")

_TRAILING_YEAR = re.compile(r"\s+\d{4}$")


def wikipedia_page_name(name: str, wikipedia_url: Optional[str] = None) -> str:
    """Article title behind a Wikipedia URL, falling back to the plain name."""
    if wikipedia_url:
        page = wikipedia_url.rstrip("/").split("/")[-1]
        return unquote(page.replace("_", " "))
    return name


def strip_trailing_year(title: str) -> str:
    return _TRAILING_YEAR.sub("", title)


def _is_unified(event_data: Dict[str, Any]) -> bool:
    return bool(event_data.get("title")) and not event_data.get("eventType")


def _festival_parts(event_data: Dict[str, Any]):
    if event_data.get("eventType") != "festival" or not event_data.get("festivalData"):
        return None
    return event_data["festivalData"]


def _concert_parts(event_data: Dict[str, Any]):
    if event_data.get("eventType") != "concert" or not event_data.get("concertData"):
        return None
    return event_data["concertData"]


def unified_event_name(event_data: Dict[str, Any]) -> tuple:
    title = event_data["title"]
    year = year_of(event_data.get("date")) or ""
    event_name = event_data.get("commonsCategory") or (f"{title} {year}" if year else title)
    return title, year, event_name


# --- Categories applied to images ---


def generate_music_categories(
    event_data: Optional[Dict[str, Any]],
    include_band: bool = True,
    include_event: bool = True,
    include_wp_integration: bool = True,
) -> List[str]:
    if not event_data:
        return [WIKIPORTRAITS]

    if _is_unified(event_data):
        return _unified_categories(event_data)

    festival_data = _festival_parts(event_data)
    if festival_data is not None:
        return _festival_categories(festival_data, include_band, include_event, include_wp_integration)

    concert_data = _concert_parts(event_data)
    if concert_data is not None:
        return _concert_categories(concert_data, include_band, include_event, include_wp_integration)

    return [WIKIPORTRAITS]


def _unified_categories(event_data: Dict[str, Any]) -> List[str]:
    categories = {WIKIPORTRAITS}
    title, year, event_name = unified_event_name(event_data)

    if year:
        # "WikiPortraits at 2025 Jærnåttå": year first, no duplicated year
        categories.add(f"WikiPortraits at {year} {strip_trailing_year(title)}")
        categories.add(f"WikiPortraits in {year}")
        categories.add(WIKIPORTRAITS_MUSIC_EVENTS)
    else:
        categories.add(f"WikiPortraits at {event_name}")

    categories.add(event_name)

    for participant in event_data.get("participants") or []:
        if participant.get("name") and participant.get("commonsCategory"):
            categories.add(participant["commonsCategory"])

    return sorted(categories)


def _festival_categories(festival_data, include_band, include_event, include_wp_integration) -> List[str]:
    categories = {WIKIPORTRAITS}
    festival = festival_data.get("festival") or {}
    name = festival.get("name")
    year = str(festival["year"]) if festival.get("year") else None

    if festival_data.get("addToWikiPortraitsConcerts") and include_wp_integration:
        categories.add(WIKIPORTRAITS_CONCERTS)

    if include_event and name and year:
        categories.add(f"{name} {year}")
        categories.add(name)
        if festival.get("location"):
            categories.add(f"Music festivals in {festival['location']}")
        if festival.get("country"):
            categories.add(f"Music festivals in {festival['country']}")
        categories.add(f"Music festivals in {year}")

    if include_band:
        for band in festival_data.get("selectedBands") or []:
            if not band.get("name"):
                continue
            categories.add(band["name"])
            if name and year:
                categories.add(f"{band['name']} at {name} {year}")

    return sorted(categories)


def _concert_categories(concert_data, include_band, include_event, include_wp_integration) -> List[str]:
    categories = {WIKIPORTRAITS}
    concert = concert_data.get("concert") or {}
    artist_name = (concert.get("artist") or {}).get("name")

    if concert_data.get("addToWikiPortraitsConcerts") and include_wp_integration:
        categories.add(WIKIPORTRAITS_CONCERTS)

    if include_band and artist_name:
        categories.add(artist_name)

    if include_event:
        if concert.get("venue"):
            categories.add(f"Concerts at {concert['venue']}")
        if concert.get("city"):
            categories.add(f"Concerts in {concert['city']}")
        if concert.get("country"):
            categories.add(f"Concerts in {concert['country']}")
        year = year_of(concert.get("date"))
        if year:
            categories.add(f"Concerts in {year}")
        if concert.get("tour"):
            categories.add(f"{concert['tour']} tour")
            if artist_name:
                categories.add(f"{artist_name} tours")

    return sorted(categories)


# --- Categories that may have to be created on Commons ---


def get_categories_to_create(event_data: Optional[Dict[str, Any]]) -> List[CategoryCreationInfo]:
    if not event_data:
        return []

    if _is_unified(event_data):
        return _unified_categories_to_create(event_data)

    festival_data = _festival_parts(event_data)
    if festival_data is not None:
        return _festival_categories_to_create(festival_data)

    concert_data = _concert_parts(event_data)
    if concert_data is not None:
        return _concert_categories_to_create(concert_data)

    return []


def _festival_categories_to_create(festival_data) -> List[CategoryCreationInfo]:
    festival = festival_data.get("festival") or {}
    name = festival.get("name")
    if not name or not festival.get("year"):
        return []

    year = str(festival["year"])
    festival_category = f"{name} {year}"
    location = f" in {festival['location']}" if festival.get("location") else ""

    result = [
        CategoryCreationInfo(
            categoryName=festival_category,
            parentCategory=name,
            description=f"[[{name}]] {year}{location}.",
            eventName=name,
        ),
        CategoryCreationInfo(
            categoryName=f"WikiPortraits at {name} {year}",
            parentCategory=WIKIPORTRAITS,
            description=f"WikiPortraits photos taken at [[{name}]] {year}.",
            eventName=name,
        ),
        CategoryCreationInfo(
            categoryName=name,
            parentCategory=WIKIPORTRAITS_CONCERTS if festival_data.get("addToWikiPortraitsConcerts") else None,
            description=f"[[{name}]] music festival.",
            eventName=name,
        ),
    ]

    for band in festival_data.get("selectedBands") or []:
        band_name = band.get("name")
        if not band_name:
            continue
        page = wikipedia_page_name(band_name, band.get("wikipediaUrl"))
        result.append(CategoryCreationInfo(
            categoryName=f"{band_name} at {name} {year}",
            parentCategory=festival_category,
            description=f"[[{page}]] performing at [[{name}]] {year}.",
            eventName=name,
        ))
        result.append(CategoryCreationInfo(
            categoryName=band_name,
            description=f"[[{page}]].",
            eventName=name,
        ))

    return result


def _concert_categories_to_create(concert_data) -> List[CategoryCreationInfo]:
    concert = concert_data.get("concert") or {}
    artist = concert.get("artist") or {}
    artist_name = artist.get("name")
    if not artist_name:
        return []

    result = [CategoryCreationInfo(
        categoryName=artist_name,
        parentCategory=WIKIPORTRAITS_CONCERTS if concert_data.get("addToWikiPortraitsConcerts") else None,
        description=f"[[{wikipedia_page_name(artist_name, artist.get('wikipediaUrl'))}]].",
        eventName=artist_name,
    )]

    if concert.get("venue"):
        city = f" in {concert['city']}" if concert.get("city") else ""
        result.append(CategoryCreationInfo(
            categoryName=f"Concerts at {concert['venue']}",
            description=f"Concerts held at {concert['venue']}{city}.",
            eventName=artist_name,
        ))

    return result


def _unified_categories_to_create(event_data: Dict[str, Any]) -> List[CategoryCreationInfo]:
    """
    Builds the full hierarchy for one event, e.g. for "Jærnåttå" in 2025:

        Jærnåttå > Jærnåttå by year > Jærnåttå 2025 > FordRekord at Jærnåttå 2025
        WikiPortraits > WikiPortraits in 2025 > WikiPortraits at 2025 Jærnåttå
    """
    title, year, event_name = unified_event_name(event_data)
    base_name = strip_trailing_year(title)
    suffix = f" {year}" if year else ""
    lowered = event_name.lower()
    well_known = any(series in lowered for series in WELL_KNOWN_SERIES)
    by_year = f"{base_name} by year"

    result = [CategoryCreationInfo(
        categoryName=base_name,
        shouldCreate=not well_known,
        description=f"[[{base_name}]].",
        eventName=base_name,
    )]

    if year:
        result.append(CategoryCreationInfo(
            categoryName=by_year,
            shouldCreate=not well_known,
            parentCategory=base_name,
            description=f"[[{base_name}]] by year.",
            eventName=base_name,
        ))

    result.append(CategoryCreationInfo(
        categoryName=event_name,
        shouldCreate=event_data.get("categoryExists") is not True,
        parentCategory=by_year if year else base_name,
        description=f"{title}{suffix}.",
        eventName=title,
    ))

    if year:
        result.append(CategoryCreationInfo(
            categoryName=f"WikiPortraits in {year}",
            parentCategory=WIKIPORTRAITS,
            description=f"Images uploaded via {WIKIPORTRAITS_LINK} in {year}.",
            eventName=WIKIPORTRAITS,
        ))

    result.append(CategoryCreationInfo(
        categoryName=WIKIPORTRAITS_MUSIC_EVENTS,
        parentCategory=WIKIPORTRAITS,
        description=f"Images from music events uploaded via {WIKIPORTRAITS_LINK}.",
        eventName=WIKIPORTRAITS,
    ))

    wp_event = f"WikiPortraits at {year} {base_name}" if year else f"WikiPortraits at {title}"
    result.append(CategoryCreationInfo(
        categoryName=wp_event,
        parentCategory=f"WikiPortraits in {year}" if year else WIKIPORTRAITS,
        description=f"Images from [[{title}]]{suffix} uploaded via {WIKIPORTRAITS_LINK}.",
        eventName=title,
        additionalParents=[WIKIPORTRAITS_MUSIC_EVENTS],
    ))

    participants = event_data.get("participants") or []
    for participant in participants:
        if participant.get("name") and participant.get("type") == "band":
            result.append(CategoryCreationInfo(
                categoryName=f"{participant['name']} at {event_name}",
                parentCategory=event_name,
                description=f"[[{participant['name']}]] performing at {title}{suffix}.",
                eventName=title,
            ))

    for participant in participants:
        if not (participant.get("name") and participant.get("commonsCategory")):
            continue
        description = f"[[{participant['name']}]] at {title}{suffix}."
        result.append(CategoryCreationInfo(
            categoryName=participant["commonsCategory"],
            parentCategory=event_name,
            description=description,
            eventName=title,
        ))
        # Second parent link only; the page is created by the entry above
        result.append(CategoryCreationInfo(
            categoryName=participant["commonsCategory"],
            shouldCreate=False,
            parentCategory=wp_event,
            description=description,
            eventName=title,
        ))

    return result


def detect_band_categories(all_categories: List[str], event_name: str) -> List[CategoryCreationInfo]:
    """Finds "<band> at <event>" categories among the image categories."""
    pattern = re.compile(rf"^(.+) at {re.escape(event_name)}$")
    found = []
    for category in all_categories:
        match = pattern.match(category)
        if match:
            found.append(CategoryCreationInfo(
                categoryName=category,
                parentCategory=event_name,
                description=f"[[{match.group(1)}]] performing at {event_name}.",
                eventName=event_name,
            ))
    return found


# --- Page names and descriptions ---


def generate_event_page_category(event_data: Dict[str, Any]) -> str:
    festival_data = _festival_parts(event_data)
    if festival_data is not None:
        festival = festival_data.get("festival") or {}
        if festival.get("name") and festival.get("year"):
            return f"{festival['name']} {festival['year']}"
        return festival.get("name") or "Unnamed Festival"

    concert_data = _concert_parts(event_data)
    if concert_data is not None:
        concert = concert_data.get("concert") or {}
        name = f"{(concert.get('artist') or {}).get('name', '')} concert"
        if concert.get("venue"):
            name += f" at {concert['venue']}"
        when = parse_date(concert.get("date"))
        if when:
            name += f" ({when.month}/{when.day}/{when.year})"
        return name

    return "Unnamed Music Event"


def generate_event_description(event_data: Dict[str, Any]) -> str:
    festival_data = _festival_parts(event_data)
    if festival_data is not None:
        festival = festival_data.get("festival") or {}
        description = f"Photos from {festival.get('name', '')}"
        if festival.get("year"):
            description += f" {festival['year']}"
        if festival.get("location"):
            description += f" in {festival['location']}"
        band_names = [b["name"] for b in festival_data.get("selectedBands") or [] if b.get("name")]
        if band_names:
            description += f". Featured band: {', '.join(band_names)}"
        return description + "."

    concert_data = _concert_parts(event_data)
    if concert_data is not None:
        concert = concert_data.get("concert") or {}
        description = f"Photos from {(concert.get('artist') or {}).get('name', '')} concert"
        if concert.get("date"):
            description += f" on {format_date_for_display(concert['date'], 'full')}"
        if concert.get("venue"):
            description += f" at {concert['venue']}"
        if concert.get("city"):
            description += f" in {concert['city']}"
        if concert.get("tour"):
            description += f" ({concert['tour']} tour)"
        return description + "."

    return "Music event photos."


def generate_image_categories(event_data: Dict[str, Any], selected_band: Optional[str] = None) -> List[str]:
    """
    Categories for a single image. Unified events skip the bare band
    category so it is not flooded with every performance photo.
    """
    if _is_unified(event_data):
        _, year, event_name = unified_event_name(event_data)
        categories = {event_name, f"WikiPortraits at {event_name}"}
        if selected_band:
            categories.add(f"{selected_band} at {event_name}")
            if year:
                categories.add(f"{selected_band} in {year}")
        return sorted(categories)

    categories = {WIKIPORTRAITS}

    festival_data = _festival_parts(event_data)
    concert_data = _concert_parts(event_data)
    if festival_data is not None:
        festival = festival_data.get("festival") or {}
        if festival_data.get("addToWikiPortraitsConcerts"):
            categories.add(WIKIPORTRAITS_CONCERTS)
        if festival.get("name") and festival.get("year"):
            categories.add(f"WikiPortraits at {festival['name']} {festival['year']}")
            if selected_band:
                categories.add(f"{selected_band} at {festival['name']} {festival['year']}")
    elif concert_data is not None:
        if concert_data.get("addToWikiPortraitsConcerts"):
            categories.add(WIKIPORTRAITS_CONCERTS)
        artist_name = ((concert_data.get("concert") or {}).get("artist") or {}).get("name")
        if artist_name:
            categories.add(artist_name)

    return sorted(categories)


def generate_artist_description(artist: Dict[str, Any], event_data: Optional[Dict[str, Any]] = None) -> str:
    description = artist.get("name", "")
    event_data = event_data or {}

    festival_data = _festival_parts(event_data)
    concert_data = _concert_parts(event_data)
    if festival_data is not None:
        festival = festival_data.get("festival") or {}
        description += f" performing at {festival.get('name', '')}"
        if festival.get("year"):
            description += f" {festival['year']}"
    elif concert_data is not None:
        concert = concert_data.get("concert") or {}
        if concert.get("venue"):
            description += f" performing at {concert['venue']}"
        if concert.get("date"):
            description += f" on {format_date_for_display(concert['date'], 'full')}"

    return description + "."
