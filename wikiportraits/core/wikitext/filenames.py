# wikiportraits/core/wikitext/filenames.py
"""
Filenames for uploaded images.

Two schemes exist:

* `generate_filename`: readable names from per-image metadata,
  "FordRekord at Jærnåttå 2025 03.jpg".
* `generate_commons_filename`: ASCII, underscore separated names from the
  unified form, "FordRekord_Jaernaattaa_Stavanger_2025-06-15_03.jpg",
  numbered until the name is free both in the current batch and on Commons.
"""
import re
from typing import Any, Dict, Iterable, Optional

import structlog

from wikiportraits.core.domain.dates import parse_date
from wikiportraits.core.ports.commons_gateway import ICommonsGateway

logger = structlog.get_logger()

_TRANSLITERATIONS = (
    ("æ", "ae"), ("ø", "o"), ("å", "aa"),
    ("ä", "a"), ("ö", "o"), ("ü", "u"),
    ("é", "e"), ("è", "e"), ("ê", "e"),
    ("à", "a"), ("á", "a"), ("ó", "o"), ("ú", "u"),
)
_FORBIDDEN = re.compile(r'[<>:"/\\|?*\[\]{}]')
_NOT_KEPT = re.compile(r"[^a-zA-Z0-9\s\-æøåÆØÅäöüÄÖÜß]")
_DESCRIPTION_UNSAFE = re.compile(r"[^a-zA-Z0-9\s-]")

_ARTIST_PATTERNS = (
    re.compile(r"^([A-Za-z0-9\s&-]+?)\s+(?:performing|on stage|at|during)", re.IGNORECASE),
    re.compile(r"(?:Singer|Band|Artist)\s+([A-Za-z0-9\s&-]+?)\s+(?:from|at|performing)", re.IGNORECASE),
    re.compile(r"^([A-Za-z0-9&-]+(?:\s+[A-Za-z0-9&-]+)?)"),
)
_NOT_ARTISTS = {"Photo", "Image", "Picture", "Concert", "Festival", "Performance"}


def sanitize_for_filename(text: str) -> str:
    result = text.strip()
    for source, target in _TRANSLITERATIONS:
        result = re.sub(source, target, result, flags=re.IGNORECASE)
    result = re.sub(r"\s+", "_", result)
    result = _FORBIDDEN.sub("", result)
    result = re.sub(r"_+", "_", result)
    return result.strip("_")


def sanitize_filename(filename: str) -> str:
    """Readable variant: keeps spaces and Nordic/Germanic letters, max 100 chars."""
    cleaned = _NOT_KEPT.sub("", filename)
    return re.sub(r"\s+", " ", cleaned).strip()[:100]


def needs_formatting(filename: str) -> bool:
    return bool(re.search(r"\s", filename) or _FORBIDDEN.search(filename) or "__" in filename)


def extension_of(filename: str, default: str = "jpg") -> str:
    if "." not in filename:
        return default
    return filename.rsplit(".", 1)[-1] or default


def _counter(image_index: Optional[int]) -> str:
    return f" {image_index:02d}" if image_index else ""


def extract_artist_from_description(description: str) -> Optional[str]:
    if not description:
        return None
    for pattern in _ARTIST_PATTERNS:
        match = pattern.search(description)
        if match and match.group(1):
            artist = match.group(1).strip()
            if artist not in _NOT_ARTISTS:
                return artist
    return None


def generate_filename(original_name: str, metadata: Dict[str, Any], image_index: Optional[int] = None) -> str:
    """Readable filename from per-image metadata; the original name when nothing better is known."""
    extension = extension_of(original_name)
    if metadata.get("musicEvent"):
        return _music_event_filename(metadata["musicEvent"], metadata, extension, image_index)
    if metadata.get("soccerMatch") or metadata.get("soccerPlayer"):
        return _soccer_filename(metadata, extension, image_index)
    if metadata.get("description"):
        clean = re.sub(r"\s+", "_", _DESCRIPTION_UNSAFE.sub("", metadata["description"]))[:100]
        return f"{clean}{_counter(image_index)}.{extension}"
    return original_name


def _music_event_filename(music_event, metadata, extension: str, image_index: Optional[int]) -> str:
    counter = _counter(image_index)

    if music_event.get("eventType") == "festival" and music_event.get("festivalData"):
        festival = music_event["festivalData"].get("festival") or {}
        band = metadata.get("selectedBand") or extract_artist_from_description(metadata.get("description", ""))
        if festival.get("name") and festival.get("year"):
            stem = f"{festival['name']} {festival['year']}{counter}"
            if band:
                stem = f"{band} at {stem}"
            return f"{sanitize_filename(stem)}.{extension}"

    elif music_event.get("eventType") == "concert" and music_event.get("concertData"):
        concert = music_event["concertData"].get("concert") or {}
        artist = (concert.get("artist") or {}).get("name")
        if artist and concert.get("venue"):
            event_name = concert.get("tour") or f"concert at {concert['venue']}"
            return f"{sanitize_filename(f'{artist} at {event_name}{counter}')}.{extension}"
        if artist:
            return f"{sanitize_filename(f'{artist} concert{counter}')}.{extension}"

    if metadata.get("description"):
        return f"{sanitize_filename(metadata['description'][:80] + counter)}.{extension}"
    return f"music_event{counter}.{extension}"


def _soccer_filename(metadata, extension: str, image_index: Optional[int]) -> str:
    counter = _counter(image_index)
    match = metadata.get("soccerMatch")
    if match:
        teams = f"{match.get('homeTeam')} vs {match.get('awayTeam')}"
        player = metadata.get("soccerPlayer")
        stem = f"{player['name']} at {teams}{counter}" if player else f"{teams}{counter}"
        return f"{sanitize_filename(stem)}.{extension}"
    return f"soccer_match{counter}.{extension}"


def _entity_name(item: Dict[str, Any]) -> Optional[str]:
    entity = item.get("entity") or item
    return ((entity.get("labels") or {}).get("en") or {}).get("value") or entity.get("id")


def commons_filename_base(form_data: Dict[str, Any]) -> str:
    """Performer, event title, location and date joined by underscores."""
    event = form_data.get("eventDetails") or {}
    entities = form_data.get("entities") or {}
    title = event.get("title") or "Event"

    main_performer = None
    if entities.get("organizations"):
        main_performer = _entity_name(entities["organizations"][0])
    elif entities.get("people"):
        main_performer = _entity_name(entities["people"][0])

    parts = []
    if main_performer:
        parts.append(sanitize_for_filename(main_performer))
        if title != main_performer and sanitize_for_filename(title) != parts[0]:
            parts.append(sanitize_for_filename(title))
    else:
        parts.append(sanitize_for_filename(title))

    if event.get("location"):
        parts.append(sanitize_for_filename(event["location"]))

    event_date = parse_date(event.get("date"))
    if event_date:
        parts.append(event_date.isoformat())

    return "_".join(parts)


async def generate_commons_filename(
    original_filename: str,
    form_data: Dict[str, Any],
    image_index: int,
    commons: ICommonsGateway,
    existing_filenames: Iterable[str] = (),
) -> str:
    """
    `image_index` is zero-based; the first candidate is numbered index + 1.
    The number goes up until the name is unused locally and on Commons.
    """
    extension = extension_of(original_filename).lower()
    base = commons_filename_base(form_data)
    taken = set(existing_filenames)
    counter = image_index + 1

    while True:
        filename = f"{base}_{counter:02d}.{extension}"
        if filename in taken:
            logger.debug("filename_collision_local", filename=filename)
        elif await commons.page_exists(f"File:{filename}"):
            logger.debug("filename_collision_commons", filename=filename)
        else:
            return filename
        counter += 1
