# wikiportraits/core/wikitext/descriptions.py
"""
Commons file descriptions built from the unified form.

Commons flags one-word descriptions as incomplete, so every generator
produces at least a short sentence wrapped in a language template.
"""
from typing import Any, Dict, List, Optional

from wikiportraits.core.domain.dates import format_date_for_display, year_of

FALLBACK_DESCRIPTION = "Concert photograph"


def _entity_label(item: Dict[str, Any]) -> Optional[str]:
    entity = item.get("entity") or {}
    return ((entity.get("labels") or {}).get("en") or {}).get("value") or entity.get("id")


def band_and_performers(form_data: Dict[str, Any]):
    entities = form_data.get("entities") or {}
    organizations = entities.get("organizations") or []
    band = _entity_label(organizations[0]) if organizations else None
    performers = [name for name in (_entity_label(p) for p in entities.get("people") or []) if name]
    return band, performers


def join_names(names: List[str]) -> str:
    """Oxford-comma list: A / A and B / A, B, and C."""
    if len(names) <= 1:
        return "".join(names)
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return f"{', '.join(names[:-1])}, and {names[-1]}"


def generate_music_event_description(
    form_data: Dict[str, Any],
    include_performers: bool = True,
    include_location: bool = True,
    include_date: bool = True,
    language: str = "en",
) -> str:
    """
    "{{en|1=FordRekord featuring Ola and Kari performing at Jærnåttå in Folken, Stavanger on June 15, 2025.}}"
    """
    event = form_data.get("eventDetails") or {}
    band, performers = band_and_performers(form_data)
    parts: List[str] = []

    if include_performers:
        if band:
            parts.append(band)
            if performers:
                parts.append(f"featuring {join_names(performers)}")
            parts.append("performing")
        elif performers:
            parts.append(join_names(performers))
            parts.append("performing")

    if event.get("title"):
        if parts:
            parts.append("at")
        parts.append(event["title"])

    venue, location = event.get("venue"), event.get("location")
    if include_location and (venue or location):
        places = [venue] if venue else []
        if location and location != venue:
            places.append(location)
        if parts:
            parts.append("in")
        parts.append(", ".join(places))

    if include_date and event.get("date"):
        shown = format_date_for_display(event["date"], "full")
        if shown:
            if parts:
                parts.append("on")
            parts.append(shown)

    text = " ".join(parts)
    if not text:
        return f"{{{{{language}|1={FALLBACK_DESCRIPTION}}}}}"
    text = text[0].upper() + text[1:]
    if not text.endswith("."):
        text += "."
    return f"{{{{{language}|1={text}}}}}"


def generate_minimal_description(form_data: Dict[str, Any]) -> str:
    event = form_data.get("eventDetails") or {}
    title = event.get("title")
    if not title:
        return FALLBACK_DESCRIPTION
    year = year_of(event.get("date"))
    return f"{title} {year}" if year else title


def generate_general_description(form_data: Dict[str, Any], custom_text: Optional[str] = None) -> str:
    if custom_text and custom_text.strip():
        return custom_text.strip()
    return generate_minimal_description(form_data)


def is_description_complete(description: Optional[str]) -> bool:
    """At least two words."""
    if not description or not description.strip():
        return False
    return len(description.split()) >= 2


def get_description_suggestions(form_data: Dict[str, Any]) -> List[str]:
    """Full, without date, without location, minimal; always ending with the fallback."""
    suggestions: List[str] = []
    for candidate in (
        generate_music_event_description(form_data),
        generate_music_event_description(form_data, include_date=False),
        generate_music_event_description(form_data, include_location=False),
        generate_minimal_description(form_data),
    ):
        if candidate != FALLBACK_DESCRIPTION and candidate not in suggestions:
            suggestions.append(candidate)
    suggestions.append(FALLBACK_DESCRIPTION)
    return suggestions
