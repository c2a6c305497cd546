# wikiportraits/core/wikitext/templates.py
"""
WikiPortraits event templates on Commons.

All events share one parameterised template, ``Template:WikiPortraits_uploader``,
which wraps ``{{WikiPortraits}}`` and files the image under
``WikiPortraits at <year> <event>``. Older per-event templates are still
generated by `generate_template` for festivals and concerts.
"""
from typing import Any, Dict, Optional, Union

from wikiportraits.core.categories.music import wikipedia_page_name
from wikiportraits.core.domain.models import UploadType
from wikiportraits.core.ports.commons_gateway import ICommonsGateway

STANDARD_TEMPLATE_NAME = "WikiPortraits_uploader"

MUSIC_ACCENT = "#00a9b5"
DEFAULT_ACCENT = "#6B73FF"

_STANDARD_TEMPLATE = """{{WikiPortraits
 | title    = [[:{{{lang|en}}}:{{{page|{{{event}}}}}}|{{{event}}} {{{year}}}]]
 | photocat = {{#if:{{{photocat|}}}
               | {{{photocat}}}
               | WikiPortraits at {{{year}}} {{{event}}}
              }}
 | accent   = {{{accent|#4b8510}}}
}}
<includeonly>
{{#ifeq: {{NAMESPACENUMBER}} | 6
 | [[Category:{{#if:{{{category|}}}
                | {{{category}}}
                | WikiPortraits at {{{year}}} {{{event}}}
               }}]]
}}
</includeonly>
<noinclude>{{Documentation}}</noinclude>"""


def generate_standard_wikiportraits_template() -> str:
    """Body of Template:WikiPortraits_uploader, created once and reused by every event."""
    return _STANDARD_TEMPLATE


def generate_template_parameters(event_details: Dict[str, Any], year: Union[str, int]) -> str:
    """
    Usage line for one event, e.g.
    ``{{WikiPortraits_uploader|event=Jærnåttå|year=2025|lang=en|page=Jærnåttå}}``.
    """
    event_name = event_details["title"]
    params = [
        f"event={event_name}",
        f"year={year}",
        f"lang={event_details.get('language') or 'en'}",
        f"page={wikipedia_page_name(event_name, event_details.get('wikipediaUrl'))}",
    ]
    return f"{{{{{STANDARD_TEMPLATE_NAME}|{'|'.join(params)}}}}}"


async def check_template_exists(commons: ICommonsGateway, template_name: str = STANDARD_TEMPLATE_NAME) -> bool:
    title = template_name if template_name.startswith("Template:") else f"Template:{template_name}"
    return await commons.page_exists(title)


def get_standard_template_name() -> str:
    return STANDARD_TEMPLATE_NAME


def get_template_creation_summary(event_name: str) -> str:
    return f"Creating WikiPortraits event template for {event_name}"


# --- Per-event templates ---


def _event(upload_type: Union[UploadType, str], music_event_data: Optional[Dict[str, Any]]):
    """("festival", festival) / ("concert", concert) / (None, None)."""
    if UploadType(upload_type) != UploadType.MUSIC or not music_event_data:
        return None, None
    event_type = music_event_data.get("eventType")
    if event_type == "festival":
        festival = (music_event_data.get("festivalData") or {}).get("festival")
        if festival:
            return "festival", festival
    elif event_type == "concert":
        concert = (music_event_data.get("concertData") or {}).get("concert")
        if concert:
            return "concert", concert
    return None, None


def _artist_name(concert: Dict[str, Any]) -> str:
    return (concert.get("artist") or {}).get("name", "")


def generate_template_name(upload_type, music_event_data=None) -> str:
    kind, event = _event(upload_type, music_event_data)
    if kind == "festival":
        return f"WikiPortraits at {event['name']} {event['year']}"
    if kind == "concert":
        return f"WikiPortraits at {_artist_name(event)} {event.get('date', '')}".rstrip()
    return "WikiPortraits at Event"


def generate_template_title(upload_type, music_event_data=None, language: str = "en") -> str:
    kind, event = _event(upload_type, music_event_data)
    if kind == "festival":
        return f"[[{language}:{event['name']}|{event['name']} {event['year']}]]"
    if kind == "concert":
        return f"{_artist_name(event)} concert {event.get('date', '')}".rstrip()
    return "Event"


def generate_category_name(upload_type, music_event_data=None) -> str:
    kind, event = _event(upload_type, music_event_data)
    if kind == "festival":
        return f"WikiPortraits at {event['year']} {event['name']}"
    if kind == "concert":
        return f"WikiPortraits at {_artist_name(event)} {event.get('date', '')}".rstrip()
    return "WikiPortraits at Event"


def generate_accent_color(upload_type) -> str:
    return MUSIC_ACCENT if UploadType(upload_type) == UploadType.MUSIC else DEFAULT_ACCENT


def generate_template(upload_type, music_event_data=None, language: str = "en") -> str:
    title = generate_template_title(upload_type, music_event_data, language)
    category = generate_category_name(upload_type, music_event_data)
    return (
        "{{WikiPortraits\n"
        f"|title = {title}\n"
        f"|photocat = {category}\n"
        f"|accent = {generate_accent_color(upload_type)}\n"
        "}}"
        f"<includeonly>{{{{#ifeq: {{{{NAMESPACENUMBER}}}} | 6 | [[Category:{category}]]}}}}</includeonly>"
        "<noinclude>{{Documentation}}</noinclude>"
    )
