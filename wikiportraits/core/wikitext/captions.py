# wikiportraits/core/wikitext/captions.py
"""
Structured-data captions (MediaInfo labels).

"Ola, Kari with FordRekord at Jærnåttå Stavanger 2025", with the connector
words translated per language and English used for unknown languages.
"""
import re
from typing import Any, Dict, List, Optional

from wikiportraits.core.domain.dates import year_of
from wikiportraits.core.domain.models import Caption
from wikiportraits.core.wikitext.descriptions import band_and_performers

DEFAULT_CAPTION_LANGUAGES = ("en", "nb", "nn", "de", "fr", "es")

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "with": {
        "en": "with", "no": "med", "nb": "med", "nn": "med", "de": "mit",
        "fr": "avec", "es": "con", "it": "con", "pt": "com", "nl": "met",
        "sv": "med", "da": "med", "fi": "kanssa", "pl": "z", "ru": "с",
    },
    "at": {
        "en": "at", "no": "på", "nb": "på", "nn": "på", "de": "bei",
        "fr": "à", "es": "en", "it": "a", "pt": "em", "nl": "bij",
        "sv": "på", "da": "ved", "fi": "tapahtumassa", "pl": "na", "ru": "на",
    },
}

_TRAILING_YEAR = re.compile(r"\s+\d{4}$")


def translate(word: str, language: str) -> str:
    return TRANSLATIONS[word].get(language, word)


def generate_multilingual_captions(
    form_data: Dict[str, Any],
    location: Optional[str] = None,
    date: Optional[str] = None,
    languages=DEFAULT_CAPTION_LANGUAGES,
) -> List[Caption]:
    band, performers = band_and_performers(form_data)
    title = (form_data.get("eventDetails") or {}).get("title") or ""
    event_name = _TRAILING_YEAR.sub("", title)
    year = year_of(date) or ""

    captions = []
    for language in languages:
        text = ", ".join(performers)
        if band and performers:
            text += f" {translate('with', language)} {band}"
        elif band:
            text += band
        if event_name:
            text += f" {translate('at', language)} {event_name}"
        if location:
            text += f" {location}"
        if year:
            text += f" {year}"
        captions.append(Caption(language=language, text=text.strip()))
    return captions


def generate_caption(
    form_data: Dict[str, Any],
    location: Optional[str] = None,
    date: Optional[str] = None,
    language: str = "en",
) -> str:
    captions = generate_multilingual_captions(form_data, location, date, [language])
    return captions[0].text if captions else ""
