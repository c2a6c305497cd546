# wikiportraits/core/wikitext/commons_page.py
"""
File description pages for Commons uploads, plus small helpers over
imageinfo records returned by the Commons gateway.
"""
from datetime import date
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from wikiportraits.core.domain.models import UploadType
from wikiportraits.core.wikitext.templates import generate_template_name

COMMONS_WIKI_URL = "https://commons.wikimedia.org/wiki"
FREE_LICENSES = ("CC0", "CC-BY", "CC-BY-SA", "PD", "GPL", "LGPL")
_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def _categories_wikitext(categories: List[str]) -> str:
    return "\n".join(f"[[Category:{c}]]" for c in categories if c)


def generate_commons_template(metadata: Dict[str, Any]) -> str:
    """
    Minimal file page: Information block, license and categories.
    `metadata` needs description, author, date, source and license.
    """
    event = metadata.get("event")
    wikiportraits_category = f"WikiPortraits at {event}" if event else "WikiPortraits"
    categories = [wikiportraits_category, *(metadata.get("categories") or [])]

    return (
        "=={{int:filedesc}}==\n"
        "{{Information\n"
        f"|description={{{{en|{metadata['description']}}}}}\n"
        f"|author={metadata['author']}\n"
        f"|date={metadata['date']}\n"
        f"|source={metadata['source']}\n"
        "|permission=\n"
        "|other_versions=\n"
        "}}\n"
        "\n"
        "=={{int:license-header}}==\n"
        f"{{{{{metadata['license']}}}}}\n"
        "\n"
        f"{_categories_wikitext(categories)}"
    )


def _upload_type(metadata: Dict[str, Any]) -> UploadType:
    if metadata.get("musicEvent"):
        return UploadType.MUSIC
    if metadata.get("soccerMatch") or metadata.get("soccerPlayer"):
        return UploadType.SOCCER
    return UploadType.GENERAL


def _template_line(metadata: Dict[str, Any]) -> str:
    custom = metadata.get("template")
    if custom is not None:
        # An empty custom template removes the line
        return f"\n{{{{{custom.strip()}}}}}\n" if custom.strip() else ""
    upload_type = _upload_type(metadata)
    if upload_type == UploadType.GENERAL:
        return ""
    return f"\n{{{{{generate_template_name(upload_type, metadata.get('musicEvent'))}}}}}\n"


def _location_template(gps: Optional[Dict[str, Any]]) -> str:
    if not gps:
        return ""
    lat, lon = gps.get("latitude"), gps.get("longitude")
    if isinstance(lat, (int, float)) and isinstance(lon, (int, float)):
        return f"{{{{Location|{lat}|{lon}}}}}"
    return ""


def generate_commons_wikitext(metadata: Dict[str, Any], force_regenerate: bool = False) -> str:
    """
    Full file page for one image.

    Hand-edited wikitext (``wikitextModified``) is returned untouched
    unless `force_regenerate` is set.
    """
    if metadata.get("wikitext") and metadata.get("wikitextModified") and not force_regenerate:
        return metadata["wikitext"]

    categories = list(metadata.get("categories") or [])
    if not any(c.startswith("WikiPortraits at") for c in categories):
        event = metadata.get("wikiPortraitsEvent")
        categories.insert(0, f"WikiPortraits at {event}" if event else "WikiPortraits")

    taken_at = metadata.get("date", "")
    if metadata.get("time"):
        taken_at = f"{taken_at} {metadata['time']}"

    location = _location_template(metadata.get("gps"))
    location_line = f"\n{location}" if location else ""

    return (
        "=={{int:filedesc}}==\n"
        "{{Information\n"
        f"|description={{{{en|{metadata.get('description', '')}}}}}\n"
        f"|author={metadata.get('author', '')}\n"
        f"|date={taken_at}\n"
        f"|source={metadata.get('source', '')}\n"
        "|permission=\n"
        "|other_versions=\n"
        "}}"
        f"{location_line}\n"
        f"{_template_line(metadata)}\n"
        "=={{int:license-header}}==\n"
        f"{{{{{metadata.get('license', '')}}}}}\n"
        "\n"
        f"{_categories_wikitext(categories)}"
    )


def generate_upload_description(
    description: str,
    source: str,
    author: str,
    license: str,
    categories: List[str],
    taken_on: Optional[str] = None,
) -> str:
    """Information block for the upload itself; bare descriptions are wrapped in {{en|1=...}}."""
    if not description.startswith("{{"):
        description = f"{{{{en|1={description}}}}}"
    return (
        "== {{int:filedesc}} ==\n"
        "{{Information\n"
        f"|description={description}\n"
        f"|date={taken_on or date.today().isoformat()}\n"
        f"|source={source}\n"
        f"|author={author}\n"
        "|permission=\n"
        "|other_versions=\n"
        "}}\n"
        "\n"
        "== {{int:license-header}} ==\n"
        f"{{{{{license}}}}}\n"
        "\n"
        f"{_categories_wikitext(categories)}"
    )


# --- imageinfo helpers ---


def file_url(filename: str) -> str:
    name = filename[len("File:"):] if filename.startswith("File:") else filename
    return f"{COMMONS_WIKI_URL}/File:{quote(name, safe='')}"


def category_url(category_name: str) -> str:
    name = category_name[len("Category:"):] if category_name.startswith("Category:") else category_name
    return f"{COMMONS_WIKI_URL}/Category:{quote(name, safe='')}"


def get_license(file: Dict[str, Any]) -> Optional[str]:
    return ((file.get("extmetadata") or {}).get("LicenseShortName") or {}).get("value")


def is_image(file: Dict[str, Any]) -> bool:
    return file.get("mediatype") in ("BITMAP", "DRAWING")


def is_free_content(file: Dict[str, Any]) -> bool:
    license_name = get_license(file)
    if not license_name:
        return False
    return any(free in license_name.upper() for free in FREE_LICENSES)


def format_file_size(size_bytes: int) -> str:
    if size_bytes <= 0:
        return "0 Bytes"
    value, unit = float(size_bytes), 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[unit]}"
