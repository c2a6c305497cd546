# wikiportraits/core/use_cases/__init__.py
"""
Application use cases: the write operations against Commons, Wikidata and
Wikipedia, the category plan for an event and the search/lookup reads. Each class takes its ports
in the constructor and exposes `async execute()`.
"""

from .create_category import CreateCategory
from .create_template import CreateTemplate
from .edit_file_page import EditFilePage
from .lookups import (
    GetBandMembers,
    GetEntitySummary,
    SearchArtists,
    SearchMusicArticles,
    SearchTeamPlayers,
    SearchWikidata,
    SearchWikipedia,
)
from .plan_event_categories import PlanEventCategories
from .structured_data import UpdateCaptions, UpdateDepicts
from .update_infobox import UpdateInfoboxImage
from .upload_image import UploadImage
from .wikidata_writes import CreateClaim, CreateEntity

__all__ = [
    "CreateCategory",
    "CreateClaim",
    "CreateEntity",
    "CreateTemplate",
    "EditFilePage",
    "GetBandMembers",
    "GetEntitySummary",
    "PlanEventCategories",
    "SearchArtists",
    "SearchMusicArticles",
    "SearchTeamPlayers",
    "SearchWikidata",
    "SearchWikipedia",
    "UpdateCaptions",
    "UpdateDepicts",
    "UpdateInfoboxImage",
    "UploadImage",
]
