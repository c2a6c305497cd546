# wikiportraits/adapters/mediawiki/__init__.py
"""httpx implementations of the Commons, Wikidata and Wikipedia ports."""

from .client import MediaWikiClient
from .commons import CommonsAdapter
from .wikidata import WikidataAdapter
from .wikipedia import WikipediaAdapter

__all__ = [
    "MediaWikiClient",
    "CommonsAdapter",
    "WikidataAdapter",
    "WikipediaAdapter",
]
