# wikiportraits/core/ports/__init__.py
"""
Core Ports (Interfaces).

Protocols the infrastructure adapters implement, so the core can read and
write Commons, Wikidata and Wikipedia without knowing about HTTP.
"""

from .commons_gateway import ICommonsGateway
from .wikidata_gateway import IWikidataGateway
from .wikipedia_gateway import IWikipediaGateway

__all__ = [
    "ICommonsGateway",
    "IWikidataGateway",
    "IWikipediaGateway",
]
