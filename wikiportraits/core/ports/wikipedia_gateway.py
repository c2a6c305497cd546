# wikiportraits/core/ports/wikipedia_gateway.py
from typing import Any, Dict, List, Protocol

from wikiportraits.core.domain.models import WikimediaCredentials


class IWikipediaGateway(Protocol):
    """
    Port for the language editions of Wikipedia.
    Implementations:
    - WikipediaAdapter (httpx, {lang}.wikipedia.org)
    """

    async def opensearch(self, query: str, limit: int = 10, lang: str = "en") -> List[Dict[str, str]]:
        """Title suggestions as [{"title", "description", "url"}]."""
        ...

    async def search_articles(self, query: str, lang: str = "en", limit: int = 10) -> List[Dict[str, Any]]:
        """Full-text hits (list=search)."""
        ...

    async def get_page_summaries(self, titles: List[str], lang: str = "en") -> Dict[str, Dict[str, Any]]:
        """Intro extract and categories per title."""
        ...

    async def get_category_members(self, category: str, lang: str = "en", limit: int = 50) -> List[str]:
        """Article titles (namespace 0) in a category."""
        ...

    async def append_to_page(
        self,
        auth: WikimediaCredentials,
        lang: str,
        title: str,
        appendtext: str,
        summary: str,
    ) -> Dict[str, Any]:
        """Fetches a token and appends text to an article (action=edit)."""
        ...

    async def health_check(self) -> bool:
        ...
