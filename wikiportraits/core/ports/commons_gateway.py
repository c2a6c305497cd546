# wikiportraits/core/ports/commons_gateway.py
from typing import Any, Dict, List, Optional, Protocol

from wikiportraits.core.domain.models import WikimediaCredentials


class ICommonsGateway(Protocol):
    """
    Port for Wikimedia Commons (MediaWiki Action API + MediaInfo entities).
    Implementations:
    - CommonsAdapter (httpx, commons.wikimedia.org)

    Titles are passed with their namespace prefix ("File:...", "Category:...",
    "Template:...") except where a method name already says what it takes.
    """

    # --- Reads ---

    async def category_exists(self, category_name: str) -> bool:
        """True when `Category:<name>` exists. Never raises; errors read as False."""
        ...

    async def page_exists(self, title: str) -> bool:
        """Never raises; errors read as False."""
        ...

    async def get_page_content(self, title: str) -> Optional[str]:
        """Current wikitext of a page, or None when it is missing."""
        ...

    async def get_page_id(self, title: str) -> Optional[int]:
        ...

    async def search_files(self, query: str, limit: int = 20) -> List[Dict[str, Any]]:
        ...

    async def get_file_details(self, filename: str) -> Optional[Dict[str, Any]]:
        """imageinfo (url, size, mime, extmetadata...) of one file."""
        ...

    async def get_category_files(
        self, category_name: str, limit: int = 50, continue_token: Optional[str] = None
    ) -> Dict[str, Any]:
        """Returns {"files": [...], "continue": token-or-None}."""
        ...

    async def get_category_info(self, category_name: str) -> Optional[Dict[str, Any]]:
        ...

    async def get_parent_categories(self, category_name: str) -> List[str]:
        """Parent category names without the 'Category:' prefix."""
        ...

    async def get_subcategories(self, category_name: str, limit: int = 50) -> List[str]:
        ...

    async def search_categories(self, query: str, limit: int = 10) -> List[str]:
        ...

    async def get_entity(self, entity_id: str, props: str = "claims") -> Optional[Dict[str, Any]]:
        """MediaInfo entity (M<pageid>) as returned by wbgetentities."""
        ...

    # --- Writes (require credentials) ---

    async def get_csrf_token(self, auth: WikimediaCredentials) -> str:
        ...

    async def get_user_info(self, auth: WikimediaCredentials) -> Dict[str, Any]:
        """`meta=userinfo` for the credentials (id, name)."""
        ...

    async def upload(
        self,
        auth: WikimediaCredentials,
        token: str,
        filename: str,
        content: bytes,
        text: str,
        comment: str,
        ignore_warnings: bool = False,
    ) -> Dict[str, Any]:
        """
        Performs action=upload.

        Returns:
            The `upload` object of the response ({"result": "Success"|"Warning", ...}).

        Raises:
            MediaWikiAPIError: the API answered with an error body.
            UnexpectedResponseError: the response carried no `upload` object.
        """
        ...

    async def edit(
        self,
        auth: WikimediaCredentials,
        token: str,
        title: str,
        summary: str,
        text: Optional[str] = None,
        appendtext: Optional[str] = None,
        createonly: bool = False,
    ) -> Dict[str, Any]:
        """Performs action=edit and returns the `edit` object of the response."""
        ...

    async def edit_entity(
        self,
        auth: WikimediaCredentials,
        token: str,
        entity_id: str,
        data: Dict[str, Any],
        summary: str,
    ) -> Dict[str, Any]:
        """Performs wbeditentity on a MediaInfo entity."""
        ...

    async def health_check(self) -> bool:
        ...
