# tests/adapters/test_commons_adapter.py
import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from wikiportraits.adapters.cache import TTLCache
from wikiportraits.adapters.mediawiki.client import MediaWikiClient
from wikiportraits.adapters.mediawiki.commons import CommonsAdapter
from wikiportraits.core.domain.exceptions import MediaWikiAPIError, TemplateExistsError, UnexpectedResponseError


def pages(*items):
    return {"query": {"pages": list(items)}}


@pytest.fixture
def client():
    mock = MagicMock(spec=MediaWikiClient)
    mock.query = AsyncMock(return_value={})
    mock.post = AsyncMock(return_value={})
    mock.get_csrf_token = AsyncMock(return_value="csrf+\\")
    return mock


@pytest.fixture
def adapter(client):
    return CommonsAdapter(client=client, cache=TTLCache(300))


@pytest.mark.asyncio
class TestCommonsReads:

    async def test_category_exists_is_cached(self, adapter, client):
        """
        Scenario: The same category is checked twice.
        Expected: One API call; the "Category:" prefix does not matter.
        """
        client.query.return_value = pages({"title": "Category:Jærnåttå 2025", "pageid": 5})

        assert await adapter.category_exists("Jærnåttå 2025") is True
        assert await adapter.category_exists("Category:Jærnåttå 2025") is True

        client.query.assert_awaited_once_with({"action": "query", "titles": "Category:Jærnåttå 2025"})

    async def test_missing_category(self, adapter, client):
        client.query.return_value = pages({"title": "Category:Nope", "missing": True})

        assert await adapter.category_exists("Nope") is False
        assert adapter.category_cache.get("Nope") is False

    async def test_failed_check_is_not_cached(self, adapter, client):
        client.query.side_effect = MediaWikiAPIError("http-503", "Service Unavailable", 503)

        assert await adapter.category_exists("Jærnåttå") is False
        assert adapter.category_cache.get("Jærnåttå") is None

    async def test_page_content(self, adapter, client):
        client.query.return_value = pages({
            "title": "File:A.jpg",
            "revisions": [{"slots": {"main": {"content": "{{Information}}"}}}],
        })

        assert await adapter.get_page_content("File:A.jpg") == "{{Information}}"

    async def test_page_id(self, adapter, client):
        client.query.return_value = pages({"title": "File:A.jpg", "pageid": 42})

        assert await adapter.get_page_id("File:A.jpg") == 42

    async def test_search_files_keeps_search_order(self, adapter, client):
        client.query.return_value = pages(
            {"title": "File:B.jpg", "pageid": 2, "index": 2, "imageinfo": [{"url": "u2", "thumburl": "t2"}]},
            {"title": "File:A.jpg", "pageid": 1, "index": 1, "imageinfo": [{"url": "u1", "mime": "image/jpeg"}]},
        )

        results = await adapter.search_files("Kari", limit=5)

        assert [r["title"] for r in results] == ["File:A.jpg", "File:B.jpg"]
        assert results[0]["mime"] == "image/jpeg"
        assert results[1]["thumbUrl"] == "t2"
        assert client.query.await_args.args[0]["gsrlimit"] == 5

    async def test_file_details(self, adapter, client):
        client.query.return_value = pages({
            "title": "File:A.jpg",
            "pageid": 1,
            "categories": [{"title": "Category:Jærnåttå 2025"}],
            "imageinfo": [{"url": "u", "user": "Photographer"}],
        })

        details = await adapter.get_file_details("A.jpg")

        assert details["categories"] == ["Jærnåttå 2025"]
        assert details["user"] == "Photographer"
        assert client.query.await_args.args[0]["titles"] == "File:A.jpg"

    async def test_category_files_continue(self, adapter, client):
        client.query.return_value = {
            "query": {"categorymembers": [{"title": "File:A.jpg", "pageid": 1}]},
            "continue": {"cmcontinue": "file|B"},
        }

        result = await adapter.get_category_files("Category:Jærnåttå", continue_token="file|A")

        assert result == {"files": [{"title": "File:A.jpg", "pageid": 1}], "continue": "file|B"}
        params = client.query.await_args.args[0]
        assert params["cmtitle"] == "Category:Jærnåttå"
        assert params["cmcontinue"] == "file|A"

    async def test_category_info(self, adapter, client):
        client.query.return_value = pages({
            "title": "Category:Jærnåttå",
            "pageid": 9,
            "touched": "2025-06-16T10:00:00Z",
            "categoryinfo": {"size": 3, "files": 2, "subcats": 1},
        })

        info = await adapter.get_category_info("Jærnåttå")

        assert info["files"] == 2
        assert info["pages"] == 0
        assert info["lastModified"] == "2025-06-16T10:00:00Z"

    async def test_category_tree(self, adapter, client):
        client.query.side_effect = [
            pages({"title": "Category:Jærnåttå 2025", "categories": [{"title": "Category:Jærnåttå by year"}]}),
            {"query": {"categorymembers": [{"title": "Category:FordRekord at Jærnåttå 2025"}]}},
            {"query": {"prefixsearch": [{"title": "Category:Jærnåttå"}]}},
        ]

        assert await adapter.get_parent_categories("Jærnåttå 2025") == ["Jærnåttå by year"]
        assert await adapter.get_subcategories("Jærnåttå 2025") == ["FordRekord at Jærnåttå 2025"]
        assert await adapter.search_categories("Jærn") == ["Jærnåttå"]

    async def test_media_info_entity(self, adapter, client):
        client.query.return_value = {"entities": {"M42": {"id": "M42", "missing": ""}}}

        assert await adapter.get_entity("M42") is None


@pytest.mark.asyncio
class TestCommonsWrites:

    async def test_upload(self, adapter, client, credentials):
        client.post.return_value = {"upload": {"result": "Success", "filename": "A.jpg"}}

        upload = await adapter.upload(credentials, "csrf", "A.jpg", b"\xff", "text", "comment", ignore_warnings=True)

        assert upload["result"] == "Success"
        args, kwargs = client.post.await_args
        assert args[1]["ignorewarnings"] == "1"
        assert kwargs["files"]["file"][0] == "A.jpg"

    async def test_upload_without_result(self, adapter, client, credentials):
        client.post.return_value = {}

        with pytest.raises(UnexpectedResponseError):
            await adapter.upload(credentials, "csrf", "A.jpg", b"\xff", "", "")

    async def test_category_edit_evicts_cache(self, adapter, client, credentials):
        """
        Scenario: A category is cached as missing and then created.
        Expected: The stale "missing" answer is dropped.
        """
        adapter.category_cache.set("Jærnåttå 2025", False)
        client.post.return_value = {"edit": {"result": "Success", "pageid": 1}}

        await adapter.edit(credentials, "csrf", "Category:Jærnåttå 2025", "create", text="[[Category:Jærnåttå]]")

        assert adapter.category_cache.get("Jærnåttå 2025") is None

    async def test_createonly_conflict(self, adapter, client, credentials):
        client.post.side_effect = MediaWikiAPIError("articleexists", "The article you tried to create already exists.")

        with pytest.raises(TemplateExistsError):
            await adapter.edit(credentials, "csrf", "Template:X", "create", text="x", createonly=True)

        assert client.post.await_args.args[1]["createonly"] == "1"

    async def test_other_edit_errors_propagate(self, adapter, client, credentials):
        client.post.side_effect = MediaWikiAPIError("protectedpage", "This page is protected.")

        with pytest.raises(MediaWikiAPIError):
            await adapter.edit(credentials, "csrf", "File:A.jpg", "edit", text="x")

    async def test_edit_entity_serializes_data(self, adapter, client, credentials):
        client.post.return_value = {"success": 1}

        await adapter.edit_entity(credentials, "csrf", "M42", {"labels": {}}, "summary")

        data = client.post.await_args.args[1]
        assert data["action"] == "wbeditentity"
        assert json.loads(data["data"]) == {"labels": {}}

    async def test_health_check(self, adapter, client):
        assert await adapter.health_check() is True

        client.query.side_effect = MediaWikiAPIError("http-503", "Service Unavailable", 503)
        assert await adapter.health_check() is False
