# tests/core/test_use_cases.py
import pytest

from wikiportraits.core.domain.exceptions import (
    DomainError,
    InvalidRequestError,
    MediaWikiAPIError,
    TemplateExistsError,
    UnexpectedResponseError,
    UploadWarningError,
)
from wikiportraits.core.domain.models import Caption, CategoryCreationInfo, DepictsItem, PendingEntity


@pytest.mark.asyncio
class TestUploadImage:

    async def test_execute_success(self, container, mock_commons, credentials):
        """
        Scenario: Commons accepts the upload.
        Expected: The stored name and the page id looked up afterwards are returned.
        """
        # Arrange
        use_case = container.upload_image_use_case()
        mock_commons.upload.return_value = {
            "result": "Success",
            "filename": "Kari_at_Jærnåttå.jpg",
            "imageinfo": {"url": "https://upload.wikimedia.org/k.jpg", "descriptionurl": "https://c/File:K"},
        }

        # Act
        result = await use_case.execute(credentials, "Kari at Jærnåttå.jpg", b"\xff\xd8", "{{Information}}")

        # Assert
        assert result.filename == "Kari_at_Jærnåttå.jpg"
        assert result.pageId == 12345
        assert result.url == "https://upload.wikimedia.org/k.jpg"
        mock_commons.get_page_id.assert_awaited_once_with("File:Kari_at_Jærnåttå.jpg")
        args = mock_commons.upload.await_args.args
        assert args[1] == "csrf+\\"
        assert args[-1] == "Uploaded via WikiPortraits"

    async def test_missing_file(self, container, mock_commons, credentials):
        with pytest.raises(InvalidRequestError):
            await container.upload_image_use_case().execute(credentials, "A.jpg", b"")
        mock_commons.upload.assert_not_awaited()

    async def test_warning(self, container, mock_commons, credentials):
        """
        Scenario: Commons stops on a duplicate warning.
        Expected: UploadWarningError carrying the warnings.
        """
        mock_commons.upload.return_value = {"result": "Warning", "warnings": {"duplicate": ["Old.jpg"]}}

        with pytest.raises(UploadWarningError) as excinfo:
            await container.upload_image_use_case().execute(credentials, "A.jpg", b"x")

        assert excinfo.value.warnings == {"duplicate": ["Old.jpg"]}
        mock_commons.get_page_id.assert_not_awaited()

    async def test_failure_result(self, container, mock_commons, credentials):
        mock_commons.upload.return_value = {"result": "Failure"}

        with pytest.raises(MediaWikiAPIError) as excinfo:
            await container.upload_image_use_case().execute(credentials, "A.jpg", b"x")

        assert excinfo.value.code == "upload-failed"

    async def test_infrastructure_failure(self, container, mock_commons, credentials):
        mock_commons.upload.side_effect = Exception("connection reset")

        with pytest.raises(DomainError) as excinfo:
            await container.upload_image_use_case().execute(credentials, "A.jpg", b"x")

        assert "Unexpected upload failure" in str(excinfo.value)


@pytest.mark.asyncio
class TestCreateCategory:

    async def test_existing_category(self, container, mock_commons, credentials):
        mock_commons.page_exists.return_value = True

        result = await container.create_category_use_case().execute(
            credentials, CategoryCreationInfo(categoryName="Jærnåttå 2025")
        )

        assert result.exists is True
        assert result.message == "Category already exists"
        mock_commons.edit.assert_not_awaited()

    async def test_creates_page(self, container, mock_commons, credentials):
        """
        Scenario: A new category with a parent and an extra parent.
        Expected: Description first, then one [[Category:]] line per parent.
        """
        info = CategoryCreationInfo(
            categoryName="FordRekord at Jærnåttå 2025",
            parentCategory="FordRekord",
            additionalParents=["Jærnåttå 2025", "FordRekord"],
            description="FordRekord at Jærnåttå.",
        )

        result = await container.create_category_use_case().execute(credentials, info)

        kwargs = mock_commons.edit.await_args.kwargs
        assert kwargs["title"] == "Category:FordRekord at Jærnåttå 2025"
        assert kwargs["text"] == (
            "FordRekord at Jærnåttå.\n\n[[Category:FordRekord]]\n[[Category:Jærnåttå 2025]]\n"
        )
        assert kwargs["summary"] == "Created category FordRekord at Jærnåttå 2025 via WikiPortraits Uploader"
        assert result.pageId == 1
        assert result.newRevision == 2

    async def test_team_category(self, container, mock_commons, credentials):
        info = CategoryCreationInfo(categoryName="Players of Viking", teamName="Viking")

        await container.create_category_use_case().execute(credentials, info)

        kwargs = mock_commons.edit.await_args.kwargs
        assert kwargs["text"] == (
            "Players of [[Viking]].\n\n"
            "[[Category:Association football players by club]]\n[[Category:Viking]]\n"
        )
        assert kwargs["summary"] == "Created category for Viking players via WikiPortraits Uploader"

    async def test_failed_edit(self, container, mock_commons, credentials):
        mock_commons.edit.return_value = {"result": "Failure"}

        with pytest.raises(UnexpectedResponseError):
            await container.create_category_use_case().execute(credentials, CategoryCreationInfo(categoryName="X"))


@pytest.mark.asyncio
class TestEditFilePage:

    async def test_prefixes_file_namespace(self, container, mock_commons, credentials):
        result = await container.edit_file_page_use_case().execute(credentials, "A.jpg", "new text")

        assert mock_commons.edit.await_args.kwargs["title"] == "File:A.jpg"
        assert result == {"success": True, "message": "Page updated successfully", "newRevisionId": 2}

    async def test_requires_wikitext(self, container, credentials):
        with pytest.raises(InvalidRequestError):
            await container.edit_file_page_use_case().execute(credentials, "File:A.jpg", "")


@pytest.mark.asyncio
class TestStructuredData:

    async def test_update_captions(self, container, mock_commons, credentials):
        captions = [Caption(language="en", text="Kari"), Caption(language="de", text="Kari")]

        result = await container.update_captions_use_case().execute(credentials, 42, captions)

        args = mock_commons.edit_entity.await_args.args
        assert args[2] == "M42"
        assert args[3] == {"labels": {
            "en": {"language": "en", "value": "Kari"},
            "de": {"language": "de", "value": "Kari"},
        }}
        assert result["message"] == "Updated captions in 2 languages: en, de"

    async def test_depicts_unchanged(self, container, mock_commons, credentials):
        """
        Scenario: The file already depicts exactly the requested items.
        Expected: Nothing is written.
        """
        mock_commons.get_entity.return_value = {"claims": {"P180": [
            {"mainsnak": {"datavalue": {"value": {"id": "Q2"}}}},
        ]}}

        result = await container.update_depicts_use_case().execute(credentials, 42, [DepictsItem(qid="Q2")])

        assert result["message"] == "Depicts already up to date - no changes needed"
        mock_commons.get_entity.assert_awaited_once_with("M42", props="claims")
        mock_commons.edit_entity.assert_not_awaited()

    async def test_depicts_replaced(self, container, mock_commons, credentials):
        result = await container.update_depicts_use_case().execute(
            credentials, 42, [DepictsItem(qid="Q2", label="Kari"), DepictsItem(qid="Q3")]
        )

        data = mock_commons.edit_entity.await_args.args[3]
        assert [c["mainsnak"]["datavalue"]["value"]["numeric-id"] for c in data["claims"]["P180"]] == [2, 3]
        assert result["message"] == "Updated depicts statements: Kari, Q3"

    async def test_captions_require_page(self, container, credentials):
        with pytest.raises(InvalidRequestError):
            await container.update_captions_use_case().execute(credentials, 0, [Caption(language="en", text="x")])


@pytest.mark.asyncio
class TestCreateTemplate:

    async def test_created(self, container, mock_commons, credentials):
        result = await container.create_template_use_case().execute(
            credentials, "WikiPortraits at Jærnåttå 2025", "{{...}}"
        )

        assert mock_commons.edit.await_args.kwargs["createonly"] is True
        assert result.templateUrl == (
            "https://commons.wikimedia.org/wiki/Template:WikiPortraits%20at%20J%C3%A6rn%C3%A5tt%C3%A5%202025"
        )
        assert result.alreadyExists is False

    async def test_existing_template_is_success(self, container, mock_commons, credentials):
        mock_commons.edit.side_effect = TemplateExistsError("Template:X")

        result = await container.create_template_use_case().execute(credentials, "X", "{{...}}")

        assert result.success is True
        assert result.alreadyExists is True
        assert result.message == "Template already exists"


@pytest.mark.asyncio
class TestWikidataWrites:

    async def test_create_claim_formats_value(self, container, mock_wikidata, credentials):
        await container.create_claim_use_case().execute(credentials, "Q1", "P585", "2025-06-15")

        value = mock_wikidata.create_claim.await_args.args[-1]
        assert value["time"] == "+2025-06-15T00:00:00Z"
        assert value["precision"] == 11

    async def test_create_claim_requires_value(self, container, credentials):
        with pytest.raises(InvalidRequestError):
            await container.create_claim_use_case().execute(credentials, "Q1", "P180", "")

    async def test_create_entity(self, container, mock_wikidata, credentials):
        result = await container.create_entity_use_case().execute(
            credentials, PendingEntity(type="band", name="FordRekord")
        )

        assert result.wikidataId == "Q123"
        assert result.wikidataUrl == "https://www.wikidata.org/wiki/Q123"
        assert result.message == 'Band "FordRekord" created successfully on wikidata.org'
        assert mock_wikidata.create_entity.await_args.args[-1] == "Created band via WikiPortraits"

    async def test_create_entity_without_id(self, container, mock_wikidata, credentials):
        mock_wikidata.create_entity.return_value = {"labels": {}}

        with pytest.raises(UnexpectedResponseError):
            await container.create_entity_use_case().execute_raw(credentials, {"labels": {}})

    async def test_create_raw(self, container, credentials):
        result = await container.create_entity_use_case().execute_raw(credentials, {"labels": {}})

        assert result["success"] is True
        assert result["entityId"] == "Q123"

    async def test_batch_reports_each_entity(self, container, credentials):
        """
        Scenario: One valid entity and one with an unknown type.
        Expected: One success, one failure, both reported with their client id.
        """
        entities = [
            PendingEntity(type="band", name="FordRekord", data={"id": "pending-1"}),
            PendingEntity(type="venue", name="Folken", data={"id": "pending-2"}),
        ]

        result = await container.create_entity_use_case().execute_batch(credentials, entities)

        assert (result["total"], result["successful"], result["failed"]) == (2, 1, 1)
        assert result["results"][0]["entityId"] == "pending-1"
        assert result["results"][0]["wikidataId"] == "Q123"
        assert result["results"][1] == {"entityId": "pending-2", "success": False, "error": "Invalid entity type"}


@pytest.mark.asyncio
class TestUpdateInfoboxImage:

    async def test_appends_image_line(self, container, mock_wikipedia, credentials):
        result = await container.update_infobox_use_case().execute(
            credentials, "nb", "FordRekord", "Kari.jpg", "Add image"
        )

        mock_wikipedia.append_to_page.assert_awaited_once_with(
            credentials, "nb", "FordRekord", "| image = Kari.jpg\n", "Add image"
        )
        assert result == {"result": "Success"}

    async def test_missing_parameters(self, container, credentials):
        with pytest.raises(InvalidRequestError, match="Missing required parameters"):
            await container.update_infobox_use_case().execute(credentials, "nb", "FordRekord", "", "Add image")


@pytest.mark.asyncio
class TestPlanEventCategories:

    async def test_only_missing(self, container, mock_commons, unified_event):
        """
        Scenario: The top event category already exists on Commons.
        Expected: It is left out; every remaining entry is unique and creatable.
        """
        mock_commons.category_exists.side_effect = lambda name: name == "Jærnåttå"

        plan = await container.plan_event_categories_use_case().execute(unified_event)
        names = [info.categoryName for info in plan]

        assert "Jærnåttå" not in names
        assert "Jærnåttå 2025" in names
        assert len(names) == len(set(names))
        assert all(info.shouldCreate for info in plan)

    async def test_full_plan_keeps_first_entry(self, container, mock_commons, unified_event):
        plan = await container.plan_event_categories_use_case().execute(unified_event, only_missing=False)

        fordrekord = [info for info in plan if info.categoryName == "FordRekord"]
        assert len(fordrekord) == 1
        assert fordrekord[0].shouldCreate is True
        mock_commons.category_exists.assert_not_awaited()

    async def test_band_hierarchy_is_added(self, container, unified_event):
        plan = await container.plan_event_categories_use_case().execute(
            unified_event, bands=[{"name": "FordRekord", "qid": "Q1"}], only_missing=False
        )
        names = [info.categoryName for info in plan]

        assert "FordRekord in 2025" in names
        assert names.count("FordRekord at Jærnåttå 2025") == 1
