# tests/core/test_domain_models.py
import pytest
from pydantic import ValidationError

from wikiportraits.core.domain.exceptions import InvalidRequestError, MediaWikiAPIError, UploadWarningError
from wikiportraits.core.domain.models import (
    CategoryCreationInfo,
    DepictsItem,
    GeneratedCategory,
    PendingEntity,
    StepStatus,
    WikimediaCredentials,
    WorkflowState,
)
from wikiportraits.core.use_cases.structured_data import depicts_statement


class TestCredentials:

    def test_token_is_required(self):
        """Should raise ValidationError if the access token is missing."""
        with pytest.raises(ValidationError):
            WikimediaCredentials(username="Photographer")

    def test_defaults(self):
        credentials = WikimediaCredentials(username="Photographer", token="tok")

        assert credentials.user_id is None
        assert credentials.token_secret == ""


class TestCategoryModels:

    def test_creation_info_defaults(self):
        info = CategoryCreationInfo(categoryName="Jærnåttå 2025")

        assert info.shouldCreate is True
        assert info.description == ""
        assert info.model_dump(exclude_none=True) == {
            "categoryName": "Jærnåttå 2025", "shouldCreate": True, "description": "",
        }

    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            GeneratedCategory(name="X", type="auto", source="eventDetails", confidence=1.5)


class TestDepicts:

    def test_item_id_format(self):
        """Should reject depicts targets that are not item ids."""
        assert DepictsItem(qid="Q42").qid == "Q42"
        for bad in ("foo", "Q", "P180", "Q42x"):
            with pytest.raises(ValidationError):
                DepictsItem(qid=bad)

    def test_statement(self):
        statement = depicts_statement("Q42")

        assert statement["mainsnak"]["datavalue"]["value"] == {"numeric-id": 42, "id": "Q42"}

    def test_statement_rejects_bad_id(self):
        with pytest.raises(InvalidRequestError):
            depicts_statement("foo")


class TestWorkflowModels:

    def test_state_from_json(self):
        state = WorkflowState.model_validate({"uploadType": "soccer", "steps": {"images": "in-progress"}})

        assert state.activeTab == "wiki-portraits"
        assert state.steps["images"] == StepStatus.IN_PROGRESS

    def test_unknown_status(self):
        with pytest.raises(ValidationError):
            WorkflowState.model_validate({"steps": {"images": "half-done"}})

    def test_pending_entity_data(self):
        entity = PendingEntity(type="band", name="FordRekord")

        assert entity.data == {}


class TestDomainErrors:

    def test_mediawiki_error_message(self):
        error = MediaWikiAPIError("badtoken", "")

        assert error.message == "badtoken"
        assert error.status_code is None

    def test_upload_warning_message(self):
        error = UploadWarningError({"duplicate": ["A.jpg"], "exists": "B.jpg"})

        assert error.message == "Upload warning: duplicate, exists"
