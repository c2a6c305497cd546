# tests/conftest.py
import pytest
from unittest.mock import AsyncMock, MagicMock

from wikiportraits.adapters.api.rate_limit import limiter
from wikiportraits.core.domain.models import WikimediaCredentials
from wikiportraits.core.ports.commons_gateway import ICommonsGateway
from wikiportraits.core.ports.wikidata_gateway import IWikidataGateway
from wikiportraits.core.ports.wikipedia_gateway import IWikipediaGateway
from wikiportraits.shared.container import container as app_container
from wikiportraits.shared.resilience import reset_circuit_breakers


@pytest.fixture(autouse=True)
def clean_process_state():
    """Rate-limit windows and circuit breakers are module level; start every test fresh."""
    limiter.reset()
    reset_circuit_breakers()
    yield
    limiter.reset()
    reset_circuit_breakers()


@pytest.fixture(scope="function")
def mock_commons():
    """Returns a mock Commons gateway with a happy-path default for every call."""
    commons = MagicMock(spec=ICommonsGateway)
    # Async methods must be mocked with AsyncMock
    commons.category_exists = AsyncMock(return_value=False)
    commons.page_exists = AsyncMock(return_value=False)
    commons.get_page_content = AsyncMock(return_value=None)
    commons.get_page_id = AsyncMock(return_value=12345)
    commons.search_files = AsyncMock(return_value=[])
    commons.get_file_details = AsyncMock(return_value=None)
    commons.get_category_files = AsyncMock(return_value={"files": [], "continue": None})
    commons.get_category_info = AsyncMock(return_value=None)
    commons.get_parent_categories = AsyncMock(return_value=[])
    commons.get_subcategories = AsyncMock(return_value=[])
    commons.search_categories = AsyncMock(return_value=[])
    commons.get_entity = AsyncMock(return_value=None)
    commons.get_csrf_token = AsyncMock(return_value="csrf+\\")
    commons.get_user_info = AsyncMock(return_value={"id": 7, "name": "Photographer"})
    commons.upload = AsyncMock(return_value={"result": "Success", "filename": "Test.jpg"})
    commons.edit = AsyncMock(return_value={"result": "Success", "pageid": 1, "newrevid": 2})
    commons.edit_entity = AsyncMock(return_value={"success": 1})
    commons.health_check = AsyncMock(return_value=True)
    return commons


@pytest.fixture(scope="function")
def mock_wikidata():
    """Returns a mock Wikidata gateway."""
    wikidata = MagicMock(spec=IWikidataGateway)
    wikidata.search_entities = AsyncMock(return_value=[])
    wikidata.get_entities = AsyncMock(return_value={})
    wikidata.get_entity = AsyncMock(return_value=None)
    wikidata.get_claims = AsyncMock(return_value={"claims": {}})
    wikidata.search_by_statement = AsyncMock(return_value=[])
    wikidata.get_csrf_token = AsyncMock(return_value="csrf+\\")
    wikidata.create_claim = AsyncMock(return_value={"success": 1, "claim": {"id": "Q1$abc"}})
    wikidata.create_entity = AsyncMock(return_value={"id": "Q123", "labels": {}})
    wikidata.health_check = AsyncMock(return_value=True)
    return wikidata


@pytest.fixture(scope="function")
def mock_wikipedia():
    """Returns a mock Wikipedia gateway."""
    wikipedia = MagicMock(spec=IWikipediaGateway)
    wikipedia.opensearch = AsyncMock(return_value=[])
    wikipedia.search_articles = AsyncMock(return_value=[])
    wikipedia.get_page_summaries = AsyncMock(return_value={})
    wikipedia.get_category_members = AsyncMock(return_value=[])
    wikipedia.append_to_page = AsyncMock(return_value={"result": "Success"})
    wikipedia.health_check = AsyncMock(return_value=True)
    return wikipedia


@pytest.fixture(scope="function")
def container(mock_commons, mock_wikidata, mock_wikipedia):
    """
    The application container with every gateway replaced by the mocks above.
    It is the same instance the routers are wired to.
    """
    app_container.commons_gateway.override(mock_commons)
    app_container.wikidata_gateway.override(mock_wikidata)
    app_container.wikipedia_gateway.override(mock_wikipedia)
    # The generator is a singleton built on top of the commons gateway
    app_container.category_generator.reset()

    yield app_container

    app_container.commons_gateway.reset_override()
    app_container.wikidata_gateway.reset_override()
    app_container.wikipedia_gateway.reset_override()
    app_container.category_generator.reset()
    app_container.unwire()


@pytest.fixture
def credentials():
    """An OAuth-logged-in user."""
    return WikimediaCredentials(username="Photographer", user_id="7", token="tok", token_secret="sec")


@pytest.fixture
def unified_event():
    """The event shape posted by the current wizard."""
    return {
        "title": "Jærnåttå",
        "date": "2025-06-15",
        "participants": [
            {"name": "FordRekord", "type": "band", "commonsCategory": "FordRekord"},
            {"name": "Kari", "type": "person"},
        ],
    }
