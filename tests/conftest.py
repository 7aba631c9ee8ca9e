# tests/conftest.py
import pytest
from unittest.mock import MagicMock, patch

from workdrive.adapter import WorkDriveAdapter
from workdrive.config import get_settings

BASE_URL = "https://www.zohoapis.com/workdrive"
DOWNLOAD_BASE_URL = "https://download.zoho.com"
HEADERS = {
    "Authorization": "Bearer test_token",
    "Accept": "application/vnd.api+json",
}


def make_response(status_code, body=None, content=b""):
    """Builds a mock of requests.Response. A body of None means "not JSON"."""
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    if body is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = body
    return response


def file_info(name="report.pdf", **overrides):
    """A WorkDrive file resource, as returned by GET /api/v1/files/{id}."""
    attributes = {
        "name": name,
        "type": "writer",
        "is_folder": False,
        "is_published": False,
        "modified_time_in_millisecond": 1700000000000,
        "storage_info": {"size_in_bytes": 2048},
    }
    attributes.update(overrides)
    return {"data": {"id": "file123", "type": "files", "attributes": attributes}}


@pytest.fixture
def token_provider():
    provider = MagicMock()
    provider.generate_access_token.return_value = "test_token"
    return provider


@pytest.fixture
def adapter(token_provider):
    """Fixture that creates an adapter whose requests.Session is mocked."""
    with patch("workdrive.adapter.requests.Session") as MockSession:
        adapter_instance = WorkDriveAdapter(token_provider)
        assert adapter_instance.session is MockSession.return_value
        yield adapter_instance


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; every test starts from a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
