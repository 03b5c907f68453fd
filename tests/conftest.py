"""Shared pytest fixtures for ParkHub Pass SDK tests."""

import pytest
from unittest.mock import AsyncMock

from parkhub_passes.api.client import ParkHubPassClient
from parkhub_passes.config.settings import ClientConfig
from parkhub_passes.http.client import AuthenticatedClient
from parkhub_passes.models.passes import CreationRequest, SpotType
from parkhub_passes.reliability.retry import RetryManager, RetryPolicy
from parkhub_passes.services.passes import PassesApi
from tests.helpers.fake_parkhub import FakeParkHub

TEST_API_KEY = "test_key_0123456789abcdefghijklmnopqrstuv"
EVENT_ID = "EV10001"


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: end-to-end flows over the fake API")
    config.addinivalue_line("markers", "slow: long-running tests")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer PARKHUB_* variables out of the tests."""
    for name in (
        "PARKHUB_API_KEY",
        "PARKHUB_BASE_URL",
        "PARKHUB_LANDMARK_ID",
        "PARKHUB_TIMEOUT",
        "PARKHUB_MAX_RETRIES",
        "PARKHUB_BATCH_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config():
    """Client configuration with a valid test key."""
    return ClientConfig(api_key=TEST_API_KEY)


@pytest.fixture
def fake_server():
    """Fake ParkHub API with one upcoming event."""
    return FakeParkHub(events=[
        {
            "id": EVENT_ID,
            "name": "Season Opener",
            "date": "2026-11-01T19:00:00Z",
            "venue": "North Stadium",
            "status": "scheduled",
        }
    ])


@pytest.fixture
def no_sleep():
    """Sleep replacement so retry tests do not wait."""
    return AsyncMock(return_value=None)


@pytest.fixture
def retry_manager(no_sleep):
    return RetryManager(RetryPolicy(max_retries=3), sleep=no_sleep)


@pytest.fixture
def http_client(config, fake_server, retry_manager):
    return AuthenticatedClient(
        config,
        transport=fake_server.transport,
        retry_manager=retry_manager,
    )


@pytest.fixture
def passes_api(http_client):
    return PassesApi(http_client)


@pytest.fixture
def pass_client(config, fake_server, retry_manager):
    return ParkHubPassClient(
        config,
        transport=fake_server.transport,
        retry_manager=retry_manager,
    )


@pytest.fixture
def make_request():
    """Factory for complete creation requests."""
    def _make(barcode: str, **overrides) -> CreationRequest:
        values = {
            "event_id": EVENT_ID,
            "account_id": "ACC-1",
            "barcode": barcode,
            "customer_name": f"Customer {barcode}",
            "spot_type": SpotType.REGULAR,
            "lot_id": "LOT-A",
        }
        values.update(overrides)
        return CreationRequest(**values)
    return _make


@pytest.fixture
def sample_requests(make_request):
    """Three complete requests with distinct barcodes."""
    return [make_request(f"BC00000{i}") for i in range(1, 4)]
