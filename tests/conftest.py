"""Shared fixtures: a fake transport wired into a real container."""

import pytest

from tests.fixtures import FakeHttpClient, install_yahoo_auth
from unified_finance.client import UnifiedFinanceClient
from unified_finance.config.state import ConfigState
from unified_finance.ingestion.dependency_container import UfcDependencyContainer


class FakeTransportContainer(UfcDependencyContainer):
    """Production wiring with the HTTP client swapped for a fake."""

    def __init__(self, config: ConfigState, http_client: FakeHttpClient):
        super().__init__(config)
        self.fake_http = http_client

    def create_http_client(self) -> FakeHttpClient:
        return self.fake_http


@pytest.fixture
def offline_config() -> ConfigState:
    """Rate limiting off, FRED enabled with a dummy key."""
    return ConfigState(
        yahoo={"rate_limit": {"enabled": False}},
        fred={"api_key": "test-fred-key", "rate_limit": {"enabled": False}},
    )


@pytest.fixture
def fake_http() -> FakeHttpClient:
    return install_yahoo_auth(FakeHttpClient())


@pytest.fixture
def container(offline_config, fake_http) -> FakeTransportContainer:
    return FakeTransportContainer(offline_config, fake_http)


@pytest.fixture
def ufc(container) -> UnifiedFinanceClient:
    return UnifiedFinanceClient.create(container=container)
