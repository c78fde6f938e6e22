"""
Tests for UnifiedFinanceClient wiring and lifecycle.
"""

import pytest

from tests.conftest import FakeTransportContainer
from tests.fixtures import FakeHttpClient
from unified_finance import UnifiedFinanceClient
from unified_finance.config.state import ConfigState
from unified_finance.ingestion.adapters.fred_plugin import MacroService
from unified_finance.ingestion.adapters.yahoo_plugin import QuoteService
from unified_finance.ingestion.connectors.aiohttp_client import AiohttpClient
from unified_finance.shared.exceptions import ConfigurationError
from unified_finance.shared.models.enums import ProviderKey


class TestCreate:
    def test_services_share_one_pipeline(self, ufc, fake_http):
        assert isinstance(ufc.quotes, QuoteService)
        assert isinstance(ufc.macro, MacroService)
        services = (ufc.quotes, ufc.history, ufc.options, ufc.stock, ufc.market, ufc.macro)
        for service in services:
            assert service.pipeline is ufc.pipeline
        assert ufc.pipeline.http_client is fake_http

    def test_default_wiring_uses_aiohttp(self, tmp_path, monkeypatch):
        monkeypatch.setenv("UFC_CONFIG_DIR", str(tmp_path))
        monkeypatch.delenv("FRED_API_KEY", raising=False)

        client = UnifiedFinanceClient.create()

        assert isinstance(client.http_client, AiohttpClient)
        assert client.macro.enabled is False

    def test_default_config_reads_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("UFC_CONFIG_DIR", str(tmp_path))
        monkeypatch.setenv("FRED_API_KEY", "key-from-env")
        monkeypatch.setenv("UFC_RATE_LIMIT_ENABLED", "false")

        client = UnifiedFinanceClient.create()

        assert client.macro.enabled is True
        assert client.rate_limit_status("yahoo").enabled is False

    def test_default_config_reads_config_dir(self, tmp_path, monkeypatch):
        (tmp_path / "unified_finance.yaml").write_text(
            "fred:\n  api_key: key-from-yaml\nbatch:\n  max_concurrency: 3\n"
        )
        monkeypatch.setenv("UFC_CONFIG_DIR", str(tmp_path))
        monkeypatch.delenv("FRED_API_KEY", raising=False)

        client = UnifiedFinanceClient.create()

        assert client.macro.enabled is True
        assert client.pipeline.batch_config.max_concurrency == 3

    def test_explicit_config_skips_loader(self, fake_http, monkeypatch):
        monkeypatch.setenv("FRED_API_KEY", "key-from-env")

        client = UnifiedFinanceClient.create(
            container=FakeTransportContainer(ConfigState(), fake_http)
        )

        assert client.macro.enabled is False

    def test_only_quote_provider_authenticates(self, ufc):
        assert set(ufc.pipeline.auth_providers) == {ProviderKey.YAHOO}


class TestRateLimitStatus:
    def test_status_per_provider(self):
        config = ConfigState(
            yahoo={"rate_limit": {"capacity": 7, "refill_rate": 7.0}},
            fred={"rate_limit": {"capacity": 3, "refill_rate": 3.0}},
        )
        client = UnifiedFinanceClient.create(
            container=FakeTransportContainer(config, FakeHttpClient())
        )

        yahoo = client.rate_limit_status("yahoo")
        fred = client.rate_limit_status(ProviderKey.FRED)

        assert yahoo.capacity == 7
        assert yahoo.available_tokens == pytest.approx(7)
        assert fred.capacity == 3

    def test_unknown_provider(self, ufc):
        with pytest.raises(ConfigurationError):
            ufc.rate_limit_status("bloomberg")


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_async_context_manager_closes_transport(self, container, fake_http):
        async with UnifiedFinanceClient.create(container=container) as client:
            assert client.http_client is fake_http
        assert fake_http.closed is True

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, ufc, fake_http):
        await ufc.close()
        fake_http.closed = False
        await ufc.close()
        assert fake_http.closed is False


class TestLoggingOptIn:
    def test_logging_left_alone_by_default(self, container, monkeypatch):
        calls = []
        monkeypatch.setattr("unified_finance.client.setup_logging", lambda **kw: calls.append(kw))

        UnifiedFinanceClient.create(container=container)

        assert calls == []

    def test_applies_logging_section(self, fake_http, monkeypatch):
        calls = []
        monkeypatch.setattr("unified_finance.client.setup_logging", lambda **kw: calls.append(kw))
        config = ConfigState(logging={"level": "DEBUG", "json_logs": False})

        UnifiedFinanceClient.create(
            container=FakeTransportContainer(config, fake_http), configure_logging=True
        )

        assert calls == [{"level": "DEBUG", "json_logs": False}]
