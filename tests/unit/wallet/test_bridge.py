"""Tests for WalletBridge: error wrapping, relay retries, event queue."""

import pytest
from tenacity import wait_none

from chainconn.domain.enums import ConnectorKind
from chainconn.domain.models.events import ChainChanged
from chainconn.domain.models.session import StoredCredential
from chainconn.exceptions import HandshakeError, RelayUnavailableError, SessionExpiredError
from chainconn.wallet.bridge import WalletBridge


@pytest.fixture(autouse=True)
def no_retry_wait(monkeypatch):
    monkeypatch.setattr(WalletBridge._connect.retry, "wait", wait_none())
    monkeypatch.setattr(WalletBridge._restore.retry, "wait", wait_none())


CREDENTIAL = StoredCredential(connector=ConnectorKind.INJECTED, account_address="0xaaa", chain_id=137)


class TestHandshake:
    async def test_success_passes_metadata_and_project(self, bridge, connector):
        seen = []
        original = connector.connect

        async def connect(request):
            seen.append(request)
            return await original(request)

        connector.connect = connect
        result = await bridge.handshake(chain_id=10)
        assert result.chain_id == 10
        assert seen[0].project_id == "test-project"
        assert seen[0].app_metadata.name == "Test App"

    async def test_provider_exception_wrapped(self, bridge, connector):
        connector.connect_error = RuntimeError("provider init threw")
        with pytest.raises(HandshakeError, match="provider init threw"):
            await bridge.handshake()

    async def test_handshake_error_passes_through(self, bridge, connector):
        connector.connect_error = HandshakeError("user rejected")
        with pytest.raises(HandshakeError, match="user rejected"):
            await bridge.handshake()

    async def test_relay_outage_retried_then_succeeds(self, bridge, connector):
        attempts = []
        original = connector.connect

        async def flaky(request):
            attempts.append(1)
            if len(attempts) < 3:
                raise RelayUnavailableError("relay down")
            return await original(request)

        connector.connect = flaky
        result = await bridge.handshake()
        assert result.account_address == "0xaaa"
        assert len(attempts) == 3

    async def test_relay_outage_exhausts_retries(self, bridge, connector):
        connector.connect_error = RelayUnavailableError("relay down")
        with pytest.raises(HandshakeError, match="relay unavailable"):
            await bridge.handshake()
        assert connector.calls == ["connect"] * 3


class TestRestore:
    async def test_success(self, bridge):
        result = await bridge.restore(CREDENTIAL)
        assert result.account_address == "0xaaa"

    async def test_expired_passes_through(self, bridge, connector):
        connector.restore_error = SessionExpiredError("gone")
        with pytest.raises(SessionExpiredError):
            await bridge.restore(CREDENTIAL)
        assert connector.calls == ["restore"]

    async def test_other_failures_wrapped(self, bridge, connector):
        connector.restore_error = KeyError("session topic")
        with pytest.raises(HandshakeError):
            await bridge.restore(CREDENTIAL)


class TestEvents:
    async def test_connector_events_land_on_queue_in_order(self, bridge, connector):
        connector.fire(ChainChanged(chain_id=10))
        connector.fire(ChainChanged(chain_id=56))
        assert bridge.events.get_nowait() == ChainChanged(chain_id=10)
        assert bridge.events.get_nowait() == ChainChanged(chain_id=56)

    def test_connector_kind(self, bridge):
        assert bridge.connector_kind == ConnectorKind.INJECTED
