"""Tests for wallet connectors over an EIP-1193 style provider."""

import pytest

from chainconn.domain.enums import ConnectorKind, WalletGroup
from chainconn.domain.models.events import AccountsChanged, ChainChanged, ProviderDisconnected
from chainconn.domain.models.session import AppMetadata, StoredCredential
from chainconn.exceptions import HandshakeError, SessionExpiredError
from chainconn.wallet.connectors import (
    HandshakeRequest,
    InjectedConnector,
    WalletConnectConnector,
    build_connector,
    wallet_options,
)

METADATA = AppMetadata(name="Test App", description="AppKit Example", url="https://example.com")


class FakeProvider:
    def __init__(self, accounts=("0xAbC",), chain_id="0x1", authorized=True) -> None:
        self.accounts = list(accounts)
        self.chain_id = chain_id
        self.authorized = authorized
        self.handlers: dict[str, object] = {}
        self.requests: list[tuple[str, list]] = []
        self.disconnected = False

    async def request(self, method, params=None):
        self.requests.append((method, params))
        if method == "eth_requestAccounts":
            self.authorized = True
            return self.accounts
        if method == "eth_accounts":
            return self.accounts if self.authorized else []
        if method == "eth_chainId":
            return self.chain_id
        if method == "wallet_switchEthereumChain":
            self.chain_id = params[0]["chainId"]
            return None
        return {"method": method, "params": params}

    def on(self, event, handler):
        self.handlers[event] = handler

    async def disconnect(self):
        self.disconnected = True


def _request(chain_id=None, project_id="pid") -> HandshakeRequest:
    return HandshakeRequest(app_metadata=METADATA, project_id=project_id, chain_id=chain_id)


class TestWalletOptions:
    def test_grouped_and_deduplicated(self):
        options = wallet_options()
        kinds = [o.kind for o in options]
        assert len(kinds) == len(set(kinds)) == 9
        trust = next(o for o in options if o.kind == ConnectorKind.TRUST)
        assert trust.group == WalletGroup.RECOMMENDED

    def test_recommended_order(self):
        recommended = [o.name for o in wallet_options() if o.group == WalletGroup.RECOMMENDED]
        assert recommended == ["Coinbase Wallet", "Trust Wallet", "Rainbow", "MetaMask", "WalletConnect"]

    def test_more_group(self):
        more = [o.kind for o in wallet_options() if o.group == WalletGroup.MORE]
        assert more == [ConnectorKind.BINANCE, ConnectorKind.BYBIT, ConnectorKind.OKX, ConnectorKind.UNISWAP]


class TestInjectedConnector:
    async def test_connect(self):
        connector = InjectedConnector(FakeProvider(chain_id="0x89"))
        result = await connector.connect(_request())
        assert result.account_address == "0xAbC"
        assert result.chain_id == 137

    async def test_connect_switches_to_requested_chain(self):
        provider = FakeProvider(chain_id="0x1")
        result = await InjectedConnector(provider).connect(_request(chain_id=10))
        assert result.chain_id == 10
        assert ("wallet_switchEthereumChain", [{"chainId": "0xa"}]) in provider.requests

    async def test_connect_without_provider(self):
        with pytest.raises(HandshakeError):
            await InjectedConnector().connect(_request())

    async def test_connect_no_accounts(self):
        with pytest.raises(HandshakeError, match="no accounts"):
            await InjectedConnector(FakeProvider(accounts=())).connect(_request())

    async def test_restore_prefers_stored_account(self):
        provider = FakeProvider(accounts=("0x111", "0x222"))
        credential = StoredCredential(connector=ConnectorKind.INJECTED, account_address="0x222", chain_id=1)
        result = await InjectedConnector(provider).restore(_request(), credential)
        assert result.account_address == "0x222"
        assert ("eth_requestAccounts", []) not in provider.requests

    async def test_restore_expired(self):
        provider = FakeProvider(authorized=False)
        credential = StoredCredential(connector=ConnectorKind.INJECTED, account_address="0xabc")
        with pytest.raises(SessionExpiredError):
            await InjectedConnector(provider).restore(_request(), credential)

    async def test_sign_request_forwards(self):
        provider = FakeProvider()
        result = await InjectedConnector(provider).sign_request({"method": "personal_sign", "params": ["0x68", "0xabc"]})
        assert result == {"method": "personal_sign", "params": ["0x68", "0xabc"]}

    async def test_events_forwarded_to_listener(self):
        provider = FakeProvider()
        connector = InjectedConnector(provider)
        received = []
        connector.set_listener(received.append)

        provider.handlers["accountsChanged"](["0xdef"])
        provider.handlers["chainChanged"]("0x38")
        provider.handlers["disconnect"]({"code": 4900})

        assert received == [
            AccountsChanged(accounts=("0xdef",)),
            ChainChanged(chain_id=56),
            ProviderDisconnected(reason="{'code': 4900}"),
        ]

    async def test_events_without_listener_are_dropped(self):
        provider = FakeProvider()
        InjectedConnector(provider)
        provider.handlers["chainChanged"](10)

    async def test_disconnect(self):
        provider = FakeProvider()
        await InjectedConnector(provider).disconnect()
        assert provider.disconnected


class TestWalletConnectConnector:
    async def test_builds_provider_with_project_and_metadata(self):
        calls = []
        provider = FakeProvider()

        async def factory(project_id, metadata, chain_ids):
            calls.append((project_id, metadata, chain_ids))
            return provider

        connector = WalletConnectConnector(factory, chain_ids=[1, 10])
        result = await connector.connect(_request())
        assert result.account_address == "0xAbC"
        assert calls == [("pid", METADATA, [1, 10])]

        await connector.connect(_request())
        assert len(calls) == 1

    async def test_missing_project_id(self):
        async def factory(project_id, metadata, chain_ids):
            raise AssertionError("must not be called")

        with pytest.raises(HandshakeError, match="project id"):
            await WalletConnectConnector(factory, chain_ids=[1]).connect(_request(project_id=""))

    async def test_missing_factory(self):
        with pytest.raises(HandshakeError, match="factory"):
            await WalletConnectConnector(None, chain_ids=[1]).connect(_request())

    def test_rejects_injected_kind(self):
        with pytest.raises(ValueError):
            WalletConnectConnector(None, chain_ids=[1], kind=ConnectorKind.INJECTED)


class TestBuildConnector:
    def test_injected(self):
        connector = build_connector(ConnectorKind.INJECTED, [1], injected_provider=FakeProvider())
        assert isinstance(connector, InjectedConnector)
        assert connector.kind == ConnectorKind.INJECTED

    def test_branded_wallet_goes_through_walletconnect(self):
        connector = build_connector(ConnectorKind.METAMASK, [1])
        assert isinstance(connector, WalletConnectConnector)
        assert connector.kind == ConnectorKind.METAMASK
