import asyncio

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from chainconn.chains.registry import ChainRegistry
from chainconn.connectivity import ConnectivityContext
from chainconn.db.session import Base
import chainconn.db.models  # noqa: F401
from chainconn.domain.enums import Chain, ConnectorKind
from chainconn.domain.models.chain import BlockExplorer, ChainDescriptor, NativeCurrency, RpcEndpoint
from chainconn.domain.models.session import AppMetadata, HandshakeResult
from chainconn.exceptions import EndpointFailure
from chainconn.infra.rpc.executors import RequestExecutor
from chainconn.infra.rpc.resolver import EndpointResolver
from chainconn.infra.rpc.transport import TransportLayer
from chainconn.session.credentials import InMemoryCredentialStore
from chainconn.session.manager import SessionManager
from chainconn.wallet.bridge import WalletBridge
from chainconn.wallet.connectors import WalletConnector

ETHER = NativeCurrency(name="Ether", symbol="ETH")


class FakeConnector(WalletConnector):
    """Scriptable wallet: gates let a test hold a handshake open, errors make it fail."""

    kind = ConnectorKind.INJECTED

    def __init__(self, account: str = "0xaaa", chain_id: int = 1) -> None:
        super().__init__()
        self.account = account
        self.chain_id = chain_id
        self.connect_gate: asyncio.Event | None = None
        self.restore_gate: asyncio.Event | None = None
        self.connect_error: Exception | None = None
        self.restore_error: Exception | None = None
        self.calls: list[str] = []
        self.disconnected = False

    async def connect(self, request):
        self.calls.append("connect")
        if self.connect_gate is not None:
            await self.connect_gate.wait()
        if self.connect_error is not None:
            raise self.connect_error
        chain_id = request.chain_id if request.chain_id is not None else self.chain_id
        return HandshakeResult(account_address=self.account, chain_id=chain_id)

    async def restore(self, request, credential):
        self.calls.append("restore")
        if self.restore_gate is not None:
            await self.restore_gate.wait()
        if self.restore_error is not None:
            raise self.restore_error
        return HandshakeResult(account_address=credential.account_address, chain_id=self.chain_id)

    async def get_accounts(self):
        return [self.account]

    async def sign_request(self, request):
        self.calls.append("sign")
        return {"signed": request["method"]}

    async def switch_chain(self, chain_id):
        self.calls.append(f"switch:{chain_id}")
        self.chain_id = chain_id

    async def disconnect(self):
        self.disconnected = True

    def fire(self, event) -> None:
        self._emit(event)


class FakeExecutor(RequestExecutor):
    """Answers every call with `result`, or `error` as a JSON-RPC error object, or fails outright."""

    def __init__(self, url: str) -> None:
        super().__init__(url)
        self.fail = False
        self.result = "0x1"
        self.error: dict | None = None
        self.payloads: list[dict] = []
        self.closed = False

    async def request(self, payload, timeout):
        self.payloads.append(payload)
        if self.fail:
            raise EndpointFailure(self.url, "connection refused")
        if self.error is not None:
            return {"jsonrpc": "2.0", "id": payload.get("id"), "error": self.error}
        return {"jsonrpc": "2.0", "id": payload.get("id"), "result": self.result}

    async def close(self):
        self.closed = True


async def _drain() -> None:
    """Let queued callbacks and tasks run."""
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture()
def drain():
    return _drain


@pytest.fixture()
def connector():
    return FakeConnector()


@pytest.fixture()
def store():
    return InMemoryCredentialStore()


@pytest.fixture()
def bridge(connector):
    return WalletBridge(connector, AppMetadata(name="Test App"), project_id="test-project")


@pytest.fixture()
def manager(bridge, store):
    return SessionManager(bridge, store, handshake_timeout=1.0)


@pytest.fixture()
def registry():
    """Three chains: Ethereum with a primary and a backup URL, OP with one, Gnosis with none."""
    return ChainRegistry.register([
        ChainDescriptor(
            id=1,
            name="Ethereum",
            slug=Chain.ETHEREUM,
            native_currency=ETHER,
            rpc_endpoints=(
                RpcEndpoint(url="https://eth-primary.test"),
                RpcEndpoint(url="https://eth-backup.test", label="backup"),
            ),
            block_explorers={"default": BlockExplorer(name="Etherscan", url="https://etherscan.io")},
        ),
        ChainDescriptor(
            id=10,
            name="OP Mainnet",
            slug=Chain.OPTIMISM,
            native_currency=ETHER,
            rpc_endpoints=(RpcEndpoint(url="https://op.test"),),
        ),
        ChainDescriptor(
            id=100,
            name="Gnosis",
            slug=Chain.GNOSIS,
            native_currency=NativeCurrency(name="xDAI", symbol="XDAI"),
            rpc_endpoints=(),
        ),
    ])


@pytest.fixture()
def executors():
    """Every FakeExecutor the transport layer has built, keyed by URL."""
    return {}


@pytest.fixture()
def transports(registry, executors):
    def factory(candidate):
        executor = FakeExecutor(candidate.url)
        executors[candidate.url] = executor
        return executor

    return TransportLayer(EndpointResolver(registry), timeout=5.0, executor_factory=factory)


@pytest.fixture()
def context(registry, transports, manager):
    return ConnectivityContext(registry, transports, manager)


@pytest.fixture()
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)
