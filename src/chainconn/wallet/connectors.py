"""Wallet connector variants behind one capability interface.

The set is closed: an injected EIP-1193 provider, a WalletConnect-bridged provider,
and the branded wallets of the catalogue below, which all go through WalletConnect.
The host application supplies the actual provider objects.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

from chainconn.domain.enums import ConnectorKind, WalletGroup
from chainconn.domain.models.events import (
    AccountsChanged,
    ChainChanged,
    ProviderDisconnected,
    ProviderEvent,
)
from chainconn.domain.models.session import AppMetadata, HandshakeResult, StoredCredential
from chainconn.exceptions import HandshakeError, SessionExpiredError

logger = logging.getLogger(__name__)


class Eip1193Provider(Protocol):
    async def request(self, method: str, params: list[Any] | None = None) -> Any: ...

    def on(self, event: str, handler: Callable[[Any], None]) -> None: ...


# (project_id, app_metadata, chain_ids) -> provider. May raise RelayUnavailableError.
ProviderFactory = Callable[[str, AppMetadata, list[int]], Awaitable[Eip1193Provider]]


class HandshakeRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    app_metadata: AppMetadata
    project_id: str
    chain_id: int | None = None


class WalletOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ConnectorKind
    name: str
    group: WalletGroup


WALLET_NAMES: dict[ConnectorKind, str] = {
    ConnectorKind.INJECTED: "Browser Wallet",
    ConnectorKind.WALLETCONNECT: "WalletConnect",
    ConnectorKind.COINBASE: "Coinbase Wallet",
    ConnectorKind.METAMASK: "MetaMask",
    ConnectorKind.RAINBOW: "Rainbow",
    ConnectorKind.TRUST: "Trust Wallet",
    ConnectorKind.UNISWAP: "Uniswap Wallet",
    ConnectorKind.OKX: "OKX Wallet",
    ConnectorKind.BYBIT: "Bybit Wallet",
    ConnectorKind.BINANCE: "Binance Wallet",
}

WALLET_GROUPS: list[tuple[WalletGroup, list[ConnectorKind]]] = [
    (
        WalletGroup.RECOMMENDED,
        [
            ConnectorKind.COINBASE,
            ConnectorKind.TRUST,
            ConnectorKind.RAINBOW,
            ConnectorKind.METAMASK,
            ConnectorKind.WALLETCONNECT,
        ],
    ),
    (
        WalletGroup.MORE,
        [
            ConnectorKind.BINANCE,
            ConnectorKind.BYBIT,
            ConnectorKind.OKX,
            ConnectorKind.TRUST,
            ConnectorKind.UNISWAP,
        ],
    ),
]


def wallet_options() -> list[WalletOption]:
    """Flattened catalogue. A wallet listed in several groups keeps its first group."""
    options: list[WalletOption] = []
    seen: set[ConnectorKind] = set()
    for group, kinds in WALLET_GROUPS:
        for kind in kinds:
            if kind in seen:
                continue
            seen.add(kind)
            options.append(WalletOption(kind=kind, name=WALLET_NAMES[kind], group=group))
    return options


def _parse_chain_id(value: Any) -> int:
    if isinstance(value, str):
        return int(value, 16) if value.startswith("0x") else int(value)
    return int(value)


class WalletConnector(ABC):
    """Capability interface every connector variant implements."""

    kind: ConnectorKind

    def __init__(self) -> None:
        self._listener: Callable[[ProviderEvent], None] | None = None

    def set_listener(self, listener: Callable[[ProviderEvent], None]) -> None:
        self._listener = listener

    def _emit(self, event: ProviderEvent) -> None:
        if self._listener is None:
            logger.debug("Dropping provider event %r, no listener", event)
            return
        self._listener(event)

    @abstractmethod
    async def connect(self, request: HandshakeRequest) -> HandshakeResult:
        """Interactive handshake."""

    @abstractmethod
    async def restore(self, request: HandshakeRequest, credential: StoredCredential) -> HandshakeResult:
        """Non-interactive re-authentication. Raises SessionExpiredError if no longer authorized."""

    @abstractmethod
    async def get_accounts(self) -> list[str]:
        """Accounts currently exposed by the wallet."""

    @abstractmethod
    async def sign_request(self, request: dict[str, Any]) -> Any:
        """Forward a signing request ({"method", "params"}) to the wallet."""

    @abstractmethod
    async def switch_chain(self, chain_id: int) -> None:
        """Ask the wallet to change its active chain."""

    @abstractmethod
    async def disconnect(self) -> None:
        """End the wallet-side session."""


class InjectedConnector(WalletConnector):
    """Talks to an EIP-1193 provider that already exists (e.g. injected by a wallet)."""

    kind = ConnectorKind.INJECTED

    def __init__(self, provider: Eip1193Provider | None = None) -> None:
        super().__init__()
        self._provider: Eip1193Provider | None = None
        if provider is not None:
            self._bind(provider)

    def _bind(self, provider: Eip1193Provider) -> None:
        self._provider = provider
        provider.on("accountsChanged", self._on_accounts_changed)
        provider.on("chainChanged", self._on_chain_changed)
        provider.on("disconnect", self._on_disconnect)

    def _on_accounts_changed(self, accounts: Any) -> None:
        self._emit(AccountsChanged(accounts=tuple(accounts or ())))

    def _on_chain_changed(self, chain_id: Any) -> None:
        self._emit(ChainChanged(chain_id=_parse_chain_id(chain_id)))

    def _on_disconnect(self, error: Any = None) -> None:
        self._emit(ProviderDisconnected(reason=str(error) if error else ""))

    async def _require_provider(self, request: HandshakeRequest) -> Eip1193Provider:
        if self._provider is None:
            raise HandshakeError("No injected wallet provider available")
        return self._provider

    async def connect(self, request: HandshakeRequest) -> HandshakeResult:
        provider = await self._require_provider(request)
        accounts = await provider.request("eth_requestAccounts", [])
        if not accounts:
            raise HandshakeError("Wallet returned no accounts")

        chain_id = _parse_chain_id(await provider.request("eth_chainId", []))
        if request.chain_id is not None and chain_id != request.chain_id:
            await self.switch_chain(request.chain_id)
            chain_id = request.chain_id
        return HandshakeResult(account_address=accounts[0], chain_id=chain_id)

    async def restore(self, request: HandshakeRequest, credential: StoredCredential) -> HandshakeResult:
        await self._require_provider(request)
        accounts = await self.get_accounts()
        if not accounts:
            raise SessionExpiredError(f"{self.kind.value} no longer authorizes any account")

        account = next(
            (a for a in accounts if a.lower() == credential.account_address.lower()),
            accounts[0],
        )
        chain_id = _parse_chain_id(await self._provider.request("eth_chainId", []))
        return HandshakeResult(account_address=account, chain_id=chain_id)

    async def get_accounts(self) -> list[str]:
        if self._provider is None:
            return []
        return list(await self._provider.request("eth_accounts", []) or [])

    async def sign_request(self, request: dict[str, Any]) -> Any:
        if self._provider is None:
            raise HandshakeError("No wallet provider available")
        return await self._provider.request(request["method"], request.get("params", []))

    async def switch_chain(self, chain_id: int) -> None:
        if self._provider is None:
            raise HandshakeError("No wallet provider available")
        await self._provider.request("wallet_switchEthereumChain", [{"chainId": hex(chain_id)}])

    async def disconnect(self) -> None:
        provider = self._provider
        close = getattr(provider, "disconnect", None)
        if close is not None:
            await close()


class WalletConnectConnector(InjectedConnector):
    """Builds its provider through the WalletConnect relay on first use.

    `kind` distinguishes the branded wallets, which all pair through WalletConnect.
    """

    def __init__(
        self,
        provider_factory: ProviderFactory | None,
        chain_ids: list[int],
        kind: ConnectorKind = ConnectorKind.WALLETCONNECT,
    ) -> None:
        super().__init__()
        if kind == ConnectorKind.INJECTED:
            raise ValueError("Injected wallets use InjectedConnector")
        self.kind = kind
        self._factory = provider_factory
        self._chain_ids = list(chain_ids)

    async def _require_provider(self, request: HandshakeRequest) -> Eip1193Provider:
        if self._provider is not None:
            return self._provider
        if not request.project_id:
            raise HandshakeError("WalletConnect project id is not configured")
        if self._factory is None:
            raise HandshakeError("No WalletConnect provider factory configured")

        provider = await self._factory(request.project_id, request.app_metadata, self._chain_ids)
        self._bind(provider)
        logger.info("WalletConnect provider ready for %s (%d chains)", self.kind.value, len(self._chain_ids))
        return provider


def build_connector(
    kind: ConnectorKind,
    chain_ids: list[int],
    injected_provider: Eip1193Provider | None = None,
    provider_factory: ProviderFactory | None = None,
) -> WalletConnector:
    """Select the connector variant for a configured kind."""
    if kind == ConnectorKind.INJECTED:
        return InjectedConnector(injected_provider)
    return WalletConnectConnector(provider_factory, chain_ids, kind=kind)
