"""Static chain metadata: currencies, RPC endpoints, explorers, known contracts."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PositiveInt, WrapSerializer

from chainconn.domain.enums import Chain, TransportProtocol

DEFAULT_ENDPOINT_LABEL = "default"


class NativeCurrency(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    symbol: str
    decimals: int = 18


class RpcEndpoint(BaseModel):
    """One declared RPC URL. `label` mirrors the rpcUrls group it was declared under."""

    model_config = ConfigDict(frozen=True)

    url: str
    protocol: TransportProtocol = TransportProtocol.HTTP
    label: str = DEFAULT_ENDPOINT_LABEL

    @property
    def is_default(self) -> bool:
        return self.label == DEFAULT_ENDPOINT_LABEL


class BlockExplorer(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    api_url: str | None = None


class ContractDeployment(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    block_created: int | None = None


def _read_only(value: dict[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(value)


def _as_dict(value: Mapping[str, Any], handler) -> Any:
    return handler(dict(value))


# Validated as a fresh dict, then wrapped so item assignment raises TypeError
ExplorerMap = Annotated[dict[str, BlockExplorer], AfterValidator(_read_only), WrapSerializer(_as_dict)]
ContractMap = Annotated[dict[str, ContractDeployment], AfterValidator(_read_only), WrapSerializer(_as_dict)]


class ChainDescriptor(BaseModel):
    """Immutable description of one network. Built once at startup, never mutated."""

    model_config = ConfigDict(frozen=True)

    id: PositiveInt
    name: str
    slug: Chain
    native_currency: NativeCurrency
    rpc_endpoints: tuple[RpcEndpoint, ...]
    block_explorers: ExplorerMap = Field(default_factory=dict, validate_default=True)
    known_contracts: ContractMap = Field(default_factory=dict, validate_default=True)

    @property
    def block_explorer(self) -> BlockExplorer | None:
        return self.block_explorers.get(DEFAULT_ENDPOINT_LABEL)

    def contract(self, role: str) -> ContractDeployment | None:
        return self.known_contracts.get(role)

    def explorer_address_url(self, address: str) -> str | None:
        explorer = self.block_explorer
        if explorer is None:
            return None
        return f"{explorer.url.rstrip('/')}/address/{address}"

    def explorer_tx_url(self, tx_hash: str) -> str | None:
        explorer = self.block_explorer
        if explorer is None:
            return None
        return f"{explorer.url.rstrip('/')}/tx/{tx_hash}"
