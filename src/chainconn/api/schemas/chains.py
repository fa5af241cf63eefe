from typing import Optional

from pydantic import BaseModel

from chainconn.domain.enums import Chain
from chainconn.domain.models.chain import BlockExplorer, ChainDescriptor, ContractDeployment, NativeCurrency


class ChainResponse(BaseModel):
    id: int
    name: str
    slug: Chain
    native_currency: NativeCurrency
    rpc_urls: list[str]
    block_explorer: Optional[BlockExplorer] = None
    contracts: dict[str, ContractDeployment] = {}

    @classmethod
    def from_descriptor(cls, chain: ChainDescriptor) -> "ChainResponse":
        # Only declared URLs; configured overrides may carry API keys
        return cls(
            id=chain.id,
            name=chain.name,
            slug=chain.slug,
            native_currency=chain.native_currency,
            rpc_urls=[e.url for e in chain.rpc_endpoints],
            block_explorer=chain.block_explorer,
            contracts=dict(chain.known_contracts),
        )


class ChainList(BaseModel):
    chains: list[ChainResponse]
    total: int
