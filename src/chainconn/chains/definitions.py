"""Static, versioned table of supported networks."""

from chainconn.domain.enums import Chain, TransportProtocol
from chainconn.domain.models.chain import (
    BlockExplorer,
    ChainDescriptor,
    ContractDeployment,
    NativeCurrency,
    RpcEndpoint,
)

# Deterministic-deployment multicall3, same address on most EVM chains
MULTICALL3 = "0xca11bde05977b3631167028862be2a173976ca11"

ETHER = NativeCurrency(name="Ether", symbol="ETH", decimals=18)


def _http(url: str) -> RpcEndpoint:
    return RpcEndpoint(url=url, protocol=TransportProtocol.HTTP)


def _ws(url: str) -> RpcEndpoint:
    return RpcEndpoint(url=url, protocol=TransportProtocol.WEBSOCKET)


def _multicall(block_created: int | None = None, address: str = MULTICALL3) -> dict[str, ContractDeployment]:
    return {"multicall3": ContractDeployment(address=address, block_created=block_created)}


AVALANCHE = ChainDescriptor(
    id=43114,
    name="Avalanche",
    slug=Chain.AVALANCHE,
    native_currency=NativeCurrency(name="Avalanche", symbol="AVAX", decimals=18),
    rpc_endpoints=(_http("https://api.avax.network/ext/bc/C/rpc"),),
    block_explorers={
        "default": BlockExplorer(name="SnowTrace", url="https://snowtrace.io", api_url="https://api.snowtrace.io"),
    },
    known_contracts=_multicall(11907934),
)

ARBITRUM = ChainDescriptor(
    id=42161,
    name="Arbitrum One",
    slug=Chain.ARBITRUM,
    native_currency=ETHER,
    rpc_endpoints=(_http("https://arb1.arbitrum.io/rpc"),),
    block_explorers={
        "default": BlockExplorer(name="Arbiscan", url="https://arbiscan.io", api_url="https://api.arbiscan.io/api"),
    },
    known_contracts=_multicall(7654707),
)

BSC = ChainDescriptor(
    id=56,
    name="BNB Smart Chain",
    slug=Chain.BSC,
    native_currency=NativeCurrency(name="BNB", symbol="BNB", decimals=18),
    rpc_endpoints=(_http("https://rpc.ankr.com/bsc"),),
    block_explorers={
        "default": BlockExplorer(name="BscScan", url="https://bscscan.com", api_url="https://api.bscscan.com/api"),
    },
    known_contracts=_multicall(15921452),
)

BASE = ChainDescriptor(
    id=8453,
    name="Base",
    slug=Chain.BASE,
    native_currency=ETHER,
    rpc_endpoints=(_http("https://mainnet.base.org"),),
    block_explorers={
        "default": BlockExplorer(name="Basescan", url="https://basescan.org", api_url="https://api.basescan.org/api"),
    },
    known_contracts={
        **_multicall(5022),
        # OP-stack bridge contracts live on L1
        "l2OutputOracle": ContractDeployment(address="0x56315b90c40730925ec5485cf004d835058518A0"),
        "portal": ContractDeployment(address="0x49048044D57e1C92A77f79988d21Fa8fAF74E97e"),
        "l1StandardBridge": ContractDeployment(address="0x3154Cf16ccdb4C6d922629664174b904d80F2C35"),
    },
)

POLYGON = ChainDescriptor(
    id=137,
    name="Polygon",
    slug=Chain.POLYGON,
    native_currency=NativeCurrency(name="MATIC", symbol="MATIC", decimals=18),
    rpc_endpoints=(_http("https://polygon-rpc.com"),),
    block_explorers={
        "default": BlockExplorer(
            name="PolygonScan", url="https://polygonscan.com", api_url="https://api.polygonscan.com/api"
        ),
    },
    known_contracts=_multicall(25770160),
)

ZKSYNC = ChainDescriptor(
    id=324,
    name="ZKsync Era",
    slug=Chain.ZKSYNC,
    native_currency=ETHER,
    rpc_endpoints=(
        _http("https://mainnet.era.zksync.io"),
        _ws("wss://mainnet.era.zksync.io/ws"),
    ),
    block_explorers={
        "default": BlockExplorer(
            name="Etherscan", url="https://era.zksync.network/", api_url="https://api-era.zksync.network/api"
        ),
        "native": BlockExplorer(
            name="ZKsync Explorer",
            url="https://explorer.zksync.io/",
            api_url="https://block-explorer-api.mainnet.zksync.io/api",
        ),
    },
    known_contracts=_multicall(address="0xF9cda624FBC7e059355ce98a31693d299FACd963"),
)

GNOSIS = ChainDescriptor(
    id=100,
    name="Gnosis",
    slug=Chain.GNOSIS,
    native_currency=NativeCurrency(name="Gnosis", symbol="xDAI", decimals=18),
    rpc_endpoints=(
        _http("https://rpc.gnosischain.com"),
        _ws("wss://rpc.gnosischain.com/wss"),
    ),
    block_explorers={
        "default": BlockExplorer(name="Gnosisscan", url="https://gnosisscan.io", api_url="https://api.gnosisscan.io/api"),
    },
    known_contracts=_multicall(21022491),
)

ETHEREUM_CLASSIC = ChainDescriptor(
    id=61,
    name="Ethereum Classic",
    slug=Chain.ETHEREUM_CLASSIC,
    native_currency=NativeCurrency(name="ETC", symbol="ETC", decimals=18),
    rpc_endpoints=(_http("https://etc.rivet.link"),),
    block_explorers={
        "default": BlockExplorer(name="Blockscout", url="https://blockscout.com/etc/mainnet"),
    },
)

ETHEREUM = ChainDescriptor(
    id=1,
    name="Ethereum",
    slug=Chain.ETHEREUM,
    native_currency=ETHER,
    rpc_endpoints=(_http("https://cloudflare-eth.com"),),
    block_explorers={
        "default": BlockExplorer(name="Etherscan", url="https://etherscan.io", api_url="https://api.etherscan.io/api"),
    },
    known_contracts=_multicall(14353601),
)

OPTIMISM = ChainDescriptor(
    id=10,
    name="Optimism",
    slug=Chain.OPTIMISM,
    native_currency=ETHER,
    rpc_endpoints=(_http("https://mainnet.optimism.io"),),
    block_explorers={
        "default": BlockExplorer(
            name="Optimistic Explorer",
            url="https://optimistic.etherscan.io",
            api_url="https://api-optimistic.etherscan.io/api",
        ),
    },
    known_contracts=_multicall(4286263),
)

CHAINS: tuple[ChainDescriptor, ...] = (
    AVALANCHE,
    ARBITRUM,
    BSC,
    BASE,
    POLYGON,
    ZKSYNC,
    GNOSIS,
    ETHEREUM_CLASSIC,
    ETHEREUM,
    OPTIMISM,
)
