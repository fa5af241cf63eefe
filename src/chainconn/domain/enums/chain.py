from enum import Enum


class Chain(str, Enum):
    """Supported networks by slug. Values lowercase to match RPC/API conventions."""

    ETHEREUM = "ethereum"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"
    POLYGON = "polygon"
    BASE = "base"
    BSC = "bsc"
    AVALANCHE = "avalanche"
    ZKSYNC = "zksync"
    GNOSIS = "gnosis"
    ETHEREUM_CLASSIC = "ethereum_classic"
