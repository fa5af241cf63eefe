from enum import Enum


class ConnectorKind(str, Enum):
    """Closed set of wallet connector variants, selected at configuration time."""

    INJECTED = "injected"
    WALLETCONNECT = "walletconnect"
    COINBASE = "coinbase"
    METAMASK = "metamask"
    RAINBOW = "rainbow"
    TRUST = "trust"
    UNISWAP = "uniswap"
    OKX = "okx"
    BYBIT = "bybit"
    BINANCE = "binance"


class WalletGroup(str, Enum):
    RECOMMENDED = "Recommended"
    MORE = "More"
