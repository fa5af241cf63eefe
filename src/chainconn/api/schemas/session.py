from typing import Optional

from pydantic import BaseModel

from chainconn.wallet.connectors import WalletOption


class InitializeRequest(BaseModel):
    chain_id: Optional[int] = None


class SwitchChainRequest(BaseModel):
    chain_id: int


class WalletList(BaseModel):
    wallets: list[WalletOption]
