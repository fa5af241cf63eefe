"""Provider-originated notifications, delivered on the bridge's inbound queue."""

from pydantic import BaseModel, ConfigDict


class AccountsChanged(BaseModel):
    model_config = ConfigDict(frozen=True)

    accounts: tuple[str, ...]


class ChainChanged(BaseModel):
    model_config = ConfigDict(frozen=True)

    chain_id: int


class ProviderDisconnected(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: str = ""


ProviderEvent = AccountsChanged | ChainChanged | ProviderDisconnected
