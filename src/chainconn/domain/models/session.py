"""Wallet session snapshots and the values exchanged with the wallet bridge."""

from pydantic import BaseModel, ConfigDict

from chainconn.domain.enums import ConnectorKind, SessionState


class Session(BaseModel):
    """Immutable snapshot of the wallet-connection lifecycle.

    account_address is only present while CONNECTED. error carries the failure
    cause while in ERROR.
    """

    model_config = ConfigDict(frozen=True)

    state: SessionState = SessionState.UNINITIALIZED
    account_address: str | None = None
    active_chain_id: int | None = None
    connector: ConnectorKind | None = None
    error: str | None = None

    @property
    def is_connected(self) -> bool:
        return self.state == SessionState.CONNECTED


class AppMetadata(BaseModel):
    """appMetadata sent to the wallet bridge during handshake."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    url: str = ""
    icons: list[str] = []


class HandshakeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_address: str
    chain_id: int


class StoredCredential(BaseModel):
    """What is persisted between runs to allow a silent reconnect."""

    model_config = ConfigDict(frozen=True)

    connector: ConnectorKind
    account_address: str
    chain_id: int | None = None
