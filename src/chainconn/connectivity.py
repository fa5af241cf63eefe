"""ConnectivityContext — the single entry point collaborators use.

Constructed once per process and passed by reference; it owns the transport cache and
the session singleton and is the only thing that mutates them.
"""

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict

from chainconn.chains.registry import ChainRegistry
from chainconn.domain.models.chain import ChainDescriptor
from chainconn.domain.models.session import Session
from chainconn.infra.rpc.transport import Transport, TransportLayer
from chainconn.session.manager import SessionListener, SessionManager

logger = logging.getLogger(__name__)


class Connection(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    chain: ChainDescriptor
    transport: Transport
    session: Session


class ConnectivityContext:
    def __init__(self, registry: ChainRegistry, transports: TransportLayer, sessions: SessionManager) -> None:
        self._registry = registry
        self._transports = transports
        self._sessions = sessions

    @property
    def registry(self) -> ChainRegistry:
        return self._registry

    @property
    def session(self) -> Session:
        return self._sessions.session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        return self._sessions.subscribe(listener)

    async def start(self) -> None:
        self._sessions.start()

    async def close(self) -> None:
        await self._sessions.close()
        await self._transports.close()

    async def initialize(self, chain_id: int | None = None) -> Session:
        if chain_id is not None:
            self._registry.lookup(chain_id)
        return await self._sessions.initialize(chain_id)

    async def reconnect(self) -> Session:
        return await self._sessions.reconnect()

    async def connect(self, chain_id: int) -> Connection:
        """Transport for chain_id plus the current session.

        Does not switch the wallet's chain; use switch_chain for that.
        """
        chain = self._registry.lookup(chain_id)
        transport = self._transports.transport_for(chain_id)
        return Connection(chain=chain, transport=transport, session=self._sessions.session)

    def transport_for(self, chain_id: int) -> Transport:
        return self._transports.transport_for(chain_id)

    async def switch_chain(self, chain_id: int) -> Session:
        self._registry.lookup(chain_id)
        # Built before the wallet moves, so a bad endpoint config fails without side effects
        self._transports.transport_for(chain_id)
        session = await self._sessions.switch_chain(chain_id)
        logger.info("Active chain is now %s", session.active_chain_id)
        return session

    async def sign_request(self, request: dict[str, Any]) -> Any:
        return await self._sessions.sign_request(request)

    async def disconnect(self) -> Session:
        return await self._sessions.disconnect()
