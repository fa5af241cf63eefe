"""WalletBridge — handshake/restore against the selected connector plus the inbound event queue."""

import asyncio
import logging
from typing import Any

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from chainconn.domain.enums import ConnectorKind
from chainconn.domain.models.events import ProviderEvent
from chainconn.domain.models.session import AppMetadata, HandshakeResult, StoredCredential
from chainconn.exceptions import HandshakeError, RelayUnavailableError, SessionExpiredError
from chainconn.wallet.connectors import HandshakeRequest, WalletConnector

logger = logging.getLogger(__name__)


class WalletBridge:
    """Owns the connector and funnels its callbacks onto one ordered queue.

    The session manager is the only consumer of `events`.
    """

    def __init__(self, connector: WalletConnector, app_metadata: AppMetadata, project_id: str) -> None:
        self._connector = connector
        self._app_metadata = app_metadata
        self._project_id = project_id
        self.events: asyncio.Queue[ProviderEvent] = asyncio.Queue()
        connector.set_listener(self.emit)

    @property
    def connector_kind(self) -> ConnectorKind:
        return self._connector.kind

    def emit(self, event: ProviderEvent) -> None:
        self.events.put_nowait(event)

    def _request(self, chain_id: int | None = None) -> HandshakeRequest:
        return HandshakeRequest(app_metadata=self._app_metadata, project_id=self._project_id, chain_id=chain_id)

    @retry(
        retry=retry_if_exception_type(RelayUnavailableError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        reraise=True,
    )
    async def _connect(self, request: HandshakeRequest) -> HandshakeResult:
        return await self._connector.connect(request)

    @retry(
        retry=retry_if_exception_type(RelayUnavailableError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        reraise=True,
    )
    async def _restore(self, request: HandshakeRequest, credential: StoredCredential) -> HandshakeResult:
        return await self._connector.restore(request, credential)

    async def handshake(self, chain_id: int | None = None) -> HandshakeResult:
        """Interactive connect. Every failure surfaces as HandshakeError."""
        logger.info("Wallet handshake via %s for %s", self.connector_kind.value, self._app_metadata.name)
        try:
            return await self._connect(self._request(chain_id))
        except HandshakeError:
            raise
        except RelayUnavailableError as exc:
            raise HandshakeError(f"Wallet relay unavailable: {exc}") from exc
        except Exception as exc:
            raise HandshakeError(f"Wallet provider initialization failed: {exc!r}") from exc

    async def restore(self, credential: StoredCredential) -> HandshakeResult:
        """Silent reconnect. SessionExpiredError passes through, other failures become HandshakeError."""
        logger.info("Silent reconnect via %s for %s", credential.connector.value, credential.account_address)
        try:
            return await self._restore(self._request(credential.chain_id), credential)
        except (HandshakeError, SessionExpiredError):
            raise
        except RelayUnavailableError as exc:
            raise HandshakeError(f"Wallet relay unavailable: {exc}") from exc
        except Exception as exc:
            raise HandshakeError(f"Wallet restore failed: {exc!r}") from exc

    async def switch_chain(self, chain_id: int) -> None:
        await self._connector.switch_chain(chain_id)

    async def sign_request(self, request: dict[str, Any]) -> Any:
        return await self._connector.sign_request(request)

    async def get_accounts(self) -> list[str]:
        return await self._connector.get_accounts()

    async def disconnect(self) -> None:
        await self._connector.disconnect()
