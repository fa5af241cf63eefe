"""SessionManager — the wallet-connection lifecycle state machine.

    uninitialized -> initializing -> connected | disconnected | error
    connected -> reconnecting -> connected | disconnected
    any -> disconnected (explicit teardown, provider disconnect)
    error -> initializing (explicit retry only)

initialize() and reconnect() both write the session, so they are serialized behind one
lock; a reconnect issued while an initialize is pending waits for it. Provider events
(account/chain changed, disconnected) never wait on that lock. Teardown bumps an epoch
and cancels the in-flight attempt; an attempt that finishes under a stale epoch is
discarded. Credential save and clear share one lock, and a save queued behind a
teardown is dropped, so an ended session is never written back.
"""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from chainconn.domain.enums import SessionState
from chainconn.domain.models.events import AccountsChanged, ChainChanged, ProviderDisconnected, ProviderEvent
from chainconn.domain.models.session import HandshakeResult, Session, StoredCredential
from chainconn.exceptions import HandshakeError, SessionExpiredError, SessionNotConnectedError
from chainconn.session.credentials import CredentialStore
from chainconn.wallet.bridge import WalletBridge

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session], None]


class _Superseded(Exception):
    """Raised internally when an attempt's result must not be applied."""


class SessionManager:
    def __init__(
        self,
        bridge: WalletBridge,
        credentials: CredentialStore,
        handshake_timeout: float = 30.0,
    ) -> None:
        self._bridge = bridge
        self._credentials = credentials
        self._timeout = handshake_timeout
        self._session = Session()
        self._entry_lock = asyncio.Lock()
        self._store_lock = asyncio.Lock()  # orders save and clear against each other
        self._epoch = 0
        self._inflight: asyncio.Future | None = None
        self._pending: dict[str, Any] = {}  # provider ground truth seen while an attempt is in flight
        self._listeners: list[SessionListener] = []
        self._consumer: asyncio.Task | None = None

    @property
    def session(self) -> Session:
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener for session snapshots. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> None:
        """Begin consuming provider events. Must be called from a running event loop."""
        if self._consumer is None or self._consumer.done():
            self._consumer = asyncio.create_task(self._consume_events())

    async def close(self) -> None:
        """Cancel in-flight attempts and stop consuming events. Session state is left as-is."""
        self._cancel_inflight()
        consumer, self._consumer = self._consumer, None
        if consumer is not None:
            consumer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await consumer

    # -- application-initiated transitions --

    async def initialize(self, chain_id: int | None = None) -> Session:
        """Interactive handshake. Failures end in ERROR, never raise."""
        async with self._entry_lock:
            if self._session.state == SessionState.CONNECTED:
                return self._session

            epoch = self._begin(Session(state=SessionState.INITIALIZING, connector=self._bridge.connector_kind))
            try:
                result = await self._attempt(self._bridge.handshake(chain_id), epoch)
            except _Superseded:
                return self._session
            except HandshakeError as exc:
                logger.warning("Wallet handshake failed: %s", exc)
                self._transition(
                    Session(state=SessionState.ERROR, connector=self._bridge.connector_kind, error=str(exc))
                )
                return self._session

            return await self._complete(result, preferred_chain_id=None)

    async def reconnect(self) -> Session:
        """Silent re-authentication from the stored credential. Failures end in DISCONNECTED."""
        async with self._entry_lock:
            state = self._session.state
            if state == SessionState.ERROR:
                logger.info("Session is in error state, reconnect ignored until initialize is retried")
                return self._session

            epoch = self._epoch
            credential = await self._credentials.load()
            if epoch != self._epoch:
                logger.info("Session torn down while loading the stored credential, reconnect abandoned")
                return self._session

            if credential is None:
                if state != SessionState.CONNECTED:
                    self._transition(Session(state=SessionState.DISCONNECTED))
                return self._session

            if credential.connector != self._bridge.connector_kind:
                logger.info(
                    "Stored credential is for %s but %s is configured, discarding",
                    credential.connector.value, self._bridge.connector_kind.value,
                )
                self._transition(Session(state=SessionState.DISCONNECTED))
                await self._clear_credentials()
                return self._session

            epoch = self._begin(
                Session(
                    state=SessionState.RECONNECTING,
                    active_chain_id=credential.chain_id,
                    connector=credential.connector,
                )
            )
            try:
                result = await self._attempt(self._bridge.restore(credential), epoch)
            except _Superseded:
                return self._session
            except SessionExpiredError as exc:
                logger.info("Stored wallet session expired: %s", exc)
                self._transition(Session(state=SessionState.DISCONNECTED))
                await self._clear_credentials()
                return self._session
            except HandshakeError as exc:
                logger.warning("Silent reconnect failed: %s", exc)
                self._transition(Session(state=SessionState.DISCONNECTED))
                return self._session

            return await self._complete(result, preferred_chain_id=credential.chain_id)

    async def switch_chain(self, chain_id: int) -> Session:
        if not self._session.is_connected:
            raise SessionNotConnectedError(f"Cannot switch chain while {self._session.state.value}")

        epoch = self._epoch
        try:
            await asyncio.wait_for(self._bridge.switch_chain(chain_id), self._timeout)
        except TimeoutError:
            raise HandshakeError(f"Chain switch to {chain_id} timed out after {self._timeout:.0f}s") from None

        if epoch != self._epoch or not self._session.is_connected:
            return self._session
        self._transition(self._session.model_copy(update={"active_chain_id": chain_id}))
        await self._persist()
        return self._session

    async def sign_request(self, request: dict[str, Any]) -> Any:
        if not self._session.is_connected:
            raise SessionNotConnectedError(f"Cannot sign while {self._session.state.value}")
        return await self._bridge.sign_request(request)

    async def disconnect(self) -> Session:
        """Explicit teardown from any state. Cancels whatever attempt is in flight."""
        had_wallet = self._session.state in (
            SessionState.INITIALIZING,
            SessionState.RECONNECTING,
            SessionState.CONNECTED,
        )
        await self._teardown()
        if had_wallet:
            try:
                await asyncio.wait_for(self._bridge.disconnect(), self._timeout)
            except Exception as exc:
                logger.warning("Wallet-side disconnect failed: %r", exc)
        return self._session

    # -- provider-originated events --

    async def _consume_events(self) -> None:
        while True:
            event = await self._bridge.events.get()
            try:
                await self.apply_event(event)
            except Exception:
                logger.exception("Failed to apply provider event %r", event)

    async def apply_event(self, event: ProviderEvent) -> None:
        """Apply wallet ground truth to whatever state the session is in right now."""
        state = self._session.state

        if isinstance(event, ProviderDisconnected):
            if state in (SessionState.INITIALIZING, SessionState.RECONNECTING, SessionState.CONNECTED):
                logger.info("Wallet provider disconnected: %s", event.reason or "no reason given")
                await self._teardown()
            return

        if state in (SessionState.INITIALIZING, SessionState.RECONNECTING):
            # Merged into the attempt's result when it lands
            if isinstance(event, AccountsChanged):
                self._pending["accounts"] = event.accounts
            elif isinstance(event, ChainChanged):
                self._pending["chain_id"] = event.chain_id
            return

        if state != SessionState.CONNECTED:
            logger.debug("Ignoring %r while %s", event, state.value)
            return

        if isinstance(event, AccountsChanged):
            if not event.accounts:
                logger.info("Wallet no longer exposes any account")
                await self._teardown()
                return
            self._transition(self._session.model_copy(update={"account_address": event.accounts[0]}))
        elif isinstance(event, ChainChanged):
            self._transition(self._session.model_copy(update={"active_chain_id": event.chain_id}))
        await self._persist()

    # -- internals --

    def _begin(self, session: Session) -> int:
        self._pending = {}
        self._transition(session)
        return self._epoch

    async def _attempt(self, coro: Awaitable[HandshakeResult], epoch: int) -> HandshakeResult:
        """Run a handshake with a bounded timeout; raise _Superseded if torn down meanwhile."""
        task = asyncio.ensure_future(coro)
        self._inflight = task
        try:
            done, _ = await asyncio.wait({task}, timeout=self._timeout)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if self._inflight is task:
                self._inflight = None

        if task not in done:
            task.cancel()
            if epoch != self._epoch:
                raise _Superseded
            raise HandshakeError(f"Wallet handshake timed out after {self._timeout:.0f}s")

        if epoch != self._epoch or task.cancelled():
            if not task.cancelled():
                task.exception()  # retrieved so asyncio does not log it
            logger.info("Discarding result of a cancelled wallet attempt")
            raise _Superseded
        return task.result()

    async def _complete(self, result: HandshakeResult, preferred_chain_id: int | None) -> Session:
        pending, self._pending = self._pending, {}
        account = result.account_address
        chain_id = preferred_chain_id if preferred_chain_id is not None else result.chain_id

        if "accounts" in pending:
            if not pending["accounts"]:
                logger.info("Wallet revoked its accounts during handshake")
                self._transition(Session(state=SessionState.DISCONNECTED))
                await self._clear_credentials()
                return self._session
            account = pending["accounts"][0]
        if "chain_id" in pending:
            chain_id = pending["chain_id"]

        self._transition(
            Session(
                state=SessionState.CONNECTED,
                account_address=account,
                active_chain_id=chain_id,
                connector=self._bridge.connector_kind,
            )
        )
        await self._persist()
        return self._session

    async def _teardown(self) -> None:
        self._cancel_inflight()
        self._pending = {}
        self._transition(Session(state=SessionState.DISCONNECTED))
        await self._clear_credentials()

    def _cancel_inflight(self) -> None:
        self._epoch += 1
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()

    async def _persist(self) -> None:
        """Save the current session, unless a teardown happened before the store was free."""
        epoch = self._epoch
        async with self._store_lock:
            session = self._session
            if epoch != self._epoch or not session.is_connected or session.account_address is None:
                return
            await self._credentials.save(
                StoredCredential(
                    connector=self._bridge.connector_kind,
                    account_address=session.account_address,
                    chain_id=session.active_chain_id,
                )
            )

    async def _clear_credentials(self) -> None:
        async with self._store_lock:
            await self._credentials.clear()

    def _transition(self, session: Session) -> None:
        previous, self._session = self._session, session
        if previous == session:
            return
        if previous.state != session.state:
            logger.info("Session %s -> %s", previous.state.value, session.state.value)
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception:
                logger.exception("Session listener failed")
