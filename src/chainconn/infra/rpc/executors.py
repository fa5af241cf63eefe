"""Request executors — one per RPC candidate, HTTP or WebSocket."""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
import websockets
from websockets.exceptions import WebSocketException

from chainconn.domain.enums import TransportProtocol
from chainconn.exceptions import EndpointFailure
from chainconn.infra.rpc.resolver import EndpointCandidate

logger = logging.getLogger(__name__)


def _check_envelope(url: str, data: Any) -> dict[str, Any]:
    """Reject anything that is not a JSON-RPC response object."""
    if not isinstance(data, dict) or ("result" not in data and "error" not in data):
        raise EndpointFailure(url, "malformed JSON-RPC response")
    return data


class RequestExecutor(ABC):
    """Sends one JSON-RPC payload to one endpoint. Every failure surfaces as EndpointFailure."""

    def __init__(self, url: str) -> None:
        self.url = url

    @abstractmethod
    async def request(self, payload: dict[str, Any], timeout: float) -> dict[str, Any]:
        """Return the raw JSON-RPC response envelope."""

    async def close(self) -> None:
        return None


class HttpExecutor(RequestExecutor):
    def __init__(self, url: str, client: httpx.AsyncClient | None = None) -> None:
        super().__init__(url)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient()

    async def request(self, payload: dict[str, Any], timeout: float) -> dict[str, Any]:
        try:
            resp = await self._client.post(self.url, json=payload, timeout=timeout)
        except httpx.TimeoutException:
            raise EndpointFailure(self.url, "timeout") from None
        except httpx.HTTPError as exc:
            raise EndpointFailure(self.url, f"connection error: {exc!r}") from exc

        if resp.status_code != 200:
            raise EndpointFailure(self.url, f"HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError:
            raise EndpointFailure(self.url, "malformed JSON-RPC response") from None
        return _check_envelope(self.url, data)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class WebSocketExecutor(RequestExecutor):
    """Keeps one lazily-opened socket; requests on it are serialized."""

    def __init__(self, url: str, connect=websockets.connect) -> None:
        super().__init__(url)
        self._connect = connect
        self._ws = None
        self._lock = asyncio.Lock()

    async def request(self, payload: dict[str, Any], timeout: float) -> dict[str, Any]:
        async with self._lock:
            try:
                return await asyncio.wait_for(self._roundtrip(payload), timeout)
            except TimeoutError:
                # Late replies would arrive on this socket; start fresh next time
                await self._drop()
                raise EndpointFailure(self.url, "timeout") from None
            except (OSError, WebSocketException) as exc:
                await self._drop()
                raise EndpointFailure(self.url, f"connection error: {exc!r}") from exc

    async def _roundtrip(self, payload: dict[str, Any]) -> dict[str, Any]:
        if self._ws is None:
            self._ws = await self._connect(self.url, ping_interval=30, ping_timeout=10)
        await self._ws.send(json.dumps(payload))

        while True:
            raw = await self._ws.recv()
            try:
                data = json.loads(raw)
            except ValueError:
                raise EndpointFailure(self.url, "malformed JSON-RPC response") from None
            # Subscription notifications carry no id
            if isinstance(data, dict) and data.get("id") == payload.get("id"):
                return _check_envelope(self.url, data)

    async def _drop(self) -> None:
        ws, self._ws = self._ws, None
        if ws is None:
            return
        try:
            await ws.close()
        except (OSError, WebSocketException) as exc:
            logger.debug("Error closing websocket %s: %r", self.url, exc)

    async def close(self) -> None:
        async with self._lock:
            await self._drop()


def build_executor(candidate: EndpointCandidate) -> RequestExecutor:
    if candidate.protocol == TransportProtocol.WEBSOCKET:
        return WebSocketExecutor(candidate.url)
    return HttpExecutor(candidate.url)
