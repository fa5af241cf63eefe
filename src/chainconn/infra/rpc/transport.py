"""Fallback-capable JSON-RPC transport per chain, and the per-process transport cache."""

import itertools
import logging
import time
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from chainconn.domain.enums import EndpointHealth, TransportProtocol
from chainconn.exceptions import AllEndpointsExhaustedError, EndpointFailure, RpcResponseError
from chainconn.infra.rpc.executors import RequestExecutor, build_executor
from chainconn.infra.rpc.health import HealthTracker
from chainconn.infra.rpc.resolver import EndpointCandidate, EndpointResolver

logger = logging.getLogger(__name__)

ExecutorFactory = Callable[[EndpointCandidate], RequestExecutor]


class EndpointSnapshot(BaseModel):
    url: str
    protocol: TransportProtocol
    priority: int
    health: EndpointHealth
    consecutive_failures: int
    retry_at: float | None = None


class Transport:
    """Single logical "send request" over one chain's ordered candidates.

    Candidates are tried in priority order; failures move on to the next one and feed
    the health tracker. Only AllEndpointsExhaustedError leaves this class.
    """

    def __init__(
        self,
        chain_id: int,
        candidates: list[EndpointCandidate],
        executors: dict[str, RequestExecutor],
        health: HealthTracker,
        timeout: float = 30.0,
    ) -> None:
        self.chain_id = chain_id
        self._candidates = sorted(candidates, key=lambda c: c.priority)
        self._executors = executors
        self._health = health
        self._timeout = timeout
        self._id_counter = itertools.count(1)

    @property
    def candidates(self) -> list[EndpointCandidate]:
        return list(self._candidates)

    async def send(self, method: str, params: list[Any] | None = None) -> Any:
        """Execute a JSON-RPC call and return the result field."""
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._id_counter),
            "method": method,
            "params": params or [],
        }
        response = await self.request(payload)
        if response.get("error") is not None:
            error = response["error"]
            if isinstance(error, dict):
                raise RpcResponseError(error.get("code", 0), error.get("message", str(error)), error.get("data"))
            raise RpcResponseError(0, str(error))
        return response.get("result")

    async def request(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Forward a prepared payload; returns the first well-formed response envelope."""
        failures: list[EndpointFailure] = []
        skipped: list[str] = []

        for candidate in self._candidates:
            if not self._health.is_eligible(candidate.url):
                skipped.append(candidate.url)
                continue

            executor = self._executors[candidate.url]
            try:
                response = await executor.request(payload, self._timeout)
            except EndpointFailure as failure:
                health = self._health.record_failure(candidate.url)
                failures.append(failure)
                logger.warning(
                    "RPC %s failed on chain %d via %s (%s), now %s",
                    payload.get("method"), self.chain_id, candidate.url, failure.reason, health.value,
                )
                continue

            self._health.record_success(candidate.url)
            return response

        logger.error(
            "All RPC endpoints exhausted for chain %d (attempted=%d, backing off=%d)",
            self.chain_id, len(failures), len(skipped),
        )
        raise AllEndpointsExhaustedError(self.chain_id, failures, skipped)

    def health(self) -> list[EndpointSnapshot]:
        snapshots = []
        for candidate in self._candidates:
            status = self._health.status(candidate.url)
            snapshots.append(
                EndpointSnapshot(
                    url=candidate.url,
                    protocol=candidate.protocol,
                    priority=candidate.priority,
                    health=status.health,
                    consecutive_failures=status.consecutive_failures,
                    retry_at=status.retry_at,
                )
            )
        return snapshots

    async def close(self) -> None:
        for executor in self._executors.values():
            await executor.close()

    # Convenience wrappers for the calls every collaborator makes

    async def chain_id_hex(self) -> str:
        return await self.send("eth_chainId")

    async def block_number(self) -> int:
        return int(await self.send("eth_blockNumber"), 16)


class TransportLayer:
    """Builds one Transport per chain id and caches it for the process lifetime.

    Building is synchronous (no suspension point), so concurrent callers can never
    create two Transports for the same chain.
    """

    def __init__(
        self,
        resolver: EndpointResolver,
        timeout: float = 30.0,
        failure_threshold: int = 3,
        backoff_base: float = 5.0,
        backoff_cap: float = 300.0,
        executor_factory: ExecutorFactory = build_executor,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._resolver = resolver
        self._timeout = timeout
        self._failure_threshold = failure_threshold
        self._backoff_base = backoff_base
        self._backoff_cap = backoff_cap
        self._executor_factory = executor_factory
        self._clock = clock
        self._transports: dict[int, Transport] = {}

    def transport_for(self, chain_id: int) -> Transport:
        transport = self._transports.get(chain_id)
        if transport is not None:
            return transport

        candidates = self._resolver.candidates_for(chain_id)
        executors = {c.url: self._executor_factory(c) for c in candidates}
        health = HealthTracker(
            failure_threshold=self._failure_threshold,
            backoff_base=self._backoff_base,
            backoff_cap=self._backoff_cap,
            clock=self._clock,
        )
        transport = Transport(chain_id, candidates, executors, health, timeout=self._timeout)
        self._transports[chain_id] = transport
        logger.info(
            "Built transport for chain %d with %d candidates: %s",
            chain_id, len(candidates), ", ".join(c.url for c in candidates),
        )
        return transport

    def cached(self) -> dict[int, Transport]:
        return dict(self._transports)

    async def close(self) -> None:
        transports = list(self._transports.values())
        self._transports.clear()
        for transport in transports:
            await transport.close()
