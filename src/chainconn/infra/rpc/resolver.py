"""EndpointResolver — chain id → ordered RPC candidates."""

import logging
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from chainconn.chains.registry import ChainRegistry
from chainconn.domain.enums import TransportProtocol
from chainconn.exceptions import NoEndpointsConfiguredError

logger = logging.getLogger(__name__)


class EndpointCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    protocol: TransportProtocol
    priority: int  # lower is tried first


def protocol_for_url(url: str) -> TransportProtocol:
    if url.startswith(("ws://", "wss://")):
        return TransportProtocol.WEBSOCKET
    return TransportProtocol.HTTP


class EndpointResolver:
    """Orders candidates: configured override, then declared defaults, then other declared URLs.

    Declaration order is the tie-break so selection is deterministic across runs.
    """

    def __init__(self, registry: ChainRegistry, overrides: Mapping[int, str] | None = None) -> None:
        self._registry = registry
        self._overrides = dict(overrides or {})
        for chain_id in self._overrides:
            if chain_id not in registry:
                logger.warning("RPC override configured for unregistered chain %d, ignoring", chain_id)

    def candidates_for(self, chain_id: int) -> list[EndpointCandidate]:
        descriptor = self._registry.lookup(chain_id)
        if not descriptor.rpc_endpoints:
            raise NoEndpointsConfiguredError(chain_id)

        urls: list[tuple[str, TransportProtocol]] = []
        override = self._overrides.get(chain_id)
        if override:
            urls.append((override, protocol_for_url(override)))

        declared = sorted(descriptor.rpc_endpoints, key=lambda e: not e.is_default)  # stable
        urls.extend((e.url, e.protocol) for e in declared)

        candidates: list[EndpointCandidate] = []
        seen: set[str] = set()
        for url, protocol in urls:
            if url in seen:
                continue
            seen.add(url)
            candidates.append(EndpointCandidate(url=url, protocol=protocol, priority=len(candidates)))
        return candidates
