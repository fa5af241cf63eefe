"""Error taxonomy for chain registry, RPC transport and wallet session failures."""

from typing import Any


class ChainConnError(Exception):
    """Base class for every error raised by chainconn."""


class UnknownChainError(ChainConnError):
    """Chain id is not in the registry. Configuration/programming error, never retried."""

    def __init__(self, chain_id: int | str) -> None:
        super().__init__(f"Unknown chain id: {chain_id}")
        self.chain_id = chain_id


class DuplicateChainIdError(ChainConnError):
    def __init__(self, chain_id: int) -> None:
        super().__init__(f"Duplicate chain id in registry: {chain_id}")
        self.chain_id = chain_id


class DuplicateChainSlugError(ChainConnError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"Duplicate chain slug in registry: {slug}")
        self.slug = slug


class NoEndpointsConfiguredError(ChainConnError):
    def __init__(self, chain_id: int) -> None:
        super().__init__(f"No RPC endpoints configured for chain {chain_id}")
        self.chain_id = chain_id


class EndpointFailure(ChainConnError):
    """Transient failure of a single RPC candidate. Drives fallback, never crosses the Transport."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class AllEndpointsExhaustedError(ChainConnError):
    """Every eligible candidate for a chain failed the request."""

    def __init__(
        self,
        chain_id: int,
        failures: list[EndpointFailure],
        skipped: list[str] | None = None,
    ) -> None:
        self.chain_id = chain_id
        self.failures = failures
        self.skipped = skipped or []
        detail = "; ".join(str(f) for f in failures) or "all candidates backing off"
        super().__init__(f"All RPC endpoints exhausted for chain {chain_id}: {detail}")

    @property
    def attempted(self) -> list[str]:
        """URLs attempted, in attempt order."""
        return [f.url for f in self.failures]


class RpcResponseError(ChainConnError):
    """The endpoint answered with a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data


class HandshakeError(ChainConnError):
    """Wallet-bridge initialization failed. Surfaced as Session error state."""


class RelayUnavailableError(ChainConnError):
    """Wallet relay temporarily unreachable. Retried before becoming a HandshakeError."""


class SessionExpiredError(ChainConnError):
    """Stored credential is no longer valid. Expected condition, routes to disconnected."""


class SessionNotConnectedError(ChainConnError):
    pass
