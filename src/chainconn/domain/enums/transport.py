from enum import Enum


class TransportProtocol(str, Enum):
    HTTP = "http"
    WEBSOCKET = "websocket"


class EndpointHealth(str, Enum):
    """Rolling health of a single RPC candidate."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"  # failed recently, still tried in order
    UNREACHABLE = "unreachable"  # skipped until its back-off window elapses
