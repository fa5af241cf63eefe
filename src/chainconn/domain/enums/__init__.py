from chainconn.domain.enums.chain import Chain
from chainconn.domain.enums.connector import ConnectorKind, WalletGroup
from chainconn.domain.enums.session import SessionState
from chainconn.domain.enums.transport import EndpointHealth, TransportProtocol

__all__ = [
    "Chain",
    "ConnectorKind",
    "EndpointHealth",
    "SessionState",
    "TransportProtocol",
    "WalletGroup",
]
