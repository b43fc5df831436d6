"""
Network layer for relaycat.

This module provides:
- Duplex endpoints over TCP and UDP sockets
- Endpoint acquisition (connect, accept one, bind)
- The two-pump relay engine and the UDP datagram forwarder
"""

from .errors import (
    RelaycatError,
    SetupError,
)
from .endpoint import (
    BUFFER_SIZE,
    DuplexEndpoint,
    TcpEndpoint,
    UdpEndpoint,
    connect_tcp,
    listen_tcp,
    accept_one,
    bind_udp,
    open_udp_client,
    format_address,
)
from .relay import (
    Pump,
    PumpState,
    StopReason,
    SessionState,
    RelaySession,
    RelayStats,
    UdpForwarder,
    relay,
)

__all__ = [
    "RelaycatError",
    "SetupError",
    "BUFFER_SIZE",
    "DuplexEndpoint",
    "TcpEndpoint",
    "UdpEndpoint",
    "connect_tcp",
    "listen_tcp",
    "accept_one",
    "bind_udp",
    "open_udp_client",
    "format_address",
    "Pump",
    "PumpState",
    "StopReason",
    "SessionState",
    "RelaySession",
    "RelayStats",
    "UdpForwarder",
    "relay",
]
