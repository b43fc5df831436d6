"""
Mode drivers: one per (transport, role) pair.

Each driver acquires its endpoint, prints a one-line status message and
hands the endpoint to the relay engine. Setup failures raise SetupError
and are left for the CLI to report.
"""

import logging
import sys
from typing import BinaryIO, Optional

from rich.console import Console
from rich.markup import escape

from .config import SessionConfig, Role, Transport
from .network.endpoint import (
    BIND_ALL,
    accept_one,
    bind_udp,
    connect_tcp,
    format_address,
    listen_tcp,
    open_udp_client,
)
from .network.relay import RelayStats, UdpForwarder, relay

console = Console(highlight=False)
logger = logging.getLogger(__name__)


def _status(message: str) -> None:
    console.print(escape(message), soft_wrap=True)


def tcp_client(
    host: str,
    port: int,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> RelayStats:
    """Connect to host:port and relay until both directions stop."""
    with connect_tcp(host, port) as endpoint:
        _status(f"Connected to {host}:{port}")
        return relay(endpoint, stdin, stdout)


def tcp_server(
    port: int,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> RelayStats:
    """Listen on every interface, serve exactly one connection, then stop."""
    listener = listen_tcp(port)
    try:
        _status(f"Listening on {BIND_ALL}:{port}")
        with accept_one(listener) as endpoint:
            _status(f"Connection from {endpoint.describe()}")
            return relay(endpoint, stdin, stdout)
    finally:
        listener.close()


def udp_client(
    host: str,
    port: int,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> RelayStats:
    """Send stdin to host:port as datagrams and print whatever comes back."""
    with open_udp_client(host, port) as endpoint:
        _status(f"UDP client ready, sending to {host}:{port}")
        return relay(endpoint, stdin, stdout)


def udp_server(port: int, stdout: Optional[BinaryIO] = None) -> None:
    """
    Print every datagram received on port, from any sender, forever.

    Only returns by raising: a failed stdout write, or an interrupt.
    """
    sock = bind_udp(port)
    try:
        _status(f"UDP server listening on {BIND_ALL}:{port}")
        forwarder = UdpForwarder(
            sock,
            stdout if stdout is not None else sys.stdout.buffer,
            on_first_peer=lambda peer: _status(f"UDP connection from {format_address(peer)}"),
        )
        forwarder.serve_forever()
    finally:
        sock.close()


def run(config: SessionConfig) -> Optional[RelayStats]:
    """Run the driver selected by config."""
    logger.debug(f"Session config: {config.to_dict()}")

    port = config.effective_port
    if config.role == Role.SERVER:
        if config.transport == Transport.UDP:
            return udp_server(port)
        return tcp_server(port)

    host = config.effective_host
    if config.transport == Transport.UDP:
        return udp_client(host, port)
    return tcp_client(host, port)
