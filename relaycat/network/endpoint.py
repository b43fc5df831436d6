"""
Duplex endpoints and endpoint acquisition.

A duplex endpoint is one TCP connection or one bound UDP socket, split into
an independent read handle and write handle so that each relay direction
owns its own descriptor:

- TCP: read from the connected socket, write through a duplicate of it
- UDP: read any inbound datagram, write datagrams to a fixed target
"""

import logging
import socket
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .errors import SetupError

logger = logging.getLogger(__name__)

# Bytes per read call. Every chunk is forwarded as soon as it is read.
BUFFER_SIZE = 1024

BIND_ALL = "0.0.0.0"

Address = Tuple


def format_address(address: Address) -> str:
    """Format a socket address as host:port ([host]:port for IPv6)."""
    host, port = address[0], address[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


# ============================================================================
# Handles
# ============================================================================

class ReadHandle(ABC):
    """Readable direction of an endpoint."""

    @abstractmethod
    def read(self, size: int = BUFFER_SIZE) -> bytes:
        """Block until data arrives. Returns b"" at end-of-stream."""
        pass


class WriteHandle(ABC):
    """Writable direction of an endpoint."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Write all of data or raise OSError."""
        pass


class StreamReader(ReadHandle):

    def __init__(self, sock: socket.socket):
        self.sock = sock

    def read(self, size: int = BUFFER_SIZE) -> bytes:
        return self.sock.recv(size)


class StreamWriter(WriteHandle):

    def __init__(self, sock: socket.socket):
        self.sock = sock

    def write(self, data: bytes) -> None:
        self.sock.sendall(data)


class DatagramReader(ReadHandle):
    """
    Receives datagrams from any source.

    UDP has no end-of-stream, so this never returns b"": empty datagrams
    are skipped and a failed receive raises.
    """

    def __init__(self, sock: socket.socket):
        self.sock = sock
        self.last_peer: Optional[Address] = None

    def read(self, size: int = BUFFER_SIZE) -> bytes:
        while True:
            data, peer = self.sock.recvfrom(size)
            self.last_peer = peer
            if data:
                return data


class DatagramWriter(WriteHandle):
    """Sends each chunk as one datagram to a fixed target."""

    def __init__(self, sock: socket.socket, target: Address):
        self.sock = sock
        self.target = target

    def write(self, data: bytes) -> None:
        self.sock.sendto(data, self.target)


# ============================================================================
# Endpoints
# ============================================================================

class DuplexEndpoint(ABC):
    """A full-duplex byte channel backed by a single socket."""

    def __init__(self, sock: socket.socket):
        self.sock = sock
        self._clones: List[socket.socket] = []
        self.closed = False

    @abstractmethod
    def split(self) -> Tuple[ReadHandle, WriteHandle]:
        """Return independent read and write handles."""
        pass

    @abstractmethod
    def describe(self) -> str:
        """Peer or target address for status lines."""
        pass

    def _clone(self) -> socket.socket:
        clone = self.sock.dup()
        self._clones.append(clone)
        return clone

    def close(self) -> None:
        """Close the socket and every handle split from it."""
        if self.closed:
            return
        self.closed = True
        for sock in self._clones + [self.sock]:
            try:
                sock.close()
            except OSError as e:
                logger.debug(f"Error closing socket: {e}")
        self._clones.clear()

    def __enter__(self) -> "DuplexEndpoint":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class TcpEndpoint(DuplexEndpoint):
    """
    One connected TCP socket.

    The write handle uses a duplicated descriptor, so closing it never
    half-closes the connection.
    """

    @property
    def peer(self) -> Address:
        return self.sock.getpeername()

    def split(self) -> Tuple[ReadHandle, WriteHandle]:
        return StreamReader(self.sock), StreamWriter(self._clone())

    def describe(self) -> str:
        return format_address(self.peer)


class UdpEndpoint(DuplexEndpoint):
    """A bound UDP socket plus the remembered peer it sends to."""

    def __init__(self, sock: socket.socket, target: Address):
        super().__init__(sock)
        self.target = target

    def split(self) -> Tuple[ReadHandle, WriteHandle]:
        return DatagramReader(self.sock), DatagramWriter(self._clone(), self.target)

    def describe(self) -> str:
        return format_address(self.target)


# ============================================================================
# Acquisition
# ============================================================================

def connect_tcp(host: str, port: int) -> TcpEndpoint:
    """
    Resolve host:port and connect to it.

    Every resolved address is tried in turn; the first one that accepts
    the connection wins.
    """
    address = f"{host}:{port}"
    try:
        sock = socket.create_connection((host, port))
    except OSError as e:
        raise SetupError(f"Could not connect to {address}: {e}", address=address) from e

    logger.debug(f"Connected to {address} via {format_address(sock.getpeername())}")
    return TcpEndpoint(sock)


def listen_tcp(port: int, host: str = BIND_ALL) -> socket.socket:
    """Bind and listen on host:port with the OS default backlog."""
    address = f"{host}:{port}"
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen()
    except OSError as e:
        sock.close()
        raise SetupError(f"Could not listen on {address}: {e}", address=address) from e
    return sock


def accept_one(listener: socket.socket) -> TcpEndpoint:
    """
    Accept exactly one inbound connection.

    A failed accept is logged and retried. Once a connection is accepted
    the listener is no longer polled, so later attempts are never served.
    """
    while True:
        try:
            conn, _ = listener.accept()
        except OSError as e:
            logger.warning(f"Connection failed: {e}")
            continue
        return TcpEndpoint(conn)


def bind_udp(port: int = 0, host: str = BIND_ALL) -> socket.socket:
    """Bind a UDP socket. Port 0 picks an ephemeral port."""
    address = f"{host}:{port}"
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        raise SetupError(f"Could not bind {address}: {e}", address=address) from e
    return sock


def open_udp_client(host: str, port: int) -> UdpEndpoint:
    """
    Bind an ephemeral UDP socket that sends to host:port.

    There is no handshake: the endpoint is ready immediately, whether or
    not anything listens at the target.
    """
    sock = bind_udp()
    logger.debug(f"UDP client bound to {format_address(sock.getsockname())}")
    return UdpEndpoint(sock, (host, port))
