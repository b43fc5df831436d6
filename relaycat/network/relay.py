"""
Relay engine: copies bytes between a duplex endpoint and stdin/stdout.

A session runs two pumps on their own threads:

    stdin    --[outbound]-->  endpoint
    endpoint --[inbound]--->  stdout

Each pump runs until its own read hits end-of-stream or a read/write
fails. Neither pump cancels the other, and the session only ends once
both have stopped. Nothing in here has a timeout.
"""

import logging
import socket
import sys
import threading
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Callable, Optional

from .endpoint import BUFFER_SIZE, Address, DuplexEndpoint, format_address

logger = logging.getLogger(__name__)


class PumpState(Enum):
    """Lifecycle of one relay direction."""
    RUNNING = "running"
    STOPPED = "stopped"


class StopReason(Enum):
    """Why a pump stopped."""
    EOF = "eof"
    ERROR = "error"


class SessionState(Enum):
    """Lifecycle of a whole relay session."""
    BOTH_RUNNING = "both_running"
    ONE_STOPPED = "one_stopped"
    BOTH_STOPPED = "both_stopped"


class Pump:
    """
    Copies chunks from one blocking reader to one blocking writer.

    Reads up to BUFFER_SIZE bytes at a time and writes each chunk in full
    before reading again, so byte order is preserved. A read returning
    b"" stops the pump with EOF; an OSError (or ValueError from a closed
    stream) on read, write or flush stops it with ERROR. Errors are kept
    on the pump and never raised.
    """

    def __init__(
        self,
        name: str,
        read: Callable[[int], bytes],
        write: Callable[[bytes], object],
        flush: Optional[Callable[[], None]] = None,
    ):
        self.name = name
        self._read = read
        self._write = write
        self._flush = flush
        self.state = PumpState.RUNNING
        self.stop_reason: Optional[StopReason] = None
        self.error: Optional[Exception] = None
        self.bytes_relayed = 0
        self.chunks = 0
        self._thread: Optional[threading.Thread] = None

    def run(self) -> None:
        """Run the copy loop on the calling thread."""
        try:
            while True:
                chunk = self._read(BUFFER_SIZE)
                if not chunk:
                    self.stop_reason = StopReason.EOF
                    break
                self._write(chunk)
                if self._flush is not None:
                    self._flush()
                self.bytes_relayed += len(chunk)
                self.chunks += 1
        except (OSError, ValueError) as e:
            self.stop_reason = StopReason.ERROR
            self.error = e
            logger.debug(f"{self.name}: stopped on error: {e}")
        finally:
            self.state = PumpState.STOPPED

        logger.debug(
            f"{self.name}: {self.stop_reason.value}, "
            f"{self.bytes_relayed} bytes in {self.chunks} chunks"
        )

    def start(self) -> None:
        """Run the copy loop on a new daemon thread."""
        self._thread = threading.Thread(target=self.run, name=self.name, daemon=True)
        self._thread.start()

    def join(self) -> None:
        if self._thread is not None:
            self._thread.join()


@dataclass
class RelayStats:
    """Counters for a finished session."""
    bytes_sent: int
    bytes_received: int
    chunks_sent: int
    chunks_received: int
    outbound_stop: Optional[StopReason]
    inbound_stop: Optional[StopReason]

    def to_dict(self) -> dict:
        return {
            "bytes_sent": self.bytes_sent,
            "bytes_received": self.bytes_received,
            "chunks_sent": self.chunks_sent,
            "chunks_received": self.chunks_received,
            "outbound_stop": self.outbound_stop.value if self.outbound_stop else None,
            "inbound_stop": self.inbound_stop.value if self.inbound_stop else None,
        }


def _reader_for(stream: BinaryIO) -> Callable[[int], bytes]:
    # read1 returns whatever is available instead of waiting for a full buffer
    return getattr(stream, "read1", stream.read)


class RelaySession:
    """One endpoint relayed against a pair of binary streams."""

    def __init__(self, endpoint: DuplexEndpoint, stdin: BinaryIO, stdout: BinaryIO):
        self.endpoint = endpoint
        self.stdin = stdin
        self.stdout = stdout
        self.outbound: Optional[Pump] = None
        self.inbound: Optional[Pump] = None

    @property
    def state(self) -> SessionState:
        pumps = [p for p in (self.outbound, self.inbound) if p is not None]
        stopped = sum(1 for p in pumps if p.state == PumpState.STOPPED)
        if stopped == 0:
            return SessionState.BOTH_RUNNING
        if stopped == 1:
            return SessionState.ONE_STOPPED
        return SessionState.BOTH_STOPPED

    def run(self) -> RelayStats:
        """Relay in both directions until both pumps have stopped."""
        reader, writer = self.endpoint.split()

        self.outbound = Pump(
            "stdin->endpoint",
            read=_reader_for(self.stdin),
            write=writer.write,
        )
        self.inbound = Pump(
            "endpoint->stdout",
            read=reader.read,
            write=self.stdout.write,
            flush=self.stdout.flush,
        )

        self.outbound.start()
        self.inbound.start()

        self.outbound.join()
        self.inbound.join()

        stats = RelayStats(
            bytes_sent=self.outbound.bytes_relayed,
            bytes_received=self.inbound.bytes_relayed,
            chunks_sent=self.outbound.chunks,
            chunks_received=self.inbound.chunks,
            outbound_stop=self.outbound.stop_reason,
            inbound_stop=self.inbound.stop_reason,
        )
        logger.debug(f"Relay finished: {stats.to_dict()}")
        return stats


def relay(
    endpoint: DuplexEndpoint,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> RelayStats:
    """Relay endpoint against stdin/stdout (the process streams by default)."""
    session = RelaySession(
        endpoint,
        stdin if stdin is not None else sys.stdin.buffer,
        stdout if stdout is not None else sys.stdout.buffer,
    )
    return session.run()


class UdpForwarder:
    """
    Forwards every inbound datagram to stdout, forever.

    The first sender seen is remembered and reported once; datagrams from
    any sender are forwarded in arrival order. Standard input is never
    read and nothing is ever sent back.
    """

    def __init__(
        self,
        sock: socket.socket,
        stdout: BinaryIO,
        on_first_peer: Optional[Callable[[Address], None]] = None,
    ):
        self.sock = sock
        self.stdout = stdout
        self.on_first_peer = on_first_peer
        self.peer: Optional[Address] = None
        self.datagrams = 0

    def receive_once(self) -> Optional[bytes]:
        """
        Receive and forward one datagram.

        Returns the payload, or None if the receive failed. Receive errors
        are logged; stdout write errors propagate.
        """
        try:
            data, peer = self.sock.recvfrom(BUFFER_SIZE)
        except OSError as e:
            logger.error(f"UDP receive error: {e}")
            return None

        if self.peer is None:
            self.peer = peer
            logger.debug(f"First datagram from {format_address(peer)}")
            if self.on_first_peer:
                self.on_first_peer(peer)

        self.stdout.write(data)
        self.stdout.flush()
        self.datagrams += 1
        return data

    def serve_forever(self) -> None:
        while True:
            self.receive_once()
