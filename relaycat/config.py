"""
Session configuration for relaycat.

Handles:
- Transport and role selection
- Port and host precedence between options and positional arguments

There is no config file and no environment lookup: everything comes from
the command line.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .network.endpoint import BIND_ALL

DEFAULT_PORT = 8080
DEFAULT_HOST = "localhost"


class Transport(Enum):
    TCP = "tcp"
    UDP = "udp"


class Role(Enum):
    CLIENT = "client"
    SERVER = "server"


@dataclass
class SessionConfig:
    """
    Parameters for one relay session.

    `port` is the --port option, `target_port` the positional PORT.
    """
    listen: bool = False
    udp: bool = False
    host: Optional[str] = None
    port: Optional[int] = None
    target_port: Optional[int] = None

    @property
    def role(self) -> Role:
        return Role.SERVER if self.listen else Role.CLIENT

    @property
    def transport(self) -> Transport:
        return Transport.UDP if self.udp else Transport.TCP

    @property
    def effective_port(self) -> int:
        """
        Port to connect to or listen on.

        Listening prefers --port over the positional port; connecting
        prefers the positional port over --port.
        """
        if self.listen:
            candidates = (self.port, self.target_port)
        else:
            candidates = (self.target_port, self.port)
        for port in candidates:
            if port is not None:
                return port
        return DEFAULT_PORT

    @property
    def effective_host(self) -> str:
        """Host to connect to; servers always bind every interface."""
        if self.listen:
            return BIND_ALL
        return self.host or DEFAULT_HOST

    def to_dict(self) -> dict:
        return {
            "listen": self.listen,
            "udp": self.udp,
            "host": self.host,
            "port": self.port,
            "target_port": self.target_port,
            "role": self.role.value,
            "transport": self.transport.value,
            "effective_host": self.effective_host,
            "effective_port": self.effective_port,
        }
