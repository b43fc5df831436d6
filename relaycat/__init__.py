"""
relaycat - relay stdin/stdout over a single TCP or UDP connection

A minimal netcat. One endpoint per invocation, as client or server, with
bytes copied in both directions until both directions have finished.

Example:
    >>> from relaycat.modes import tcp_client
    >>> tcp_client("localhost", 8080)
"""

__version__ = "0.1.0"

from .config import SessionConfig
from .network import SetupError, RelaySession, relay

__all__ = [
    "__version__",
    "SessionConfig",
    "SetupError",
    "RelaySession",
    "relay",
]
