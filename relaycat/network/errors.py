"""
Error types for relaycat.

Only setup failures are raised to callers. Errors inside a running relay
end the affected direction and are never raised.
"""

from typing import Optional


class RelaycatError(Exception):
    """Base exception for relaycat errors."""
    
    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


class SetupError(RelaycatError):
    """Raised when an endpoint cannot be resolved, connected or bound."""
    
    def __init__(self, message: str, address: Optional[str] = None):
        super().__init__(message)
        self.address = address
