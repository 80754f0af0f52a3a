"""Load failure taxonomy. Each one is shown to the user as str(error)."""

from typing import Optional


class LoadError(RuntimeError):
    """Base class for failures of a whole dataset load."""


class TransportError(LoadError):
    """Non-success HTTP status, connection failure or timeout."""

    def __init__(self, status_code: Optional[int] = None, message: Optional[str] = None):
        self.status_code = status_code
        self.message = message or ""
        if status_code is not None:
            text = f"HTTP {status_code}"
        else:
            text = self.message or "Transport error"
        super().__init__(text)


class ParseError(LoadError):
    """Response body is not a JSON object."""


class RemoteError(LoadError):
    """Endpoint answered with an explicit ``error`` field."""

    def __init__(self, message: str, reason: Optional[str] = None):
        self.message = message
        self.reason = reason
        super().__init__(f"{message}: {reason}" if reason else message)
