"""Session gate: holds the bearer token and decides when loading may start."""

import threading
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel

from ..utils.logging import get_logger
from .id_token import identity_from_token

logger = get_logger(__name__)


class SessionState(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    AUTHENTICATING = "AUTHENTICATING"
    AUTHENTICATED = "AUTHENTICATED"


class Session(BaseModel):
    token: Optional[str] = None
    identity_label: str = ""


class SessionGate:
    """
    Tracks sign-in state and triggers one data load per new token.

    There is no sign-out: once authenticated the session lasts for the life
    of the process, and a later sign-in only swaps the token.
    """

    def __init__(self, on_authenticated: Optional[Callable[[str], None]] = None):
        self.on_authenticated = on_authenticated
        self._state = SessionState.UNAUTHENTICATED
        self._session = Session()
        self._lock = threading.RLock()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Session:
        return self._session

    @property
    def token(self) -> Optional[str]:
        return self._session.token

    @property
    def identity_label(self) -> str:
        return self._session.identity_label

    @property
    def is_authenticated(self) -> bool:
        return self._state is SessionState.AUTHENTICATED

    @property
    def requires_sign_in(self) -> bool:
        return not self.is_authenticated

    def begin_sign_in(self) -> None:
        """Mark the identity provider flow as started."""
        with self._lock:
            if self._state is SessionState.UNAUTHENTICATED:
                self._state = SessionState.AUTHENTICATING

    def complete_sign_in(self, token: str, identity_label: Optional[str] = None) -> bool:
        """
        Identity provider callback.

        Args:
            token: Opaque bearer token
            identity_label: Display label; read from the token's email claim if omitted

        Returns:
            True if a load was triggered
        """
        if not token or not token.strip():
            logger.warning("Ignoring sign-in callback without a token")
            return False

        with self._lock:
            if self._state is SessionState.AUTHENTICATED and token == self._session.token:
                logger.debug("Sign-in repeated with the current token; not reloading")
                return False
            label = identity_label if identity_label is not None else identity_from_token(token)
            self._session = Session(token=token, identity_label=label)
            self._state = SessionState.AUTHENTICATED
            logger.info(f"Signed in as {label or 'unknown user'}")
            # Held across the callback so loads start in sign-in order.
            if self.on_authenticated is not None:
                self.on_authenticated(token)
        return True
