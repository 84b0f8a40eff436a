from __future__ import annotations

from enum import Enum
from typing import Optional

from bot.errors import SessionStateError
from shared.log import get_logger
from shared.packets import (
    PROTOCOL_VERSION,
    AuthenticationRequest,
    LivenessResponse,
    LoginResult,
)

logger = get_logger(__name__)

# Anonymous login, the server hands out a guest identity
ANONYMOUS_SESSION_TOKEN = "none"
# Not interpreted by the bot; any positive values are accepted by the server
DEFAULT_HORIZON = (1000, 1000)


class SessionState(str, Enum):
    DISCONNECTED = "disconnected"
    AUTHENTICATING = "authenticating"
    ACTIVE = "active"
    CLOSED = "closed"


class Session:
    """
    Lifecycle of the one game connection this process owns.

    DISCONNECTED -> AUTHENTICATING -> ACTIVE -> CLOSED

    The move to ACTIVE happens as soon as the login request is built; the
    server's login response only fills in ``player_id``.
    """

    def __init__(self, identity: str, flag: str) -> None:
        self.identity = identity
        self.flag = flag
        self.state = SessionState.DISCONNECTED
        self.player_id: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def is_closed(self) -> bool:
        return self.state is SessionState.CLOSED

    def begin_authentication(self) -> AuthenticationRequest:
        """Build the login request and mark the session active. Call exactly once."""
        if self.state is not SessionState.DISCONNECTED:
            raise SessionStateError(f"Cannot authenticate from state {self.state.value}")

        self.state = SessionState.AUTHENTICATING
        request = AuthenticationRequest(
            protocol=PROTOCOL_VERSION,
            identity=self.identity,
            credential_token=ANONYMOUS_SESSION_TOKEN,
            horizon_x=DEFAULT_HORIZON[0],
            horizon_y=DEFAULT_HORIZON[1],
            flag=self.flag,
        )
        self.state = SessionState.ACTIVE
        logger.info("Logging in as %s (flag %s)", self.identity, self.flag)
        return request

    @staticmethod
    def answer_liveness(token: int) -> LivenessResponse:
        return LivenessResponse(token=token)

    def record_login(self, result: LoginResult) -> None:
        if not result.success:
            logger.warning("Server rejected login for %s", self.identity, extra={"packet": "LOGIN"})
            return
        self.player_id = result.player_id
        logger.info("Logged in as %s", self.identity, extra={"player_id": result.player_id})

    def mark_closed(self) -> None:
        if self.state is not SessionState.CLOSED:
            logger.info("Session closed", extra={"state": self.state.value})
        self.state = SessionState.CLOSED
