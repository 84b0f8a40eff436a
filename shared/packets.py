from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Union

# Must match the server exactly, a mismatch is not recoverable.
PROTOCOL_VERSION = 5


class ClientPacketType(IntEnum):
    """AIRMASH client -> server packet ids (protocol v5)."""

    LOGIN = 0
    BACKUP = 1
    HORIZON = 2
    ACK = 5
    PONG = 6
    KEYDOWN = 10
    COMMAND = 11
    SCOREDETAILED = 12
    CHAT = 20
    WHISPER = 21
    SAY = 22
    TEAMCHAT = 23
    VOTEMUTE = 24
    LOCALPING = 255


class ServerPacketType(IntEnum):
    """AIRMASH server -> client packet ids (protocol v5)."""

    LOGIN = 0
    BACKUP = 1
    PING = 5
    PING_RESULT = 6
    ACK = 7
    ERROR = 8
    COMMAND_REPLY = 9
    PLAYER_NEW = 10
    PLAYER_LEAVE = 11
    PLAYER_UPDATE = 12
    PLAYER_FIRE = 13
    PLAYER_HIT = 14
    PLAYER_RESPAWN = 15
    PLAYER_FLAG = 16
    PLAYER_KILL = 17
    PLAYER_UPGRADE = 18
    PLAYER_TYPE = 19
    PLAYER_POWERUP = 20
    PLAYER_LEVEL = 21
    PLAYER_RETEAM = 22
    GAME_FLAG = 30
    GAME_SPECTATE = 31
    GAME_PLAYERSALIVE = 32
    GAME_FIREWALL = 33
    EVENT_REPEL = 40
    EVENT_BOOST = 41
    EVENT_BOUNCE = 42
    EVENT_STEALTH = 43
    EVENT_LEAVEHORIZON = 44
    MOB_UPDATE = 60
    MOB_UPDATE_STATIONARY = 61
    MOB_DESPAWN = 62
    MOB_DESPAWN_COORDS = 63
    CHAT_PUBLIC = 70
    CHAT_TEAM = 71
    CHAT_SAY = 72
    CHAT_WHISPER = 73
    CHAT_VOTEMUTEPASSED = 78
    CHAT_VOTEMUTED = 79
    SCORE_UPDATE = 80
    SCORE_BOARD = 81
    SCORE_DETAILED = 82
    SCORE_DETAILED_CTF = 83
    SCORE_DETAILED_BTR = 84
    SERVER_MESSAGE = 90
    SERVER_CUSTOM = 91

    @classmethod
    def is_valid(cls, value: int) -> bool:
        """Check if an integer is a known server packet id."""
        try:
            cls(value)
            return True
        except ValueError:
            return False


# ========================================
#           INBOUND EVENTS
# ========================================

@dataclass(frozen=True)
class LivenessChallenge:
    """Server Ping. ``token`` must be echoed back in a Pong."""
    clock: int
    token: int


@dataclass(frozen=True)
class BroadcastText:
    """Server ChatPublic."""
    sender_id: int
    text: str


@dataclass(frozen=True)
class WhisperText:
    sender_id: int
    recipient_id: int
    text: str


@dataclass(frozen=True)
class LoginResult:
    """Leading fields of the server Login packet; the player list that follows is not decoded."""
    success: bool
    player_id: int
    team: int
    clock: int
    token: str


@dataclass(frozen=True)
class ServerError:
    code: int


@dataclass(frozen=True)
class Other:
    """Any known server packet this client does not act on."""
    packet_type: ServerPacketType


InboundEvent = Union[LivenessChallenge, BroadcastText, WhisperText, LoginResult, ServerError, Other]


# ========================================
#           OUTBOUND REQUESTS
# ========================================

@dataclass(frozen=True)
class AuthenticationRequest:
    protocol: int
    identity: str
    credential_token: str
    horizon_x: int
    horizon_y: int
    flag: str


@dataclass(frozen=True)
class LivenessResponse:
    token: int


@dataclass(frozen=True)
class DirectedReply:
    """Whisper, visible only to ``recipient_id``."""
    recipient_id: int
    text: str


@dataclass(frozen=True)
class BroadcastReply:
    """Public chat line."""
    text: str


OutboundRequest = Union[AuthenticationRequest, LivenessResponse, DirectedReply, BroadcastReply]

