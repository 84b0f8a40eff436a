from __future__ import annotations

from shared.codec import DecodeError


class BotError(Exception):
    """Base class for bot failures."""
    pass


class BotConnectionError(BotError):
    """Could not open the websocket to the game server. Fatal at startup."""
    pass


class SendError(BotError):
    """A frame could not be written to the connection. Fatal for the session."""
    pass


class SessionStateError(BotError):
    """An operation was attempted in a session state that does not allow it."""
    pass


class ConfigError(BotError):
    """The configuration file is unreadable or does not match the expected schema."""
    pass


__all__ = [
    "BotError",
    "BotConnectionError",
    "ConfigError",
    "DecodeError",
    "SendError",
    "SessionStateError",
]
