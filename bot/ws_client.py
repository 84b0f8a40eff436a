from __future__ import annotations
import asyncio
from typing import Final, Optional, Union

import websockets

from bot.errors import BotConnectionError, SendError
from shared.log import get_logger

logger = get_logger(__name__)


class Closed:
    """Returned by ``next_frame`` once the connection is gone."""

    def __repr__(self) -> str:
        return "CLOSED"


CLOSED: Final = Closed()

Frame = Union[bytes, str]


class WebSocketConnection:
    """
    The one websocket link to the game server.

    Frames are pulled one at a time with ``next_frame``. Closure, clean or not,
    is reported as ``CLOSED`` instead of an exception so the caller can treat it
    as the normal end of the session.
    """

    def __init__(self, url: str, websocket: Optional[websockets.ClientConnection] = None) -> None:
        self.url = url
        self.websocket = websocket

    async def connect(self) -> None:
        """Open the websocket. Raises BotConnectionError if the handshake fails."""
        try:
            # Keepalive is the game's Ping/Pong, not websocket control frames
            self.websocket = await websockets.connect(self.url, ping_interval=None, max_size=None)
        except (OSError, asyncio.TimeoutError, websockets.exceptions.InvalidURI, websockets.exceptions.InvalidHandshake) as e:
            raise BotConnectionError(f"Failed to connect to {self.url}: {e}") from e
        logger.info("Connected to %s", self.url)

    async def next_frame(self) -> Union[Frame, Closed]:
        assert self.websocket is not None
        try:
            return await self.websocket.recv()
        except websockets.exceptions.ConnectionClosedOK:
            logger.info("Connection to %s closed by server", self.url)
        except websockets.exceptions.ConnectionClosedError as e:
            logger.warning("Connection to %s lost: %s", self.url, e)
        return CLOSED

    async def send(self, data: bytes) -> None:
        assert self.websocket is not None
        try:
            await self.websocket.send(data)
        except websockets.exceptions.ConnectionClosed as e:
            raise SendError(f"Connection closed while sending: {e}") from e
        except OSError as e:
            raise SendError(f"Error sending frame: {e}") from e

    async def close(self) -> None:
        if self.websocket:
            await self.websocket.close(code=1000)


async def open_connection(url: str) -> WebSocketConnection:
    connection = WebSocketConnection(url)
    await connection.connect()
    return connection
