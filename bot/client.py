#!/usr/bin/env python3
"""
Connect, log in and serve chat commands until the server hangs up.
"""

from __future__ import annotations
from typing import Optional

from bot.commands import CommandResponder
from bot.config import BotConfig
from bot.dispatch import Dispatcher
from bot.session import Session
from bot.ws_client import WebSocketConnection, open_connection
from shared.log import get_logger

logger = get_logger(__name__)


async def run_session(config: BotConfig, connection: Optional[WebSocketConnection] = None) -> Dispatcher:
    """
    Run one session to completion and return its dispatcher for inspection.

    Raises:
        BotConnectionError: the websocket could not be opened
        SendError: a frame could not be sent; the session is closed
    """
    if connection is None:
        connection = await open_connection(config.server)

    session = Session(identity=config.name, flag=config.flag)
    dispatcher = Dispatcher(session, CommandResponder(config.commands))
    try:
        await dispatcher.login(connection)
        await dispatcher.run(connection, connection)
    finally:
        session.mark_closed()
        await connection.close()

    logger.info(
        "Session ended: %d frames, %d undecodable, %d sent",
        dispatcher.frames_received, dispatcher.decode_failures, dispatcher.frames_sent,
    )
    return dispatcher
