from __future__ import annotations

from typing import Awaitable, Callable, Dict, Optional, Protocol, Type, Union

from bot.commands import CommandResponder
from bot.errors import SendError
from bot.session import Session
from bot.ws_client import CLOSED, Frame, Closed
from shared.codec import DecodeError, decode, encode
from shared.log import get_logger
from shared.packets import (
    BroadcastText,
    InboundEvent,
    LivenessChallenge,
    LoginResult,
    OutboundRequest,
    ServerError,
    WhisperText,
)

logger = get_logger(__name__)


class FrameSource(Protocol):
    async def next_frame(self) -> Union[Frame, Closed]: ...


class FrameSink(Protocol):
    async def send(self, data: bytes) -> None: ...


class Dispatcher:
    """
    Reads frames one at a time and routes each decoded event to its handler.

    A handler's send finishes before the next frame is pulled, so replies go
    out in the same order as the events that caused them.
    """

    def __init__(self, session: Session, responder: CommandResponder) -> None:
        self.session = session
        self.responder = responder
        self.frames_received = 0
        self.decode_failures = 0
        self.frames_sent = 0
        self._sink: Optional[FrameSink] = None
        self._handlers: Dict[Type, Callable[..., Awaitable[None]]] = {
            LivenessChallenge: self.handle_liveness_challenge,
            BroadcastText: self.handle_broadcast_text,
            LoginResult: self.handle_login_result,
            ServerError: self.handle_server_error,
            WhisperText: self.handle_whisper_text,
        }

    async def send(self, request: OutboundRequest) -> None:
        """Encode and send. A failed send closes the session and re-raises."""
        assert self._sink is not None
        try:
            await self._sink.send(encode(request))
        except SendError:
            logger.error("Failed to send %s, giving up on session", type(request).__name__)
            self.session.mark_closed()
            raise
        self.frames_sent += 1

    async def login(self, sink: FrameSink) -> None:
        """Send the login request. Must happen once, before ``run``."""
        self._sink = sink
        await self.send(self.session.begin_authentication())

    async def run(self, source: FrameSource, sink: FrameSink) -> None:
        """Run until the source reports CLOSED. Raises SendError on a failed send."""
        self._sink = sink
        while True:
            frame = await source.next_frame()
            if frame is CLOSED:
                self.session.mark_closed()
                return

            self.frames_received += 1
            try:
                event = decode(frame)
            except DecodeError as e:
                self.decode_failures += 1
                logger.debug("Dropping undecodable frame: %s", e)
                continue

            await self.dispatch(event)

    async def dispatch(self, event: InboundEvent) -> None:
        handler = self._handlers.get(type(event))
        if handler is not None:
            await handler(event)

    # ========================================
    #           HANDLERS
    # ========================================

    async def handle_liveness_challenge(self, event: LivenessChallenge) -> None:
        if not self.session.is_active:
            logger.warning("Ping before login, not answering", extra={"state": self.session.state.value})
            return
        await self.send(self.session.answer_liveness(event.token))

    async def handle_broadcast_text(self, event: BroadcastText) -> None:
        if not self.session.is_active:
            logger.warning("Chat before login, ignoring", extra={"state": self.session.state.value})
            return
        reply = self.responder.match(event.sender_id, event.text)
        if reply is None:
            return
        await self.send(reply)
        logger.info("Answered %r", event.text, extra={"player_id": event.sender_id})

    async def handle_login_result(self, event: LoginResult) -> None:
        self.session.record_login(event)

    async def handle_server_error(self, event: ServerError) -> None:
        logger.warning("Server reported error code %d", event.code, extra={"packet": "ERROR"})

    async def handle_whisper_text(self, event: WhisperText) -> None:
        logger.debug("Whisper: %s", event.text, extra={"player_id": event.sender_id})
