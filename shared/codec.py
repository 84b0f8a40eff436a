#!/usr/bin/env python3
"""
AIRMASH v5 binary codec

Every frame is a single websocket binary message. Byte 0 is the packet id,
the remaining bytes are the packet fields in declaration order, little-endian:

    uint8 / uint16 / uint32   fixed width integers
    bool                      uint8, non-zero is True
    text                      uint8 byte length + UTF-8

Only the packets this client sends or acts on have full layouts here. Every
other known server packet decodes to ``Other`` without looking at its body.

Usage:
    from shared.codec import decode, encode, DecodeError

    frame = encode(LivenessResponse(token=42))
    event = decode(raw_bytes)
"""

from __future__ import annotations
import struct
from typing import Callable, Dict

from shared.packets import (
    AuthenticationRequest,
    BroadcastReply,
    BroadcastText,
    ClientPacketType,
    DirectedReply,
    InboundEvent,
    LivenessChallenge,
    LivenessResponse,
    LoginResult,
    Other,
    OutboundRequest,
    ServerError,
    ServerPacketType,
    WhisperText,
)


class DecodeError(Exception):
    """Raised when an inbound frame cannot be turned into an event."""
    pass


class EncodeError(ValueError):
    """Raised when an outbound request does not fit the wire format."""
    pass


_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")


# ========================================
#           READING
# ========================================

class _Reader:
    def __init__(self, data: bytes, offset: int = 0) -> None:
        self.data = data
        self.offset = offset

    def _unpack(self, fmt: struct.Struct) -> int:
        try:
            (value,) = fmt.unpack_from(self.data, self.offset)
        except struct.error as e:
            raise DecodeError(f"Truncated frame at offset {self.offset}: {e}") from e
        self.offset += fmt.size
        return value

    def u8(self) -> int:
        return self._unpack(_U8)

    def u16(self) -> int:
        return self._unpack(_U16)

    def u32(self) -> int:
        return self._unpack(_U32)

    def boolean(self) -> bool:
        return self.u8() != 0

    def _string(self, length: int) -> str:
        end = self.offset + length
        if end > len(self.data):
            raise DecodeError(f"Truncated string: need {length} bytes at offset {self.offset}")
        raw = self.data[self.offset:end]
        self.offset = end
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid UTF-8 in string field: {e}") from e

    def text(self) -> str:
        return self._string(self.u8())

    def expect_end(self, packet: ServerPacketType) -> None:
        remaining = len(self.data) - self.offset
        if remaining:
            raise DecodeError(f"{packet.name}: {remaining} unexpected trailing bytes")


def _decode_login(r: _Reader) -> LoginResult:
    # Player list, room and server configuration follow; not needed here.
    return LoginResult(
        success=r.boolean(),
        player_id=r.u16(),
        team=r.u16(),
        clock=r.u32(),
        token=r.text(),
    )


def _decode_ping(r: _Reader) -> LivenessChallenge:
    event = LivenessChallenge(clock=r.u32(), token=r.u32())
    r.expect_end(ServerPacketType.PING)
    return event


def _decode_error(r: _Reader) -> ServerError:
    event = ServerError(code=r.u8())
    r.expect_end(ServerPacketType.ERROR)
    return event


def _decode_chat_public(r: _Reader) -> BroadcastText:
    event = BroadcastText(sender_id=r.u16(), text=r.text())
    r.expect_end(ServerPacketType.CHAT_PUBLIC)
    return event


def _decode_chat_whisper(r: _Reader) -> WhisperText:
    event = WhisperText(sender_id=r.u16(), recipient_id=r.u16(), text=r.text())
    r.expect_end(ServerPacketType.CHAT_WHISPER)
    return event


_DECODERS: Dict[ServerPacketType, Callable[[_Reader], InboundEvent]] = {
    ServerPacketType.LOGIN: _decode_login,
    ServerPacketType.PING: _decode_ping,
    ServerPacketType.ERROR: _decode_error,
    ServerPacketType.CHAT_PUBLIC: _decode_chat_public,
    ServerPacketType.CHAT_WHISPER: _decode_chat_whisper,
}


def decode(data: bytes) -> InboundEvent:
    """
    Decode one server frame.

    Raises:
        DecodeError: empty frame, unknown packet id, truncated or malformed body
    """
    if not isinstance(data, (bytes, bytearray)):
        raise DecodeError(f"Expected a binary frame, got {type(data).__name__}")
    if not data:
        raise DecodeError("Empty frame")

    packet_id = data[0]
    if not ServerPacketType.is_valid(packet_id):
        raise DecodeError(f"Unknown server packet id: {packet_id}")
    packet = ServerPacketType(packet_id)

    decoder = _DECODERS.get(packet)
    if decoder is None:
        return Other(packet_type=packet)
    return decoder(_Reader(bytes(data), offset=1))


# ========================================
#           WRITING
# ========================================

class _Writer:
    def __init__(self, packet: ClientPacketType) -> None:
        self.buf = bytearray()
        self.u8(int(packet))

    def _pack(self, fmt: struct.Struct, value: int, name: str) -> "_Writer":
        try:
            self.buf += fmt.pack(value)
        except struct.error as e:
            raise EncodeError(f"{name} out of range: {value}") from e
        return self

    def u8(self, value: int) -> "_Writer":
        return self._pack(_U8, value, "uint8")

    def u16(self, value: int) -> "_Writer":
        return self._pack(_U16, value, "uint16")

    def u32(self, value: int) -> "_Writer":
        return self._pack(_U32, value, "uint32")

    def text(self, value: str) -> "_Writer":
        raw = value.encode("utf-8")
        if len(raw) > 0xFF:
            raise EncodeError(f"text field is {len(raw)} bytes, limit is 255")
        self.u8(len(raw))
        self.buf += raw
        return self

    def to_bytes(self) -> bytes:
        return bytes(self.buf)


def encode(request: OutboundRequest) -> bytes:
    """Encode one outbound request to a binary frame."""
    if isinstance(request, AuthenticationRequest):
        w = (
            _Writer(ClientPacketType.LOGIN)
            .u8(request.protocol)
            .text(request.identity)
            .text(request.credential_token)
            .u16(request.horizon_x)
            .u16(request.horizon_y)
            .text(request.flag)
        )
    elif isinstance(request, LivenessResponse):
        w = _Writer(ClientPacketType.PONG).u32(request.token)
    elif isinstance(request, DirectedReply):
        w = _Writer(ClientPacketType.WHISPER).u16(request.recipient_id).text(request.text)
    elif isinstance(request, BroadcastReply):
        w = _Writer(ClientPacketType.CHAT).text(request.text)
    else:
        raise EncodeError(f"Cannot encode {type(request).__name__}")
    return w.to_bytes()
