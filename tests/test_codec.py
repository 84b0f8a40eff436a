import struct

import pytest

from frames import chat_public, chat_whisper, login, ping, server_error
from shared.codec import DecodeError, EncodeError, decode, encode
from shared.packets import (
    AuthenticationRequest,
    BroadcastReply,
    BroadcastText,
    DirectedReply,
    LivenessChallenge,
    LivenessResponse,
    LoginResult,
    Other,
    ServerError,
    ServerPacketType,
    WhisperText,
)


def test_encode_login_layout():
    request = AuthenticationRequest(
        protocol=5, identity="PIZZABOT", credential_token="none",
        horizon_x=1000, horizon_y=1000, flag="XX",
    )

    data = encode(request)

    assert data == (
        b"\x00\x05"
        + b"\x08PIZZABOT"
        + b"\x04none"
        + struct.pack("<HH", 1000, 1000)
        + b"\x02XX"
    )


def test_encode_pong_whisper_and_chat():
    assert encode(LivenessResponse(token=42)) == b"\x06" + struct.pack("<I", 42)
    assert encode(DirectedReply(recipient_id=7, text="hi")) == b"\x15" + struct.pack("<H", 7) + b"\x02hi"
    assert encode(BroadcastReply(text="yo")) == b"\x14\x02yo"


def test_encode_counts_utf8_bytes_not_characters():
    assert encode(BroadcastReply(text="é")) == b"\x14\x02\xc3\xa9"


def test_encode_rejects_oversized_fields():
    with pytest.raises(EncodeError):
        encode(BroadcastReply(text="x" * 256))
    with pytest.raises(EncodeError):
        encode(LivenessResponse(token=2 ** 32))
    with pytest.raises(EncodeError):
        encode(DirectedReply(recipient_id=-1, text="x"))


def test_decode_ping():
    assert decode(ping(token=0xDEADBEEF, clock=99)) == LivenessChallenge(clock=99, token=0xDEADBEEF)


def test_decode_chat_public_and_whisper():
    assert decode(chat_public(7, "-bot-ping")) == BroadcastText(sender_id=7, text="-bot-ping")
    assert decode(chat_whisper(3, 4, "psst")) == WhisperText(sender_id=3, recipient_id=4, text="psst")


def test_decode_error_packet():
    assert decode(server_error(30)) == ServerError(code=30)


def test_decode_login_ignores_trailing_player_data():
    event = decode(login(player_id=1234, team=2, clock=5, token="abc"))

    assert event == LoginResult(success=True, player_id=1234, team=2, clock=5, token="abc")


def test_known_but_unmodeled_packet_is_other():
    frame = bytes([ServerPacketType.PLAYER_UPDATE]) + b"\x00" * 20

    assert decode(frame) == Other(packet_type=ServerPacketType.PLAYER_UPDATE)


@pytest.mark.parametrize(
    "frame",
    [
        b"",
        b"\xfe",                                  # unknown packet id
        ping(1)[:-1],                             # truncated
        ping(1) + b"\x00",                        # trailing bytes
        bytes([ServerPacketType.CHAT_PUBLIC]) + struct.pack("<H", 1) + b"\x05ab",
        bytes([ServerPacketType.CHAT_PUBLIC]) + struct.pack("<H", 1) + b"\x02\xff\xfe",
        "text frame",
    ],
)
def test_decode_failures_raise_decode_error(frame):
    with pytest.raises(DecodeError):
        decode(frame)


@pytest.mark.parametrize(
    "packet_id, packet_type",
    [
        (14, ServerPacketType.PLAYER_HIT),
        (17, ServerPacketType.PLAYER_KILL),
        (22, ServerPacketType.PLAYER_RETEAM),
    ],
)
def test_player_packet_ids_match_protocol(packet_id, packet_type):
    assert decode(bytes([packet_id]) + b"\x00" * 8) == Other(packet_type=packet_type)
