"""
Packet framing - response classification and request building

Every datagram starts with a 4-byte marker:
- FF FF FF FF: simple response, payload follows directly
- FF FF FF FE: split response, payload carries multi-packet framing
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from valve_query.engine.codec import ByteReader, pack_byte
from valve_query.exceptions import (
    InvalidFragmentError,
    TruncatedInputError,
    UnrecognizedHeaderError,
)

SIMPLE_RESPONSE_HEADER = b"\xFF\xFF\xFF\xFF"
MULTI_PACKET_RESPONSE_HEADER = b"\xFF\xFF\xFF\xFE"
HEADER_SIZE = 4

# Sent with Player/Rules requests until the server issues a real token
CHALLENGE_PLACEHOLDER = b"\xFF\xFF\xFF\xFF"
CHALLENGE_SIZE = 4
# Marker + type byte + token
CHALLENGE_PACKET_SIZE = HEADER_SIZE + 1 + CHALLENGE_SIZE

# Request kinds
A2S_INFO = 0x54  # 'T'
A2S_PLAYER = 0x55
A2S_RULES = 0x56

# Response types
S2C_CHALLENGE = 0x41  # 'A'
S2A_INFO = 0x49  # 'I'
S2A_PLAYER = 0x44  # 'D'
S2A_RULES = 0x45  # 'E'

INFO_PAYLOAD = b"Source Engine Query\x00"

# answer id (4) + total (1) + index (1)
SPLIT_HEADER_SIZE = 6


class PacketKind(str, Enum):
    """Response framing"""

    SIMPLE = "simple"
    SPLIT = "split"


@dataclass
class Fragment:
    """One datagram of a split response"""

    answer_id: int
    total: int
    index: int
    payload: bytes


def classify(datagram: bytes) -> PacketKind:
    """
    Decide the framing of a received datagram from its first four bytes.

    Raises:
        UnrecognizedHeaderError: Marker is neither simple nor split
    """
    header = bytes(datagram[:HEADER_SIZE])
    if header == SIMPLE_RESPONSE_HEADER:
        return PacketKind.SIMPLE
    if header == MULTI_PACKET_RESPONSE_HEADER:
        return PacketKind.SPLIT
    raise UnrecognizedHeaderError(
        f"Unknown packet header: {header.hex() or '<empty>'}",
        details={"header": header.hex(), "size": len(datagram)},
    )


def simple_payload(datagram: bytes) -> bytes:
    return bytes(datagram[HEADER_SIZE:])


def parse_fragment(datagram: bytes) -> Fragment:
    """
    Parse a split datagram into a Fragment.

    Layout after the marker: answer id (int32), total fragments (uint8),
    fragment index (uint8), fragment payload.
    """
    if classify(datagram) is not PacketKind.SPLIT:
        raise InvalidFragmentError(
            "Expected a split packet",
            details={"size": len(datagram)},
        )

    if len(datagram) < HEADER_SIZE + SPLIT_HEADER_SIZE:
        raise TruncatedInputError(
            "Split packet header is truncated",
            details={"size": len(datagram), "needed": HEADER_SIZE + SPLIT_HEADER_SIZE},
        )

    reader = ByteReader(datagram[HEADER_SIZE:])
    answer_id = reader.read_long()
    total = reader.read_byte()
    index = reader.read_byte()
    return Fragment(
        answer_id=answer_id,
        total=total,
        index=index,
        payload=reader.read_remaining(),
    )


def _request(kind: int, payload: bytes = b"", challenge: Optional[bytes] = None) -> bytes:
    request = SIMPLE_RESPONSE_HEADER + pack_byte(kind) + payload
    if challenge is not None:
        request += bytes(challenge)
    return request


def info_request(challenge: Optional[bytes] = None) -> bytes:
    """A2S_INFO request; the token is only appended once the server has issued one."""
    return _request(A2S_INFO, INFO_PAYLOAD, challenge)


def player_request(challenge: Optional[bytes] = None) -> bytes:
    return _request(A2S_PLAYER, challenge=challenge or CHALLENGE_PLACEHOLDER)


def rules_request(challenge: Optional[bytes] = None) -> bytes:
    return _request(A2S_RULES, challenge=challenge or CHALLENGE_PLACEHOLDER)
