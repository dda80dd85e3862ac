"""
Challenge Handshake

Servers answer most queries only after the client echoes back a 4-byte
challenge token. Two shapes exist:

- Info: the server may or may not challenge. A 9-byte reply is a
  challenge; anything longer is already the answer.
- Player/Rules: always two steps. The first request carries an all-FF
  placeholder and the reply carries the real token.

Tokens live for a single exchange and are never cached.
"""
from typing import Callable, Optional

import structlog

from valve_query.config import settings
from valve_query.engine.packets import (
    CHALLENGE_PACKET_SIZE,
    CHALLENGE_SIZE,
    HEADER_SIZE,
    SIMPLE_RESPONSE_HEADER,
    info_request,
)
from valve_query.engine.transport import Transport
from valve_query.exceptions import TruncatedInputError, UnrecognizedHeaderError

logger = structlog.get_logger()


def extract_challenge(datagram: bytes) -> bytes:
    """
    Pull the challenge token out of a challenge reply.

    The reply is the simple marker, one type byte and the token; the
    token is the 4 bytes following the type byte.
    """
    if len(datagram) < CHALLENGE_PACKET_SIZE:
        raise TruncatedInputError(
            "Challenge reply is too short",
            details={"size": len(datagram), "needed": CHALLENGE_PACKET_SIZE},
        )
    if bytes(datagram[:HEADER_SIZE]) != SIMPLE_RESPONSE_HEADER:
        raise UnrecognizedHeaderError(
            "Challenge reply is not a simple packet",
            details={"header": bytes(datagram[:HEADER_SIZE]).hex()},
        )
    start = HEADER_SIZE + 1
    return bytes(datagram[start:start + CHALLENGE_SIZE])


class ChallengeHandshake:
    """Runs the challenge exchange for one query over a transport."""

    def __init__(self, transport: Transport, packet_size: Optional[int] = None):
        self.transport = transport
        self.packet_size = packet_size or settings.packet_size

    def _exchange(self, request: bytes) -> bytes:
        self.transport.send(request)
        return self.transport.receive(self.packet_size)

    def info_exchange(self) -> bytes:
        """
        Send A2S_INFO, answering a challenge if the server issues one.

        Returns:
            First datagram of the real answer
        """
        reply = self._exchange(info_request())
        if len(reply) != CHALLENGE_PACKET_SIZE:
            logger.debug("info_unchallenged", size=len(reply))
            return reply

        challenge = extract_challenge(reply)
        logger.debug("challenge_received", query="info", challenge=challenge.hex())
        return self._exchange(info_request(challenge))

    def challenge_exchange(self, build_request: Callable[..., bytes]) -> bytes:
        """
        Two-step exchange for Player and Rules queries.

        Args:
            build_request: Request builder taking an optional challenge token

        Returns:
            First datagram of the real answer
        """
        reply = self._exchange(build_request())
        challenge = extract_challenge(reply)
        logger.debug(
            "challenge_received",
            query=getattr(build_request, "__name__", "query"),
            challenge=challenge.hex(),
        )
        return self._exchange(build_request(challenge))
