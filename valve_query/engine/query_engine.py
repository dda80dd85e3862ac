"""
Query Engine - end-to-end A2S queries over a transport

Each operation runs handshake -> classify -> (reassemble) -> decode and
either returns a typed result or raises a QueryError. Nothing is retried
beyond the challenge re-send built into the handshake, and no state is
kept between calls.
"""
import time
from typing import Callable, List, Optional, TypeVar

import structlog

from valve_query.config import settings
from valve_query.engine.decoders import decode_info, decode_players, decode_rules
from valve_query.engine.handshake import ChallengeHandshake
from valve_query.engine.packets import (
    SIMPLE_RESPONSE_HEADER,
    PacketKind,
    classify,
    player_request,
    rules_request,
    simple_payload,
)
from valve_query.engine.reassembler import reassemble
from valve_query.engine.transport import Transport
from valve_query.models import Player, RuleSet, ServerInfo

logger = structlog.get_logger()

T = TypeVar("T")


class QueryEngine:
    """
    Runs A2S_INFO, A2S_PLAYER and A2S_RULES queries.

    Calls are synchronous and each one owns the transport for its whole
    duration. Sharing one engine between threads requires external
    serialization.
    """

    def __init__(
        self,
        transport: Transport,
        packet_size: Optional[int] = None,
        encoding: Optional[str] = None,
    ):
        self.transport = transport
        self.packet_size = packet_size or settings.packet_size
        self.encoding = encoding or settings.string_encoding

    def info(self) -> ServerInfo:
        """Query general server information."""
        return self._run("info", self._handshake().info_exchange, decode_info)

    def players(self) -> List[Player]:
        """Query the list of connected players."""
        return self._run(
            "players",
            lambda: self._handshake().challenge_exchange(player_request),
            decode_players,
        )

    def rules(self) -> RuleSet:
        """Query the server rules (cvars)."""
        return self._run(
            "rules",
            lambda: self._handshake().challenge_exchange(rules_request),
            decode_rules,
        )

    def _handshake(self) -> ChallengeHandshake:
        return ChallengeHandshake(self.transport, self.packet_size)

    def _receive(self) -> bytes:
        return self.transport.receive(self.packet_size)

    def _payload(self, datagram: bytes) -> bytes:
        """Turn the first answer datagram into a complete payload."""
        if classify(datagram) is PacketKind.SIMPLE:
            return simple_payload(datagram)

        payload = reassemble(datagram, self._receive)
        # A reassembled response still starts with the simple marker
        if payload.startswith(SIMPLE_RESPONSE_HEADER):
            payload = payload[len(SIMPLE_RESPONSE_HEADER):]
        return payload

    def _run(
        self,
        query: str,
        exchange: Callable[[], bytes],
        decode: Callable[[bytes, Optional[str]], T],
    ) -> T:
        started = time.monotonic()
        datagram = exchange()
        result = decode(self._payload(datagram), self.encoding)
        logger.debug(
            "query_completed",
            query=query,
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )
        return result
