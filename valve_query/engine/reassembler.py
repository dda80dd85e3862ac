"""
Multi-Packet Reassembler

Buffers the fragments of one split response until the total declared by
the first fragment has arrived, then joins them by ascending index.
Wire order is never trusted.
"""
from typing import Callable, Dict, List

import structlog

from valve_query.engine.packets import Fragment, PacketKind, classify, parse_fragment
from valve_query.exceptions import (
    IncompleteResponseError,
    InvalidFragmentError,
    ReceiveTimeoutError,
)

logger = structlog.get_logger()


class MultiPacketReassembler:
    """
    Fragment buffer for a single split response.

    The first fragment fixes the answer id and the total fragment count.
    Duplicate indices overwrite the earlier payload, since repeats are
    normal on an unreliable transport.
    """

    def __init__(self, first: Fragment):
        if first.total == 0:
            raise InvalidFragmentError(
                "Split response declares zero fragments",
                details={"answer_id": first.answer_id},
            )
        self.answer_id = first.answer_id
        self.total = first.total
        self._fragments: Dict[int, bytes] = {}
        self.add(first)

    @property
    def is_complete(self) -> bool:
        return len(self._fragments) == self.total

    @property
    def received(self) -> List[int]:
        return sorted(self._fragments)

    @property
    def missing(self) -> List[int]:
        return [index for index in range(self.total) if index not in self._fragments]

    def add(self, fragment: Fragment) -> bool:
        """
        Store a fragment.

        Returns:
            True once every index below total has been received
        """
        if fragment.answer_id != self.answer_id:
            logger.warning(
                "fragment_answer_id_mismatch",
                expected=self.answer_id,
                actual=fragment.answer_id,
                index=fragment.index,
            )
            return self.is_complete

        if fragment.index >= self.total:
            raise InvalidFragmentError(
                f"Fragment index {fragment.index} out of range for {self.total} fragments",
                details={"index": fragment.index, "total": self.total},
            )

        if fragment.total != self.total:
            logger.debug(
                "fragment_total_mismatch",
                expected=self.total,
                actual=fragment.total,
                index=fragment.index,
            )

        if fragment.index in self._fragments:
            logger.debug("fragment_duplicate", index=fragment.index)

        self._fragments[fragment.index] = fragment.payload
        logger.debug(
            "fragment_received",
            answer_id=self.answer_id,
            index=fragment.index,
            total=self.total,
            size=len(fragment.payload),
        )
        return self.is_complete

    def assemble(self) -> bytes:
        """Concatenate the buffered payloads in index order."""
        if not self.is_complete:
            raise IncompleteResponseError(
                f"Missing {len(self.missing)} of {self.total} fragments",
                details={"received": self.received, "total": self.total},
            )
        return b"".join(self._fragments[index] for index in range(self.total))

    def collect(self, receive: Callable[[], bytes]) -> bytes:
        """
        Receive datagrams until the response is complete.

        Args:
            receive: Blocking call returning the next datagram, raising
                ReceiveTimeoutError when nothing arrives in time

        Raises:
            IncompleteResponseError: Timed out with fragments still missing
            InvalidFragmentError: A non-split datagram arrived mid-response
        """
        while not self.is_complete:
            try:
                datagram = receive()
            except ReceiveTimeoutError as e:
                raise IncompleteResponseError(
                    f"Timed out with {len(self.missing)} of {self.total} fragments missing",
                    details={"received": self.received, "total": self.total, "error": str(e)},
                ) from e

            if classify(datagram) is not PacketKind.SPLIT:
                raise InvalidFragmentError(
                    "Simple packet received while reassembling a split response",
                    details={"received": self.received, "total": self.total},
                )
            self.add(parse_fragment(datagram))

        return self.assemble()


def reassemble(first_datagram: bytes, receive: Callable[[], bytes]) -> bytes:
    """Reassemble the split response whose first datagram is already in hand."""
    reassembler = MultiPacketReassembler(parse_fragment(first_datagram))
    return reassembler.collect(receive)
