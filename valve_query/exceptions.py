"""
Custom Exception Hierarchy for the query client

Every failure surfaced by a query is one of these. Server responses are
untrusted network input, so malformed or truncated data ends up here
instead of as a raw struct/index error.
All custom exceptions inherit from QueryError base class.
"""
from typing import Optional


class QueryError(Exception):
    """
    Base exception for all query client errors.

    Catching QueryError covers every failure a query operation can raise.
    """
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(QueryError):
    """
    Invalid configuration or settings.

    Raised when a setting or constructor argument is out of range.
    """
    pass


# Network and Transport Errors

class TransportError(QueryError):
    """
    Network transport failures.

    Base class for all send/receive errors. Never retried by the engine.
    """
    pass


class SendError(TransportError):
    """Failed to send a request datagram to the server."""
    pass


class ReceiveError(TransportError):
    """Failed to receive a datagram from the server."""
    pass


class ReceiveTimeoutError(ReceiveError):
    """No datagram arrived before the receive timeout elapsed."""
    pass


class IncompleteResponseError(ReceiveTimeoutError):
    """
    Multi-packet response timed out with fragments still missing.

    details carries the fragment indices received so far and the
    declared total.
    """
    pass


# Protocol and Decoding Errors

class ProtocolError(QueryError):
    """
    Response does not match the query protocol.

    Base class for framing and decoding errors.
    """
    pass


class UnrecognizedHeaderError(ProtocolError):
    """Datagram starts with neither the simple nor the split marker."""
    pass


class TruncatedInputError(ProtocolError):
    """Decoder ran out of bytes in the middle of a field or record."""
    pass


class UnrecognizedEnumByteError(ProtocolError):
    """
    Enum-coded byte outside its documented set.

    Raised for server type, environment, visibility and VAC bytes.
    """
    def __init__(self, field: str, value: int):
        super().__init__(
            f"Unrecognized {field} byte: 0x{value:02x}",
            {"field": field, "value": value},
        )
        self.field = field
        self.value = value


class UnexpectedResponseError(ProtocolError):
    """Response type byte is not the one the query expects."""
    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Expected response type 0x{expected:02x}, got 0x{actual:02x}",
            {"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


class InvalidFragmentError(ProtocolError):
    """Split-packet framing is inconsistent with the response being reassembled."""
    pass
