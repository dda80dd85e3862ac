"""
Primitive Codec - little-endian scalars and null-terminated strings

ByteReader walks a response payload field by field. Every read checks the
remaining length first, so short payloads raise TruncatedInputError rather
than struct.error.
"""
import struct
from typing import Optional

from valve_query.config import settings
from valve_query.exceptions import TruncatedInputError

_BYTE = struct.Struct("<B")
_SHORT = struct.Struct("<h")
_USHORT = struct.Struct("<H")
_LONG = struct.Struct("<i")
_FLOAT = struct.Struct("<f")
_LONGLONG = struct.Struct("<Q")


class ByteReader:
    """
    Cursor over a byte payload.

    Supports the scalar types used by the query protocol:
    - byte (uint8), short (int16), ushort (uint16)
    - long (int32), float (float32), longlong (uint64)
    - null-terminated strings, one byte per character
    """

    def __init__(self, data: bytes, encoding: Optional[str] = None):
        self._data = bytes(data)
        self._offset = 0
        self.encoding = encoding or settings.string_encoding

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def _unpack(self, fmt: struct.Struct, kind: str):
        if self.remaining < fmt.size:
            raise TruncatedInputError(
                f"Not enough data for {kind} (need {fmt.size}, have {self.remaining})",
                details={"offset": self._offset, "kind": kind, "needed": fmt.size, "available": self.remaining},
            )
        value, = fmt.unpack_from(self._data, self._offset)
        self._offset += fmt.size
        return value

    def read_byte(self) -> int:
        return self._unpack(_BYTE, "byte")

    def read_short(self) -> int:
        return self._unpack(_SHORT, "short")

    def read_ushort(self) -> int:
        return self._unpack(_USHORT, "ushort")

    def read_long(self) -> int:
        return self._unpack(_LONG, "long")

    def read_float(self) -> float:
        return self._unpack(_FLOAT, "float")

    def read_longlong(self) -> int:
        return self._unpack(_LONGLONG, "longlong")

    def read_string(self) -> str:
        """Read up to the next 0x00; the terminator is consumed but not returned."""
        end = self._data.find(b"\x00", self._offset)
        if end < 0:
            raise TruncatedInputError(
                "Unterminated string",
                details={"offset": self._offset, "kind": "string", "available": self.remaining},
            )
        value = self._data[self._offset:end].decode(self.encoding, errors="replace")
        self._offset = end + 1
        return value

    def read_remaining(self) -> bytes:
        value = self._data[self._offset:]
        self._offset = len(self._data)
        return value


def pack_byte(value: int) -> bytes:
    return _BYTE.pack(value)


def pack_short(value: int) -> bytes:
    return _SHORT.pack(value)


def pack_ushort(value: int) -> bytes:
    return _USHORT.pack(value)


def pack_long(value: int) -> bytes:
    return _LONG.pack(value)


def pack_float(value: float) -> bytes:
    return _FLOAT.pack(value)


def pack_longlong(value: int) -> bytes:
    return _LONGLONG.pack(value)


def pack_string(value: str, encoding: Optional[str] = None) -> bytes:
    return value.encode(encoding or settings.string_encoding) + b"\x00"


def compress_trailing_nulls(data: bytes) -> bytes:
    """
    Collapse a run of trailing zero bytes down to a single zero byte.

    Example:
        b"\\x01\\x02\\x03\\x00\\x00\\x00" -> b"\\x01\\x02\\x03\\x00"
    """
    data = bytes(data)
    stripped = data.rstrip(b"\x00")
    if stripped == data:
        return data
    return stripped + b"\x00"
