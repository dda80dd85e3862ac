"""
Query result models
"""
from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel

from valve_query.exceptions import UnrecognizedEnumByteError


class ServerType(str, Enum):
    """Kind of server answering the query"""

    DEDICATED = "dedicated"
    NON_DEDICATED = "non_dedicated"
    SOURCE_TV_RELAY = "source_tv_relay"

    @classmethod
    def from_byte(cls, value: int) -> "ServerType":
        try:
            return _SERVER_TYPE_BYTES[value]
        except KeyError:
            raise UnrecognizedEnumByteError("server_type", value) from None


class Environment(str, Enum):
    """Operating system of the server"""

    LINUX = "linux"
    WINDOWS = "windows"
    MAC = "mac"

    @classmethod
    def from_byte(cls, value: int) -> "Environment":
        try:
            return _ENVIRONMENT_BYTES[value]
        except KeyError:
            raise UnrecognizedEnumByteError("environment", value) from None


class Visibility(str, Enum):
    """Whether the server requires a password"""

    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def from_byte(cls, value: int) -> "Visibility":
        try:
            return _VISIBILITY_BYTES[value]
        except KeyError:
            raise UnrecognizedEnumByteError("visibility", value) from None


class Vac(str, Enum):
    """Whether the server uses Valve Anti-Cheat"""

    UNSECURED = "unsecured"
    SECURED = "secured"

    @classmethod
    def from_byte(cls, value: int) -> "Vac":
        try:
            return _VAC_BYTES[value]
        except KeyError:
            raise UnrecognizedEnumByteError("vac", value) from None


_SERVER_TYPE_BYTES = {
    ord("d"): ServerType.DEDICATED,
    ord("l"): ServerType.NON_DEDICATED,
    ord("p"): ServerType.SOURCE_TV_RELAY,
}

# 'o' replaced 'm' for Mac after Left 4 Dead
_ENVIRONMENT_BYTES = {
    ord("l"): Environment.LINUX,
    ord("w"): Environment.WINDOWS,
    ord("m"): Environment.MAC,
    ord("o"): Environment.MAC,
}

_VISIBILITY_BYTES = {
    0x00: Visibility.PUBLIC,
    0x01: Visibility.PRIVATE,
}

_VAC_BYTES = {
    0x00: Vac.UNSECURED,
    0x01: Vac.SECURED,
}


class ServerInfo(BaseModel):
    """
    A2S_INFO response.

    The fields after game_version are only populated when the matching
    bit of extra_data_flag is set.
    """

    header: int
    protocol: int
    name: str
    map: str
    folder: str
    game: str
    app_id: int
    players: int
    max_players: int
    bots: int
    server_type: ServerType
    environment: Environment
    visibility: Visibility
    vac: Vac
    game_version: str

    # Extra data flag block
    extra_data_flag: Optional[int] = None
    port: Optional[int] = None
    steam_id: Optional[int] = None
    spectator_port: Optional[int] = None
    spectator_name: Optional[str] = None
    keywords: Optional[str] = None
    game_id: Optional[int] = None

    # Undecoded leftover bytes, trailing nulls collapsed
    trailing_bytes: Optional[bytes] = None


class Player(BaseModel):
    """One entry of an A2S_PLAYER response"""

    index: int
    name: str
    score: int
    duration: float


RuleSet = Dict[str, str]
