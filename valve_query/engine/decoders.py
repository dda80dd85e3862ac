"""
Payload Decoders - A2S_INFO, A2S_PLAYER and A2S_RULES responses

Each decoder takes the payload that follows the simple-response marker
(or a reassembled split payload) and returns a typed result. Truncated
payloads raise TruncatedInputError; nothing is silently dropped except
the short tail of a player list, whose record count cannot be trusted.
"""
from typing import List, Optional

import structlog

from valve_query.engine.codec import ByteReader, compress_trailing_nulls
from valve_query.engine.packets import S2A_INFO, S2A_PLAYER, S2A_RULES
from valve_query.exceptions import UnexpectedResponseError
from valve_query.models import (
    Environment,
    Player,
    RuleSet,
    ServerInfo,
    ServerType,
    Vac,
    Visibility,
)

logger = structlog.get_logger()

# Extra data flag bits, in the order their fields appear on the wire
EDF_PORT = 0x80
EDF_STEAM_ID = 0x10
EDF_SOURCE_TV = 0x40
EDF_KEYWORDS = 0x20
EDF_GAME_ID = 0x01

# index (byte) + score (long) + duration (float); the name is variable
PLAYER_FIXED_SIZE = 1 + 4 + 4


def _expect_type(reader: ByteReader, expected: int) -> int:
    actual = reader.read_byte()
    if actual != expected:
        raise UnexpectedResponseError(expected, actual)
    return actual


def decode_info(payload: bytes, encoding: Optional[str] = None) -> ServerInfo:
    """
    Decode an A2S_INFO payload.

    Optional fields are read only when their extra-data-flag bit is set,
    checked in wire order: port, SteamID, SourceTV, keywords, GameID.
    Whatever is left afterwards is kept as trailing_bytes.
    """
    reader = ByteReader(payload, encoding)

    fields = {
        "header": _expect_type(reader, S2A_INFO),
        "protocol": reader.read_byte(),
        "name": reader.read_string(),
        "map": reader.read_string(),
        "folder": reader.read_string(),
        "game": reader.read_string(),
        "app_id": reader.read_ushort(),
        "players": reader.read_byte(),
        "max_players": reader.read_byte(),
        "bots": reader.read_byte(),
        "server_type": ServerType.from_byte(reader.read_byte()),
        "environment": Environment.from_byte(reader.read_byte()),
        "visibility": Visibility.from_byte(reader.read_byte()),
        "vac": Vac.from_byte(reader.read_byte()),
        "game_version": reader.read_string(),
    }

    if reader.remaining:
        edf = reader.read_byte()
        fields["extra_data_flag"] = edf

        if edf & EDF_PORT:
            fields["port"] = reader.read_ushort()
        if edf & EDF_STEAM_ID:
            fields["steam_id"] = reader.read_longlong()
        if edf & EDF_SOURCE_TV:
            fields["spectator_port"] = reader.read_ushort()
            fields["spectator_name"] = reader.read_string()
        if edf & EDF_KEYWORDS:
            fields["keywords"] = reader.read_string()
        if edf & EDF_GAME_ID:
            fields["game_id"] = reader.read_longlong()

    if reader.remaining:
        leftover = compress_trailing_nulls(reader.read_remaining())
        # A lone terminator is padding, not residue
        if leftover != b"\x00":
            fields["trailing_bytes"] = leftover
            logger.debug("info_trailing_bytes", size=len(leftover))

    return ServerInfo(**fields)


def decode_player_records(data: bytes, encoding: Optional[str] = None) -> List[Player]:
    """
    Decode consecutive player records.

    Decoding continues while more bytes remain than the fixed part of a
    record; a record that starts but runs out of bytes raises
    TruncatedInputError.
    """
    reader = ByteReader(data, encoding)
    players = []

    while reader.remaining > PLAYER_FIXED_SIZE:
        players.append(
            Player(
                index=reader.read_byte(),
                name=reader.read_string(),
                score=reader.read_long(),
                duration=reader.read_float(),
            )
        )

    if reader.remaining:
        logger.debug("player_trailing_bytes", size=reader.remaining)

    return players


def decode_players(payload: bytes, encoding: Optional[str] = None) -> List[Player]:
    """Decode an A2S_PLAYER payload: type byte, count byte, player records."""
    reader = ByteReader(payload, encoding)
    _expect_type(reader, S2A_PLAYER)
    # Informational only; the records themselves decide the count
    declared = reader.read_byte()

    players = decode_player_records(reader.read_remaining(), encoding)
    if declared != len(players):
        logger.debug("player_count_mismatch", declared=declared, decoded=len(players))
    return players


def decode_rule_pairs(data: bytes, encoding: Optional[str] = None) -> RuleSet:
    """
    Decode (name, value) string pairs until the data is exhausted.

    A repeated name keeps the last value. A name without a value raises
    TruncatedInputError.
    """
    reader = ByteReader(data, encoding)
    rules: RuleSet = {}

    while reader.remaining:
        name = reader.read_string()
        value = reader.read_string()
        rules[name] = value

    return rules


def decode_rules(payload: bytes, encoding: Optional[str] = None) -> RuleSet:
    """Decode an A2S_RULES payload: type byte, rule count (short), rule pairs."""
    reader = ByteReader(payload, encoding)
    _expect_type(reader, S2A_RULES)
    declared = reader.read_short()

    rules = decode_rule_pairs(reader.read_remaining(), encoding)
    if declared != len(rules):
        logger.debug("rule_count_mismatch", declared=declared, decoded=len(rules))
    return rules
