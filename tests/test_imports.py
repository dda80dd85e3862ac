"""
Test that all modules can be imported correctly
Run this after installing dependencies to validate the setup
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def test_package_imports():
    """Test top-level package exports"""
    import valve_query
    from valve_query import Client, QueryEngine, ServerInfo, Player, RuleSet, QueryError

    for name in valve_query.__all__:
        assert hasattr(valve_query, name), name


def test_engine_imports():
    """Test engine module imports"""
    from valve_query.engine.codec import ByteReader, compress_trailing_nulls
    from valve_query.engine.packets import classify, parse_fragment, PacketKind
    from valve_query.engine.reassembler import MultiPacketReassembler, reassemble
    from valve_query.engine.handshake import ChallengeHandshake, extract_challenge
    from valve_query.engine.decoders import decode_info, decode_players, decode_rules
    from valve_query.engine.transport import Transport, UDPTransport
    from valve_query.engine.query_engine import QueryEngine


def test_exception_hierarchy():
    """Test that every failure is a QueryError"""
    from valve_query import exceptions

    assert issubclass(exceptions.IncompleteResponseError, exceptions.ReceiveTimeoutError)
    assert issubclass(exceptions.ReceiveTimeoutError, exceptions.TransportError)
    for name in (
        "UnrecognizedHeaderError",
        "TruncatedInputError",
        "UnrecognizedEnumByteError",
        "UnexpectedResponseError",
        "InvalidFragmentError",
    ):
        assert issubclass(getattr(exceptions, name), exceptions.ProtocolError)
    assert issubclass(exceptions.ProtocolError, exceptions.QueryError)
    assert issubclass(exceptions.TransportError, exceptions.QueryError)
