"""
Client for the Source/Steam server query protocol
"""
from valve_query.client import Client
from valve_query.engine.query_engine import QueryEngine
from valve_query.exceptions import (
    ConfigurationError,
    IncompleteResponseError,
    InvalidFragmentError,
    ProtocolError,
    QueryError,
    ReceiveError,
    ReceiveTimeoutError,
    SendError,
    TransportError,
    TruncatedInputError,
    UnexpectedResponseError,
    UnrecognizedEnumByteError,
    UnrecognizedHeaderError,
)
from valve_query.models import (
    Environment,
    Player,
    RuleSet,
    ServerInfo,
    ServerType,
    Vac,
    Visibility,
)

__version__ = "0.1.0"

__all__ = [
    "Client",
    "QueryEngine",
    "ServerInfo",
    "Player",
    "RuleSet",
    "ServerType",
    "Environment",
    "Visibility",
    "Vac",
    "QueryError",
    "ConfigurationError",
    "TransportError",
    "SendError",
    "ReceiveError",
    "ReceiveTimeoutError",
    "IncompleteResponseError",
    "ProtocolError",
    "UnrecognizedHeaderError",
    "TruncatedInputError",
    "UnrecognizedEnumByteError",
    "UnexpectedResponseError",
    "InvalidFragmentError",
]
