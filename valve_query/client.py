"""
Client - query a game server by host and port
"""
from typing import List, Optional

from valve_query.config import settings
from valve_query.engine.query_engine import QueryEngine
from valve_query.engine.transport import UDPTransport
from valve_query.models import Player, RuleSet, ServerInfo


class Client:
    """
    UDP query client for one server.

    Example:
        with Client("203.0.113.7", 27015) as client:
            info = client.info()
            players = client.players()
            rules = client.rules()
    """

    def __init__(self, host: str, port: Optional[int] = None, timeout_ms: Optional[int] = None):
        self.host = host
        self.port = port or settings.default_port
        self.transport = UDPTransport(self.host, self.port, timeout_ms)
        self.engine = QueryEngine(self.transport)

    def info(self) -> ServerInfo:
        return self.engine.info()

    def players(self) -> List[Player]:
        return self.engine.players()

    def rules(self) -> RuleSet:
        return self.engine.rules()

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
