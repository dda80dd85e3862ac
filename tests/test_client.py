"""
End-to-end tests: Client and UDPTransport against the fake A2S server.

Tests cover:
- Info with and without a challenge
- Player and rules queries, including split responses
- Receive timeouts and incomplete split responses
- UDPTransport send/receive and lifecycle
"""
import socket

import pytest

from valve_query import Client
from valve_query.engine.transport import UDPTransport
from valve_query.exceptions import (
    ConfigurationError,
    IncompleteResponseError,
    ReceiveTimeoutError,
)
from valve_query.models import Environment, ServerType

from a2s_server import FakeA2SServer, build_player_payload, build_rules_payload


@pytest.fixture
def server():
    with FakeA2SServer() as srv:
        yield srv


def _client(srv: FakeA2SServer, timeout_ms: int = 1000) -> Client:
    host, port = srv.address
    return Client(host, port, timeout_ms=timeout_ms)


class TestClient:
    """Tests for Client over UDP"""

    def test_info(self, server):
        with _client(server) as client:
            info = client.info()

        assert info.name == "Test Server"
        assert info.server_type is ServerType.DEDICATED
        assert info.environment is Environment.LINUX
        assert info.port == 27015
        assert info.keywords == "secure,casual"
        assert len(server.requests) == 2

    def test_info_without_challenge(self):
        with FakeA2SServer(challenge_info=False) as srv, _client(srv) as client:
            info = client.info()
            requests = list(srv.requests)

        assert info.map == "de_dust2"
        assert len(requests) == 1

    def test_players(self, server):
        with _client(server) as client:
            players = client.players()

        assert [(p.name, p.score) for p in players] == [("alice", 12), ("bob", -2)]
        assert players[0].duration == 301.5

    def test_rules(self, server):
        with _client(server) as client:
            rules = client.rules()

        assert rules == {"mp_timelimit": "30", "sv_cheats": "0"}

    def test_split_responses(self):
        rules = [(f"rule_{i}", "x" * 40) for i in range(60)]
        players = [(i, f"player{i}", i, float(i)) for i in range(40)]
        srv = FakeA2SServer(
            player_payload=build_player_payload(players),
            rules_payload=build_rules_payload(rules),
            fragment_size=300,
        )
        with srv, _client(srv) as client:
            decoded_rules = client.rules()
            decoded_players = client.players()

        assert decoded_rules == dict(rules)
        assert [p.index for p in decoded_players] == list(range(40))

    def test_incomplete_split_response(self):
        srv = FakeA2SServer(
            rules_payload=build_rules_payload([(f"rule_{i}", "y" * 30) for i in range(30)]),
            fragment_size=200,
            drop_fragments=[1],
        )
        with srv, _client(srv, timeout_ms=200) as client:
            with pytest.raises(IncompleteResponseError) as exc_info:
                client.rules()

        assert 1 not in exc_info.value.details["received"]

    def test_consecutive_queries_on_one_client(self, server):
        with _client(server) as client:
            client.info()
            client.players()
            client.rules()

        # Two datagrams per query, challenge requested every time
        assert len(server.requests) == 6

    def test_default_port(self):
        client = Client("127.0.0.1")

        assert client.port == 27015
        client.close()


class TestUDPTransport:
    """Tests for UDPTransport"""

    def test_send_and_receive(self):
        peer = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        peer.bind(("127.0.0.1", 0))
        peer.settimeout(1.0)
        try:
            with UDPTransport(*peer.getsockname(), timeout_ms=1000) as transport:
                transport.send(b"ping")
                data, addr = peer.recvfrom(64)
                peer.sendto(b"pong-pong", addr)

                assert data == b"ping"
                assert transport.receive(1400) == b"pong-pong"
        finally:
            peer.close()

    def test_receive_timeout(self):
        peer = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        peer.bind(("127.0.0.1", 0))
        try:
            with UDPTransport(*peer.getsockname(), timeout_ms=50) as transport:
                transport.send(b"anyone?")
                with pytest.raises(ReceiveTimeoutError):
                    transport.receive(1400)
        finally:
            peer.close()

    def test_client_timeout_against_silent_server(self):
        peer = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        peer.bind(("127.0.0.1", 0))
        try:
            client = Client(*peer.getsockname(), timeout_ms=50)
            with pytest.raises(ReceiveTimeoutError):
                client.info()
            client.close()
        finally:
            peer.close()

    def test_invalid_timeout(self):
        with pytest.raises(ConfigurationError):
            UDPTransport("127.0.0.1", 27015, timeout_ms=0)

    def test_close_is_idempotent(self):
        transport = UDPTransport("127.0.0.1", 27015)
        transport.close()
        transport.close()
