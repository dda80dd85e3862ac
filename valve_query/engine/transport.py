"""
Transport Abstraction Layer

The query engine only needs to send a datagram to the server and to
receive one back within a timeout. Transport captures that capability;
UDPTransport is the socket implementation used by Client.
"""
import socket
from abc import ABC, abstractmethod
from typing import Optional

import structlog

from valve_query.config import settings
from valve_query.exceptions import (
    ConfigurationError,
    ReceiveError,
    ReceiveTimeoutError,
    SendError,
)

logger = structlog.get_logger()


class Transport(ABC):
    """
    Abstract base class for datagram transports.

    A transport is owned by one query at a time; concurrent queries need
    their own transport instances.
    """

    @abstractmethod
    def send(self, data: bytes) -> None:
        """
        Send one datagram to the server.

        Raises:
            SendError: On send failures
        """
        pass

    @abstractmethod
    def receive(self, max_bytes: int) -> bytes:
        """
        Block until one datagram arrives or the timeout elapses.

        Args:
            max_bytes: Receive buffer size

        Returns:
            The datagram, trimmed to its actual length

        Raises:
            ReceiveTimeoutError: Nothing arrived in time
            ReceiveError: On other receive failures
        """
        pass

    def close(self) -> None:
        """Release transport resources."""
        pass


class UDPTransport(Transport):
    """
    UDP datagram transport.

    Uses a connected socket so that only datagrams from the target
    address are delivered. The socket is opened on first use.
    """

    def __init__(self, host: str, port: int, timeout_ms: Optional[int] = None):
        """
        Initialize transport.

        Args:
            host: Server hostname or IP
            port: Server query port
            timeout_ms: Receive timeout in milliseconds
        """
        if timeout_ms is None:
            timeout_ms = settings.timeout_ms
        if timeout_ms <= 0:
            raise ConfigurationError(
                "Receive timeout must be positive",
                details={"timeout_ms": timeout_ms},
            )
        self.host = host
        self.port = port
        self.timeout_sec = timeout_ms / 1000.0
        self._sock: Optional[socket.socket] = None

    def _socket(self) -> socket.socket:
        if self._sock is None:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            try:
                sock.settimeout(self.timeout_sec)
                sock.connect((self.host, self.port))
            except OSError as e:
                sock.close()
                raise SendError(
                    f"Failed to open UDP socket to {self.host}:{self.port}",
                    details={"error": str(e)},
                ) from e
            self._sock = sock
            logger.debug("udp_socket_opened", host=self.host, port=self.port)
        return self._sock

    def send(self, data: bytes) -> None:
        sock = self._socket()
        try:
            sock.send(data)
        except OSError as e:
            raise SendError(
                f"Failed to send data to {self.host}:{self.port}",
                details={"error": str(e), "data_size": len(data)},
            ) from e
        logger.debug("datagram_sent", host=self.host, port=self.port, size=len(data))

    def receive(self, max_bytes: int) -> bytes:
        sock = self._socket()
        try:
            data = sock.recv(max_bytes)
        except socket.timeout as e:
            raise ReceiveTimeoutError(
                f"Receive timeout from {self.host}:{self.port}",
                details={"timeout_sec": self.timeout_sec},
            ) from e
        except OSError as e:
            raise ReceiveError(
                f"Failed to receive data from {self.host}:{self.port}",
                details={"error": str(e)},
            ) from e
        logger.debug("datagram_received", host=self.host, port=self.port, size=len(data))
        return data

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError as e:
                logger.warning(
                    "udp_socket_close_failed",
                    host=self.host,
                    port=self.port,
                    error=str(e),
                    error_type=type(e).__name__
                )
            self._sock = None

    def __enter__(self) -> "UDPTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
