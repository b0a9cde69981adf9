"""
UDP socket primitive for mDNS queries: one datagram endpoint bound per local
IPv4 address.
"""
import asyncio
import socket
from collections.abc import Callable
from typing import Optional, Tuple

import structlog

logger = structlog.get_logger(__name__)

DatagramHandler = Callable[[bytes, Tuple[str, int]], None]
ErrorHandler = Callable[[Exception], None]


class MDNSProtocol(asyncio.DatagramProtocol):
    """Forwards datagrams and transport errors to the owning discovery session."""

    def __init__(self, address: str, on_datagram: DatagramHandler, on_error: ErrorHandler):
        self.address = address
        self.on_datagram = on_datagram
        self.on_error = on_error
        self.transport: Optional[asyncio.DatagramTransport] = None
        self.closed = False

    def connection_made(self, transport: asyncio.DatagramTransport):
        self.transport = transport

    def connection_lost(self, exc: Optional[Exception]):
        self.closed = True
        if exc is not None:
            self.on_error(exc)

    def datagram_received(self, data: bytes, addr: Tuple[str, int]):
        self.on_datagram(data, addr)

    def error_received(self, exc: Exception):
        self.on_error(exc)

    def detach(self) -> None:
        """Stops forwarding anything further to the session."""
        self.on_datagram = lambda data, addr: None
        self.on_error = lambda exc: None

    def send(self, data: bytes, group: str, port: int) -> None:
        if self.transport is None or self.transport.is_closing():
            raise ConnectionError(f"Socket for {self.address} is not open")
        self.transport.sendto(data, (group, port))


def _make_socket(address: str, multicast_ttl: int) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    try:
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, socket.inet_aton(address))
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, multicast_ttl)
        sock.bind((address, 0))
        sock.setblocking(False)
    except OSError:
        sock.close()
        raise
    return sock


async def bind_to_address(
    address: str,
    on_datagram: DatagramHandler,
    on_error: ErrorHandler,
    multicast_ttl: int = 255,
) -> MDNSProtocol:
    """Creates a UDP endpoint bound to ``address`` on an ephemeral port.

    Raises:
        OSError: If the socket cannot be created or bound.
    """
    loop = asyncio.get_running_loop()
    sock = _make_socket(address, multicast_ttl)
    try:
        _, protocol = await loop.create_datagram_endpoint(
            lambda: MDNSProtocol(address, on_datagram, on_error), sock=sock
        )
    except BaseException:
        sock.close()
        raise
    logger.debug("Bound mDNS socket", address=address, local=sock.getsockname())
    return protocol
