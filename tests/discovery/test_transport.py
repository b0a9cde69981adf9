"""Tests for the per-address UDP endpoint."""

import asyncio
import socket

import pytest

from mdns_finder.discovery.transport import MDNSProtocol, bind_to_address


@pytest.mark.asyncio
async def test_bind_to_loopback_receives_datagrams():
    received = asyncio.Queue()
    errors = []
    protocol = await bind_to_address(
        "127.0.0.1", lambda data, addr: received.put_nowait((data, addr)), errors.append
    )
    try:
        port = protocol.transport.get_extra_info("sockname")[1]
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sender:
            sender.sendto(b"\x00\x00ping", ("127.0.0.1", port))
        data, addr = await asyncio.wait_for(received.get(), timeout=2)
        assert data == b"\x00\x00ping"
        assert addr[0] == "127.0.0.1"
        assert errors == []
    finally:
        protocol.transport.close()

@pytest.mark.asyncio
async def test_bind_to_unassigned_address_fails():
    with pytest.raises(OSError):
        await bind_to_address("203.0.113.254", lambda data, addr: None, lambda exc: None)

def test_send_without_transport_fails():
    protocol = MDNSProtocol("10.0.0.1", lambda data, addr: None, lambda exc: None)
    with pytest.raises(ConnectionError):
        protocol.send(b"\x00", "224.0.0.251", 5353)

def test_detach_silences_forwarding():
    seen = []
    protocol = MDNSProtocol("10.0.0.1", lambda data, addr: seen.append(data), seen.append)
    protocol.detach()
    protocol.datagram_received(b"x", ("10.0.0.2", 5353))
    protocol.error_received(OSError("boom"))
    assert seen == []

def test_connection_lost_with_error_is_forwarded():
    errors = []
    protocol = MDNSProtocol("10.0.0.1", lambda data, addr: None, errors.append)
    exc = OSError("link down")
    protocol.connection_lost(exc)
    assert protocol.closed
    assert errors == [exc]
    protocol.connection_lost(None)
    assert errors == [exc]
