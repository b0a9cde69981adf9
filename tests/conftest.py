"""Shared fixtures: wire-format builders and fake sockets for discovery tests."""
import errno

import pytest

from mdns_finder.config import Config, DiscoveryConfig
from mdns_finder.discovery.transport import MDNSProtocol
from mdns_finder.dns.buffer import BinaryWriter
from mdns_finder.dns.message import CLASS_IN, SERVICES_QUERY_NAME, TYPE_PTR


def build_response(answers, transaction_id=0, flags=0x8400, trailing=b""):
    """Builds a response packet. ``answers`` holds (name, type, rdata) triples."""
    out = BinaryWriter()
    out.short(transaction_id).short(flags).short(0).short(len(answers)).short(0).short(0)
    for name, rtype, rdata in answers:
        out.name(name).short(rtype).short(CLASS_IN).long(4500).short(len(rdata)).bytes_(rdata)
    return out.getvalue() + trailing


def ptr_response(*services, transaction_id=0):
    answers = [
        (SERVICES_QUERY_NAME, TYPE_PTR, BinaryWriter().name(service).getvalue())
        for service in services
    ]
    return build_response(answers, transaction_id=transaction_id)


class FakeTransport:
    def __init__(self, send_error=None):
        self.sent = []
        self.closed = False
        self.send_error = send_error

    def sendto(self, data, addr):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((data, addr))

    def is_closing(self):
        return self.closed

    def close(self):
        self.closed = True


class StaticNetwork:
    def __init__(self, addresses):
        self.addresses = list(addresses)

    async def get_local_addresses(self):
        return list(self.addresses)


class FakeBinder:
    """Stands in for transport.bind_to_address, recording each bound protocol."""

    def __init__(self, failing=(), send_failing=()):
        self.failing = set(failing)
        self.send_failing = set(send_failing)
        self.protocols = {}

    async def __call__(self, address, on_datagram, on_error, multicast_ttl=255):
        if address in self.failing:
            raise OSError(errno.EADDRNOTAVAIL, "Cannot assign requested address")
        protocol = MDNSProtocol(address, on_datagram, on_error)
        send_error = OSError(errno.ENETUNREACH, "Network is unreachable") if address in self.send_failing else None
        protocol.connection_made(FakeTransport(send_error=send_error))
        self.protocols[address] = protocol
        return protocol


@pytest.fixture
def app_config():
    return Config(discovery=DiscoveryConfig(debounce_seconds=0.02, timeout_seconds=5))

@pytest.fixture
def fake_binder(monkeypatch):
    binder = FakeBinder()
    monkeypatch.setattr("mdns_finder.discovery.discovery_service.bind_to_address", binder)
    return binder
