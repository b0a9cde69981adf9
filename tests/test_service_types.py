"""Tests for the DNS-SD service type table."""

import pytest

from mdns_finder.service_types import SERVICE_TYPES, display_name, service_type_key


@pytest.mark.parametrize("service,expected", [
    ("_ipp._tcp", "_ipp._tcp"),
    ("_ipp._tcp.local", "_ipp._tcp"),
    ("_ipp._tcp.local.", "_ipp._tcp"),
    ("Office Printer._ipp._tcp.local", "_ipp._tcp"),
    ("_printer._sub._http._tcp.local", "_http._tcp"),
    ("myhost.local", "myhost.local"),
])
def test_service_type_key(service, expected):
    assert service_type_key(service) == expected

def test_display_name_lookup():
    assert display_name("_http._tcp.local") == "Web Site"
    assert display_name("_ntp._udp") == "NTP Time Server"
    assert display_name("_unknown._tcp") is None

def test_table_keys_are_service_strings():
    for key in SERVICE_TYPES:
        service, proto = key.split(".")
        assert service.startswith("_")
        assert proto in ("_tcp", "_udp")
