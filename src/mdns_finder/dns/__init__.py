"""
DNS wire codec: binary reader/writer and the message model used for mDNS queries
and responses.
"""

from .buffer import BinaryReader, BinaryWriter
from .message import (
    CLASS_IN,
    MDNS_GROUP,
    MDNS_PORT,
    SECTIONS,
    SERVICES_QUERY_NAME,
    TYPE_PTR,
    DNSMessage,
    DNSRecord,
    build_service_query,
    parse,
    record_as_name,
    serialize,
)

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "CLASS_IN",
    "DNSMessage",
    "DNSRecord",
    "MDNS_GROUP",
    "MDNS_PORT",
    "SECTIONS",
    "SERVICES_QUERY_NAME",
    "TYPE_PTR",
    "build_service_query",
    "parse",
    "record_as_name",
    "serialize",
]
