"""
DNS message model and wire codec for mDNS.

Only question records can be serialized; answer, authority and additional
records are parse-only.
"""
from collections.abc import Iterator
from dataclasses import dataclass, field

import structlog

from ..exceptions import ProtocolError
from .buffer import DEFAULT_INITIAL_SIZE, DEFAULT_MAX_SIZE, BinaryReader, BinaryWriter

logger = structlog.get_logger(__name__)

MDNS_GROUP = "224.0.0.251"
MDNS_PORT = 5353
SERVICES_QUERY_NAME = "_services._dns-sd._udp.local"

TYPE_PTR = 12
CLASS_IN = 1

SECTIONS = ("question", "answer", "authority", "additional")


@dataclass
class DNSRecord:
    """
    A record inside a DNS message: a QUESTION, or an ANSWER, AUTHORITY or
    ADDITIONAL record. Question records carry neither ttl nor rdata.
    """
    name: str
    type: int
    cls: int
    ttl: int | None = None
    rdata: bytes | memoryview | None = None

    def __post_init__(self):
        if (self.ttl is None) != (self.rdata is None):
            raise ValueError("Resource records need both ttl and rdata; question records take neither.")

    @property
    def is_question(self) -> bool:
        return self.ttl is None

    def as_name(self) -> str:
        return record_as_name(self)


@dataclass
class DNSMessage:
    """A DNS message: 16-bit flags plus the four record sections."""
    flags: int = 0
    question: list[DNSRecord] = field(default_factory=list)
    answer: list[DNSRecord] = field(default_factory=list)
    authority: list[DNSRecord] = field(default_factory=list)
    additional: list[DNSRecord] = field(default_factory=list)

    def section(self, name: str) -> list[DNSRecord]:
        if name not in SECTIONS:
            raise ValueError(f"Unknown DNS message section: {name!r}")
        return getattr(self, name)

    def push(self, section: str, record: DNSRecord) -> None:
        self.section(section).append(record)

    def records(self, section: str, record_type: int | None = None) -> Iterator[DNSRecord]:
        """Iterates a section, optionally keeping only records of ``record_type``."""
        for rec in self.section(section):
            if record_type is None or rec.type == record_type:
                yield rec


def parse(data: bytes | bytearray | memoryview) -> DNSMessage:
    """Parses a DNS message from raw wire bytes."""
    reader = BinaryReader(data)
    transaction_id = reader.short()
    if transaction_id:
        raise ProtocolError(f"DNS message must start with 00 00, got transaction id 0x{transaction_id:04x}", offset=0)
    message = DNSMessage(flags=reader.short())
    counts = [reader.short() for _ in SECTIONS]

    for _ in range(counts[0]):
        message.question.append(DNSRecord(reader.name(), reader.short(), reader.short()))

    for section, count in zip(SECTIONS[1:], counts[1:]):
        records = message.section(section)
        for _ in range(count):
            name = reader.name()
            rtype = reader.short()
            rclass = reader.short()
            ttl = reader.long()
            rdata = reader.slice(reader.short())
            records.append(DNSRecord(name, rtype, rclass, ttl, rdata))

    if not reader.is_eof():
        logger.warning("Trailing bytes after DNS message ignored.", trailing_bytes=reader.remaining)
    return message


def serialize(
    message: DNSMessage,
    initial_size: int = DEFAULT_INITIAL_SIZE,
    max_size: int = DEFAULT_MAX_SIZE,
) -> bytes:
    """Serializes a question-only DNS message for sending over UDP."""
    for section in SECTIONS[1:]:
        if message.section(section):
            raise ProtocolError(f"Cannot serialize records in the {section!r} section; only questions are supported.")

    out = BinaryWriter(initial_size=initial_size, max_size=max_size)
    out.short(0).short(message.flags)
    for section in SECTIONS:
        out.short(len(message.section(section)))
    for rec in message.question:
        if not rec.is_question:
            raise ProtocolError(f"Question section holds a resource record for {rec.name!r}.")
        out.name(rec.name).short(rec.type).short(rec.cls)
    return out.getvalue()


def record_as_name(record: DNSRecord) -> str:
    """Decodes a resource record's rdata as a DNS name (e.g. a PTR target)."""
    if record.rdata is None:
        raise ProtocolError(f"Question record {record.name!r} has no rdata to decode.")
    return BinaryReader(record.rdata).name()


def build_service_query(name: str = SERVICES_QUERY_NAME) -> DNSMessage:
    """Builds the single-question PTR query used to enumerate DNS-SD services."""
    message = DNSMessage()
    message.push("question", DNSRecord(name, TYPE_PTR, CLASS_IN))
    return message
