"""Tests for the binary reader and writer."""

import pytest

from mdns_finder.dns.buffer import BinaryReader, BinaryWriter
from mdns_finder.exceptions import BufferBoundsError, BufferOverflowError, ProtocolError


def test_writer_big_endian_and_chaining():
    writer = BinaryWriter()
    result = writer.byte(0x01).short(0x0203).long(0x04050607)
    assert result is writer
    assert writer.getvalue() == b"\x01\x02\x03\x04\x05\x06\x07"
    assert len(writer) == 7

def test_writer_buffer_is_exact_span_not_capacity():
    writer = BinaryWriter()
    writer.short(0)
    assert writer.capacity == 512
    assert writer.buffer == b"\x00\x00"

def test_writer_name_encoding():
    assert BinaryWriter().name("_http._tcp.local").getvalue() == b"\x05_http\x04_tcp\x05local\x00"

def test_writer_name_trailing_dot_is_ignored():
    assert BinaryWriter().name("local.").getvalue() == b"\x05local\x00"

def test_writer_name_with_back_reference():
    assert BinaryWriter().name("_ipp._tcp", 12).getvalue() == b"\x04_ipp\x04_tcp\xc0\x0c"

def test_writer_rejects_long_label():
    with pytest.raises(ProtocolError):
        BinaryWriter().name("a" * 64 + ".local")

@pytest.mark.parametrize("method,value", [("byte", 256), ("byte", -1), ("short", 0x10000), ("long", 0x100000000)])
def test_writer_rejects_out_of_range_values(method, value):
    with pytest.raises(ValueError):
        getattr(BinaryWriter(), method)(value)

def test_writer_grows_past_initial_size():
    writer = BinaryWriter(initial_size=4, max_size=64)
    writer.long(1).long(2).long(3)
    assert writer.capacity >= 12
    assert writer.getvalue() == b"\x00\x00\x00\x01\x00\x00\x00\x02\x00\x00\x00\x03"

def test_writer_overflow_is_a_hard_error():
    writer = BinaryWriter(initial_size=4, max_size=6)
    writer.long(0)
    with pytest.raises(BufferOverflowError) as exc_info:
        writer.long(0)
    assert exc_info.value.max_size == 6
    assert writer.getvalue() == b"\x00\x00\x00\x00"

def test_writer_invalid_sizes():
    with pytest.raises(ValueError):
        BinaryWriter(initial_size=0)
    with pytest.raises(ValueError):
        BinaryWriter(initial_size=16, max_size=8)

def test_reader_integers():
    reader = BinaryReader(b"\x01\x02\x03\x04\x05\x06\x07")
    assert reader.byte() == 1
    assert reader.short() == 0x0203
    assert reader.long() == 0x04050607
    assert reader.is_eof()

def test_reader_slice_is_zero_copy_and_advances():
    data = bytearray(b"abcdef")
    reader = BinaryReader(data)
    reader.byte()
    view = reader.slice(3)
    assert isinstance(view, memoryview)
    assert bytes(view) == b"bcd"
    assert reader.offset == 4
    data[1] = ord("X")
    assert bytes(view) == b"Xcd"

def test_reader_name_round_trip():
    encoded = BinaryWriter().name("_http._tcp.local").getvalue()
    reader = BinaryReader(encoded)
    assert reader.name() == "_http._tcp.local"
    assert reader.is_eof()

def test_reader_name_stops_at_compression_pointer_without_resolving():
    # Offset 0 points at the name itself; following it would loop.
    reader = BinaryReader(b"\x04_ipp\x04_tcp\xc0\x00")
    assert reader.name() == "_ipp._tcp"
    assert reader.is_eof()

def test_reader_name_pointer_only():
    assert BinaryReader(b"\xc0\x0c").name() == ""

def test_reader_name_with_high_offset_pointer():
    reader = BinaryReader(b"\x05_http\xc1\x02\xff")
    assert reader.name() == "_http"
    assert reader.remaining == 1

def test_reader_rejects_reserved_label_type():
    with pytest.raises(ProtocolError):
        BinaryReader(b"\x41abc").name()

def test_reader_label_running_past_end():
    with pytest.raises(BufferBoundsError):
        BinaryReader(b"\x10abc").name()

def test_reader_name_missing_terminator():
    with pytest.raises(BufferBoundsError):
        BinaryReader(b"\x03abc").name()

@pytest.mark.parametrize("method", ["byte", "short", "long"])
def test_reader_bounds(method):
    with pytest.raises(BufferBoundsError):
        getattr(BinaryReader(b""), method)()

def test_reader_slice_bounds():
    reader = BinaryReader(b"\x00\x01")
    with pytest.raises(BufferBoundsError) as exc_info:
        reader.slice(3)
    assert exc_info.value.offset == 0
    assert isinstance(exc_info.value, ProtocolError)
