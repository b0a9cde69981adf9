"""
Cursor-based binary reader and growable binary writer for DNS wire data.

All multi-byte integers are big-endian (network order).
"""
import struct

from ..exceptions import BufferBoundsError, BufferOverflowError, ProtocolError

DEFAULT_INITIAL_SIZE = 512
DEFAULT_MAX_SIZE = 9000 # Largest mDNS message allowed on the wire
MAX_LABEL_LENGTH = 63
POINTER_MASK = 0xC0


class BinaryWriter:
    """
    Appends bytes, shorts, longs and DNS names into a growing buffer.

    Every write returns the writer so calls can be chained:
    ``BinaryWriter().short(0).short(flags).name("_http._tcp.local")``.
    """

    def __init__(self, initial_size: int = DEFAULT_INITIAL_SIZE, max_size: int = DEFAULT_MAX_SIZE):
        if initial_size < 1:
            raise ValueError("Initial size must be at least 1.")
        if max_size < initial_size:
            raise ValueError("Maximum size must not be smaller than the initial size.")
        self.max_size = max_size
        self._view = bytearray(initial_size)
        self._loc = 0

    def __len__(self) -> int:
        return self._loc

    @property
    def capacity(self) -> int:
        return len(self._view)

    @property
    def buffer(self) -> bytes:
        """The bytes written so far, not the backing capacity."""
        return bytes(self._view[:self._loc])

    def getvalue(self) -> bytes:
        return self.buffer

    def _reserve(self, count: int) -> None:
        needed = self._loc + count
        if needed > self.max_size:
            raise BufferOverflowError(count, self.max_size)
        if needed > len(self._view):
            new_size = len(self._view)
            while new_size < needed:
                new_size *= 2
            self._view.extend(bytes(min(new_size, self.max_size) - len(self._view)))

    def bytes_(self, data: bytes) -> "BinaryWriter":
        self._reserve(len(data))
        self._view[self._loc:self._loc + len(data)] = data
        self._loc += len(data)
        return self

    def byte(self, v: int) -> "BinaryWriter":
        if not 0 <= v <= 0xFF:
            raise ValueError(f"byte value out of range: {v}")
        return self.bytes_(bytes((v,)))

    def short(self, v: int) -> "BinaryWriter":
        if not 0 <= v <= 0xFFFF:
            raise ValueError(f"short value out of range: {v}")
        return self.bytes_(struct.pack("!H", v))

    def long(self, v: int) -> "BinaryWriter":
        if not 0 <= v <= 0xFFFFFFFF:
            raise ValueError(f"long value out of range: {v}")
        return self.bytes_(struct.pack("!I", v))

    def name(self, v: str, ref: int | None = None) -> "BinaryWriter":
        """
        Writes a DNS name as length-prefixed labels.

        If ``ref`` is given the name is finished with a suffix reference
        (``0xC0 <ref>``) instead of the terminating zero byte.
        """
        for part in v.split("."):
            if not part:
                continue
            label = part.encode("utf-8")
            if len(label) > MAX_LABEL_LENGTH:
                raise ProtocolError(f"DNS label longer than {MAX_LABEL_LENGTH} bytes: {part!r}")
            self.byte(len(label)).bytes_(label)
        if ref is not None:
            self.byte(POINTER_MASK).byte(ref)
        else:
            self.byte(0)
        return self


class BinaryReader:
    """Sequential reader over a fixed byte buffer."""

    def __init__(self, data: bytes | bytearray | memoryview):
        self._view = memoryview(data)
        self._loc = 0

    @property
    def offset(self) -> int:
        return self._loc

    @property
    def remaining(self) -> int:
        return max(len(self._view) - self._loc, 0)

    def is_eof(self) -> bool:
        """Whether all data has been consumed."""
        return self._loc >= len(self._view)

    def _take(self, length: int) -> memoryview:
        if length < 0 or self._loc + length > len(self._view):
            raise BufferBoundsError(length, self._loc, len(self._view))
        view = self._view[self._loc:self._loc + length]
        self._loc += length
        return view

    def slice(self, length: int) -> memoryview:
        """Returns the next ``length`` bytes without copying."""
        return self._take(length)

    def byte(self) -> int:
        return self._take(1)[0]

    def short(self) -> int:
        return struct.unpack("!H", self._take(2))[0]

    def long(self) -> int:
        return struct.unpack("!I", self._take(4))[0]

    def name(self) -> str:
        """
        Consumes a DNS name, which finishes with either a zero byte or a
        suffix reference (``0xC0 <ref>``).

        The reference is consumed but not followed: the suffix it points at is
        dropped, so ``_http._tcp`` + pointer decodes as ``_http._tcp``.
        """
        parts = []
        while True:
            start = self._loc
            length = self.byte()
            if length == 0:
                break
            if length & POINTER_MASK == POINTER_MASK:
                self.byte()
                break
            if length & POINTER_MASK:
                raise ProtocolError(f"Reserved label type 0x{length:02x}", offset=start)
            parts.append(bytes(self._take(length)).decode("utf-8", errors="replace"))
        return ".".join(parts)
