"""
Custom exceptions for the mDNS finder.
"""
from typing import Optional


class MDNSFinderError(Exception):
    """Base class for all mDNS finder errors."""
    pass

class ProtocolError(MDNSFinderError):
    """Raised for errors related to the DNS wire format itself
    (e.g., nonzero transaction id, malformed names, unsupported sections)."""
    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(message)
        self.offset = offset

class BufferBoundsError(ProtocolError):
    """Raised when a read runs past the end of the buffer."""
    def __init__(self, requested: int, offset: int, size: int):
        message = f"Read of {requested} byte(s) at offset {offset} exceeds buffer of {size} byte(s)"
        super().__init__(message, offset=offset)
        self.requested = requested
        self.size = size

class BufferOverflowError(ProtocolError):
    """Raised when a write would grow the buffer beyond its maximum size."""
    def __init__(self, requested: int, max_size: int):
        super().__init__(f"Writing {requested} byte(s) would exceed maximum buffer size of {max_size}")
        self.requested = requested
        self.max_size = max_size
