"""Pydantic models shared across the mDNS finder."""

from .common import BasePydanticModel, DiscoveryErrorKind, SessionState
from .discovery import DiscoveryError, ServiceEntry

__all__ = [
    "BasePydanticModel",
    "DiscoveryError",
    "DiscoveryErrorKind",
    "ServiceEntry",
    "SessionState",
]
