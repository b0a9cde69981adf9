"""mDNS Finder - discovers DNS-SD service types on the local network.

Broadcasts a ``_services._dns-sd._udp.local`` PTR query over multicast DNS on
every local IPv4 interface and keeps a live map of service types to the hosts
that offer them.
"""

__version__ = "0.1.0"

from .config import Config
from .discovery import ServiceFinder, ServiceFinderCoordinator, discover_services
from .models import DiscoveryError, DiscoveryErrorKind, ServiceEntry

__all__ = [
    "Config",
    "DiscoveryError",
    "DiscoveryErrorKind",
    "ServiceEntry",
    "ServiceFinder",
    "ServiceFinderCoordinator",
    "discover_services",
]
