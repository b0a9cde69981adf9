"""
mDNS service discovery: interface enumeration, per-interface UDP sockets,
response aggregation and the single-flight session coordinator.
"""

from .discovery_service import ServiceFinder, ServiceFinderCoordinator, discover_services
from .registry import ServiceRegistry, compare_ips, sort_ips

__all__ = [
    "ServiceFinder",
    "ServiceFinderCoordinator",
    "ServiceRegistry",
    "compare_ips",
    "discover_services",
    "sort_ips",
]
