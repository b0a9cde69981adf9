"""Local network interface and address enumeration."""

import asyncio
import socket
from typing import List, Optional, Set

import netifaces
import structlog

logger = structlog.get_logger(__name__)


def _is_loopback(iface: str) -> bool:
    # 'lo' on Linux, 'lo0' on BSD/macOS, 'Loopback ...' on Windows
    return iface.lower().startswith(("lo", "loopback"))

def get_network_interfaces(skip_loopback: bool = True) -> List[str]:
    """Get list of network interfaces in a platform-agnostic way.

    Args:
        skip_loopback: Whether to exclude loopback interfaces.

    Returns:
        List[str]: List of interface names.
    """
    try:
        interfaces = list(netifaces.interfaces())
    except (OSError, ValueError) as e:
        logger.warning("netifaces interface listing failed, falling back to if_nameindex", error=str(e))
        try:
            interfaces = [name for _, name in socket.if_nameindex()]
        except OSError as fallback_error:
            logger.error("Failed to list network interfaces", error=str(fallback_error))
            return []
    if skip_loopback:
        interfaces = [iface for iface in interfaces if not _is_loopback(iface)]
    return interfaces

def get_interface_ips(interface: str) -> Set[str]:
    """Get all IP addresses for a given interface.

    IPv6 addresses are returned with their zone suffix removed; callers decide
    whether to use them.
    """
    addresses = set()
    try:
        addr_info = netifaces.ifaddresses(interface)
    except (ValueError, KeyError, OSError) as e:
        logger.error("Failed to get addresses for interface", interface=interface, error=str(e))
        return addresses
    for addr in addr_info.get(netifaces.AF_INET, []):
        if 'addr' in addr:
            addresses.add(addr['addr'])
    for addr in addr_info.get(netifaces.AF_INET6, []):
        if 'addr' in addr:
            addresses.add(addr['addr'].split('%')[0])
    return addresses

def get_local_addresses(interfaces: Optional[List[str]] = None, skip_loopback: bool = True) -> List[str]:
    """Get every address of the selected interfaces, in interface order, without duplicates.

    Args:
        interfaces: Restrict to these interface names. All suitable interfaces if empty.
        skip_loopback: Whether to exclude loopback interfaces.
    """
    available = get_network_interfaces(skip_loopback=skip_loopback)
    if interfaces:
        missing = [iface for iface in interfaces if iface not in available]
        if missing:
            logger.warning("Configured interfaces not found", interfaces=missing)
        available = [iface for iface in available if iface in interfaces]

    addresses: List[str] = []
    for iface in available:
        for ip in sorted(get_interface_ips(iface)):
            if ip not in addresses:
                addresses.append(ip)
    return addresses


class NetworkDiscovery:
    """Async facade over the blocking interface enumeration calls."""

    def __init__(self, interfaces: Optional[List[str]] = None, skip_loopback: bool = True):
        self.interfaces = list(interfaces or [])
        self.skip_loopback = skip_loopback

    async def get_local_addresses(self) -> List[str]:
        """Enumerate local addresses without blocking the event loop."""
        loop = asyncio.get_running_loop()
        addresses = await loop.run_in_executor(
            None, lambda: get_local_addresses(self.interfaces, skip_loopback=self.skip_loopback)
        )
        logger.info("Enumerated local addresses", addresses=addresses)
        return addresses
