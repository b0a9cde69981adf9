"""
Bidirectional index of discovered services: IP -> services and service -> IPs.
"""
import functools
from collections.abc import Callable, Iterable

from ..models.discovery import ServiceEntry


def _octets(ip: str) -> list[int]:
    return [int(part) for part in ip.split(".")]

def compare_ips(left: str, right: str) -> int:
    """Numeric dotted-quad comparison, most significant octet first.

    IPv6 addresses are not supported.
    """
    lp = _octets(left)
    rp = _octets(right)
    for lo, ro in zip(lp, rp):
        if lo < ro:
            return -1
        if lo > ro:
            return 1
    return 0

def sort_ips(ips: Iterable[str]) -> list[str]:
    return sorted(ips, key=functools.cmp_to_key(compare_ips))


class ServiceRegistry:
    """
    Additive index of which hosts answered for which services.

    ``by_ip[ip]`` and ``by_service[service]`` are kept symmetric: an IP is listed
    under a service exactly when the service is listed under that IP.
    """

    def __init__(self, display_name: Callable[[str], str | None] | None = None):
        self.by_ip: dict[str, set[str]] = {}
        self.by_service: dict[str, set[str]] = {}
        self._display_name = display_name

    def is_empty(self) -> bool:
        return not self.by_ip

    def add_host(self, ip: str) -> bool:
        """Records that ``ip`` responded. Returns True if the host is new."""
        if ip in self.by_ip:
            return False
        self.by_ip[ip] = set()
        return True

    def add(self, ip: str, service: str) -> bool:
        """Records ``service`` as offered by ``ip``. Returns True if the pair is new."""
        self.add_host(ip)
        if service in self.by_ip[ip]:
            return False
        self.by_ip[ip].add(service)
        self.by_service.setdefault(service, set()).add(ip)
        return True

    def services(self, ip: str | None = None) -> list[str]:
        """Sorted service names, optionally only those seen from ``ip``."""
        if ip is None:
            return sorted(self.by_service)
        return sorted(self.by_ip.get(ip, ()))

    def ips(self, service: str | None = None) -> list[str]:
        """IPs in dotted-quad order, optionally only those offering ``service``."""
        if service is None:
            return sort_ips(self.by_ip)
        return sort_ips(self.by_service.get(service, ()))

    def snapshot(self) -> list[ServiceEntry]:
        return [
            ServiceEntry(
                service=service,
                ips=self.ips(service),
                display_name=self._display_name(service) if self._display_name else None,
            )
            for service in self.services()
        ]
