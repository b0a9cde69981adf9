"""
Discovery sessions: broadcast a DNS-SD service enumeration query on every local
IPv4 interface and aggregate PTR answers into a ServiceRegistry.
"""
import asyncio
import functools
from collections.abc import Callable

import structlog  # type: ignore[import-not-found]

from ..config import Config, DiscoveryConfig
from ..dns.message import TYPE_PTR, build_service_query, parse, serialize
from ..exceptions import ProtocolError
from ..models.common import DiscoveryErrorKind, SessionState
from ..models.discovery import DiscoveryError, ServiceEntry
from ..service_types import display_name
from .network import NetworkDiscovery
from .registry import ServiceRegistry
from .transport import MDNSProtocol, bind_to_address

logger = structlog.get_logger(__name__)

ResultCallback = Callable[[list[ServiceEntry] | DiscoveryError], None]


class ServiceFinder:
    """
    A single discovery session.

    The callback receives either the current list of ServiceEntry values
    (debounced, at most once per debounce window) or a DiscoveryError. Errors
    never stop the session; only shutdown() does.
    """

    def __init__(
        self,
        callback: ResultCallback,
        app_config: Config | None = None,
        network: NetworkDiscovery | None = None,
    ):
        self.app_config = app_config or Config()
        self.discovery_config: DiscoveryConfig = self.app_config.discovery
        self.callback = callback
        self.registry = ServiceRegistry(display_name=display_name)
        self.network = network or NetworkDiscovery(
            interfaces=self.discovery_config.network_interfaces,
            skip_loopback=self.discovery_config.skip_loopback,
        )
        self.state = SessionState.CREATED
        self.timed_out = False
        self.logger = logger.bind(session=f"{id(self):x}")

        self._loop: asyncio.AbstractEventLoop | None = None
        self._query: bytes | None = None
        self._protocols: list[MDNSProtocol] = []
        self._startup_task: asyncio.Task | None = None
        self._notify_handle: asyncio.TimerHandle | None = None
        self._timeout_handle: asyncio.TimerHandle | None = None

    async def __aenter__(self) -> "ServiceFinder":
        self.start()
        try:
            await self.wait_started()
        except BaseException:
            self.shutdown()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    @property
    def is_closed(self) -> bool:
        return self.state in (SessionState.SHUTTING_DOWN, SessionState.CLOSED)

    @property
    def notification_pending(self) -> bool:
        return self._notify_handle is not None

    def start(self) -> "ServiceFinder":
        """Arms the empty-result timer and schedules interface setup. Needs a running loop."""
        if self.state != SessionState.CREATED:
            raise RuntimeError(f"Discovery session already started (state: {self.state.value})")
        self._loop = asyncio.get_running_loop()
        self._timeout_handle = self._loop.call_later(self.discovery_config.timeout_seconds, self._check_empty_result)
        self._startup_task = self._loop.create_task(self._run_startup())
        return self

    async def wait_started(self) -> None:
        """Waits until every interface has been bound and queried (or failed)."""
        if self._startup_task is None:
            return
        await asyncio.wait({self._startup_task})
        if not self._startup_task.cancelled():
            self._startup_task.result()

    def services(self, ip: str | None = None) -> list[str]:
        return self.registry.services(ip)

    def ips(self, service: str | None = None) -> list[str]:
        return self.registry.ips(service)

    def shutdown(self) -> None:
        """Cancels pending work, detaches listeners and closes every socket of this session."""
        if self.is_closed:
            return
        self.state = SessionState.SHUTTING_DOWN
        self.logger.info("Shutting down discovery session.", sockets=len(self._protocols))

        if self._startup_task is not None and not self._startup_task.done():
            self._startup_task.cancel()
        for handle in (self._notify_handle, self._timeout_handle):
            if handle is not None:
                handle.cancel()
        self._notify_handle = None
        self._timeout_handle = None

        for protocol in self._protocols:
            self._close_protocol(protocol)
        self._protocols.clear()
        self.state = SessionState.CLOSED

    # --- startup ---

    async def _run_startup(self) -> None:
        cfg = self.discovery_config
        try:
            self._query = serialize(
                build_service_query(cfg.query_name),
                initial_size=cfg.buffer_initial_size,
                max_size=cfg.buffer_max_size,
            )
        except (ProtocolError, ValueError) as e:
            self._report(DiscoveryErrorKind.PROTOCOL_ERROR, f"could not serialize query for {cfg.query_name!r}: {e}")
            return

        self.state = SessionState.ENUMERATING_INTERFACES
        addresses = await self.network.get_local_addresses()
        if not addresses:
            self._report(DiscoveryErrorKind.NO_NETWORK_AVAILABLE, "no network available")
            return

        self.state = SessionState.BINDING
        ipv4_addresses = []
        for address in addresses:
            if ":" in address:
                self.logger.debug("IPv6 address unsupported, skipping.", address=address)
                continue
            ipv4_addresses.append(address)

        await asyncio.gather(*(self._open_interface(address) for address in ipv4_addresses))
        if not self.is_closed:
            self.state = SessionState.LISTENING
            self.logger.info("Listening for mDNS responses.", sockets=len(self._protocols))

    async def _open_interface(self, address: str) -> None:
        log = self.logger.bind(address=address)
        try:
            protocol = await bind_to_address(
                address,
                self._on_datagram,
                functools.partial(self._on_transport_error, address),
                multicast_ttl=self.discovery_config.multicast_ttl,
            )
        except OSError as e:
            self._report(DiscoveryErrorKind.BIND_FAILURE, f"could not bind UDP socket: {e}", address=address, code=e.errno)
            return

        if self.is_closed:
            self._close_protocol(protocol)
            return
        self._protocols.append(protocol)
        log.info("Broadcasting to address.")
        self._broadcast(protocol)

    def _broadcast(self, protocol: MDNSProtocol) -> None:
        cfg = self.discovery_config
        try:
            protocol.send(self._query, cfg.multicast_group, cfg.multicast_port)
        except OSError as e:
            self._report(
                DiscoveryErrorKind.SEND_FAILURE,
                f"could not send data to {cfg.multicast_group}:{cfg.multicast_port}: {e}",
                address=protocol.address,
                code=e.errno,
            )

    @staticmethod
    def _close_protocol(protocol: MDNSProtocol) -> None:
        protocol.detach()
        if protocol.transport is not None:
            protocol.transport.close()

    # --- reception ---

    def _on_datagram(self, data: bytes, addr: tuple) -> None:
        if self.is_closed:
            return
        source = addr[0]
        try:
            message = parse(data)
        except ProtocolError as e:
            self.logger.warning("Dropping malformed mDNS packet.", source=source, error=str(e))
            return

        self.registry.add_host(source)
        for rec in message.records("answer", TYPE_PTR):
            try:
                service = rec.as_name()
            except ProtocolError as e:
                self.logger.warning("Skipping PTR record with undecodable rdata.", source=source, record=rec.name, error=str(e))
                continue
            if self.registry.add(source, service):
                self.logger.debug("Discovered service.", source=source, service=service)

        self._schedule_notification()

    def _on_transport_error(self, address: str, exc: Exception) -> None:
        if self.is_closed:
            return
        self._report(
            DiscoveryErrorKind.RECEIVE_ERROR,
            f"socket error: {exc}",
            address=address,
            code=getattr(exc, "errno", None),
        )

    # --- notification ---

    def _schedule_notification(self) -> None:
        if self._notify_handle is not None:
            return
        self._notify_handle = self._loop.call_later(self.discovery_config.debounce_seconds, self._flush_notification)

    def _flush_notification(self) -> None:
        self._notify_handle = None
        self._emit(self.registry.snapshot())

    def _check_empty_result(self) -> None:
        self._timeout_handle = None
        if self.registry.is_empty():
            self.timed_out = True
            self._report(DiscoveryErrorKind.EMPTY_RESULT, "no mDNS services found")

    def _report(self, kind: DiscoveryErrorKind, message: str, address: str | None = None, code: int | None = None) -> None:
        error = DiscoveryError(kind=kind, message=message, address=address, code=code)
        self.logger.warning("Discovery error reported.", kind=kind.value, message=message, address=address, code=code)
        self._emit(error)

    def _emit(self, payload: list[ServiceEntry] | DiscoveryError) -> None:
        try:
            self.callback(payload)
        except Exception:
            self.logger.exception("Discovery callback raised.")


class ServiceFinderCoordinator:
    """Keeps at most one discovery session running at a time."""

    def __init__(self, app_config: Config | None = None):
        self.app_config = app_config or Config()
        self.current: ServiceFinder | None = None

    def find_services(self, callback: ResultCallback) -> ServiceFinder:
        """Shuts down any previous session and starts a new one."""
        self.shutdown()
        self.current = ServiceFinder(callback, app_config=self.app_config)
        return self.current.start()

    def shutdown(self) -> None:
        if self.current is not None:
            self.current.shutdown()
            self.current = None


async def discover_services(
    duration: float,
    app_config: Config | None = None,
    on_error: Callable[[DiscoveryError], None] | None = None,
) -> list[ServiceEntry]:
    """Runs one discovery session for ``duration`` seconds and returns what it found."""
    def collect(payload: list[ServiceEntry] | DiscoveryError) -> None:
        if isinstance(payload, DiscoveryError) and on_error is not None:
            on_error(payload)

    async with ServiceFinder(collect, app_config=app_config) as finder:
        await asyncio.sleep(duration)
        return finder.registry.snapshot()
