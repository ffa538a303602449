"""Monitor facade: snapshots in, health and topology out."""

import time
from loguru import logger
from typing import Any
from unifi_monitor.cache import SnapshotCache, TelemetrySource
from unifi_monitor.health import evaluate_health
from unifi_monitor.ingest import parse_clients, parse_devices
from unifi_monitor.models import (
    ClientSnapshot,
    DeviceSnapshot,
    HealthReport,
    ResourceKind,
    TopologySnapshot,
)
from unifi_monitor.topology import build_topology
from unifi_monitor.utils.client import UniFiClient
from unifi_monitor.utils.errors import SourceError
from unifi_monitor.utils.settings import Settings


class NetworkMonitor:
    """Entry point for presentation-layer consumers.

    Owns one snapshot cache and one telemetry source. Construct once per
    process and pass it to whatever serves the results.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        source: TelemetrySource | None = None,
        cache: SnapshotCache | None = None,
    ):
        """Initialize monitor.

        Args:
            settings: Settings (loaded from the environment if omitted)
            source: Telemetry source (a UniFiClient built from settings if omitted)
            cache: Snapshot cache (built around the source if omitted)
        """
        self._settings = settings if settings is not None else Settings.from_env()
        self._source = source if source is not None else UniFiClient(self._settings)
        self._cache = cache if cache is not None else SnapshotCache(
            self._source,
            ttls={
                ResourceKind.DEVICES: self._settings.devices_ttl,
                ResourceKind.CLIENTS: self._settings.clients_ttl,
            },
        )

    async def __aenter__(self) -> 'NetworkMonitor':
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    @property
    def cache(self) -> SnapshotCache:
        return self._cache

    async def close(self) -> None:
        """Release the telemetry source's connections."""
        close = getattr(self._source, 'close', None)
        if close is not None:
            await close()

    async def get_devices(self) -> DeviceSnapshot:
        """Latest device snapshot and whether it is stale."""
        snapshot = await self._cache.get(ResourceKind.DEVICES)
        return DeviceSnapshot(
            devices=tuple(parse_devices(snapshot.data)),
            stale=snapshot.stale,
            timestamp=time.time(),
        )

    async def get_clients(self) -> ClientSnapshot:
        """Latest client snapshot and whether it is stale."""
        snapshot = await self._cache.get(ResourceKind.CLIENTS)
        return ClientSnapshot(
            clients=tuple(parse_clients(snapshot.data)),
            stale=snapshot.stale,
            timestamp=time.time(),
        )

    async def check_health(self) -> HealthReport:
        """Evaluate health over the latest devices; staleness follows the device fetch."""
        snapshot = await self.get_devices()
        alerts = evaluate_health(snapshot.devices)
        logger.info('Health evaluated', alerts=len(alerts), stale=snapshot.stale)
        return HealthReport(alerts=tuple(alerts), stale=snapshot.stale, timestamp=time.time())

    async def get_topology(self, include_clients: bool = True) -> TopologySnapshot:
        """Build the topology over the latest devices and, when available, clients.

        A failed client fetch degrades to a topology without client details.
        """
        devices = await self.get_devices()
        clients: tuple = ()
        if include_clients:
            try:
                clients = (await self.get_clients()).clients
            except SourceError as e:
                logger.warning('Building topology without clients', error=e.message)

        graph = build_topology(devices.devices, clients)
        return TopologySnapshot(graph=graph, stale=devices.stale, timestamp=time.time())
