"""UniFi monitor: cached controller snapshots, health alerts and uplink topology."""

__version__ = '1.0.0'

from unifi_monitor.cache import SnapshotCache
from unifi_monitor.health import evaluate_health
from unifi_monitor.service import NetworkMonitor
from unifi_monitor.topology import build_topology
from unifi_monitor.utils.errors import ConfigurationError, MonitorError, SourceError

__all__ = [
    'ConfigurationError',
    'MonitorError',
    'NetworkMonitor',
    'SnapshotCache',
    'SourceError',
    'build_topology',
    'evaluate_health',
]
