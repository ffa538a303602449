"""Pydantic models for UniFi monitor."""

from unifi_monitor.models.client import Client
from unifi_monitor.models.device import (
    Device,
    DeviceKind,
    LastConnection,
    LinkKind,
    LldpNeighbor,
    Port,
    PortPoe,
    Transceiver,
    UplinkDetail,
    UplinkRef,
)
from unifi_monitor.models.health import AlertKind, HealthAlert, HealthReport, Severity
from unifi_monitor.models.snapshot import (
    ClientSnapshot,
    DeviceSnapshot,
    ResourceKind,
    Snapshot,
    TopologySnapshot,
)
from unifi_monitor.models.topology import (
    NodeSize,
    PortPeer,
    TopologyEdge,
    TopologyGraph,
    TopologyNode,
)

__all__ = [
    'AlertKind',
    'Client',
    'ClientSnapshot',
    'Device',
    'DeviceKind',
    'DeviceSnapshot',
    'HealthAlert',
    'HealthReport',
    'LastConnection',
    'LinkKind',
    'LldpNeighbor',
    'NodeSize',
    'Port',
    'PortPeer',
    'PortPoe',
    'ResourceKind',
    'Severity',
    'Snapshot',
    'TopologyEdge',
    'TopologyGraph',
    'TopologyNode',
    'Transceiver',
    'UplinkDetail',
    'UplinkRef',
]
