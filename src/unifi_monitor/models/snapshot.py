"""Snapshot envelopes returned by the cache and the monitor facade."""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Any
from unifi_monitor.models.client import Client
from unifi_monitor.models.device import Device
from unifi_monitor.models.topology import TopologyGraph


class ResourceKind(str, Enum):
    """Controller resources the monitor polls."""

    DEVICES = 'devices'
    CLIENTS = 'clients'

    @property
    def path(self) -> str:
        """Controller API path relative to the site root."""
        return _RESOURCE_PATHS[self]


_RESOURCE_PATHS = {
    ResourceKind.DEVICES: 'stat/device',
    ResourceKind.CLIENTS: 'rest/user',
}


class Snapshot(BaseModel):
    """Raw payload served by the cache."""

    model_config = ConfigDict(frozen=True)

    data: list[dict[str, Any]] = Field(default_factory=list)
    stale: bool = False
    fetched_at: float = Field(default=0.0, description='Cache clock time of the fetch')


class DeviceSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    devices: tuple[Device, ...] = ()
    stale: bool = False
    timestamp: float = 0.0


class ClientSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    clients: tuple[Client, ...] = ()
    stale: bool = False
    timestamp: float = 0.0


class TopologySnapshot(BaseModel):
    """Topology built from the latest device (and client) snapshots."""

    model_config = ConfigDict(frozen=True)

    graph: TopologyGraph
    stale: bool = False
    timestamp: float = 0.0
