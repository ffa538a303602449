"""Device and port models for UniFi infrastructure snapshots."""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Literal


SFP_MEDIA = ('SFP', 'SFP+', 'SFP28')


class DeviceKind(str, Enum):
    """Infrastructure device kinds."""

    SWITCH = 'switch'
    ACCESS_POINT = 'ap'
    GATEWAY = 'gateway'
    OTHER = 'other'


class LinkKind(str, Enum):
    """Uplink medium."""

    WIRED = 'wired'
    MESH = 'mesh'


class Transceiver(BaseModel):
    """Pluggable SFP module diagnostics reported for a port."""

    model_config = ConfigDict(frozen=True)

    temperature: float | None = Field(default=None, description='Module temperature in C')
    vendor: str | None = Field(default=None, description='Module vendor')
    part: str | None = Field(default=None, description='Module part number')
    rx_power: str | None = Field(default=None, description='Receive optical power')
    tx_power: str | None = Field(default=None, description='Transmit optical power')


class PortPoe(BaseModel):
    """PoE state of a port."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    power: float | None = Field(default=None, description='Power draw in watts')
    voltage: float | None = Field(default=None, description='Voltage in volts')


class LastConnection(BaseModel):
    """Last peer seen on a port."""

    model_config = ConfigDict(frozen=True)

    mac: str
    last_seen: int = 0


class Port(BaseModel):
    """Physical switch/gateway port with counters and diagnostics."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(description='Port index, unique within a device')
    name: str = Field(default='', description='Port name/label')
    up: bool = Field(default=False, description='Link status')
    speed: int = Field(default=0, ge=0, description='Link speed in Mbps, 0 when down')
    duplex: Literal['full', 'half', 'unknown'] = 'unknown'
    rx_bytes: int = Field(default=0, ge=0)
    tx_bytes: int = Field(default=0, ge=0)
    rx_errors: int = Field(default=0, ge=0)
    tx_errors: int = Field(default=0, ge=0)
    rx_dropped: int = Field(default=0, ge=0)
    tx_dropped: int = Field(default=0, ge=0)
    transceiver: Transceiver | None = None
    poe: PortPoe | None = None
    stp_state: str | None = Field(
        default=None, description='forwarding, blocking, learning, listening, disabled'
    )
    is_uplink: bool = False
    last_connection: LastConnection | None = None
    media: str | None = Field(default=None, description='Media tag (GE, 2P5GE, SFP+)')

    @property
    def is_sfp(self) -> bool:
        """Check if the port is a fiber/SFP cage."""
        if self.media in SFP_MEDIA or self.transceiver is not None:
            return True
        return 'SFP' in self.name

    @property
    def sfp_temperature(self) -> float | None:
        """Transceiver temperature, None when not reported."""
        return self.transceiver.temperature if self.transceiver else None


class UplinkRef(BaseModel):
    """Coarse uplink record (the controller's `last_uplink`)."""

    model_config = ConfigDict(frozen=True)

    local_port: int | None = Field(default=None, description='Port on this device')
    device_name: str = Field(default='', description='Parent device name')
    device_mac: str | None = None
    remote_port: int | None = Field(default=None, description='Port on the parent device')
    link_type: str = Field(default='wire', description="Raw type: 'wire' or 'wireless'")
    speed: int = Field(default=0, description='Raw link speed in Mbps')

    @property
    def link_kind(self) -> LinkKind:
        """Classify the raw type string."""
        if self.link_type.lower() in ('wireless', 'mesh'):
            return LinkKind.MESH
        return LinkKind.WIRED


class UplinkDetail(BaseModel):
    """Detailed uplink record (the controller's `uplink`), reliable for mesh parents."""

    model_config = ConfigDict(frozen=True)

    device_name: str = ''
    device_mac: str | None = None
    link_type: str = 'wire'
    rssi: int | None = Field(default=None, description='Signal strength in dBm')
    signal: int | None = Field(default=None, description='Signal quality percentage')
    channel: int | None = None
    tx_rate: int | None = Field(default=None, description='Transmit rate in bps')
    rx_rate: int | None = Field(default=None, description='Receive rate in bps')
    tx_rate_label: str | None = Field(default=None, description='Human-readable rate')


class LldpNeighbor(BaseModel):
    """Neighbor-discovery record keyed by local port."""

    model_config = ConfigDict(frozen=True)

    local_port: int
    chassis_id: str = ''
    system_name: str | None = None
    port_id: str | None = None
    port_description: str | None = None
    management_address: str | None = None


class Device(BaseModel):
    """UniFi infrastructure device snapshot.

    Represents switches, access points and gateways. Instances are rebuilt on
    every poll and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description='Controller object id')
    mac: str = Field(description='MAC address')
    name: str = Field(default='', description='Display name')
    kind: DeviceKind = DeviceKind.OTHER
    model: str = ''
    version: str = ''
    ip: str | None = None
    online: bool = False
    uptime: int = 0
    temperature: float | None = Field(default=None, description='General temperature in C')
    overheating: bool = False
    upgradable: bool = False
    power_used: float | None = Field(default=None, description='Total PoE power used in W')
    power_max: float | None = Field(default=None, description='PoE budget in W')
    ports: tuple[Port, ...] = ()
    uplink: UplinkRef | None = None
    uplink_detail: UplinkDetail | None = None
    lldp: tuple[LldpNeighbor, ...] = ()

    @model_validator(mode='after')
    def _unique_port_indices(self) -> 'Device':
        seen: set[int] = set()
        for port in self.ports:
            if port.index in seen:
                raise ValueError(f'duplicate port index {port.index} on device {self.id}')
            seen.add(port.index)
        return self

    @property
    def display_name(self) -> str:
        """Get display name, falling back to MAC if name is empty."""
        return self.name if self.name else self.mac

    def port(self, index: int) -> Port | None:
        """Look up a port by index."""
        for port in self.ports:
            if port.index == index:
                return port
        return None

    def lldp_for(self, index: int) -> LldpNeighbor | None:
        """Look up the neighbor record for a local port."""
        for entry in self.lldp:
            if entry.local_port == index:
                return entry
        return None
