"""Topology builder: reconstruct the uplink graph from a device snapshot.

Parents are resolved by device *name*, mirroring how the controller reports
uplinks. For mesh (wireless) links the coarse `last_uplink` record carries an
unreliable parent name, so the parent comes from the detailed `uplink` record
instead. Mesh links occupy no physical port on either side.

The result is an abstract graph with size hints; positions are left to an
external hierarchical layout engine (see TopologyGraph.to_networkx).
"""

import math
from collections.abc import Iterable, Sequence
from loguru import logger
from unifi_monitor.formatting import format_rate, format_speed
from unifi_monitor.models import (
    Client,
    Device,
    DeviceKind,
    LinkKind,
    NodeSize,
    PortPeer,
    TopologyEdge,
    TopologyGraph,
    TopologyNode,
)
from unifi_monitor.thresholds import RX_ERRORS_WARNING, SFP_TEMP_WARNING


# Layout size hints (pixels)
AP_NODE_SIZE = NodeSize(width=160, height=60)
DEFAULT_NODE_SIZE = NodeSize(width=200, height=80)
PORTS_PER_ROW = 16
PORT_CELL_WIDTH = 20
PORT_ROW_HEIGHT = 20
NODE_PADDING_WIDTH = 120
NODE_HEADER_HEIGHT = 60


def find_device_by_name(name: str, devices: Sequence[Device]) -> Device | None:
    """Exact name lookup used for uplink parent resolution.

    If two devices share a name the first one wins.
    """
    if not name:
        return None
    for device in devices:
        if device.name == name:
            return device
    return None


def resolve_parent_name(device: Device) -> str | None:
    """Name of the device's uplink parent, or None when it cannot be told."""
    if device.uplink is None:
        return None
    if device.uplink.link_kind == LinkKind.MESH:
        if device.uplink_detail is None:
            return None
        return device.uplink_detail.device_name or None
    return device.uplink.device_name or None


def node_size(device: Device) -> NodeSize:
    """Size hint: compact fixed size for APs, port-count driven for switches/gateways."""
    if device.kind == DeviceKind.ACCESS_POINT:
        return AP_NODE_SIZE
    if device.kind in (DeviceKind.SWITCH, DeviceKind.GATEWAY):
        port_count = len(device.ports)
        rows = math.ceil(port_count / PORTS_PER_ROW)
        width = NODE_PADDING_WIDTH + PORT_CELL_WIDTH * min(port_count, PORTS_PER_ROW)
        height = NODE_HEADER_HEIGHT + PORT_ROW_HEIGHT * rows
        return NodeSize(
            width=max(width, DEFAULT_NODE_SIZE.width),
            height=max(height, DEFAULT_NODE_SIZE.height),
        )
    return DEFAULT_NODE_SIZE


def has_issues(device: Device) -> bool:
    """Quick flag for node highlighting; the health engine owns the full alert logic."""
    if device.overheating or device.upgradable:
        return True
    for port in device.ports:
        if port.rx_errors > RX_ERRORS_WARNING:
            return True
        temp = port.sfp_temperature
        if temp is not None and temp > SFP_TEMP_WARNING:
            return True
    return False


def resolve_client_name(mac: str, clients: Iterable[Client]) -> str | None:
    """Client name or hostname for a MAC, case-insensitive."""
    mac = mac.lower()
    for client in clients:
        if client.mac.lower() == mac:
            return client.name or client.hostname
    return None


def resolve_port_peers(device: Device, clients: Sequence[Client]) -> dict[int, PortPeer]:
    """Best-known peer per port: LLDP neighbor, then wired client, then last connection."""
    peers: dict[int, PortPeer] = {}
    device_mac = device.mac.lower()

    for port in device.ports:
        lldp = device.lldp_for(port.index)
        if lldp is not None:
            peers[port.index] = PortPeer(
                name=lldp.system_name or lldp.chassis_id,
                detail=lldp.port_description or lldp.management_address or '',
                source='lldp',
            )
            continue

        client = next(
            (
                c for c in clients
                if c.is_wired
                and (c.switch_mac or '').lower() == device_mac
                and c.switch_port == port.index
            ),
            None,
        )
        if client is not None:
            peers[port.index] = PortPeer(
                name=client.name or client.hostname or 'Client',
                detail=client.ip or client.mac,
                source='client',
            )
            continue

        if port.last_connection is not None:
            mac = port.last_connection.mac
            peers[port.index] = PortPeer(
                name=resolve_client_name(mac, clients) or 'Unknown device',
                detail=mac,
                source='last_connection',
            )

    return peers


def count_clients(device: Device, clients: Sequence[Client]) -> int:
    """Wired clients on the device's ports plus wireless clients on its radios."""
    device_mac = device.mac.lower()
    return sum(
        1 for c in clients
        if (c.switch_mac or '').lower() == device_mac or (c.ap_mac or '').lower() == device_mac
    )


def _wired_edge(child: Device, parent: Device) -> TopologyEdge:
    uplink = child.uplink
    remote_port = uplink.remote_port
    local_port = uplink.local_port

    speed = 0
    parent_port = parent.port(remote_port) if remote_port is not None else None
    if parent_port is not None:
        speed = parent_port.speed
    if not speed:
        speed = uplink.speed

    return TopologyEdge(
        id=f'{parent.id}-{child.id}',
        source=parent.id,
        target=child.id,
        kind=LinkKind.WIRED,
        local_port=local_port,
        remote_port=remote_port,
        speed=speed,
        label=f'P{_port_label(remote_port)} -- {format_speed(speed)} -- P{_port_label(local_port)}',
    )


def _mesh_edge(child: Device, parent: Device) -> TopologyEdge:
    uplink = child.uplink
    detail = child.uplink_detail

    speed = 0
    rate_label = None
    if detail is not None and detail.tx_rate:
        speed = detail.tx_rate // 1_000_000
        rate_label = detail.tx_rate_label or format_rate(detail.tx_rate)
    if not speed:
        speed = uplink.speed

    parts = ['mesh', rate_label or format_speed(speed)]
    if detail is not None and detail.rssi is not None:
        parts.append(f'{detail.rssi} dBm')

    return TopologyEdge(
        id=f'{parent.id}-{child.id}',
        source=parent.id,
        target=child.id,
        kind=LinkKind.MESH,
        speed=speed,
        label=' -- '.join(parts),
        rssi=detail.rssi if detail else None,
        signal=detail.signal if detail else None,
        channel=detail.channel if detail else None,
        rate_label=rate_label,
    )


def _port_label(index: int | None) -> str:
    return '?' if index is None else str(index)


def build_topology(
    devices: Iterable[Device],
    clients: Iterable[Client] | None = None,
) -> TopologyGraph:
    """Build the uplink graph for a device snapshot.

    Args:
        devices: Device snapshot
        clients: Optional client snapshot, used for per-node client counts and
                 port peer names

    Returns:
        TopologyGraph with one node per device, at most one uplink edge per
        child, and the port indices each device spends on wired uplinks
    """
    devices = list(devices)
    clients = list(clients or [])

    connected: dict[str, set[int]] = {device.id: set() for device in devices}
    edges: list[TopologyEdge] = []

    for device in devices:
        if device.uplink is None:
            continue

        parent_name = resolve_parent_name(device)
        parent = find_device_by_name(parent_name, devices) if parent_name else None
        if parent is None:
            logger.debug(
                'Dropping uplink with unknown parent',
                device=device.display_name,
                parent=parent_name,
                link=device.uplink.link_kind.value,
            )
            continue
        if parent.id == device.id:
            logger.debug('Dropping self-referencing uplink', device=device.display_name)
            continue

        if device.uplink.link_kind == LinkKind.MESH:
            edges.append(_mesh_edge(device, parent))
            continue

        if device.uplink.local_port is not None:
            connected[device.id].add(device.uplink.local_port)
        if device.uplink.remote_port is not None:
            connected[parent.id].add(device.uplink.remote_port)
        edges.append(_wired_edge(device, parent))

    nodes = [
        TopologyNode(
            id=device.id,
            name=device.display_name,
            kind=device.kind,
            online=device.online,
            size=node_size(device),
            port_count=len(device.ports),
            active_ports=sum(1 for port in device.ports if port.up),
            sfp_ports=tuple(port.index for port in device.ports if port.is_sfp),
            has_issues=has_issues(device),
            client_count=count_clients(device, clients),
            peers=resolve_port_peers(device, clients),
        )
        for device in devices
    ]

    logger.debug('Built topology', nodes=len(nodes), edges=len(edges))

    return TopologyGraph(
        nodes=tuple(nodes),
        edges=tuple(edges),
        connected_ports={device_id: frozenset(ports) for device_id, ports in connected.items()},
    )
