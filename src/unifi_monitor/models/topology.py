"""Topology graph models handed to an external layout engine."""

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field
from typing import Literal
from unifi_monitor.models.device import DeviceKind, LinkKind


class NodeSize(BaseModel):
    """Layout size hint in pixels."""

    model_config = ConfigDict(frozen=True)

    width: int
    height: int


class PortPeer(BaseModel):
    """What is plugged into a port, as far as the snapshot can tell."""

    model_config = ConfigDict(frozen=True)

    name: str
    detail: str = ''
    source: Literal['lldp', 'client', 'last_connection']


class TopologyNode(BaseModel):
    """One device in the topology graph."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    kind: DeviceKind
    online: bool = False
    size: NodeSize
    port_count: int = 0
    active_ports: int = 0
    sfp_ports: tuple[int, ...] = ()
    has_issues: bool = False
    client_count: int = 0
    peers: dict[int, PortPeer] = Field(default_factory=dict)


class TopologyEdge(BaseModel):
    """Uplink from a parent device (source) down to a child (target)."""

    model_config = ConfigDict(frozen=True)

    id: str
    source: str = Field(description='Parent device id')
    target: str = Field(description='Child device id')
    kind: LinkKind
    local_port: int | None = Field(default=None, description='Port on the child')
    remote_port: int | None = Field(default=None, description='Port on the parent')
    speed: int = Field(default=0, description='Link speed in Mbps')
    label: str = ''
    rssi: int | None = None
    signal: int | None = None
    channel: int | None = None
    rate_label: str | None = None


class TopologyGraph(BaseModel):
    """Directed uplink graph plus the ports each device spends on uplinks."""

    model_config = ConfigDict(frozen=True)

    nodes: tuple[TopologyNode, ...] = ()
    edges: tuple[TopologyEdge, ...] = ()
    connected_ports: dict[str, frozenset[int]] = Field(default_factory=dict)

    def node(self, node_id: str) -> TopologyNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def uplink_of(self, node_id: str) -> TopologyEdge | None:
        """Edge from this device's parent, if any."""
        for edge in self.edges:
            if edge.target == node_id:
                return edge
        return None

    def children_of(self, node_id: str) -> list[str]:
        """Ids of devices uplinked to this device."""
        return [edge.target for edge in self.edges if edge.source == node_id]

    def to_networkx(self) -> nx.DiGraph:
        """Convert to a NetworkX DiGraph carrying size hints and edge metadata."""
        graph = nx.DiGraph()
        for node in self.nodes:
            graph.add_node(
                node.id,
                name=node.name,
                type=node.kind.value,
                width=node.size.width,
                height=node.size.height,
                has_issues=node.has_issues,
                connected_ports=sorted(self.connected_ports.get(node.id, ())),
            )
        for edge in self.edges:
            graph.add_edge(
                edge.source,
                edge.target,
                kind=edge.kind.value,
                speed_mbps=edge.speed,
                local_port=edge.local_port,
                remote_port=edge.remote_port,
                label=edge.label,
            )
        return graph
