"""Shared fixtures for UniFi monitor tests."""

import pytest
from typing import Any
from unifi_monitor.models import ResourceKind
from unifi_monitor.utils.errors import SourceError


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource:
    """Telemetry source returning scripted results per resource kind.

    Each script entry is either a payload list or an exception instance; the
    last entry repeats once the script is exhausted.
    """

    def __init__(self, **scripts: list[Any]):
        self.scripts = {ResourceKind(kind): list(script) for kind, script in scripts.items()}
        self.calls: dict[ResourceKind, int] = {kind: 0 for kind in ResourceKind}
        self.closed = False

    async def fetch(self, kind: ResourceKind) -> list[dict[str, Any]]:
        script = self.scripts.get(kind)
        if not script:
            raise SourceError(f'no script for {kind.value}')
        index = min(self.calls[kind], len(script) - 1)
        self.calls[kind] += 1
        result = script[index]
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_source_factory():
    """Build a FakeSource from per-kind scripts."""
    return FakeSource


@pytest.fixture
def raw_port():
    """Factory for raw `port_table` entries."""

    def _make(port_idx: int, **overrides: Any) -> dict[str, Any]:
        port = {
            'port_idx': port_idx,
            'name': f'Port {port_idx}',
            'up': True,
            'speed': 1000,
            'full_duplex': True,
            'rx_bytes': 0,
            'tx_bytes': 0,
            'rx_errors': 0,
            'tx_errors': 0,
            'rx_dropped': 0,
            'tx_dropped': 0,
        }
        port.update(overrides)
        return port

    return _make


@pytest.fixture
def raw_device(raw_port):
    """Factory for raw `stat/device` records."""

    def _make(
        device_id: str,
        name: str,
        device_type: str = 'usw',
        ports: int | list[dict[str, Any]] = 0,
        **overrides: Any,
    ) -> dict[str, Any]:
        if isinstance(ports, int):
            ports = [raw_port(i) for i in range(1, ports + 1)]
        device = {
            '_id': device_id,
            'mac': f'mac-{device_id}',
            'name': name,
            'type': device_type,
            'model': 'TEST',
            'version': '7.0.0',
            'ip': '192.168.1.2',
            'state': 1,
            'uptime': 3600,
            'adopted': True,
            'upgradable': False,
            'port_table': ports,
        }
        device.update(overrides)
        return device

    return _make


@pytest.fixture
def scenario_payload(raw_device, raw_port) -> list[dict[str, Any]]:
    """Gateway GW1 with switch SW1 uplinked from its port 24 to GW1 port 1 at 10G."""
    gateway = raw_device(
        'gw1', 'GW1', 'udm', ports=[raw_port(1, speed=10000), raw_port(2, up=False, speed=0)],
        mac='aa:aa:aa:aa:aa:01',
    )
    sw_ports = [raw_port(i) for i in range(1, 25)]
    sw_ports[0] = raw_port(1, rx_errors=15000)
    sw_ports[23] = raw_port(24, speed=10000, media='SFP+')
    switch = raw_device(
        'sw1', 'SW1', 'usw', ports=sw_ports,
        mac='aa:aa:aa:aa:aa:02',
        last_uplink={
            'port_idx': 24,
            'uplink_mac': 'aa:aa:aa:aa:aa:01',
            'uplink_device_name': 'GW1',
            'uplink_remote_port': 1,
            'type': 'wire',
            'speed': 10000,
        },
    )
    return [gateway, switch]


# Pytest markers for test organization
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        'markers',
        'live: marks tests that require live UniFi controller connection',
    )
    config.addinivalue_line('markers', 'slow: marks tests that take longer than 5 seconds')
    config.addinivalue_line('markers', 'integration: marks tests that test component integration')
