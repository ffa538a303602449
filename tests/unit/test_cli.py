"""Unit tests for the CLI commands."""

import json
import pytest
from typer.testing import CliRunner
from unifi_monitor import cli
from unifi_monitor.health import evaluate_health
from unifi_monitor.ingest import parse_clients, parse_devices
from unifi_monitor.models import ClientSnapshot, DeviceSnapshot, HealthReport, TopologySnapshot
from unifi_monitor.topology import build_topology
from unifi_monitor.utils.errors import SourceError
from unittest.mock import patch


runner = CliRunner()


class FakeMonitor:
    """Stands in for NetworkMonitor with fixed snapshots."""

    def __init__(self, devices, clients=(), stale=False, error=None):
        self.devices = tuple(devices)
        self.clients = tuple(clients)
        self.stale = stale
        self.error = error
        self.include_clients = None

    def __call__(self, settings):
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        return None

    def _check(self):
        if self.error is not None:
            raise self.error

    async def get_devices(self):
        self._check()
        return DeviceSnapshot(devices=self.devices, stale=self.stale, timestamp=1.0)

    async def get_clients(self):
        self._check()
        return ClientSnapshot(clients=self.clients, stale=self.stale, timestamp=1.0)

    async def check_health(self):
        self._check()
        alerts = evaluate_health(self.devices)
        return HealthReport(alerts=tuple(alerts), stale=self.stale, timestamp=1.0)

    async def get_topology(self, include_clients=True):
        self._check()
        self.include_clients = include_clients
        graph = build_topology(self.devices, self.clients if include_clients else None)
        return TopologySnapshot(graph=graph, stale=self.stale, timestamp=1.0)


@pytest.fixture(autouse=True)
def no_log_files():
    with patch('unifi_monitor.cli.configure_logging'):
        yield


@pytest.fixture
def monitor(scenario_payload):
    clients = parse_clients([{'mac': 'c1', 'name': 'NAS', 'is_wired': True,
                              'sw_mac': 'aa:aa:aa:aa:aa:02', 'sw_port': 3}])
    fake = FakeMonitor(parse_devices(scenario_payload), clients)
    with patch.object(cli, 'NetworkMonitor', fake):
        yield fake


class TestDevicesCommand:
    """Test `devices`."""

    def test_table(self, monitor):
        result = runner.invoke(cli.app, ['devices'])

        assert result.exit_code == 0
        assert 'GW1' in result.output
        assert 'SW1' in result.output

    def test_json(self, monitor):
        result = runner.invoke(cli.app, ['devices', '--json'])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [d['name'] for d in data['devices']] == ['GW1', 'SW1']
        assert data['stale'] is False

    def test_stale_warning(self, monitor):
        monitor.stale = True
        result = runner.invoke(cli.app, ['devices'])

        assert result.exit_code == 0
        assert 'cached data' in result.output


class TestClientsCommand:
    """Test `clients`."""

    def test_table(self, monitor):
        result = runner.invoke(cli.app, ['clients'])

        assert result.exit_code == 0
        assert 'NAS' in result.output


class TestHealthCommand:
    """Test `health`."""

    def test_table(self, monitor):
        result = runner.invoke(cli.app, ['health'])

        assert result.exit_code == 0
        assert '1 critical' in result.output
        assert 'SW1' in result.output

    def test_json_includes_summary(self, monitor):
        result = runner.invoke(cli.app, ['health', '--json'])

        data = json.loads(result.output)
        assert data['summary']['severity'] == {'critical': 1, 'warning': 0}
        assert data['alerts'][0]['kind'] == 'errors'

    def test_fail_on_critical(self, monitor):
        result = runner.invoke(cli.app, ['health', '--fail-on-critical'])
        assert result.exit_code == 3

    def test_healthy(self, monitor):
        monitor.devices = ()
        result = runner.invoke(cli.app, ['health', '--fail-on-critical'])

        assert result.exit_code == 0
        assert 'No health alerts' in result.output


class TestTopologyCommand:
    """Test `topology`."""

    def test_table(self, monitor):
        result = runner.invoke(cli.app, ['topology'])

        assert result.exit_code == 0
        assert 'P1 -- 10G -- P24' in result.output
        assert 'Roots: GW1' in result.output
        assert monitor.include_clients is True

    def test_no_clients(self, monitor):
        result = runner.invoke(cli.app, ['topology', '--no-clients', '--json'])

        assert result.exit_code == 0
        assert monitor.include_clients is False
        data = json.loads(result.output)
        assert data['graph']['edges'][0]['source'] == 'gw1'


class TestErrorExitCodes:
    """Test error mapping to exit codes."""

    def test_source_error_exits_1(self, monitor):
        monitor.error = SourceError('controller down')
        result = runner.invoke(cli.app, ['devices'])

        assert result.exit_code == 1
        assert 'controller down' in result.output

    def test_unconfigured_exits_2(self, monkeypatch):
        for name in ('UNIFI_API_URL', 'UNIFI_URL', 'UNIFI_API_KEY', 'UNIFI_CONSOLE_API_TOKEN'):
            monkeypatch.delenv(name, raising=False)

        result = runner.invoke(cli.app, ['health'])

        assert result.exit_code == 2
        assert 'Not configured' in result.output

    def test_malformed_timeout_exits_2(self, monkeypatch):
        monkeypatch.setenv('UNIFI_TIMEOUT', 'ten')

        result = runner.invoke(cli.app, ['devices'])

        assert result.exit_code == 2
        assert 'UNIFI_TIMEOUT' in result.output
