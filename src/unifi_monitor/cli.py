"""Typer-based CLI for UniFi monitor."""

import asyncio
import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from unifi_monitor.formatting import device_kind_name, format_bytes, format_speed, format_uptime
from unifi_monitor.health import summarize
from unifi_monitor.models import Severity
from unifi_monitor.service import NetworkMonitor
from unifi_monitor.utils.errors import ConfigurationError, MonitorError
from unifi_monitor.utils.logging import configure_logging
from unifi_monitor.utils.settings import Settings

console = Console()
err_console = Console(stderr=True)


class State:
    """Global CLI state."""

    env_file: Optional[Path] = None
    debug: bool = False


state = State()

app = typer.Typer(
    name='unifi-monitor',
    help='UniFi health alerts and uplink topology from controller snapshots',
    no_args_is_help=True,
)


@app.callback()
def main(
    env_file: Annotated[
        Optional[Path],
        typer.Option('--env-file', '-e', help='Path to .env configuration file', envvar='UNIFI_ENV_FILE'),
    ] = None,
    debug: Annotated[bool, typer.Option('--debug', help='Enable debug logging')] = False,
):
    """UniFi health alerts and uplink topology."""
    state.env_file = env_file
    state.debug = debug
    configure_logging(log_level='DEBUG' if debug else 'INFO', include_console=debug)


def _run(func: Callable[[NetworkMonitor], Awaitable[Any]]) -> Any:
    """Run one monitor call, mapping errors to exit codes."""

    async def _call() -> Any:
        settings = Settings.from_env(state.env_file)
        async with NetworkMonitor(settings) as monitor:
            return await func(monitor)

    try:
        return asyncio.run(_call())
    except ConfigurationError as e:
        err_console.print(f'[red]Not configured:[/red] {e.message}')
        if e.suggestion:
            err_console.print(f'[yellow]{e.suggestion}[/yellow]')
        raise typer.Exit(code=2)
    except MonitorError as e:
        err_console.print(f'[red]Controller error:[/red] {e.message}')
        raise typer.Exit(code=1)


def _print_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))


def _warn_stale(stale: bool) -> None:
    if stale:
        err_console.print('[yellow]Controller unreachable: showing cached data[/yellow]')


@app.command()
def devices(
    as_json: Annotated[bool, typer.Option('--json', help='Output JSON')] = False,
):
    """List infrastructure devices."""
    snapshot = _run(lambda monitor: monitor.get_devices())

    if as_json:
        _print_json(snapshot.model_dump(mode='json'))
        return

    _warn_stale(snapshot.stale)
    table = Table(title=f'Devices ({len(snapshot.devices)})')
    table.add_column('Name', style='cyan')
    table.add_column('Type')
    table.add_column('Model')
    table.add_column('IP')
    table.add_column('Status')
    table.add_column('Ports', justify='right')
    table.add_column('Traffic', justify='right')
    table.add_column('Uptime', justify='right')

    for device in sorted(snapshot.devices, key=lambda d: d.display_name):
        active = sum(1 for port in device.ports if port.up)
        traffic = sum(port.rx_bytes + port.tx_bytes for port in device.ports)
        table.add_row(
            device.display_name,
            device_kind_name(device.kind),
            device.model,
            device.ip or '-',
            '[green]online[/green]' if device.online else '[red]offline[/red]',
            f'{active}/{len(device.ports)}' if device.ports else '-',
            format_bytes(traffic),
            format_uptime(device.uptime),
        )
    console.print(table)


@app.command()
def clients(
    as_json: Annotated[bool, typer.Option('--json', help='Output JSON')] = False,
):
    """List known clients and where they attach."""
    snapshot = _run(lambda monitor: monitor.get_clients())

    if as_json:
        _print_json(snapshot.model_dump(mode='json'))
        return

    _warn_stale(snapshot.stale)
    table = Table(title=f'Clients ({len(snapshot.clients)})')
    table.add_column('Name', style='cyan')
    table.add_column('MAC')
    table.add_column('IP')
    table.add_column('Attached to')

    for client in sorted(snapshot.clients, key=lambda c: c.display_name):
        if client.is_wired:
            attached = f'{client.switch_mac} port {client.switch_port}'
        elif client.is_wireless:
            attached = f'{client.ap_mac} (wireless)'
        else:
            attached = '-'
        table.add_row(client.display_name, client.mac, client.ip or '-', attached)
    console.print(table)


@app.command()
def health(
    as_json: Annotated[bool, typer.Option('--json', help='Output JSON')] = False,
    fail_on_critical: Annotated[
        bool, typer.Option('--fail-on-critical', help='Exit 3 when any critical alert is raised')
    ] = False,
):
    """Show health alerts, critical first."""
    report = _run(lambda monitor: monitor.check_health())

    if as_json:
        _print_json({**report.model_dump(mode='json'), 'summary': summarize(report.alerts)})
    else:
        _warn_stale(report.stale)
        if report.healthy:
            console.print('[green]No health alerts[/green]')
        else:
            table = Table(title=f'Health alerts ({report.critical_count} critical, {report.warning_count} warning)')
            table.add_column('Severity')
            table.add_column('Device', style='cyan')
            table.add_column('Port', justify='right')
            table.add_column('Type')
            table.add_column('Message')
            for alert in report.alerts:
                color = 'red' if alert.severity == Severity.CRITICAL else 'yellow'
                table.add_row(
                    f'[{color}]{alert.severity.value}[/{color}]',
                    alert.device,
                    '-' if alert.port is None else str(alert.port),
                    alert.kind.value,
                    alert.message,
                )
            console.print(table)

    if fail_on_critical and report.critical_count:
        raise typer.Exit(code=3)


@app.command()
def topology(
    as_json: Annotated[bool, typer.Option('--json', help='Output JSON')] = False,
    no_clients: Annotated[
        bool, typer.Option('--no-clients', help='Skip the client fetch')
    ] = False,
):
    """Show uplink edges between devices."""
    snapshot = _run(lambda monitor: monitor.get_topology(include_clients=not no_clients))
    graph = snapshot.graph

    if as_json:
        _print_json(snapshot.model_dump(mode='json'))
        return

    _warn_stale(snapshot.stale)
    names = {node.id: node.name for node in graph.nodes}
    table = Table(title=f'Topology ({len(graph.nodes)} devices, {len(graph.edges)} uplinks)')
    table.add_column('Parent', style='cyan')
    table.add_column('Child', style='cyan')
    table.add_column('Link')
    table.add_column('Speed', justify='right')
    table.add_column('Label')

    for edge in sorted(graph.edges, key=lambda e: (names[e.source], names[e.target])):
        table.add_row(
            names[edge.source],
            names[edge.target],
            edge.kind.value,
            edge.rate_label or format_speed(edge.speed),
            edge.label,
        )
    console.print(table)

    roots = [node.name for node in graph.nodes if graph.uplink_of(node.id) is None]
    if roots:
        console.print(f'Roots: {", ".join(sorted(roots))}')


if __name__ == '__main__':
    app()
