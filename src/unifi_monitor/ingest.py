"""Convert raw controller JSON into immutable snapshot models.

Everything numeric that the controller reports as text (SFP temperature,
PoE power) is parsed here, once. Missing or garbled optional fields become
None rather than errors.
"""

import math
from loguru import logger
from pydantic import ValidationError
from typing import Any
from unifi_monitor.models import (
    Client,
    Device,
    DeviceKind,
    LastConnection,
    LldpNeighbor,
    Port,
    PortPoe,
    Transceiver,
    UplinkDetail,
    UplinkRef,
)


TYPE_MAPPING = {
    'usw': DeviceKind.SWITCH,
    'uap': DeviceKind.ACCESS_POINT,
    'ugw': DeviceKind.GATEWAY,
    'udm': DeviceKind.GATEWAY,
    'uxg': DeviceKind.GATEWAY,
}


def parse_float(value: Any) -> float | None:
    """Parse a numeric or numeric-string field, None when absent, invalid or non-finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            number = float(str(value).strip())
    except (ValueError, OverflowError):
        return None
    # NaN and infinity come through as JSON literals or strings like "1e400"
    return number if math.isfinite(number) else None


def parse_int(value: Any) -> int | None:
    number = parse_float(value)
    return int(number) if number is not None else None


def _counter(value: Any) -> int:
    number = parse_int(value)
    return max(0, number) if number is not None else 0


def parse_port(port_info: dict[str, Any]) -> Port:
    """Convert one `port_table` entry to a Port."""
    transceiver = None
    if port_info.get('sfp_found') or port_info.get('sfp_temperature') is not None:
        transceiver = Transceiver(
            temperature=parse_float(port_info.get('sfp_temperature')),
            vendor=port_info.get('sfp_vendor'),
            part=port_info.get('sfp_part'),
            rx_power=port_info.get('sfp_rxpower'),
            tx_power=port_info.get('sfp_txpower'),
        )

    poe = None
    if 'poe_enable' in port_info or 'poe_power' in port_info:
        poe = PortPoe(
            enabled=bool(port_info.get('poe_enable', False)),
            power=parse_float(port_info.get('poe_power')),
            voltage=parse_float(port_info.get('poe_voltage')),
        )

    last_connection = None
    last = port_info.get('last_connection')
    if isinstance(last, dict) and last.get('mac'):
        last_connection = LastConnection(
            mac=last['mac'], last_seen=parse_int(last.get('last_seen')) or 0
        )

    if 'full_duplex' in port_info:
        duplex = 'full' if port_info['full_duplex'] else 'half'
    else:
        duplex = 'unknown'

    return Port(
        index=parse_int(port_info.get('port_idx')) or 0,
        name=port_info.get('name') or '',
        up=bool(port_info.get('up', False)),
        speed=_counter(port_info.get('speed')),
        duplex=duplex,
        rx_bytes=_counter(port_info.get('rx_bytes')),
        tx_bytes=_counter(port_info.get('tx_bytes')),
        rx_errors=_counter(port_info.get('rx_errors')),
        tx_errors=_counter(port_info.get('tx_errors')),
        rx_dropped=_counter(port_info.get('rx_dropped')),
        tx_dropped=_counter(port_info.get('tx_dropped')),
        transceiver=transceiver,
        poe=poe,
        stp_state=port_info.get('stp_state'),
        is_uplink=bool(port_info.get('is_uplink', False)),
        last_connection=last_connection,
        media=port_info.get('media'),
    )


def parse_uplink_ref(uplink_info: dict[str, Any] | None) -> UplinkRef | None:
    """Convert `last_uplink` to an UplinkRef."""
    if not uplink_info:
        return None
    return UplinkRef(
        local_port=parse_int(uplink_info.get('port_idx')),
        device_name=uplink_info.get('uplink_device_name') or '',
        device_mac=uplink_info.get('uplink_mac'),
        remote_port=parse_int(uplink_info.get('uplink_remote_port')),
        link_type=uplink_info.get('type') or 'wire',
        speed=_counter(uplink_info.get('speed')),
    )


def parse_uplink_detail(uplink_info: dict[str, Any] | None) -> UplinkDetail | None:
    """Convert `uplink` to an UplinkDetail."""
    if not uplink_info:
        return None
    return UplinkDetail(
        device_name=uplink_info.get('uplink_device_name') or uplink_info.get('name') or '',
        device_mac=uplink_info.get('uplink_mac'),
        link_type=uplink_info.get('type') or 'wire',
        rssi=parse_int(uplink_info.get('rssi')),
        signal=parse_int(uplink_info.get('signal')),
        channel=parse_int(uplink_info.get('channel')),
        tx_rate=parse_int(uplink_info.get('tx_rate')),
        rx_rate=parse_int(uplink_info.get('rx_rate')),
        tx_rate_label=uplink_info.get('tx_rate_label'),
    )


def parse_lldp(entry: dict[str, Any]) -> LldpNeighbor | None:
    """Convert one `lldp_table` entry, None when it names no local port."""
    # Field names vary across controller versions.
    local_port = parse_int(
        entry.get('local_port_idx') or entry.get('port_idx') or entry.get('lldp_local_port_idx')
    )
    if local_port is None:
        return None
    return LldpNeighbor(
        local_port=local_port,
        chassis_id=entry.get('chassis_id') or '',
        system_name=entry.get('system_name') or entry.get('lldp_system_name') or None,
        port_id=entry.get('port_id'),
        port_description=entry.get('port_description'),
        management_address=entry.get('management_address'),
    )


def _dedupe_ports(ports: list[Port], device_id: str) -> tuple[Port, ...]:
    unique: dict[int, Port] = {}
    for port in ports:
        if port.index in unique:
            logger.warning(
                'Duplicate port index in snapshot, keeping first', device_id=device_id, port=port.index
            )
            continue
        unique[port.index] = port
    return tuple(unique.values())


def parse_device(device_info: dict[str, Any]) -> Device:
    """Convert UniFi device API data to a Device model."""
    device_id = device_info.get('_id') or device_info.get('mac', '')
    ports = [parse_port(p) for p in device_info.get('port_table') or [] if isinstance(p, dict)]
    lldp = [parse_lldp(e) for e in device_info.get('lldp_table') or [] if isinstance(e, dict)]

    return Device(
        id=device_id,
        mac=device_info.get('mac', ''),
        name=device_info.get('name') or device_info.get('hostname') or '',
        kind=TYPE_MAPPING.get(str(device_info.get('type', '')).lower(), DeviceKind.OTHER),
        model=device_info.get('model') or '',
        version=device_info.get('version') or '',
        ip=device_info.get('ip'),
        online=device_info.get('state') == 1,
        uptime=_counter(device_info.get('uptime')),
        temperature=parse_float(device_info.get('general_temperature')),
        overheating=bool(device_info.get('overheating', False)),
        upgradable=bool(device_info.get('upgradable', False)),
        power_used=parse_float(device_info.get('total_used_power')),
        power_max=parse_float(device_info.get('total_max_power')),
        ports=_dedupe_ports(ports, device_id),
        uplink=parse_uplink_ref(device_info.get('last_uplink')),
        uplink_detail=parse_uplink_detail(device_info.get('uplink')),
        lldp=tuple(entry for entry in lldp if entry is not None),
    )


def parse_client(client_info: dict[str, Any]) -> Client:
    """Convert UniFi client API data to a Client model."""
    is_wired = client_info.get('is_wired')
    switch_mac = client_info.get('sw_mac')
    if is_wired is False:
        switch_mac = None

    return Client(
        mac=client_info.get('mac', ''),
        name=client_info.get('name') or None,
        hostname=client_info.get('hostname') or None,
        ip=client_info.get('ip') or client_info.get('last_ip'),
        switch_mac=switch_mac,
        switch_port=parse_int(client_info.get('sw_port')) if switch_mac else None,
        ap_mac=client_info.get('ap_mac'),
    )


def parse_devices(payload: list[dict[str, Any]]) -> list[Device]:
    """Convert a device payload, skipping records that cannot be modelled."""
    devices = []
    for device_info in payload:
        try:
            devices.append(parse_device(device_info))
        except (ValidationError, AttributeError, TypeError, ValueError, OverflowError) as e:
            logger.warning('Skipping malformed device record', mac=_mac_of(device_info), error=str(e))
    return devices


def parse_clients(payload: list[dict[str, Any]]) -> list[Client]:
    """Convert a client payload, skipping records without a MAC."""
    clients = []
    for client_info in payload:
        try:
            client = parse_client(client_info)
        except (ValidationError, AttributeError, TypeError, ValueError, OverflowError) as e:
            logger.warning('Skipping malformed client record', mac=_mac_of(client_info), error=str(e))
            continue
        if client.mac:
            clients.append(client)
    return clients


def _mac_of(record: Any) -> str:
    return record.get('mac', '') if isinstance(record, dict) else ''
