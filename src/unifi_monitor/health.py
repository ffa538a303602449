"""Health engine: classify a device snapshot into sorted alerts.

Pure functions of their input. Each port is checked independently for
transceiver temperature, receive errors and receive drops; each device for
pending firmware upgrades and overheating. Within a metric the critical tier
suppresses the warning tier.
"""

from collections import Counter
from collections.abc import Iterable
from unifi_monitor.models import AlertKind, Device, HealthAlert, Port, Severity
from unifi_monitor.thresholds import (
    RX_DROPPED_WARNING,
    RX_ERRORS_CRITICAL,
    RX_ERRORS_WARNING,
    SFP_TEMP_CRITICAL,
    SFP_TEMP_WARNING,
)


_SEVERITY_RANK = {Severity.CRITICAL: 0, Severity.WARNING: 1}


def check_port(device: Device, port: Port) -> list[HealthAlert]:
    """Check one port against the temperature, error and drop thresholds."""
    alerts: list[HealthAlert] = []
    prefix = f'{device.id}-port{port.index}'

    def _alert(suffix: str, kind: AlertKind, severity: Severity, message: str,
               value: float, threshold: float) -> HealthAlert:
        return HealthAlert(
            id=f'{prefix}-{suffix}',
            kind=kind,
            severity=severity,
            device=device.display_name,
            device_id=device.id,
            port=port.index,
            message=message,
            value=value,
            threshold=threshold,
        )

    temp = port.sfp_temperature
    if temp is not None:
        if temp >= SFP_TEMP_CRITICAL:
            alerts.append(_alert(
                'temp-critical', AlertKind.TEMPERATURE, Severity.CRITICAL,
                f'Port {port.index} SFP at {temp:.1f}C (critical)', temp, SFP_TEMP_CRITICAL,
            ))
        elif temp >= SFP_TEMP_WARNING:
            alerts.append(_alert(
                'temp-warning', AlertKind.TEMPERATURE, Severity.WARNING,
                f'Port {port.index} SFP at {temp:.1f}C', temp, SFP_TEMP_WARNING,
            ))

    if port.rx_errors >= RX_ERRORS_CRITICAL:
        alerts.append(_alert(
            'errors-critical', AlertKind.ERRORS, Severity.CRITICAL,
            f'Port {port.index} has {port.rx_errors:,} rx errors',
            port.rx_errors, RX_ERRORS_CRITICAL,
        ))
    elif port.rx_errors >= RX_ERRORS_WARNING:
        alerts.append(_alert(
            'errors-warning', AlertKind.ERRORS, Severity.WARNING,
            f'Port {port.index} has {port.rx_errors:,} rx errors',
            port.rx_errors, RX_ERRORS_WARNING,
        ))

    if port.rx_dropped >= RX_DROPPED_WARNING:
        alerts.append(_alert(
            'dropped', AlertKind.DROPPED, Severity.WARNING,
            f'Port {port.index} has {port.rx_dropped:,} dropped packets',
            port.rx_dropped, RX_DROPPED_WARNING,
        ))

    return alerts


def check_device(device: Device) -> list[HealthAlert]:
    """Check device-level flags, then every port."""
    alerts: list[HealthAlert] = []

    if device.upgradable:
        alerts.append(HealthAlert(
            id=f'{device.id}-upgrade',
            kind=AlertKind.UPGRADE,
            severity=Severity.WARNING,
            device=device.display_name,
            device_id=device.id,
            message='Firmware upgrade available',
            value=1,
            threshold=0,
        ))

    if device.overheating:
        # TODO: the alert value is 0 when the controller omits general_temperature;
        # switch HealthAlert.value to optional once consumers handle a missing reading.
        if device.temperature is not None:
            message = f'Device overheating ({device.temperature:.1f}C)'
        else:
            message = 'Device overheating (temperature not reported)'
        alerts.append(HealthAlert(
            id=f'{device.id}-overheating',
            kind=AlertKind.TEMPERATURE,
            severity=Severity.CRITICAL,
            device=device.display_name,
            device_id=device.id,
            message=message,
            value=device.temperature if device.temperature is not None else 0,
            threshold=0,
        ))

    for port in device.ports:
        alerts.extend(check_port(device, port))

    return alerts


def _sort_key(alert: HealthAlert) -> tuple:
    # Device-level alerts (no port) sort ahead of port alerts for the same device.
    port_key = -1 if alert.port is None else alert.port
    return (
        _SEVERITY_RANK[alert.severity],
        alert.device,
        alert.device_id,
        port_key,
        alert.kind.value,
        alert.id,
    )


def sort_alerts(alerts: Iterable[HealthAlert]) -> list[HealthAlert]:
    """Critical before warning, then by device name; total order on any input order."""
    return sorted(alerts, key=_sort_key)


def evaluate_health(devices: Iterable[Device]) -> list[HealthAlert]:
    """Evaluate all devices and return alerts in severity/device-name order."""
    alerts: list[HealthAlert] = []
    for device in devices:
        alerts.extend(check_device(device))
    return sort_alerts(alerts)


def summarize(alerts: Iterable[HealthAlert]) -> dict[str, dict[str, int]]:
    """Count alerts by severity and by kind."""
    alerts = list(alerts)
    by_severity = Counter(alert.severity.value for alert in alerts)
    by_kind = Counter(alert.kind.value for alert in alerts)
    return {
        'severity': {severity.value: by_severity.get(severity.value, 0) for severity in Severity},
        'kind': {kind.value: by_kind.get(kind.value, 0) for kind in AlertKind},
    }
