"""Display helpers for speeds, rates and device kinds."""

from unifi_monitor.models import DeviceKind


def format_speed(speed: int) -> str:
    """Format a link speed in Mbps as a short tier label."""
    if speed >= 10000:
        return '10G'
    if speed >= 2500:
        return '2.5G'
    if speed >= 1000:
        return '1G'
    if speed >= 100:
        return '100M'
    if speed > 0:
        return f'{speed}M'
    return 'Down'


def format_rate(bps: int | None) -> str | None:
    """Format a radio rate in bits per second, e.g. 1_100_000_000 -> '1.1 Gbps'."""
    if not bps or bps <= 0:
        return None
    if bps >= 1_000_000_000:
        return f'{bps / 1_000_000_000:.1f} Gbps'
    if bps >= 1_000_000:
        return f'{bps / 1_000_000:.0f} Mbps'
    return f'{bps / 1_000:.0f} Kbps'


def format_bytes(count: int) -> str:
    """Format a byte counter with binary units."""
    if count <= 0:
        return '0 B'
    value = float(count)
    for unit in ('B', 'KB', 'MB', 'GB', 'TB'):
        if value < 1024 or unit == 'TB':
            return f'{value:.1f} {unit}'.replace('.0 ', ' ')
        value /= 1024
    return f'{value:.1f} TB'


def format_uptime(seconds: int) -> str:
    days, rest = divmod(max(0, seconds), 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60
    if days:
        return f'{days}d {hours}h'
    if hours:
        return f'{hours}h {minutes}m'
    return f'{minutes}m'


DEVICE_KIND_NAMES = {
    DeviceKind.SWITCH: 'Switch',
    DeviceKind.ACCESS_POINT: 'Access Point',
    DeviceKind.GATEWAY: 'Gateway',
    DeviceKind.OTHER: 'Device',
}


def device_kind_name(kind: DeviceKind) -> str:
    return DEVICE_KIND_NAMES.get(kind, 'Device')
