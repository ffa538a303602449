"""Health alert models."""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class AlertKind(str, Enum):
    """Metric family an alert was raised for."""

    TEMPERATURE = 'temperature'
    ERRORS = 'errors'
    DROPPED = 'dropped'
    UPGRADE = 'upgrade'


class Severity(str, Enum):
    """Alert urgency."""

    CRITICAL = 'critical'
    WARNING = 'warning'


class HealthAlert(BaseModel):
    """A degraded port or device condition."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description='Deterministic id from device id, port and kind')
    kind: AlertKind
    severity: Severity
    device: str = Field(description='Device display name')
    device_id: str
    port: int | None = Field(default=None, description='Port index for port-level alerts')
    message: str
    value: float = Field(description='Value that triggered the alert')
    threshold: float = Field(description='Threshold that was crossed')


class HealthReport(BaseModel):
    """Sorted alerts for one device snapshot."""

    model_config = ConfigDict(frozen=True)

    alerts: tuple[HealthAlert, ...] = ()
    stale: bool = False
    timestamp: float = Field(default=0.0, description='Wall-clock time of evaluation')

    @property
    def critical_count(self) -> int:
        return sum(1 for alert in self.alerts if alert.severity == Severity.CRITICAL)

    @property
    def warning_count(self) -> int:
        return sum(1 for alert in self.alerts if alert.severity == Severity.WARNING)

    @property
    def healthy(self) -> bool:
        """True if no alerts were raised."""
        return not self.alerts
