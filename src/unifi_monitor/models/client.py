"""Client model for stations attached to UniFi infrastructure."""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Any


class Client(BaseModel):
    """Network client with either a wired or a wireless association."""

    model_config = ConfigDict(frozen=True)

    mac: str = Field(description='MAC address (primary identifier)')
    name: str | None = Field(default=None, description='User-assigned name')
    hostname: str | None = Field(default=None, description='Reported hostname')
    ip: str | None = None
    switch_mac: str | None = Field(default=None, description='Switch MAC for wired clients')
    switch_port: int | None = Field(default=None, description='Switch port for wired clients')
    ap_mac: str | None = Field(default=None, description='Access point MAC for wireless clients')

    @model_validator(mode='before')
    @classmethod
    def _single_association(cls, data: Any) -> Any:
        # Controllers occasionally keep a stale ap_mac on wired clients.
        if isinstance(data, dict) and data.get('switch_mac') and data.get('ap_mac'):
            data = {**data, 'ap_mac': None}
        return data

    @property
    def is_wired(self) -> bool:
        """Check if client is attached to a switch port."""
        return self.switch_mac is not None

    @property
    def is_wireless(self) -> bool:
        """Check if client is associated to an access point."""
        return self.ap_mac is not None

    @property
    def display_name(self) -> str:
        """Name, then hostname, then MAC."""
        return self.name or self.hostname or self.mac
