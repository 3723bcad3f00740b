# device.py
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Optional

from errors import InvalidMACError
from utils import format_mac, is_valid_mac_address

DEFAULT_WOL_PORT = "9"

# Zero time written by older stores for "never online"
_ZERO_TIMES = {"", "0001-01-01T00:00:00Z", "0001-01-01T00:00:00"}


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parses a stored timestamp, returning None for missing or zero values."""
    if value is None or value in _ZERO_TIMES:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass
class Device:
    id: str
    name: str
    mac: str
    ip: str = ""
    port: str = DEFAULT_WOL_PORT
    is_online: bool = False
    last_online: Optional[datetime] = None

    @classmethod
    def create(cls, name: str, mac: str, ip: str = "", port: str = DEFAULT_WOL_PORT) -> "Device":
        """Builds a new, unregistered device with a normalized MAC.

        The id is left empty; DeviceRegistry.add assigns one.

        Raises:
            InvalidMACError: If mac is not six hex octets.
        """
        if not is_valid_mac_address(mac):
            raise InvalidMACError(f"Invalid MAC address: {mac}")
        return cls(id="", name=name, mac=format_mac(mac), ip=ip.strip(), port=str(port))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["last_online"] = self.last_online.isoformat() if self.last_online else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Device":
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            mac=data.get("mac") or "",
            ip=data.get("ip") or "",
            port=str(data.get("port") or ""),
            is_online=bool(data.get("is_online", False)),
            last_online=parse_timestamp(data.get("last_online")),
        )


@dataclass
class ScannedDevice:
    """One neighbor-table entry found by a scan. Never persisted."""
    ip: str
    mac: str
    vendor: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
