"""Device snapshot built from status responses."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

# Placeholder the firmware reports when it has no address yet
_NO_ADDRESS = {"", "N/A"}


class WifiMode(str, Enum):
    """Wi-Fi mode reported by the device."""

    AP = "AP"
    STA = "STA"

    @classmethod
    def parse(cls, value: Any) -> "WifiMode":
        """Parse a reported mode, treating anything unknown as AP."""
        try:
            return cls(value)
        except ValueError:
            return cls.AP


def _as_bool(value: Any) -> bool:
    return value if isinstance(value, bool) else False


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if isinstance(value, (int, float)):
        return max(0, int(value))
    return 0


@dataclass(frozen=True)
class DeviceSnapshot:
    """State reported by the device in one status response.

    Snapshots are never merged: each successful status response replaces
    the previous snapshot wholesale.

    Attributes:
        wifi_mode: Current Wi-Fi mode of the device
        bluetooth_connected: Whether the phone is paired as a headset
        ip_address: Device-reported address, mainly present in STA mode
        auto_redial_enabled: Whether automatic redial is running
        redial_period_seconds: Automatic redial period
        redial_random_delay_seconds: Extra random delay added to each redial
        last_random_delay_seconds: Delay used for the most recent redial
        message: Device-provided message, if any
    """

    wifi_mode: WifiMode = WifiMode.AP
    bluetooth_connected: bool = False
    ip_address: Optional[str] = None
    auto_redial_enabled: bool = False
    redial_period_seconds: int = 0
    redial_random_delay_seconds: int = 0
    last_random_delay_seconds: int = 0
    message: Optional[str] = None

    @classmethod
    def from_status(cls, data: dict[str, Any]) -> "DeviceSnapshot":
        """Create a snapshot from a status response body.

        Missing numbers default to 0, missing booleans to False and a
        missing or unknown Wi-Fi mode to AP.

        Args:
            data: Decoded JSON body of a status response

        Returns:
            DeviceSnapshot instance
        """
        ip_address = data.get("ip_address")
        if not isinstance(ip_address, str) or ip_address.strip() in _NO_ADDRESS:
            ip_address = None
        else:
            ip_address = ip_address.strip()

        message = data.get("message")

        return cls(
            wifi_mode=WifiMode.parse(data.get("wifi_mode")),
            bluetooth_connected=_as_bool(data.get("bluetooth_connected")),
            ip_address=ip_address,
            auto_redial_enabled=_as_bool(data.get("auto_redial_enabled")),
            redial_period_seconds=_as_int(data.get("redial_period")),
            redial_random_delay_seconds=_as_int(data.get("redial_random_delay")),
            last_random_delay_seconds=_as_int(data.get("last_random_delay")),
            message=message if isinstance(message, str) else None,
        )

    @property
    def is_station(self) -> bool:
        """Check if the device is joined to a home network."""
        return self.wifi_mode is WifiMode.STA

    @property
    def control_enabled(self) -> bool:
        """Check if redial and dial can be issued."""
        return self.bluetooth_connected and self.is_station

    @property
    def followable_address(self) -> Optional[str]:
        """Address the session should follow, if the device reports one."""
        return self.ip_address if self.is_station else None
