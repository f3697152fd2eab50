"""Command encoding - builds request payloads for each device command."""

from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

MIN_REDIAL_PERIOD = 10
MAX_REDIAL_PERIOD = 84600
DEFAULT_REDIAL_PERIOD = 60
MIN_RANDOM_DELAY = 0

# Characters encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


class InvalidInput(ValueError):
    """A user-supplied value failed local validation."""


@dataclass(frozen=True)
class Command:
    """An encoded device command.

    Attributes:
        name: Command name used in status messages (e.g., "dial")
        path: Request path relative to the device root
        method: HTTP method
        body: JSON body for POST commands
    """

    name: str
    path: str
    method: str = "GET"
    body: Optional[dict[str, Any]] = None

    @property
    def is_status(self) -> bool:
        """Check if this is a status query."""
        return self.name == "status"


def _parse_int(value: Any) -> Optional[int]:
    """Parse a user-entered number, returning None if it is not one."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            return int(value)
        return int(str(value).strip())
    except (TypeError, ValueError, OverflowError):
        return None


def clamp_redial_period(value: Any) -> int:
    """Clamp a redial period to [10, 84600] seconds.

    Empty or non-numeric input falls back to the minimum.
    """
    period = _parse_int(value)
    if period is None:
        return MIN_REDIAL_PERIOD
    return max(MIN_REDIAL_PERIOD, min(period, MAX_REDIAL_PERIOD))


def clamp_random_delay(value: Any) -> int:
    """Clamp a random delay to zero or more seconds.

    Empty or non-numeric input falls back to zero.
    """
    delay = _parse_int(value)
    if delay is None:
        return MIN_RANDOM_DELAY
    return max(MIN_RANDOM_DELAY, delay)


def status() -> Command:
    """Query device status."""
    return Command(name="status", path="status")


def redial() -> Command:
    """Redial the last number on the paired phone."""
    return Command(name="redial", path="redial")


def dial(number: str) -> Command:
    """Dial a number on the paired phone.

    Raises:
        InvalidInput: If the number is empty
    """
    number = (number or "").strip()
    if not number:
        raise InvalidInput("Please enter a number to dial.")
    return Command(
        name="dial", path=f"dial?number={quote(number, safe=_URI_COMPONENT_SAFE)}"
    )


def configure_wifi(ssid: str, password: str) -> Command:
    """Send home Wi-Fi credentials to the device.

    Raises:
        InvalidInput: If the SSID is empty
    """
    ssid = (ssid or "").strip()
    if not ssid:
        raise InvalidInput("Please enter your home Wi-Fi SSID.")
    return Command(
        name="configure_wifi",
        path="configure_wifi",
        method="POST",
        body={"ssid": ssid, "password": (password or "").strip()},
    )


def set_auto_redial(enabled: bool, period: Any, random_delay: Any) -> Command:
    """Update the automatic redial settings."""
    return Command(
        name="set_auto_redial",
        path="set_auto_redial",
        method="POST",
        body={
            "enabled": bool(enabled),
            "period": clamp_redial_period(period),
            "random_delay": clamp_random_delay(random_delay),
        },
    )
