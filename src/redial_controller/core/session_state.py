"""Session state aggregate and the view derived from it."""

import ipaddress
from dataclasses import dataclass, field
from typing import Optional

from redial_controller.core.commands import (
    DEFAULT_REDIAL_PERIOD,
    clamp_random_delay,
    clamp_redial_period,
)
from redial_controller.core.device_state import DeviceSnapshot, WifiMode

FACTORY_AP_ADDRESS = "192.168.4.1"
INITIAL_STATUS_MESSAGE = (
    'Connect to "REMOTEHEAD" Wi-Fi, then configure home network.'
)


def _strip_port(host: str) -> str:
    if host.startswith("["):
        return host[1:].split("]", 1)[0]
    if host.count(":") == 1:
        return host.split(":", 1)[0]
    return host


def is_loopback_host(host: str) -> bool:
    """Check if a host, with or without a port, refers to the local machine."""
    host = _strip_port(host.strip())
    if host.lower() == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def initial_target_address(
    page_host: Optional[str] = None,
    fallback: str = FACTORY_AP_ADDRESS,
) -> str:
    """Pick the first address to talk to.

    The host the controller was reached through is the device itself
    unless it is a loopback or development address, in which case the
    factory access-point address is used.

    Args:
        page_host: Host the control page was served from, if known
        fallback: Address used when page_host is missing or loopback

    Returns:
        Non-empty target address
    """
    if page_host and page_host.strip() and not is_loopback_host(page_host):
        return page_host.strip()
    return fallback


@dataclass
class PendingEdits:
    """Locally entered values the device has not confirmed yet.

    Wi-Fi credentials and the dial number are never echoed by the device
    and survive every snapshot. The auto-redial fields hold optimistic or
    not-yet-sent values and are reconciled when a snapshot arrives.
    """

    wifi_ssid: str = ""
    wifi_password: str = ""
    dial_number: str = ""
    auto_redial_enabled: Optional[bool] = None
    redial_period_seconds: Optional[int] = None
    redial_random_delay_seconds: Optional[int] = None
    redial_settings_sent: bool = False


@dataclass(frozen=True)
class SessionView:
    """Read-only view of the session for display."""

    target_address: str
    connected: bool
    status_message: str
    wifi_mode: WifiMode
    bluetooth_connected: bool
    auto_redial_enabled: bool
    redial_period_seconds: int
    redial_random_delay_seconds: int
    last_random_delay_seconds: int
    control_enabled: bool
    dial_enabled: bool
    wifi_configurable: bool
    auto_redial_editable: bool


@dataclass
class SessionState:
    """Everything the controller knows about the current session.

    Each event has exactly one update method so that connection status,
    the latest snapshot and the flags derived from them change together.
    """

    target_address: str = FACTORY_AP_ADDRESS
    connected: bool = False
    latest: Optional[DeviceSnapshot] = None
    pending: PendingEdits = field(default_factory=PendingEdits)
    status_message: str = INITIAL_STATUS_MESSAGE

    def __post_init__(self) -> None:
        """Validate session state."""
        if not self.target_address or not self.target_address.strip():
            raise ValueError("target_address cannot be empty")

    # Derived values

    @property
    def wifi_mode(self) -> WifiMode:
        return self.latest.wifi_mode if self.latest else WifiMode.AP

    @property
    def bluetooth_connected(self) -> bool:
        return self.latest.bluetooth_connected if self.latest else False

    @property
    def auto_redial_enabled(self) -> bool:
        if self.pending.auto_redial_enabled is not None:
            return self.pending.auto_redial_enabled
        return self.latest.auto_redial_enabled if self.latest else False

    @property
    def redial_period_seconds(self) -> int:
        if self.pending.redial_period_seconds is not None:
            return self.pending.redial_period_seconds
        if self.latest:
            return clamp_redial_period(self.latest.redial_period_seconds)
        return DEFAULT_REDIAL_PERIOD

    @property
    def redial_random_delay_seconds(self) -> int:
        if self.pending.redial_random_delay_seconds is not None:
            return self.pending.redial_random_delay_seconds
        if self.latest:
            return clamp_random_delay(self.latest.redial_random_delay_seconds)
        return 0

    @property
    def control_enabled(self) -> bool:
        """Redial and dial need a paired phone and a home network."""
        return self.latest.control_enabled if self.latest else False

    @property
    def dial_enabled(self) -> bool:
        return self.control_enabled and bool(self.pending.dial_number.strip())

    @property
    def wifi_configurable(self) -> bool:
        return self.connected and bool(self.pending.wifi_ssid.strip())

    @property
    def auto_redial_editable(self) -> bool:
        return self.connected and self.wifi_mode is WifiMode.STA

    def view(self) -> SessionView:
        """Build a snapshot of the session for display."""
        return SessionView(
            target_address=self.target_address,
            connected=self.connected,
            status_message=self.status_message,
            wifi_mode=self.wifi_mode,
            bluetooth_connected=self.bluetooth_connected,
            auto_redial_enabled=self.auto_redial_enabled,
            redial_period_seconds=self.redial_period_seconds,
            redial_random_delay_seconds=self.redial_random_delay_seconds,
            last_random_delay_seconds=(
                self.latest.last_random_delay_seconds if self.latest else 0
            ),
            control_enabled=self.control_enabled,
            dial_enabled=self.dial_enabled,
            wifi_configurable=self.wifi_configurable,
            auto_redial_editable=self.auto_redial_editable,
        )

    # Events

    def apply_snapshot(self, snapshot: DeviceSnapshot) -> bool:
        """Record a successful status response.

        The device is authoritative for its own state: the optimistic
        auto-redial flag is dropped, and numeric edits are dropped once
        they have been sent. Follows the device to its self-reported
        address in STA mode.

        Args:
            snapshot: Freshly parsed device snapshot

        Returns:
            True if the target address changed
        """
        self.latest = snapshot
        self.connected = True
        self.pending.auto_redial_enabled = None
        if self.pending.redial_settings_sent:
            self.pending.redial_period_seconds = None
            self.pending.redial_random_delay_seconds = None
            self.pending.redial_settings_sent = False

        address = snapshot.followable_address
        if address and address != self.target_address:
            self.target_address = address
            return True
        return False

    def begin_wifi_configuration(self) -> None:
        """Record that the device is about to leave its current network."""
        self.connected = False

    def apply_wifi_configured(self, message: str) -> None:
        """Record that new Wi-Fi credentials were handed to the device."""
        self.connected = False
        self.status_message = message

    def apply_failure(self, message: str) -> None:
        """Record a failed request."""
        self.connected = False
        self.status_message = message

    def apply_redial_settings_sent(self, period: int, random_delay: int) -> None:
        """Record that pending period/delay edits reached the device.

        Edits made while the request was in flight differ from what was
        sent and stay pending.

        Args:
            period: Redial period carried by the completed request
            random_delay: Random delay carried by the completed request
        """
        pending = self.pending
        if (
            pending.redial_period_seconds is None
            and pending.redial_random_delay_seconds is None
        ):
            return
        if pending.redial_period_seconds not in (None, period):
            return
        if pending.redial_random_delay_seconds not in (None, random_delay):
            return
        pending.redial_settings_sent = True

    def set_target_address(self, address: str) -> bool:
        """Point the session at a new address.

        Returns:
            True if the address changed
        """
        address = address.strip()
        if not address:
            raise ValueError("target_address cannot be empty")
        if address == self.target_address:
            return False
        self.target_address = address
        return True
