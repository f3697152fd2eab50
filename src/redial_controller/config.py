"""Configuration loading from YAML files."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from redial_controller.core.session_state import FACTORY_AP_ADDRESS


@dataclass
class DeviceConfig:
    """Device addressing settings.

    Attributes:
        host: Explicit device address; wins over everything else when set
        page_host: Host the controller was reached through, used when not loopback
        fallback_host: Address used when neither of the above applies
    """

    host: Optional[str] = None
    page_host: Optional[str] = None
    fallback_host: str = FACTORY_AP_ADDRESS


@dataclass
class TransportConfig:
    """HTTP transport settings."""

    timeout: float = 5.0


@dataclass
class PollerConfig:
    """Status polling settings."""

    interval_seconds: float = 5.0


@dataclass
class ControlsConfig:
    """Input handling settings."""

    debounce_seconds: float = 0.3


@dataclass
class Config:
    """Main configuration container."""

    device: DeviceConfig = field(default_factory=DeviceConfig)
    transport: TransportConfig = field(default_factory=TransportConfig)
    poller: PollerConfig = field(default_factory=PollerConfig)
    controls: ControlsConfig = field(default_factory=ControlsConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create Config from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance
        """
        device_data = data.get("device", {}) or {}
        device = DeviceConfig(
            host=device_data.get("host"),
            page_host=device_data.get("page_host"),
            fallback_host=device_data.get("fallback_host", FACTORY_AP_ADDRESS),
        )

        transport_data = data.get("transport", {}) or {}
        transport = TransportConfig(
            timeout=transport_data.get("timeout", 5.0),
        )

        poller_data = data.get("poller", {}) or {}
        poller = PollerConfig(
            interval_seconds=poller_data.get("interval_seconds", 5.0),
        )

        controls_data = data.get("controls", {}) or {}
        controls = ControlsConfig(
            debounce_seconds=controls_data.get("debounce_seconds", 0.3),
        )

        return cls(
            device=device,
            transport=transport,
            poller=poller,
            controls=controls,
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config instance
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def default(cls) -> "Config":
        """Create default configuration."""
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "device": {
                "host": self.device.host,
                "page_host": self.device.page_host,
                "fallback_host": self.device.fallback_host,
            },
            "transport": {
                "timeout": self.transport.timeout,
            },
            "poller": {
                "interval_seconds": self.poller.interval_seconds,
            },
            "controls": {
                "debounce_seconds": self.controls.debounce_seconds,
            },
        }

    def save_yaml(self, path: str | Path) -> None:
        """Save configuration to YAML file.

        Args:
            path: Path to save configuration
        """
        path = Path(path)
        with open(path, "w") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False)
