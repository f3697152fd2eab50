"""Shared test fixtures for pytest."""

import pytest

from redial_controller.config import Config
from redial_controller.core.controller import SessionController
from redial_controller.core.session_state import SessionState
from tests.mocks import MockTransport

STA_STATUS = {
    "bluetooth_connected": True,
    "wifi_mode": "STA",
    "ip_address": "192.168.1.55",
    "auto_redial_enabled": False,
    "redial_period": 60,
    "redial_random_delay": 0,
    "last_random_delay": 0,
    "message": "ESP32 Bluetooth connected to phone.",
}

AP_STATUS = {
    "bluetooth_connected": False,
    "wifi_mode": "AP",
    "ip_address": "192.168.4.1",
    "auto_redial_enabled": False,
    "redial_period": 60,
    "message": "ESP32 Bluetooth disconnected.",
}


@pytest.fixture
def mock_transport() -> MockTransport:
    """Create a MockTransport."""
    return MockTransport()


@pytest.fixture
def session_state() -> SessionState:
    """Create a SessionState pointed at the factory address."""
    return SessionState(target_address="192.168.4.1")


@pytest.fixture
def controller(mock_transport: MockTransport, session_state: SessionState) -> SessionController:
    """Create a SessionController with mock transport and no debounce."""
    return SessionController(mock_transport, session_state)


@pytest.fixture
def default_config() -> Config:
    """Create default configuration."""
    return Config.default()
