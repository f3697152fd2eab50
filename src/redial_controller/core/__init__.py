"""Core module - Command encoding, device state, polling and session control."""

from redial_controller.core.commands import Command, InvalidInput
from redial_controller.core.controller import SessionController
from redial_controller.core.debounce import Debouncer
from redial_controller.core.device_state import DeviceSnapshot, WifiMode
from redial_controller.core.poller import Poller, PollerState
from redial_controller.core.session_state import (
    PendingEdits,
    SessionState,
    SessionView,
    initial_target_address,
)

__all__ = [
    "Command",
    "Debouncer",
    "DeviceSnapshot",
    "InvalidInput",
    "PendingEdits",
    "Poller",
    "PollerState",
    "SessionController",
    "SessionState",
    "SessionView",
    "WifiMode",
    "initial_target_address",
]
