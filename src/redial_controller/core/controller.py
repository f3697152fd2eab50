"""Session controller - routes user intents to the device and applies results."""

import json
import logging
from collections.abc import Callable
from typing import Any, Optional

from redial_controller.core import commands
from redial_controller.core.commands import Command, InvalidInput
from redial_controller.core.debounce import Debouncer
from redial_controller.core.device_state import DeviceSnapshot
from redial_controller.core.poller import Poller
from redial_controller.core.session_state import SessionState, SessionView
from redial_controller.interfaces.device_transport import (
    ApplicationError,
    DeviceTransport,
    JsonResponse,
    TransportError,
)

logger = logging.getLogger(__name__)

SENDING_MESSAGE = "Sending command..."
WIFI_CONFIGURED_MESSAGE = (
    "Wi-Fi configured. Device is switching to home network. "
    "The address will be updated automatically when the device reconnects."
)

ChangeHandler = Callable[[SessionView], None]


def _failure_message(command: Command, error: TransportError) -> str:
    if isinstance(error, ApplicationError):
        return f'Error sending "{command.name}" command: {error.message}'
    return (
        f'Network error for "{command.name}": {error.message}. '
        "Ensure the device address is correct and the device is reachable."
    )


class SessionController:
    """Owns the session state and serializes user commands into requests.

    Every request is tagged with the address it was sent to. When it
    completes after the session has moved to another address, its result
    is not allowed to change the device snapshot or connection status.

    Example:
        controller = SessionController(HttpTransport(), SessionState("10.0.0.5"))
        await controller.refresh_status()
        await controller.redial()
        print(controller.view().status_message)
    """

    def __init__(
        self,
        transport: DeviceTransport,
        state: Optional[SessionState] = None,
        debounce_seconds: float = 0.0,
    ) -> None:
        """Initialize the session controller.

        Args:
            transport: Transport used for all device requests
            state: Initial session state (factory AP address if not provided)
            debounce_seconds: Quiet window before numeric edits are sent
        """
        self._transport = transport
        self._state = state or SessionState()
        self._debouncer = Debouncer(debounce_seconds)
        self._poller: Optional[Poller] = None
        self._change_handler: Optional[ChangeHandler] = None

    @property
    def state(self) -> SessionState:
        """Get the session state (read it, do not mutate it)."""
        return self._state

    @property
    def target_address(self) -> str:
        """Get the address all requests are routed to."""
        return self._state.target_address

    @property
    def connected(self) -> bool:
        """Check if the last request reached the device successfully."""
        return self._state.connected

    @property
    def status_message(self) -> str:
        return self._state.status_message

    def view(self) -> SessionView:
        """Get a read-only view of the session."""
        return self._state.view()

    def attach_poller(self, poller: Poller) -> None:
        """Let target changes restart the given poller."""
        self._poller = poller

    def set_change_handler(self, handler: Optional[ChangeHandler]) -> None:
        """Set the callback invoked with a fresh view after every change."""
        self._change_handler = handler

    # Local edits

    def set_target_address(self, address: str) -> None:
        """Point the session at a user-entered address.

        Raises:
            InvalidInput: If the address is empty
        """
        try:
            changed = self._state.set_target_address(address)
        except ValueError as e:
            raise InvalidInput("Please enter the device address.") from e
        if changed:
            self._on_target_changed()
            self._notify()

    def update_wifi_credentials(self, ssid: str, password: str = "") -> None:
        """Store home Wi-Fi credentials entered by the user."""
        self._state.pending.wifi_ssid = ssid
        self._state.pending.wifi_password = password
        self._notify()

    def update_dial_number(self, number: str) -> None:
        """Store the number entered by the user."""
        self._state.pending.dial_number = number
        self._notify()

    # Device commands

    async def refresh_status(self) -> None:
        """Query device status and apply the snapshot."""
        await self._run(commands.status)

    async def redial(self) -> None:
        """Redial the last number on the paired phone."""
        await self._run(commands.redial)

    async def dial(self, number: Optional[str] = None) -> None:
        """Dial a number, storing it as the current dial number if given."""
        if number is not None:
            self._state.pending.dial_number = number
        await self._run(commands.dial, self._state.pending.dial_number)

    async def configure_wifi(
        self, ssid: Optional[str] = None, password: Optional[str] = None
    ) -> None:
        """Send home Wi-Fi credentials, storing them if given."""
        pending = self._state.pending
        if ssid is not None:
            pending.wifi_ssid = ssid
        if password is not None:
            pending.wifi_password = password
        await self._run(commands.configure_wifi, pending.wifi_ssid, pending.wifi_password)

    async def toggle_auto_redial(self) -> None:
        """Flip automatic redial and send the new settings."""
        await self.set_auto_redial(not self._state.auto_redial_enabled)

    async def set_auto_redial(self, enabled: bool) -> None:
        """Enable or disable automatic redial.

        The new value is shown immediately; the next status response is
        authoritative if the device disagrees.
        """
        self._debouncer.cancel()
        self._state.pending.auto_redial_enabled = enabled
        await self._send_redial_settings()

    async def set_redial_period(self, value: Any) -> None:
        """Set the redial period, clamped to [10, 84600] seconds.

        The value is only sent while automatic redial is enabled; otherwise
        it is kept until automatic redial is switched on.
        """
        period = commands.clamp_redial_period(value)
        self._state.pending.redial_period_seconds = period
        self._state.pending.redial_settings_sent = False
        await self._after_redial_edit(f"Redial period set to {period} seconds.")

    async def set_random_delay(self, value: Any) -> None:
        """Set the extra random redial delay, clamped to zero or more seconds."""
        delay = commands.clamp_random_delay(value)
        self._state.pending.redial_random_delay_seconds = delay
        self._state.pending.redial_settings_sent = False
        await self._after_redial_edit(f"Random redial delay set to {delay} seconds.")

    async def flush_pending(self) -> None:
        """Send a debounced edit now instead of waiting for the quiet window."""
        await self._debouncer.flush()

    async def _after_redial_edit(self, description: str) -> None:
        if not self._state.auto_redial_enabled:
            self._state.status_message = (
                f"{description} It will be sent when automatic redial is enabled."
            )
            self._notify()
            return
        self._notify()
        await self._debouncer.schedule(self._send_redial_settings)

    async def _send_redial_settings(self) -> None:
        state = self._state
        await self._run(
            commands.set_auto_redial,
            state.auto_redial_enabled,
            state.redial_period_seconds,
            state.redial_random_delay_seconds,
        )

    # Request cycle

    async def _run(self, encode: Callable[..., Command], *args: Any) -> None:
        self._state.status_message = SENDING_MESSAGE
        self._notify()

        try:
            command = encode(*args)
        except InvalidInput as e:
            logger.info(f"Rejected input: {e}")
            self._state.status_message = str(e)
            self._notify()
            return

        if command.name == "configure_wifi":
            self._state.begin_wifi_configuration()

        target = self._state.target_address
        result = await self._transport.send(
            target, command.path, command.method, command.body
        )

        if target != self._state.target_address:
            self._apply_stale(command, target, result)
        elif isinstance(result, JsonResponse):
            self._apply_success(command, result)
        else:
            self._apply_failure(command, result)
        self._notify()

    def _apply_success(self, command: Command, response: JsonResponse) -> None:
        detail = response.message or json.dumps(response.data)
        self._state.status_message = f'Command "{command.name}" successful: {detail}'

        if command.is_status:
            snapshot = DeviceSnapshot.from_status(response.data)
            if self._state.apply_snapshot(snapshot):
                logger.info(f"Following device to {self._state.target_address}")
                self._on_target_changed()
        elif command.name == "configure_wifi":
            self._state.apply_wifi_configured(WIFI_CONFIGURED_MESSAGE)
        elif command.name == "set_auto_redial":
            self._state.apply_redial_settings_sent(
                command.body["period"], command.body["random_delay"]
            )

    def _apply_failure(self, command: Command, error: TransportError) -> None:
        message = _failure_message(command, error)
        logger.warning(message)
        self._state.apply_failure(message)

    def _apply_stale(self, command: Command, target: str, result: Any) -> None:
        logger.debug(
            f'Discarding stale "{command.name}" result from {target} '
            f"(now {self._state.target_address})"
        )
        if command.is_status:
            return
        # The command still ran on the old address; report it without
        # touching the snapshot or connection status.
        if isinstance(result, JsonResponse):
            detail = result.message or json.dumps(result.data)
            self._state.status_message = f'Command "{command.name}" successful: {detail}'
        else:
            self._state.status_message = _failure_message(command, result)

    def _on_target_changed(self) -> None:
        if self._poller is not None:
            self._poller.retarget(self._state.target_address)

    def _notify(self) -> None:
        if self._change_handler is not None:
            self._change_handler(self._state.view())
