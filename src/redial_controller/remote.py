"""Main RedialRemote orchestrator."""

import logging
from typing import Optional

from redial_controller.config import Config
from redial_controller.core.controller import SessionController
from redial_controller.core.poller import Poller
from redial_controller.core.session_state import SessionState, initial_target_address
from redial_controller.interfaces.device_transport import DeviceTransport
from redial_controller.transport.http_transport import HttpTransport

logger = logging.getLogger(__name__)


class RedialRemote:
    """Remote control session for one redial device.

    The RedialRemote coordinates:
    - Transport layer for the device's HTTP API
    - Session controller owning the session state
    - Status poller keeping the device snapshot fresh
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        transport: Optional[DeviceTransport] = None,
    ) -> None:
        """Initialize the remote.

        Args:
            config: Remote configuration (default if not provided)
            transport: Custom transport (creates HttpTransport if not provided)
        """
        self._config = config or Config.default()
        self._running = False

        if transport is not None:
            self._transport = transport
        else:
            self._transport = HttpTransport(timeout=self._config.transport.timeout)

        device = self._config.device
        target = device.host or initial_target_address(
            device.page_host, fallback=device.fallback_host
        )
        self._controller = SessionController(
            self._transport,
            SessionState(target_address=target),
            debounce_seconds=self._config.controls.debounce_seconds,
        )
        self._poller = Poller(
            self._controller.refresh_status,
            interval_seconds=self._config.poller.interval_seconds,
        )
        self._controller.attach_poller(self._poller)

    async def start(self) -> None:
        """Start polling the device."""
        logger.info(f"Starting session with {self._controller.target_address}")
        self._running = True
        self._poller.start(self._controller.target_address)

    async def stop(self) -> None:
        """Stop polling and flush any debounced edit."""
        if not self._running:
            return
        logger.info("Stopping session...")
        self._running = False
        await self._controller.flush_pending()
        await self._poller.stop()
        logger.info("Session stopped")

    @property
    def transport(self) -> DeviceTransport:
        """Get the device transport."""
        return self._transport

    @property
    def controller(self) -> SessionController:
        """Get the session controller."""
        return self._controller

    @property
    def poller(self) -> Poller:
        """Get the status poller."""
        return self._poller

    @property
    def is_running(self) -> bool:
        """Check if the session is polling."""
        return self._running
