"""Tests for CLI argument parsing, config loading and commands."""

import asyncio
import tempfile
from pathlib import Path

import pytest

from redial_controller.cli import format_view, load_config, parse_args, run_command
from redial_controller.config import Config
from redial_controller.core.controller import SessionController
from redial_controller.core.session_state import SessionState
from tests.conftest import AP_STATUS, STA_STATUS
from tests.mocks import MockTransport


class TestParseArgs:
    """Tests for argument parsing."""

    def test_default_args(self) -> None:
        """Test parsing with no arguments."""
        args = parse_args([])

        assert args.command == "monitor"
        assert args.values == []
        assert args.config is None
        assert args.verbose is False
        assert args.host is None
        assert args.page_host is None
        assert args.interval is None

    def test_config_path(self) -> None:
        args = parse_args(["-c", "/path/to/config.yaml"])
        assert args.config == "/path/to/config.yaml"

        args = parse_args(["--config", "/other/path.yaml"])
        assert args.config == "/other/path.yaml"

    def test_verbose_flag(self) -> None:
        assert parse_args(["-v"]).verbose is True
        assert parse_args(["--verbose"]).verbose is True

    def test_dial_number(self) -> None:
        """Test dial collects the number words."""
        args = parse_args(["dial", "555", "1234"])
        assert args.command == "dial"
        assert args.values == ["555", "1234"]

    def test_dial_requires_number(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["dial"])

    def test_configure_wifi_values(self) -> None:
        args = parse_args(["configure-wifi", "HomeNet", "secret"])
        assert args.values == ["HomeNet", "secret"]

        with pytest.raises(SystemExit):
            parse_args(["configure-wifi"])

    def test_auto_redial_values(self) -> None:
        args = parse_args(["auto-redial", "on", "--period", "120", "--random-delay", "10"])
        assert args.values == ["on"]
        assert args.period == "120"
        assert args.random_delay == "10"

        with pytest.raises(SystemExit):
            parse_args(["auto-redial", "maybe"])

    def test_invalid_command(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["reboot"])

    def test_redial_takes_no_values(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["redial", "now"])


class TestLoadConfig:
    """Tests for configuration loading."""

    def test_load_default_config_when_no_file(self) -> None:
        """Test loading default config when no file specified."""
        config = load_config(parse_args([]))

        assert isinstance(config, Config)

    def test_load_config_from_file(self) -> None:
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("""
device:
  host: 192.168.1.50
poller:
  interval_seconds: 10
""")
            config_path = f.name

        try:
            config = load_config(parse_args(["-c", config_path]))

            assert config.device.host == "192.168.1.50"
            assert config.poller.interval_seconds == 10
        finally:
            Path(config_path).unlink()

    def test_config_file_not_found_exits(self) -> None:
        """Test that missing config file exits with error."""
        args = parse_args(["-c", "/nonexistent/config.yaml"])

        with pytest.raises(SystemExit) as exc_info:
            load_config(args)
        assert exc_info.value.code == 1

    def test_cli_overrides(self) -> None:
        """Test CLI values override the config."""
        args = parse_args([
            "--host", "10.0.0.1",
            "--page-host", "10.0.0.2",
            "--interval", "2",
            "--timeout", "1.5",
        ])
        config = load_config(args)

        assert config.device.host == "10.0.0.1"
        assert config.device.page_host == "10.0.0.2"
        assert config.poller.interval_seconds == 2.0
        assert config.transport.timeout == 1.5


class TestRunCommand:
    """Tests for one-shot commands."""

    @pytest.fixture
    def controller(self, mock_transport: MockTransport) -> SessionController:
        mock_transport.set_status(**STA_STATUS)
        return SessionController(mock_transport, SessionState(target_address="192.168.4.1"))

    @pytest.mark.asyncio
    async def test_status_follows_device(
        self, controller: SessionController, mock_transport: MockTransport
    ) -> None:
        view = await run_command(controller, parse_args(["status"]))

        assert view.target_address == "192.168.1.55"
        assert [r.name for r in mock_transport.sent] == ["status"]

    @pytest.mark.asyncio
    async def test_redial_goes_to_followed_address(
        self, controller: SessionController, mock_transport: MockTransport
    ) -> None:
        """Test the command is sent after following the device."""
        await run_command(controller, parse_args(["redial"]))

        request = mock_transport.sent_to("redial")[0]
        assert request.target_address == "192.168.1.55"

    @pytest.mark.asyncio
    async def test_dial_joins_values(
        self, controller: SessionController, mock_transport: MockTransport
    ) -> None:
        await run_command(controller, parse_args(["dial", "555", "1234"]))

        assert mock_transport.sent_to("dial")[0].path == "dial?number=555%201234"

    @pytest.mark.asyncio
    async def test_configure_wifi(
        self, controller: SessionController, mock_transport: MockTransport
    ) -> None:
        view = await run_command(controller, parse_args(["configure-wifi", "HomeNet"]))

        assert mock_transport.sent_to("configure_wifi")[0].body == {
            "ssid": "HomeNet",
            "password": "",
        }
        assert not view.connected

    @pytest.mark.asyncio
    async def test_auto_redial_on_with_settings(
        self, controller: SessionController, mock_transport: MockTransport
    ) -> None:
        """Test period and delay options are sent with the enable request."""
        await run_command(
            controller,
            parse_args(["auto-redial", "on", "--period", "5", "--random-delay", "20"]),
        )

        requests = mock_transport.sent_to("set_auto_redial")
        assert len(requests) == 1
        assert requests[0].body == {"enabled": True, "period": 10, "random_delay": 20}


class TestFormatView:
    """Tests for plain-text rendering."""

    @pytest.mark.asyncio
    async def test_format_view(self, mock_transport: MockTransport) -> None:
        mock_transport.set_status(**AP_STATUS)
        controller = SessionController(mock_transport)
        await controller.refresh_status()

        text = format_view(controller.view())

        assert "192.168.4.1" in text
        assert "Wi-Fi mode:       AP" in text
        assert "disconnected" in text
        assert "every 60s" in text
