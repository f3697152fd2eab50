"""Tests for the status poller."""

import asyncio

import pytest

from redial_controller.core.poller import Poller, PollerState


class RefreshRecorder:
    """Counts refreshes and records the address they were made for."""

    def __init__(self, poller_ref: list[Poller], delay: float = 0.0) -> None:
        self._poller_ref = poller_ref
        self._delay = delay
        self.targets: list[str | None] = []

    async def __call__(self) -> None:
        self.targets.append(self._poller_ref[0].target_address)
        if self._delay:
            await asyncio.sleep(self._delay)


def make_poller(interval: float = 0.05, delay: float = 0.0) -> tuple[Poller, RefreshRecorder]:
    ref: list[Poller] = []
    recorder = RefreshRecorder(ref, delay=delay)
    poller = Poller(recorder, interval_seconds=interval)
    ref.append(poller)
    return poller, recorder


class TestPoller:
    """Tests for Poller lifecycle and ticking."""

    def test_initially_idle(self) -> None:
        poller, _ = make_poller()

        assert poller.state is PollerState.IDLE
        assert not poller.is_active
        assert poller.tick_count == 0

    def test_invalid_interval(self) -> None:
        with pytest.raises(ValueError):
            Poller(lambda: asyncio.sleep(0), interval_seconds=0)

    @pytest.mark.asyncio
    async def test_fires_immediately_on_start(self) -> None:
        """Test the first tick fires without waiting an interval."""
        poller, recorder = make_poller(interval=10)

        poller.start("10.0.0.5")
        await asyncio.sleep(0.01)

        assert poller.state is PollerState.ACTIVE
        assert recorder.targets == ["10.0.0.5"]
        await poller.stop()

    @pytest.mark.asyncio
    async def test_fires_every_interval(self) -> None:
        poller, recorder = make_poller(interval=0.05)

        poller.start("10.0.0.5")
        await asyncio.sleep(0.175)
        await poller.stop()

        assert 3 <= len(recorder.targets) <= 5

    @pytest.mark.asyncio
    async def test_retarget_restarts_timer(self) -> None:
        """Test the next request after a target change goes to the new address."""
        poller, recorder = make_poller(interval=10)
        poller.start("192.168.4.1")
        await asyncio.sleep(0.01)

        poller.retarget("192.168.1.55")
        await asyncio.sleep(0.01)

        assert recorder.targets == ["192.168.4.1", "192.168.1.55"]
        assert poller.target_address == "192.168.1.55"
        await poller.stop()

    @pytest.mark.asyncio
    async def test_retarget_same_address_is_noop(self) -> None:
        poller, recorder = make_poller(interval=10)
        poller.start("10.0.0.5")
        await asyncio.sleep(0.01)

        poller.retarget("10.0.0.5")
        await asyncio.sleep(0.01)

        assert len(recorder.targets) == 1
        await poller.stop()

    @pytest.mark.asyncio
    async def test_retarget_does_not_cancel_in_flight(self) -> None:
        """Test refreshes sent to the old address keep running."""
        poller, recorder = make_poller(interval=10, delay=0.05)
        poller.start("192.168.4.1")
        await asyncio.sleep(0.01)

        poller.retarget("192.168.1.55")
        await asyncio.sleep(0.01)

        assert poller.in_flight == 2
        await asyncio.sleep(0.1)
        assert poller.in_flight == 0
        await poller.stop()

    @pytest.mark.asyncio
    async def test_retarget_while_idle_does_not_start(self) -> None:
        poller, recorder = make_poller()

        poller.retarget("10.0.0.5")
        await asyncio.sleep(0.01)

        assert not poller.is_active
        assert recorder.targets == []

    @pytest.mark.asyncio
    async def test_ticks_overlap(self) -> None:
        """Test a slow refresh does not hold back the next tick."""
        poller, recorder = make_poller(interval=0.02, delay=0.1)

        poller.start("10.0.0.5")
        await asyncio.sleep(0.05)

        assert poller.in_flight >= 2
        await poller.stop()

    @pytest.mark.asyncio
    async def test_stop_returns_to_idle(self) -> None:
        poller, recorder = make_poller(interval=0.02)
        poller.start("10.0.0.5")
        await asyncio.sleep(0.01)

        await poller.stop()
        count = len(recorder.targets)
        await asyncio.sleep(0.05)

        assert poller.state is PollerState.IDLE
        assert poller.in_flight == 0
        assert len(recorder.targets) == count

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_polling(self) -> None:
        """Test an exception in one tick does not stop the timer."""
        calls = 0

        async def failing_refresh() -> None:
            nonlocal calls
            calls += 1
            raise RuntimeError("boom")

        poller = Poller(failing_refresh, interval_seconds=0.02)
        poller.start("10.0.0.5")
        await asyncio.sleep(0.07)
        await poller.stop()

        assert calls >= 2
