import asyncio
import subprocess

import pytest

from vibevolume.adapters.macos.volume import MacOSVolumeSink, percent_to_step, step_to_percent
from vibevolume.adapters.simulated import (
    InMemoryVolumeSink,
    SimulatedMotionSource,
    SimulatedProximityScanner,
)
from vibevolume.errors import PermissionDeniedError, SensorUnavailableError, SinkWriteError


def test_in_memory_sink_clamps_to_platform_range() -> None:
    sink = InMemoryVolumeSink(max_step=10)

    sink.set_level(25)
    assert sink.get_level() == 10
    sink.set_level(-3)
    assert sink.get_level() == 0
    assert sink.get_range() == (0, 10)


def test_in_memory_sink_can_reject_writes() -> None:
    sink = InMemoryVolumeSink(level=5, reject_writes=True)

    with pytest.raises(SinkWriteError):
        sink.set_level(9)
    assert sink.get_level() == 5


def test_simulated_sources_report_unavailability() -> None:
    async def scenario() -> None:
        with pytest.raises(SensorUnavailableError):
            await SimulatedMotionSource(available=False).start(lambda x, y, z: None)
        with pytest.raises(PermissionDeniedError):
            await SimulatedProximityScanner(permitted=False).start(lambda address: None)

    asyncio.run(scenario())


def test_simulated_sources_deliver_samples_until_stopped() -> None:
    async def scenario() -> None:
        samples: list[tuple[float, float, float]] = []
        devices: list[str] = []
        motion = SimulatedMotionSource(sample_interval=0.005)
        scanner = SimulatedProximityScanner(device_pool=6, report_interval=0.005)

        await motion.start(lambda x, y, z: samples.append((x, y, z)))
        await scanner.start(devices.append)
        await asyncio.sleep(0.05)
        motion.stop()
        scanner.stop()
        delivered = (len(samples), len(devices))
        await asyncio.sleep(0.02)

        assert delivered[0] > 0
        assert delivered[1] > 0
        assert (len(samples), len(devices)) == delivered
        assert set(devices) <= {f"AA:BB:CC:00:00:{index:02X}" for index in range(6)}

    asyncio.run(scenario())


def test_macos_step_percent_conversion() -> None:
    assert step_to_percent(16) == 100
    assert step_to_percent(0) == 0
    assert step_to_percent(8) == 50
    assert percent_to_step(50) == 8
    assert percent_to_step(100) == 16
    assert percent_to_step(130) == 16


def test_macos_sink_wraps_osascript_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    def _missing(*_args, **_kwargs):
        raise FileNotFoundError("osascript")

    monkeypatch.setattr(subprocess, "run", _missing)
    sink = MacOSVolumeSink()

    with pytest.raises(SinkWriteError):
        sink.set_level(4)
    with pytest.raises(SinkWriteError):
        sink.get_level()


def test_macos_sink_reads_back_volume(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def _fake_run(args, **_kwargs):
        calls.append(args)
        return subprocess.CompletedProcess(args, 0, stdout="75\n", stderr="")

    monkeypatch.setattr(subprocess, "run", _fake_run)
    sink = MacOSVolumeSink()

    sink.set_level(8)
    assert sink.get_level() == 12
    assert calls[0] == ["osascript", "-e", "set volume output volume 50"]
