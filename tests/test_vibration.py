import math
import random
import threading

import pytest

from vibevolume.core.vibration import DEFAULT_WINDOW_SIZE, VibrationEstimator


def _expected_deltas(magnitudes: list[float]) -> list[float]:
    deltas = []
    last = 0.0
    for magnitude in magnitudes:
        deltas.append(abs(magnitude - last))
        last = magnitude
    return deltas


def test_empty_window_has_zero_energy() -> None:
    estimator = VibrationEstimator()

    assert estimator.current_energy() == 0.0
    assert estimator.window_size() == 0


def test_energy_is_mean_of_last_thirty_deltas() -> None:
    rng = random.Random(7)
    magnitudes = [9.81 + rng.uniform(-0.5, 0.5) for _ in range(75)]
    estimator = VibrationEstimator()

    for index, magnitude in enumerate(magnitudes, start=1):
        estimator.ingest(magnitude)
        expected = _expected_deltas(magnitudes[:index])[-DEFAULT_WINDOW_SIZE:]
        assert estimator.window_size() == min(index, DEFAULT_WINDOW_SIZE)
        assert estimator.current_energy() == pytest.approx(sum(expected) / len(expected))

    assert estimator.snapshot() == pytest.approx(_expected_deltas(magnitudes)[-DEFAULT_WINDOW_SIZE:])


def test_first_sample_delta_is_measured_from_zero() -> None:
    estimator = VibrationEstimator()

    estimator.ingest(9.8)

    assert estimator.current_energy() == pytest.approx(9.8)


def test_ingest_vector_uses_euclidean_norm() -> None:
    estimator = VibrationEstimator()

    estimator.ingest_vector(3.0, 4.0, 0.0)
    estimator.ingest_vector(6.0, 8.0, 0.0)

    assert estimator.snapshot() == pytest.approx([5.0, 5.0])


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_non_finite_magnitude_is_treated_as_zero(bad: float) -> None:
    estimator = VibrationEstimator()
    estimator.ingest(2.0)

    estimator.ingest(bad)

    assert estimator.snapshot() == pytest.approx([2.0, 2.0])
    assert math.isfinite(estimator.current_energy())


def test_custom_window_size_is_respected() -> None:
    estimator = VibrationEstimator(window_size=3)

    for magnitude in (1.0, 3.0, 6.0, 10.0, 15.0):
        estimator.ingest(magnitude)

    assert estimator.snapshot() == pytest.approx([3.0, 4.0, 5.0])
    assert estimator.current_energy() == pytest.approx(4.0)


def test_concurrent_writers_keep_window_bounded_and_mean_consistent() -> None:
    estimator = VibrationEstimator(window_size=30)
    stop = threading.Event()
    readings: list[tuple[float, int]] = []

    def _writer(offset: int) -> None:
        for index in range(2000):
            estimator.ingest(float((index + offset) % 2))

    def _reader() -> None:
        while not stop.is_set():
            readings.append((estimator.current_energy(), len(estimator.snapshot())))

    writers = [threading.Thread(target=_writer, args=(offset,)) for offset in range(4)]
    reader = threading.Thread(target=_reader)
    reader.start()
    for thread in writers:
        thread.start()
    for thread in writers:
        thread.join()
    stop.set()
    reader.join()

    # 幅值只取 0 或 1，任何时刻的差值都落在 [0, 1]
    assert readings
    assert all(0.0 <= energy <= 1.0 for energy, _ in readings)
    assert all(size <= 30 for _, size in readings)
    window = estimator.snapshot()
    assert len(window) == 30
    assert estimator.current_energy() == pytest.approx(sum(window) / len(window))
