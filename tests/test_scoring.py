import math

import pytest

from vibevolume.core.baseline import BaselineCalibrator
from vibevolume.core.crowd import CrowdDensityEstimator
from vibevolume.core.curve import CurveMode, shape
from vibevolume.core.fusion import ScoreFuser, bluetooth_score, fuse, vibration_score
from vibevolume.core.vibration import VibrationEstimator


def test_unset_baselines_give_neutral_scores() -> None:
    assert bluetooth_score(10, None) == 0.5
    assert vibration_score(3.0, None) == 0.5
    assert fuse(0.5, 0.5) == pytest.approx(0.5)


def test_bluetooth_score_normalizes_against_baseline() -> None:
    assert bluetooth_score(8, 4) == pytest.approx(1.0)
    assert bluetooth_score(6, 4) == pytest.approx(0.5)
    assert bluetooth_score(2, 4) == 0.0
    assert bluetooth_score(20, 4) == 1.0


def test_bluetooth_score_treats_empty_baseline_as_one_device() -> None:
    assert bluetooth_score(0, 0) == 0.0
    assert bluetooth_score(1, 0) == 0.0
    assert bluetooth_score(2, 0) == pytest.approx(1.0)


def test_vibration_score_normalizes_against_baseline() -> None:
    assert vibration_score(0.02, 0.01) == pytest.approx(0.5)
    assert vibration_score(0.03, 0.01) == pytest.approx(1.0)
    assert vibration_score(0.005, 0.01) == 0.0


def test_vibration_score_floors_tiny_baseline() -> None:
    assert vibration_score(0.002, 0.0) == pytest.approx(0.5)


def test_fusion_weights_bluetooth_higher() -> None:
    assert fuse(1.0, 0.0) == pytest.approx(0.6)
    assert fuse(0.0, 1.0) == pytest.approx(0.4)
    assert fuse(1.0, 1.0) == pytest.approx(1.0)


def test_score_fuser_reads_current_estimator_state() -> None:
    crowd = CrowdDensityEstimator()
    vibration = VibrationEstimator()
    baseline = BaselineCalibrator()
    fuser = ScoreFuser(crowd, vibration, baseline)

    neutral = fuser.compute()
    assert neutral.raw == pytest.approx(0.5)
    assert neutral.device_count == 0

    baseline.record_device_baseline_if_unset(4)
    crowd.begin_scan()
    for index in range(8):
        crowd.record_device(f"dev-{index}")
    crowd.end_scan()

    score = fuser.compute()
    assert score.device_count == 8
    assert score.bluetooth == pytest.approx(1.0)
    assert score.vibration == 0.5
    assert score.raw == pytest.approx(0.8)


@pytest.mark.parametrize("mode", list(CurveMode))
def test_curve_fixed_points(mode: CurveMode) -> None:
    assert shape(0.0, mode) == 0.0
    assert shape(1.0, mode) == 1.0


@pytest.mark.parametrize("mode", list(CurveMode))
def test_curve_is_monotonic_and_bounded(mode: CurveMode) -> None:
    previous = -1.0
    for step in range(101):
        value = shape(step / 100, mode)
        assert 0.0 <= value <= 1.0
        assert value >= previous
        previous = value


def test_curve_values_at_neutral_score() -> None:
    assert shape(0.5, CurveMode.MEDIUM) == pytest.approx(0.5)
    assert shape(0.5, CurveMode.GRADUAL) == pytest.approx(math.sqrt(0.5))
    assert shape(0.5, CurveMode.AGGRESSIVE) == pytest.approx(0.25)


@pytest.mark.parametrize("mode", list(CurveMode))
def test_curve_clamps_out_of_range_input(mode: CurveMode) -> None:
    assert shape(-0.3, mode) == 0.0
    assert shape(1.7, mode) == 1.0
    assert shape(math.nan, mode) == 0.0


def test_curve_mode_accepts_string_values() -> None:
    assert CurveMode("AGGRESSIVE") is CurveMode.AGGRESSIVE
    assert CurveMode.GRADUAL.description
