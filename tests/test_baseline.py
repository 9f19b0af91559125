from vibevolume.core.baseline import BaselineCalibrator


def test_baselines_start_unset() -> None:
    calibrator = BaselineCalibrator()

    assert calibrator.device_count is None
    assert calibrator.vibration is None
    assert calibrator.is_calibrated() is False


def test_device_baseline_latches_once() -> None:
    calibrator = BaselineCalibrator()

    assert calibrator.record_device_baseline_if_unset(4) is True
    for later in (0, 9, 4, 100):
        assert calibrator.record_device_baseline_if_unset(later) is False

    assert calibrator.device_count == 4


def test_vibration_baseline_latches_once() -> None:
    calibrator = BaselineCalibrator()

    assert calibrator.record_vibration_baseline_if_unset(0.01) is True
    for later in (0.0, 0.5, 0.001):
        assert calibrator.record_vibration_baseline_if_unset(later) is False

    assert calibrator.vibration == 0.01


def test_latches_are_independent() -> None:
    calibrator = BaselineCalibrator()

    calibrator.record_vibration_baseline_if_unset(0.02)

    assert calibrator.vibration == 0.02
    assert calibrator.device_count is None
    assert calibrator.is_calibrated() is False

    calibrator.record_device_baseline_if_unset(0)

    assert calibrator.device_count == 0
    assert calibrator.is_calibrated() is True
