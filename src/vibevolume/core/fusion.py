"""把蓝牙密度与振动能量融合为原始人群得分。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from vibevolume.core.baseline import BaselineCalibrator
from vibevolume.core.crowd import CrowdDensityEstimator
from vibevolume.core.curve import clamp_unit
from vibevolume.core.vibration import VibrationEstimator

BLUETOOTH_WEIGHT = 0.6
VIBRATION_WEIGHT = 0.4
NEUTRAL_SCORE = 0.5
MIN_VIBRATION_BASELINE = 0.001


def bluetooth_score(count: int, baseline: Optional[int]) -> float:
    if baseline is None:
        return NEUTRAL_SCORE
    reference = float(max(baseline, 1))
    return clamp_unit((count - reference) / reference)


def vibration_score(energy: float, baseline: Optional[float]) -> float:
    if baseline is None:
        return NEUTRAL_SCORE
    reference = max(baseline, MIN_VIBRATION_BASELINE)
    return clamp_unit((energy / reference - 1.0) / 2.0)


def fuse(bt_score: float, vib_score: float) -> float:
    # 蓝牙密度更稳定，权重更高
    return clamp_unit(BLUETOOTH_WEIGHT * bt_score + VIBRATION_WEIGHT * vib_score)


@dataclass
class CrowdScore:
    """一次融合的中间结果。"""

    device_count: int
    vibration_energy: float
    bluetooth: float
    vibration: float
    raw: float


class ScoreFuser:
    """读取两个估计器的最新状态并计算原始得分。"""

    def __init__(
        self,
        crowd: CrowdDensityEstimator,
        vibration: VibrationEstimator,
        baseline: BaselineCalibrator,
    ) -> None:
        self._crowd = crowd
        self._vibration = vibration
        self._baseline = baseline

    def compute(self) -> CrowdScore:
        count = self._crowd.current_count()
        energy = self._vibration.current_energy()
        bt = bluetooth_score(count, self._baseline.device_count)
        vib = vibration_score(energy, self._baseline.vibration)
        return CrowdScore(
            device_count=count,
            vibration_energy=energy,
            bluetooth=bt,
            vibration=vib,
            raw=fuse(bt, vib),
        )
