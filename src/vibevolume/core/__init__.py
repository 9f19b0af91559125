"""核心业务逻辑：信号估计、基线、融合、曲线与音量映射。"""

from .baseline import BaselineCalibrator
from .crowd import CrowdDensityEstimator
from .curve import CurveMode, shape
from .fusion import CrowdScore, ScoreFuser
from .vibration import VibrationEstimator
from .volume_controller import ControlConfig, TickReport, VolumeController

__all__ = [
    "BaselineCalibrator",
    "ControlConfig",
    "CrowdDensityEstimator",
    "CrowdScore",
    "CurveMode",
    "ScoreFuser",
    "TickReport",
    "VibrationEstimator",
    "VolumeController",
    "shape",
]
