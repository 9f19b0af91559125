"""响应曲线：把原始人群得分映射为成形得分。"""

from __future__ import annotations

import math
from enum import Enum


class CurveMode(str, Enum):
    """三种单调响应曲线。"""

    GRADUAL = "GRADUAL"
    MEDIUM = "MEDIUM"
    AGGRESSIVE = "AGGRESSIVE"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    CurveMode.GRADUAL: "平方根曲线：最初几位来客就能明显抬高音量，接近上限时趋于平缓。",
    CurveMode.MEDIUM: "线性曲线：音量随人群增长等比例变化，适合大多数聚会。",
    CurveMode.AGGRESSIVE: "平方曲线：人少时几乎不动，人群可观后迅速冲高。",
}


def clamp_unit(value: float) -> float:
    """截断到 [0, 1]，NaN 视为 0。"""

    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


def shape(raw: float, mode: CurveMode) -> float:
    raw = clamp_unit(raw)
    if mode is CurveMode.GRADUAL:
        return clamp_unit(raw ** 0.5)
    if mode is CurveMode.AGGRESSIVE:
        return clamp_unit(raw ** 2)
    return raw
