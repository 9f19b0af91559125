"""音量控制：把成形得分线性映射到用户区间并写入平台。"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from vibevolume.core.curve import CurveMode, clamp_unit
from vibevolume.core.fusion import CrowdScore
from vibevolume.errors import SinkWriteError

logger = logging.getLogger(__name__)


class ControlConfig(BaseModel):
    """单次输出节拍使用的一致配置快照，整体替换、不可原地修改。"""

    model_config = ConfigDict(frozen=True)

    min_volume: int = Field(3, ge=0)
    max_volume: int = Field(12, ge=0)
    curve_mode: CurveMode = CurveMode.MEDIUM

    @model_validator(mode="after")
    def _check_bounds(self) -> "ControlConfig":
        if self.min_volume >= self.max_volume:
            raise ValueError("min_volume 必须小于 max_volume")
        return self


class VolumeOutput(Protocol):
    """平台音量接口，供控制器写入与回读。"""

    def get_range(self) -> Tuple[int, int]:
        """返回 (0, 最大档位)。"""

    def set_level(self, step: int) -> None:
        """写入音量档位。"""

    def get_level(self) -> int:
        """读取当前音量档位。"""


@dataclass
class TickReport:
    """每个输出节拍推送给观察者的数据。"""

    device_count: int
    vibration_energy: float
    shaped_score: float
    applied_volume: Optional[int]
    raw_score: float
    bluetooth_score: float
    vibration_score: float
    target_volume: int
    curve_mode: CurveMode
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "device_count": self.device_count,
            "vibration_energy": self.vibration_energy,
            "shaped_score": self.shaped_score,
            "applied_volume": self.applied_volume,
            "raw_score": self.raw_score,
            "bluetooth_score": self.bluetooth_score,
            "vibration_score": self.vibration_score,
            "target_volume": self.target_volume,
            "curve_mode": self.curve_mode.value,
            "timestamp": self.timestamp,
        }


TickObserver = Callable[[TickReport], None]


def target_volume(shaped: float, min_volume: int, max_volume: int) -> int:
    """线性映射并四舍五入（0.5 向上），结果始终落在 [min, max]。"""

    shaped = clamp_unit(shaped)
    value = min_volume + (max_volume - min_volume) * shaped
    return max(min_volume, min(max_volume, int(math.floor(value + 0.5))))


class VolumeController:
    """写入目标音量、回读实际值并通知观察者。"""

    def __init__(self, sink: VolumeOutput) -> None:
        self._sink = sink
        self._observers: List[TickObserver] = []
        self._lock = threading.Lock()

    @property
    def sink(self) -> VolumeOutput:
        return self._sink

    def subscribe(self, observer: TickObserver) -> None:
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)

    def unsubscribe(self, observer: TickObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def apply(self, config: ControlConfig, score: CrowdScore, shaped: float) -> TickReport:
        target = target_volume(shaped, config.min_volume, config.max_volume)
        try:
            self._sink.set_level(target)
        except (SinkWriteError, OSError) as exc:
            logger.warning("写入音量 %s 失败，不做重试: %s", target, exc)

        applied: Optional[int]
        try:
            applied = self._sink.get_level()
        except (SinkWriteError, OSError) as exc:
            logger.warning("回读音量失败: %s", exc)
            applied = None

        report = TickReport(
            device_count=score.device_count,
            vibration_energy=score.vibration_energy,
            shaped_score=shaped,
            applied_volume=applied,
            raw_score=score.raw,
            bluetooth_score=score.bluetooth,
            vibration_score=score.vibration,
            target_volume=target,
            curve_mode=config.curve_mode,
        )
        logger.debug(
            "音量节拍：设备=%s 振动=%.4f 得分=%.3f 目标=%s 实际=%s",
            report.device_count,
            report.vibration_energy,
            report.shaped_score,
            target,
            applied,
        )
        self._notify(report)
        return report

    def _notify(self, report: TickReport) -> None:
        with self._lock:
            observers = list(self._observers)
        for observer in observers:
            try:
                observer(report)
            except Exception:
                logger.warning("观察者回调异常", exc_info=True)
