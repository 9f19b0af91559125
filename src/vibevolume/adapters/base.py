"""平台适配器基类：运动传感器、蓝牙扫描器与音量输出。"""

from __future__ import annotations

import abc
from typing import Callable, Tuple

MotionCallback = Callable[[float, float, float], None]
DeviceCallback = Callable[[str], None]


class MotionSource(abc.ABC):
    """三轴加速度来源，按自身节奏回调。"""

    @abc.abstractmethod
    async def start(self, callback: MotionCallback) -> None:
        """开始推送样本；缺少传感器时抛出 SensorUnavailableError。"""

    @abc.abstractmethod
    def stop(self) -> None:
        """停止推送。"""


class ProximityScanner(abc.ABC):
    """蓝牙低功耗扫描器，回调可能重复给出同一设备。"""

    @abc.abstractmethod
    async def start(self, callback: DeviceCallback) -> None:
        """开始一次扫描；未获授权时抛出 PermissionDeniedError。"""

    @abc.abstractmethod
    def stop(self) -> None:
        """结束当前扫描，未在扫描时调用也应安全。"""


class VolumeSink(abc.ABC):
    """平台音量档位，均为非负整数。"""

    @abc.abstractmethod
    def get_range(self) -> Tuple[int, int]:
        """返回 (0, 最大档位)。"""

    @abc.abstractmethod
    def set_level(self, step: int) -> None:
        """写入档位；平台拒绝时抛出 SinkWriteError。"""

    @abc.abstractmethod
    def get_level(self) -> int:
        """读取当前档位。"""
