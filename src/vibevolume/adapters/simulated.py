"""模拟适配器，用于开发阶段或缺少真实硬件的机器。"""

from __future__ import annotations

import asyncio
import logging
import math
import random
import threading
from typing import Optional, Tuple

from vibevolume.adapters.base import (
    DeviceCallback,
    MotionCallback,
    MotionSource,
    ProximityScanner,
    VolumeSink,
)
from vibevolume.errors import PermissionDeniedError, SensorUnavailableError, SinkWriteError

logger = logging.getLogger(__name__)

GRAVITY = 9.81


class SimulatedMotionSource(MotionSource):
    """生成带缓慢起伏噪声的加速度样本，模拟房间里逐渐热闹起来。"""

    def __init__(self, sample_interval: float = 0.2, available: bool = True) -> None:
        self._sample_interval = sample_interval
        self._available = available
        self._task: Optional[asyncio.Task[None]] = None
        self._phase = 0.0

    async def start(self, callback: MotionCallback) -> None:
        if not self._available:
            raise SensorUnavailableError("模拟环境未提供加速度传感器")
        if self._task is not None:
            return

        async def _loop() -> None:
            while True:
                callback(*self._sample())
                await asyncio.sleep(self._sample_interval)

        self._task = asyncio.create_task(_loop())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _sample(self) -> Tuple[float, float, float]:
        # 振幅随相位缓慢变化
        amplitude = 0.02 + 0.08 * (1.0 + math.sin(self._phase)) / 2.0
        self._phase += 0.01
        return (
            random.gauss(0.0, amplitude),
            random.gauss(0.0, amplitude),
            GRAVITY + random.gauss(0.0, amplitude),
        )


class SimulatedProximityScanner(ProximityScanner):
    """从固定设备池中随机报告附近设备，包含重复上报。"""

    def __init__(
        self,
        device_pool: int = 12,
        report_interval: float = 0.5,
        permitted: bool = True,
    ) -> None:
        self._pool = [f"AA:BB:CC:00:00:{index:02X}" for index in range(device_pool)]
        self._report_interval = report_interval
        self._permitted = permitted
        self._task: Optional[asyncio.Task[None]] = None
        self._phase = 0.0

    async def start(self, callback: DeviceCallback) -> None:
        if not self._permitted:
            raise PermissionDeniedError("模拟环境未授予蓝牙扫描权限")
        if self._task is not None or not self._pool:
            return

        visible = max(1, int(len(self._pool) * (0.3 + 0.7 * (1.0 + math.sin(self._phase)) / 2.0)))
        self._phase += 0.4
        nearby = random.sample(self._pool, min(visible, len(self._pool)))

        async def _loop() -> None:
            while True:
                for address in random.choices(nearby, k=len(nearby)):
                    callback(address)
                await asyncio.sleep(self._report_interval)

        self._task = asyncio.create_task(_loop())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None


class InMemoryVolumeSink(VolumeSink):
    """内存中的音量档位，写入时按平台范围截断。"""

    def __init__(self, max_step: int = 15, level: int = 0, reject_writes: bool = False) -> None:
        self._max_step = max_step
        self._level = max(0, min(level, max_step))
        self._reject_writes = reject_writes
        self._lock = threading.Lock()

    def get_range(self) -> Tuple[int, int]:
        return 0, self._max_step

    def set_level(self, step: int) -> None:
        if self._reject_writes:
            raise SinkWriteError(f"拒绝写入音量 {step}")
        with self._lock:
            self._level = max(0, min(int(step), self._max_step))

    def get_level(self) -> int:
        with self._lock:
            return self._level
