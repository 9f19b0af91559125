"""测试公共替身：手动驱动的运动源与蓝牙扫描器。"""

from __future__ import annotations

from typing import List, Optional

import pytest

from vibevolume.adapters.base import (
    DeviceCallback,
    MotionCallback,
    MotionSource,
    ProximityScanner,
)
from vibevolume.errors import PermissionDeniedError, SensorUnavailableError


class ManualMotionSource(MotionSource):
    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.callback: Optional[MotionCallback] = None
        self.start_calls = 0
        self.stop_calls = 0

    async def start(self, callback: MotionCallback) -> None:
        self.start_calls += 1
        if not self.available:
            raise SensorUnavailableError("no accelerometer")
        self.callback = callback

    def stop(self) -> None:
        self.stop_calls += 1
        self.callback = None

    def emit(self, x: float, y: float, z: float) -> None:
        if self.callback is not None:
            self.callback(x, y, z)


class ManualScanner(ProximityScanner):
    """`failures` 次启动抛出 OSError，之后正常工作。"""

    def __init__(self, permitted: bool = True, failures: int = 0) -> None:
        self.permitted = permitted
        self.failures = failures
        self.callback: Optional[DeviceCallback] = None
        self.start_calls = 0
        self.stop_calls = 0

    async def start(self, callback: DeviceCallback) -> None:
        self.start_calls += 1
        if not self.permitted:
            raise PermissionDeniedError("bluetooth scan not permitted")
        if self.failures > 0:
            self.failures -= 1
            raise OSError("bluetooth adapter busy")
        self.callback = callback

    def stop(self) -> None:
        self.stop_calls += 1
        self.callback = None

    def discover(self, addresses: List[str]) -> None:
        if self.callback is None:
            return
        for address in addresses:
            self.callback(address)


@pytest.fixture
def motion_source() -> ManualMotionSource:
    """可用的手动运动源；测试可把 `available` 置为 False 模拟缺失传感器。"""
    return ManualMotionSource()


@pytest.fixture
def scanner() -> ManualScanner:
    """已授权的手动扫描器；`permitted` / `failures` 可在测试中调整。"""
    return ManualScanner()
