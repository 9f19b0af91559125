"""振动能量估计：对加速度幅值变化做固定长度滑动平均。"""

from __future__ import annotations

import collections
import math
import threading
from typing import Deque, List

DEFAULT_WINDOW_SIZE = 30


class VibrationEstimator:
    """滑动窗口，支持多线程写入与读取当前能量。"""

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE) -> None:
        self._window: Deque[float] = collections.deque(maxlen=window_size)
        self._lock = threading.Lock()
        self._last_magnitude = 0.0
        self._energy = 0.0

    def ingest(self, magnitude: float) -> None:
        """写入一次加速度幅值，并以窗口现有内容重新计算均值。"""

        if not math.isfinite(magnitude):
            magnitude = 0.0
        with self._lock:
            delta = abs(magnitude - self._last_magnitude)
            self._last_magnitude = magnitude
            self._window.append(delta)
            self._energy = sum(self._window) / len(self._window) if self._window else 0.0

    def ingest_vector(self, x: float, y: float, z: float) -> None:
        """三轴样本先取欧氏范数。"""

        self.ingest(math.sqrt(x * x + y * y + z * z))

    def current_energy(self) -> float:
        with self._lock:
            return self._energy

    def window_size(self) -> int:
        with self._lock:
            return len(self._window)

    def snapshot(self) -> List[float]:
        """返回窗口内容的浅拷贝，按时间先后排列。"""

        with self._lock:
            return list(self._window)
