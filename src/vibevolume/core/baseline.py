"""“空房间”基线：每个信号只在首次有效读数时锁定一次。"""

from __future__ import annotations

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class BaselineCalibrator:
    """两个互相独立的一次性锁存值。

    会话开始后第一次扫描完成时的读数被视为空房间参考，此后不再变化，
    避免人群到来后基线随之漂移。
    """

    def __init__(self) -> None:
        self._device_count: Optional[int] = None
        self._vibration: Optional[float] = None
        self._lock = threading.Lock()

    def record_device_baseline_if_unset(self, count: int) -> bool:
        with self._lock:
            if self._device_count is not None:
                return False
            self._device_count = count
        logger.info("蓝牙基线已锁定：%s 台设备", count)
        return True

    def record_vibration_baseline_if_unset(self, energy: float) -> bool:
        with self._lock:
            if self._vibration is not None:
                return False
            self._vibration = energy
        logger.info("振动基线已锁定：%.4f", energy)
        return True

    @property
    def device_count(self) -> Optional[int]:
        with self._lock:
            return self._device_count

    @property
    def vibration(self) -> Optional[float]:
        with self._lock:
            return self._vibration

    def is_calibrated(self) -> bool:
        with self._lock:
            return self._device_count is not None and self._vibration is not None
