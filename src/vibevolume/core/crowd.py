"""蓝牙人群密度估计。"""

from __future__ import annotations

import logging
import threading
from typing import Set

logger = logging.getLogger(__name__)


class CrowdDensityEstimator:
    """按扫描窗口统计去重后的设备数量，同一时刻至多一个扫描。"""

    def __init__(self) -> None:
        self._devices: Set[str] = set()
        self._device_count = 0
        self._scanning = False
        self._lock = threading.Lock()

    def begin_scan(self) -> bool:
        """开始新扫描；已有扫描进行中时不做任何事并返回 False。"""

        with self._lock:
            if self._scanning:
                return False
            self._devices.clear()
            self._scanning = True
            return True

    def record_device(self, device_id: str) -> None:
        with self._lock:
            if not self._scanning:
                return
            self._devices.add(device_id)

    def end_scan(self) -> int:
        """结束扫描并更新设备数量。"""

        with self._lock:
            self._device_count = len(self._devices)
            self._scanning = False
            count = self._device_count
        logger.debug("蓝牙扫描结束：发现 %s 台设备", count)
        return count

    def abort_scan(self) -> None:
        """放弃进行中的扫描，不更新计数。"""

        with self._lock:
            self._scanning = False
            self._devices.clear()

    def current_count(self) -> int:
        with self._lock:
            return self._device_count

    def is_scanning(self) -> bool:
        with self._lock:
            return self._scanning
