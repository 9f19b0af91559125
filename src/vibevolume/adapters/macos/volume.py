"""通过 osascript 读写 macOS 系统输出音量。"""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Tuple

from vibevolume.adapters.base import VolumeSink
from vibevolume.errors import SinkWriteError

logger = logging.getLogger(__name__)

# 与音量键一致的 16 档
MACOS_VOLUME_STEPS = 16


def is_available() -> bool:
    return shutil.which("osascript") is not None


def step_to_percent(step: int, max_step: int = MACOS_VOLUME_STEPS) -> int:
    step = max(0, min(int(step), max_step))
    return int(round(step * 100 / max_step))


def percent_to_step(percent: int, max_step: int = MACOS_VOLUME_STEPS) -> int:
    percent = max(0, min(int(percent), 100))
    return int(round(percent * max_step / 100))


class MacOSVolumeSink(VolumeSink):
    """系统音量以 0-100 表示，这里换算为整数档位。"""

    def __init__(self, max_step: int = MACOS_VOLUME_STEPS, timeout: float = 2.0) -> None:
        self._max_step = max_step
        self._timeout = timeout

    def get_range(self) -> Tuple[int, int]:
        return 0, self._max_step

    def set_level(self, step: int) -> None:
        percent = step_to_percent(step, self._max_step)
        self._run(f"set volume output volume {percent}")

    def get_level(self) -> int:
        output = self._run("output volume of (get volume settings)")
        try:
            percent = int(output.strip())
        except ValueError as exc:
            raise SinkWriteError(f"无法解析系统音量: {output!r}") from exc
        return percent_to_step(percent, self._max_step)

    def _run(self, script: str) -> str:
        try:
            result = subprocess.run(
                ["osascript", "-e", script],
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=True,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired, subprocess.CalledProcessError) as exc:
            raise SinkWriteError(f"osascript 执行失败: {exc}") from exc
        return result.stdout
