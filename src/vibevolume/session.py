"""会话编排：驱动蓝牙扫描周期与音量输出周期。"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple, Union

from pydantic import ValidationError

from vibevolume.adapters.base import MotionSource, ProximityScanner, VolumeSink
from vibevolume.config import AppConfig
from vibevolume.core.baseline import BaselineCalibrator
from vibevolume.core.crowd import CrowdDensityEstimator
from vibevolume.core.curve import CurveMode, shape
from vibevolume.core.fusion import ScoreFuser
from vibevolume.core.vibration import VibrationEstimator
from vibevolume.core.volume_controller import (
    ControlConfig,
    TickObserver,
    TickReport,
    VolumeController,
)
from vibevolume.errors import ConfigInvalidError, PermissionDeniedError, SensorUnavailableError

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    """会话状态机。"""

    STOPPED = auto()
    RUNNING = auto()


@dataclass
class SessionState:
    """单次会话的全部临时状态，启动时创建，停止时丢弃。"""

    vibration: VibrationEstimator
    crowd: CrowdDensityEstimator
    baseline: BaselineCalibrator
    fuser: ScoreFuser
    bluetooth_available: bool = True
    motion_available: bool = True
    ticks: int = 0
    latest: Optional[TickReport] = None

    @classmethod
    def create(cls, window_size: int) -> "SessionState":
        vibration = VibrationEstimator(window_size)
        crowd = CrowdDensityEstimator()
        baseline = BaselineCalibrator()
        return cls(
            vibration=vibration,
            crowd=crowd,
            baseline=baseline,
            fuser=ScoreFuser(crowd, vibration, baseline),
        )


class VolumeSession:
    """根据房间人群热度持续调节输出音量。

    扫描周期与输出周期是两个独立的 asyncio 任务；传感器回调可来自任意线程。
    `stop()` 是同步的：返回后不会再有任何节拍作用于已结束的会话。
    """

    def __init__(
        self,
        sink: VolumeSink,
        motion_source: MotionSource,
        scanner: ProximityScanner,
        config: Optional[AppConfig] = None,
    ) -> None:
        self._config = config or AppConfig.load_default()
        self._motion_source = motion_source
        self._scanner = scanner
        self._controller = VolumeController(sink)
        low, high = self._config.default_bounds(self.volume_range()[1])
        self._control = ControlConfig(
            min_volume=low,
            max_volume=high,
            curve_mode=self._config.curve_mode,
        )
        self._lock = threading.Lock()
        self._state: Optional[SessionState] = None
        self._scan_task: Optional[asyncio.Task[None]] = None
        self._output_task: Optional[asyncio.Task[None]] = None

    # ---- 控制接口 ----

    @property
    def phase(self) -> SessionPhase:
        with self._lock:
            return SessionPhase.RUNNING if self._state is not None else SessionPhase.STOPPED

    def is_running(self) -> bool:
        return self.phase is SessionPhase.RUNNING

    @property
    def state(self) -> Optional[SessionState]:
        with self._lock:
            return self._state

    def volume_range(self) -> Tuple[int, int]:
        return self._controller.sink.get_range()

    def control_config(self) -> ControlConfig:
        with self._lock:
            return self._control

    def latest_report(self) -> Optional[TickReport]:
        with self._lock:
            return self._state.latest if self._state is not None else None

    def set_bounds(self, min_volume: int, max_volume: int) -> ControlConfig:
        """更新音量区间；非法时抛出 ConfigInvalidError 并保留原配置。"""

        low, high = self.volume_range()
        if not (low <= min_volume < max_volume <= high):
            raise ConfigInvalidError(
                f"音量区间 [{min_volume}, {max_volume}] 非法，平台范围为 [{low}, {high}]"
            )
        with self._lock:
            try:
                updated = ControlConfig(
                    min_volume=min_volume,
                    max_volume=max_volume,
                    curve_mode=self._control.curve_mode,
                )
            except ValidationError as exc:
                raise ConfigInvalidError(str(exc)) from exc
            self._control = updated
        logger.info("音量区间更新为 [%s, %s]", min_volume, max_volume)
        return updated

    def set_curve_mode(self, mode: Union[CurveMode, str]) -> ControlConfig:
        try:
            curve_mode = CurveMode(mode)
        except ValueError as exc:
            raise ConfigInvalidError(f"未知曲线模式: {mode}") from exc
        with self._lock:
            self._control = self._control.model_copy(update={"curve_mode": curve_mode})
            updated = self._control
        logger.info("曲线模式切换为 %s", curve_mode.value)
        return updated

    def subscribe(self, observer: TickObserver) -> None:
        self._controller.subscribe(observer)

    def unsubscribe(self, observer: TickObserver) -> None:
        self._controller.unsubscribe(observer)

    # ---- 生命周期 ----

    async def start(self) -> None:
        """进入 RUNNING；已在运行时不做任何事。"""

        with self._lock:
            if self._state is not None:
                return
            state = SessionState.create(self._config.vibration_window_size)
            self._state = state
        logger.info("会话启动，开始监听房间")

        try:
            await self._motion_source.start(state.vibration.ingest_vector)
        except SensorUnavailableError as exc:
            logger.warning("加速度传感器不可用，振动得分保持中性: %s", exc)
            state.motion_available = False
        except Exception:
            self.stop()
            raise

        with self._lock:
            current = self._state is state
            if current:
                self._scan_task = asyncio.create_task(self._scan_cycle(state), name="vibevolume-scan")
                self._output_task = asyncio.create_task(
                    self._output_cycle(state), name="vibevolume-output"
                )
        if not current:
            self._stop_adapter(self._motion_source)

    def stop(self) -> None:
        """回到 STOPPED：丢弃会话状态，取消两个周期任务，放弃进行中的扫描。"""

        with self._lock:
            state = self._state
            self._state = None
            tasks = [self._scan_task, self._output_task]
            self._scan_task = None
            self._output_task = None
        if state is None:
            return

        for task in tasks:
            if task is not None and not task.done():
                task.cancel()
        state.crowd.abort_scan()
        self._stop_adapter(self._scanner)
        self._stop_adapter(self._motion_source)
        logger.info("会话已停止，共执行 %s 个输出节拍", state.ticks)

    # ---- 单步驱动 ----

    async def begin_scan_window(self) -> bool:
        state = self.state
        if state is None:
            return False
        return await self._begin_scan(state)

    def complete_scan_window(self) -> Optional[int]:
        state = self.state
        if state is None:
            return None
        return self._complete_scan(state)

    def run_output_tick(self) -> Optional[TickReport]:
        state = self.state
        if state is None:
            return None
        return self._output_tick(state)

    # ---- 内部实现 ----

    def _is_current(self, state: SessionState) -> bool:
        with self._lock:
            return self._state is state

    async def _begin_scan(self, state: SessionState) -> bool:
        if not state.crowd.begin_scan():
            logger.debug("已有扫描进行中，跳过本轮")
            return False
        if not state.bluetooth_available:
            return True

        try:
            await self._scanner.start(state.crowd.record_device)
        except PermissionDeniedError as exc:
            logger.warning("蓝牙扫描未获授权，蓝牙得分保持中性: %s", exc)
            state.bluetooth_available = False
        except Exception:
            # 本轮放弃，下一轮照常重试
            logger.warning("蓝牙扫描启动失败，本轮跳过", exc_info=True)
            state.crowd.abort_scan()
            self._latch_vibration_baseline(state)
            return False

        if not self._is_current(state):
            self._stop_adapter(self._scanner)
            return False
        return True

    def _complete_scan(self, state: SessionState) -> Optional[int]:
        if not self._is_current(state):
            return None
        if not state.crowd.is_scanning():
            return None

        count: Optional[int] = None
        if state.bluetooth_available:
            self._stop_adapter(self._scanner)
            count = state.crowd.end_scan()
            state.baseline.record_device_baseline_if_unset(count)
        else:
            state.crowd.abort_scan()

        self._latch_vibration_baseline(state)
        return count

    @staticmethod
    def _latch_vibration_baseline(state: SessionState) -> None:
        if state.motion_available:
            state.baseline.record_vibration_baseline_if_unset(state.vibration.current_energy())

    def _output_tick(self, state: SessionState) -> Optional[TickReport]:
        with self._lock:
            if self._state is not state:
                return None
            config = self._control

        score = state.fuser.compute()
        shaped = shape(score.raw, config.curve_mode)
        report = self._controller.apply(config, score, shaped)

        with self._lock:
            if self._state is state:
                state.ticks += 1
                state.latest = report
        return report

    async def _scan_cycle(self, state: SessionState) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        while self._is_current(state):
            try:
                if await self._begin_scan(state):
                    await asyncio.sleep(self._config.scan_window_seconds)
                    self._complete_scan(state)
            except Exception:
                logger.exception("蓝牙扫描周期异常")
                state.crowd.abort_scan()
            next_at += self._config.scan_interval_seconds
            await asyncio.sleep(max(0.0, next_at - loop.time()))

    async def _output_cycle(self, state: SessionState) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time() + self._config.output_initial_delay_seconds
        await asyncio.sleep(self._config.output_initial_delay_seconds)
        while self._is_current(state):
            try:
                self._output_tick(state)
            except Exception:
                logger.exception("音量输出节拍异常")
            next_at += self._config.output_interval_seconds
            await asyncio.sleep(max(0.0, next_at - loop.time()))

    @staticmethod
    def _stop_adapter(adapter: Union[MotionSource, ProximityScanner]) -> None:
        try:
            adapter.stop()
        except Exception:
            logger.warning("停止适配器失败", exc_info=True)
