"""后台服务装配，以及状态栏与事件循环之间的线程桥接。"""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from concurrent.futures import Future
from typing import Optional, Union

import uvicorn

from vibevolume.adapters.base import VolumeSink
from vibevolume.adapters.macos import MacOSVolumeSink, is_available as macos_volume_available
from vibevolume.adapters.simulated import (
    InMemoryVolumeSink,
    SimulatedMotionSource,
    SimulatedProximityScanner,
)
from vibevolume.config import AppConfig
from vibevolume.core.curve import CurveMode
from vibevolume.core.volume_controller import ControlConfig, TickReport
from vibevolume.session import VolumeSession
from vibevolume.ui import create_app

logger = logging.getLogger(__name__)


def build_volume_sink(config: AppConfig) -> VolumeSink:
    backend = config.volume_sink_backend
    if backend == "auto":
        backend = "macos" if sys.platform == "darwin" and macos_volume_available() else "memory"
    if backend == "macos":
        return MacOSVolumeSink()
    if backend != "memory":
        logger.warning("未知音量后端 %s，改用内存音量", backend)
    return InMemoryVolumeSink(max_step=config.simulated_max_volume)


def build_session(config: Optional[AppConfig] = None) -> VolumeSession:
    """按配置组装会话；当前运动与蓝牙信号均来自模拟适配器。"""

    config = config or AppConfig.load()
    motion = SimulatedMotionSource(
        sample_interval=config.simulated_sample_interval_seconds,
        available=not config.simulated_sensor_missing,
    )
    scanner = SimulatedProximityScanner(
        device_pool=config.simulated_device_pool,
        permitted=not config.simulated_permission_denied,
    )
    return VolumeSession(build_volume_sink(config), motion, scanner, config=config)


async def run_backend(
    session: VolumeSession,
    config: AppConfig,
    ready: Optional[threading.Event] = None,
) -> None:
    """运行会话与 HTTP 接口，二者共用同一个事件循环。"""

    if config.autostart:
        await session.start()

    app = create_app(session)
    server = uvicorn.Server(
        uvicorn.Config(app, host=config.api_host, port=config.api_port, reload=False)
    )
    if ready is not None:
        ready.set()
    try:
        await server.serve()
    finally:
        session.stop()


class BackendHandle:
    """供其他线程（如状态栏主线程）安全地控制会话。"""

    def __init__(self, session: VolumeSession, loop: asyncio.AbstractEventLoop) -> None:
        self._session = session
        self._loop = loop

    @property
    def session(self) -> VolumeSession:
        return self._session

    def start(self) -> Future:
        return asyncio.run_coroutine_threadsafe(self._session.start(), self._loop)

    def stop(self, timeout: float = 5.0) -> None:
        """在事件循环线程上停止会话，返回时会话已处于 STOPPED。"""

        if not self._loop.is_running():
            self._session.stop()
            return
        asyncio.run_coroutine_threadsafe(self._stop_on_loop(), self._loop).result(timeout)

    async def _stop_on_loop(self) -> None:
        self._session.stop()

    def is_running(self) -> bool:
        return self._session.is_running()

    def latest_report(self) -> Optional[TickReport]:
        return self._session.latest_report()

    def control_config(self) -> ControlConfig:
        return self._session.control_config()

    def set_bounds(self, min_volume: int, max_volume: int) -> ControlConfig:
        return self._session.set_bounds(min_volume, max_volume)

    def set_curve_mode(self, mode: Union[CurveMode, str]) -> ControlConfig:
        return self._session.set_curve_mode(mode)


def start_backend_in_thread(config: Optional[AppConfig] = None) -> BackendHandle:
    """在独立线程运行 asyncio 后台服务。"""

    config = config or AppConfig.load()
    session = build_session(config)
    loop = asyncio.new_event_loop()
    ready = threading.Event()

    def _run() -> None:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(run_backend(session, config, ready=ready))

    thread = threading.Thread(target=_run, name="vibevolume-backend", daemon=True)
    thread.start()
    ready.wait(timeout=5.0)
    return BackendHandle(session, loop)
