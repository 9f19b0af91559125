"""开发环境启动会话与 FastAPI 服务（无状态栏）。"""

from __future__ import annotations

import asyncio
import logging
import signal
from contextlib import suppress

from vibevolume.config import AppConfig
from vibevolume.service import build_session, run_backend

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, format="[%(asctime)s][%(levelname)s] %(name)s: %(message)s")


async def main() -> None:
    config = AppConfig.load()
    session = build_session(config)

    def _log_tick(report) -> None:
        logger.info(
            "设备=%s 振动=%.4f 得分=%.2f 音量=%s",
            report.device_count,
            report.vibration_energy,
            report.shaped_score,
            report.applied_volume,
        )

    session.subscribe(_log_tick)

    stop_event = asyncio.Event()

    def _handle_stop(*_: object) -> None:
        logger.info("收到终止信号，准备关闭服务器…")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _handle_stop)

    serve_task = asyncio.create_task(run_backend(session, config))
    serve_task.add_done_callback(lambda _: stop_event.set())

    await stop_event.wait()
    serve_task.cancel()
    with suppress(asyncio.CancelledError):
        await serve_task
    session.stop()


if __name__ == "__main__":
    asyncio.run(main())
