"""状态栏应用启动入口。"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# 确保 src 加入路径
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_DIR = PROJECT_ROOT / "src"
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from vibevolume.config import AppConfig
from vibevolume.service import start_backend_in_thread
from vibevolume.ui.status import run_status_bar_app


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s][%(levelname)s] %(name)s: %(message)s")

    config = AppConfig.load()
    handle = start_backend_in_thread(config)
    logging.getLogger(__name__).info(
        "控制接口位于 http://%s:%s", config.api_host, config.api_port
    )

    run_status_bar_app(
        report_provider=handle.latest_report,
        running_provider=handle.is_running,
        config_provider=handle.control_config,
        start_session=handle.start,
        stop_session=handle.stop,
        set_bounds=handle.set_bounds,
        set_curve_mode=handle.set_curve_mode,
    )


if __name__ == "__main__":
    main()
