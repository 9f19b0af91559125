"""本地配置覆盖示例（存在时由 AppConfig.load 自动加载）。"""

from vibevolume.config import AppConfig
from vibevolume.core.curve import CurveMode


def load_config() -> AppConfig:
    return AppConfig(
        scan_interval_seconds=30.0,
        scan_window_seconds=8.0,
        output_interval_seconds=5.0,
        output_initial_delay_seconds=5.0,
        curve_mode=CurveMode.MEDIUM,
        volume_sink_backend="auto",
        simulated_device_pool=12,
        # min_volume=3,
        # max_volume=12,
        api_port=8000,
    )
