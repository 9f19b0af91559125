"""应用配置模型。"""

from __future__ import annotations

import importlib.util
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from vibevolume.core.curve import CurveMode


class AppConfig(BaseModel):
    """总配置，可由项目根目录的 `config.local.py` 覆盖。"""

    scan_interval_seconds: float = Field(30.0, gt=0.0)
    scan_window_seconds: float = Field(8.0, gt=0.0)
    output_interval_seconds: float = Field(5.0, gt=0.0)
    output_initial_delay_seconds: float = Field(5.0, ge=0.0)
    vibration_window_size: int = Field(30, ge=1)
    min_volume: Optional[int] = Field(None, ge=0)
    max_volume: Optional[int] = Field(None, ge=0)
    curve_mode: CurveMode = CurveMode.MEDIUM
    volume_sink_backend: str = "auto"
    simulated_max_volume: int = Field(15, ge=1)
    simulated_sample_interval_seconds: float = Field(0.2, gt=0.0)
    simulated_device_pool: int = Field(12, ge=0)
    simulated_permission_denied: bool = False
    simulated_sensor_missing: bool = False
    autostart: bool = True
    api_host: str = "127.0.0.1"
    api_port: int = Field(8000, ge=1, le=65535)

    @model_validator(mode="after")
    def _check_windows(self) -> "AppConfig":
        if self.scan_window_seconds >= self.scan_interval_seconds:
            raise ValueError("scan_window_seconds 必须小于 scan_interval_seconds")
        if (
            self.min_volume is not None
            and self.max_volume is not None
            and self.min_volume >= self.max_volume
        ):
            raise ValueError("min_volume 必须小于 max_volume")
        return self

    def default_bounds(self, max_step: int) -> tuple[int, int]:
        """返回初始音量区间；未显式配置时取平台最大档位的 20% / 90%。"""

        low = self.min_volume if self.min_volume is not None else int(max_step * 0.2)
        high = self.max_volume if self.max_volume is not None else int(max_step * 0.9)
        high = max(1, min(high, max_step))
        low = max(0, min(low, high - 1))
        return low, high

    @classmethod
    def load_default(cls) -> "AppConfig":
        return cls()

    @classmethod
    def load(cls) -> "AppConfig":
        """优先尝试加载项目根目录的 `config.local.py`，否则返回默认配置。"""

        root_dir = Path(__file__).resolve().parents[2]
        local_path = root_dir / "config.local.py"
        if not local_path.exists():
            return cls.load_default()

        spec = importlib.util.spec_from_file_location("config_local", local_path)
        if spec is None or spec.loader is None:
            return cls.load_default()

        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)  # type: ignore[arg-type]
        except Exception:
            return cls.load_default()

        load_fn = getattr(module, "load_config", None)
        if callable(load_fn):
            try:
                return load_fn()
            except Exception:
                return cls.load_default()
        return cls.load_default()
