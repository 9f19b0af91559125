"""异常类型：除配置错误外，均不会终止运行中的会话。"""

from __future__ import annotations


class VibeVolumeError(Exception):
    """所有业务异常的基类。"""


class PermissionDeniedError(VibeVolumeError):
    """蓝牙扫描未获授权，本次会话的蓝牙得分保持中性。"""


class SensorUnavailableError(VibeVolumeError):
    """设备缺少加速度传感器，本次会话的振动得分保持中性。"""


class SinkWriteError(VibeVolumeError):
    """平台拒绝写入音量。"""


class ConfigInvalidError(VibeVolumeError, ValueError):
    """音量区间非法，沿用之前的有效配置。"""
