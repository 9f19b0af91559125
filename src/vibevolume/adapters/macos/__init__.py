"""macOS 平台适配器。"""

from .volume import MacOSVolumeSink, is_available

__all__ = [
    "MacOSVolumeSink",
    "is_available",
]
