"""用户界面：HTTP 控制接口与状态栏。"""

from .server import create_app

__all__ = [
    "create_app",
]
