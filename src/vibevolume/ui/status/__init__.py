"""状态栏应用入口。"""

from .status_bar import StatusBarApp, format_status_title, run_status_bar_app

__all__ = [
    "StatusBarApp",
    "format_status_title",
    "run_status_bar_app",
]
