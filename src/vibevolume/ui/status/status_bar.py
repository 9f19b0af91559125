"""基于 rumps 的 macOS 状态栏应用。"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import rumps

from vibevolume.core.curve import CurveMode
from vibevolume.core.volume_controller import ControlConfig, TickReport
from vibevolume.errors import ConfigInvalidError

logger = logging.getLogger(__name__)

_CURVE_LABELS = {
    CurveMode.GRADUAL: "平缓",
    CurveMode.MEDIUM: "均衡",
    CurveMode.AGGRESSIVE: "激进",
}


def format_status_title(report: Optional[TickReport], running: bool) -> str:
    """状态栏标题，对应常驻通知里的“音量 | 人群”一行。"""

    if not running:
        return "🔇"
    if report is None:
        return "🔈 聆听中"
    volume = report.applied_volume if report.applied_volume is not None else "?"
    return f"音量 {volume} | 人群 {report.shaped_score * 100:.0f}%"


class StatusBarApp(rumps.App):
    """状态栏应用，周期性读取会话最新节拍。"""

    def __init__(
        self,
        report_provider: Callable[[], Optional[TickReport]],
        running_provider: Callable[[], bool],
        config_provider: Callable[[], ControlConfig],
        start_session: Callable[[], object],
        stop_session: Callable[[], None],
        set_bounds: Callable[[int, int], ControlConfig],
        set_curve_mode: Callable[[CurveMode], ControlConfig],
    ) -> None:
        super().__init__(name="VibeVolume", title="🔇", quit_button=None)
        self._report_provider = report_provider
        self._running_provider = running_provider
        self._config_provider = config_provider
        self._start_session = start_session
        self._stop_session = stop_session
        self._set_bounds = set_bounds
        self._set_curve_mode = set_curve_mode
        self._toggle_item = rumps.MenuItem("开始", callback=self._handle_toggle)
        self._curve_menu = rumps.MenuItem("响应曲线")
        self._curve_items = {}
        for mode in CurveMode:
            item = rumps.MenuItem(_CURVE_LABELS[mode], callback=self._make_curve_handler(mode))
            self._curve_items[mode] = item
            self._curve_menu.add(item)
        self._bounds_item = rumps.MenuItem("音量区间", callback=None)
        self.menu = [
            rumps.MenuItem("人群得分", callback=None),
            rumps.MenuItem("附近设备", callback=None),
            self._toggle_item,
            self._curve_menu,
            self._bounds_item,
            rumps.MenuItem("最低音量 +1", lambda _: self._shift_bounds(1, 0)),
            rumps.MenuItem("最低音量 -1", lambda _: self._shift_bounds(-1, 0)),
            rumps.MenuItem("最高音量 +1", lambda _: self._shift_bounds(0, 1)),
            rumps.MenuItem("最高音量 -1", lambda _: self._shift_bounds(0, -1)),
            None,
            rumps.MenuItem("退出", callback=self._quit_app),
        ]
        self._poll_timer = rumps.Timer(self._refresh, 2.0)

    def run(self, *args, **kwargs):  # type: ignore[override]
        self._poll_timer.start()
        super().run(*args, **kwargs)

    def _refresh(self, _timer: rumps.Timer) -> None:
        running = self._running_provider()
        report = self._report_provider()
        self.title = format_status_title(report, running)
        self._toggle_item.title = "停止" if running else "开始"
        if report is not None:
            self.menu["人群得分"].title = f"人群得分：{report.shaped_score:.2f}"
            self.menu["附近设备"].title = f"附近设备：{report.device_count} 台"
        config = self._config_provider()
        self._bounds_item.title = f"音量区间：{config.min_volume} - {config.max_volume}"
        for mode, item in self._curve_items.items():
            item.state = 1 if mode is config.curve_mode else 0

    def _handle_toggle(self, _sender: rumps.MenuItem) -> None:
        if self._running_provider():
            self._stop_session()
        else:
            self._start_session()

    def _make_curve_handler(self, mode: CurveMode) -> Callable[[rumps.MenuItem], None]:
        def _handler(_sender: rumps.MenuItem) -> None:
            self._set_curve_mode(mode)
            rumps.notification("VibeVolume", _CURVE_LABELS[mode], mode.description)

        return _handler

    def _shift_bounds(self, min_delta: int, max_delta: int) -> None:
        config = self._config_provider()
        try:
            self._set_bounds(config.min_volume + min_delta, config.max_volume + max_delta)
        except ConfigInvalidError as exc:
            logger.info("忽略非法音量区间: %s", exc)

    def _quit_app(self, _sender: rumps.MenuItem) -> None:
        self._stop_session()
        rumps.quit_application()


def run_status_bar_app(
    report_provider: Callable[[], Optional[TickReport]],
    running_provider: Callable[[], bool],
    config_provider: Callable[[], ControlConfig],
    start_session: Callable[[], object],
    stop_session: Callable[[], None],
    set_bounds: Callable[[int, int], ControlConfig],
    set_curve_mode: Callable[[CurveMode], ControlConfig],
) -> None:
    app = StatusBarApp(
        report_provider,
        running_provider,
        config_provider,
        start_session,
        stop_session,
        set_bounds,
        set_curve_mode,
    )
    app.run()
