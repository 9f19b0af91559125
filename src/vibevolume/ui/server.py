"""FastAPI 控制接口。"""

from __future__ import annotations

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from vibevolume.core.curve import CurveMode
from vibevolume.errors import ConfigInvalidError
from vibevolume.session import VolumeSession


class BoundsUpdate(BaseModel):
    min_volume: int = Field(..., ge=0)
    max_volume: int = Field(..., ge=0)


class CurveUpdate(BaseModel):
    curve_mode: CurveMode


def create_app(session: VolumeSession) -> FastAPI:
    """构建 FastAPI 应用并注册会话控制路由。"""

    app = FastAPI(title="VibeVolume")

    def _status() -> dict:
        control = session.control_config()
        low, high = session.volume_range()
        report = session.latest_report()
        return {
            "running": session.is_running(),
            "min_volume": control.min_volume,
            "max_volume": control.max_volume,
            "curve_mode": control.curve_mode.value,
            "volume_range": [low, high],
            "latest": report.to_dict() if report is not None else None,
        }

    @app.get("/health", tags=["system"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/status", tags=["session"])
    async def status() -> dict:
        return _status()

    @app.post("/session/start", tags=["session"])
    async def start_session() -> dict:
        await session.start()
        return _status()

    @app.post("/session/stop", tags=["session"])
    async def stop_session() -> dict:
        session.stop()
        return _status()

    @app.put("/config/bounds", tags=["config"])
    async def update_bounds(update: BoundsUpdate) -> dict:
        try:
            session.set_bounds(update.min_volume, update.max_volume)
        except ConfigInvalidError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _status()

    @app.put("/config/curve", tags=["config"])
    async def update_curve(update: CurveUpdate) -> dict:
        session.set_curve_mode(update.curve_mode)
        return _status()

    @app.get("/curves", tags=["config"])
    async def curves() -> list[dict[str, str]]:
        return [{"mode": mode.value, "description": mode.description} for mode in CurveMode]

    return app
