"""平台适配器。"""

from .base import MotionSource, ProximityScanner, VolumeSink
from .simulated import InMemoryVolumeSink, SimulatedMotionSource, SimulatedProximityScanner

__all__ = [
    "InMemoryVolumeSink",
    "MotionSource",
    "ProximityScanner",
    "SimulatedMotionSource",
    "SimulatedProximityScanner",
    "VolumeSink",
]
