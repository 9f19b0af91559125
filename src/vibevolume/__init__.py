"""VibeVolume：根据房间人群热度自动调节音量。"""

__version__ = "0.1.0"
