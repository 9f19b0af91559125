"""安装与 py2app 打包配置。"""

from __future__ import annotations

import sys
from pathlib import Path

from setuptools import find_packages, setup


ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"
VERSION = "0.1.0"

INSTALL_REQUIRES = [
    "pydantic>=2.5",
    "fastapi>=0.104",
    "uvicorn>=0.24",
    "rumps>=0.4.0; sys_platform == 'darwin'",
]

EXTRAS_REQUIRE = {
    "test": [
        "pytest>=7.4",
        "httpx>=0.25",
    ],
}

PLIST = {
    "CFBundleName": "VibeVolume",
    "CFBundleDisplayName": "VibeVolume",
    "CFBundleIdentifier": "com.vibevolume.agent",
    "CFBundleShortVersionString": VERSION,
    "CFBundleVersion": VERSION,
    "LSUIElement": True,
    "NSBluetoothAlwaysUsageDescription": "VibeVolume 需要扫描附近的蓝牙设备以估计房间人数。",
    "NSHumanReadableCopyright": "© 2025 VibeVolume contributors",
}

OPTIONS = {
    "argv_emulation": False,
    "packages": ["vibevolume", "anyio"],
    "includes": [
        "rumps",
        "fastapi",
        "uvicorn",
        "starlette",
        "anyio",
        "h11",
        "sniffio",
        "uvicorn.lifespan.on",
        "uvicorn.protocols",
        "uvicorn.protocols.http",
        "uvicorn.protocols.http.auto",
        "uvicorn.protocols.http.h11_impl",
        "anyio._backends",
        "anyio._backends._asyncio",
    ],
    "plist": PLIST,
    "optimize": 0,
}

app_kwargs: dict = {}
if "py2app" in sys.argv:
    sys.setrecursionlimit(10000)
    app_kwargs = {
        "app": [str(ROOT / "main.py")],
        "options": {"py2app": OPTIONS},
        "setup_requires": ["py2app"],
    }


setup(
    name="vibevolume",
    version=VERSION,
    python_requires=">=3.9",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    **app_kwargs,
)
