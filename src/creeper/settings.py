"""Startup settings handling."""

from __future__ import annotations

from dataclasses import dataclass, field
import yaml

DEFAULT_SETTINGS_PATH = "creeper_settings.yml"


@dataclass
class WindowSettings:
    title: str = "Creeper"
    start_hidden: bool = False


@dataclass
class AppSettings:
    log_dir: str = "logs"
    debug_logging: bool = False
    worker_threads: int = 4
    tray_title: str = "Creeper"
    window: WindowSettings = field(default_factory=WindowSettings)


def load_settings(path: str) -> AppSettings:
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    window = WindowSettings(**data.get("window", {}))

    return AppSettings(
        log_dir=data.get("log_dir", "logs"),
        debug_logging=bool(data.get("debug_logging", False)),
        worker_threads=max(1, int(data.get("worker_threads", 4))),
        tray_title=data.get("tray_title", "Creeper"),
        window=window,
    )


def save_settings(path: str, settings: AppSettings) -> None:
    data = {
        "log_dir": settings.log_dir,
        "debug_logging": settings.debug_logging,
        "worker_threads": settings.worker_threads,
        "tray_title": settings.tray_title,
        "window": {
            "title": settings.window.title,
            "start_hidden": settings.window.start_hidden,
        },
    }
    with open(path, "w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False)
