"""Runtime configuration overrides."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger("creeper")

DEFAULT_CHUNK_DURATION = 60
CHUNK_DURATION_KEY = "chunk_duration"
_U32_MAX = 2**32 - 1


@dataclass(frozen=True)
class Config:
    chunk_duration: int = DEFAULT_CHUNK_DURATION

    def to_dict(self) -> dict:
        return {"chunk_duration": self.chunk_duration}


def parse_unsigned(value: Optional[str]) -> Optional[int]:
    if not isinstance(value, str) or not value:
        return None
    digits = value[1:] if value.startswith("+") else value
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    number = int(digits)
    if number > _U32_MAX:
        return None
    return number


class ConfigStore:
    """Key/value overrides shared between the UI and background callers.

    Every read and write takes the same lock, so a get always observes the
    latest completed set.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: Dict[str, str] = {}

    def get_config(self) -> Config:
        with self._lock:
            raw = self._values.get(CHUNK_DURATION_KEY)
        chunk_duration = parse_unsigned(raw)
        if chunk_duration is None:
            chunk_duration = DEFAULT_CHUNK_DURATION
        return Config(chunk_duration=chunk_duration)

    def set_config(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value
        logger.debug("Config override %s=%r", key, value)

    def snapshot(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._values)

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
