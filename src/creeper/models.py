"""Data models for Creeper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union

_U32_MAX = 2**32 - 1


class ChunkPayloadError(ValueError):
    """Raised when a chunk payload is missing fields or has the wrong types."""


@dataclass(frozen=True)
class AudioChunk:
    data: Union[str, bytes]
    timestamp: int
    duration: int
    format: str

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AudioChunk":
        if not isinstance(payload, Mapping):
            raise ChunkPayloadError("Chunk must be an object")

        data = _require(payload, "data", (str, bytes))
        duration = _require(payload, "duration", int)
        fmt = _require(payload, "format", str)
        timestamp = payload.get("timestamp", 0)
        if not _is_int(timestamp):
            raise ChunkPayloadError("Field 'timestamp' must be an integer")
        if duration < 0:
            raise ChunkPayloadError("Field 'duration' must not be negative")
        if duration > _U32_MAX:
            raise ChunkPayloadError("Field 'duration' is out of range")

        return cls(data=data, timestamp=timestamp, duration=duration, format=fmt)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require(payload: Mapping[str, Any], name: str, kind) -> Any:
    if name not in payload:
        raise ChunkPayloadError(f"Missing field '{name}'")
    value = payload[name]
    if kind is int:
        if not _is_int(value):
            raise ChunkPayloadError(f"Field '{name}' must be an integer")
    elif not isinstance(value, kind):
        raise ChunkPayloadError(f"Field '{name}' has the wrong type")
    return value
