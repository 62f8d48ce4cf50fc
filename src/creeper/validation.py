"""Audio chunk metadata checks."""

from __future__ import annotations

from enum import Enum

from .models import AudioChunk


class ChunkCheck(Enum):
    EMPTY_DATA = "EmptyData"
    ZERO_DURATION = "ZeroDuration"
    MISSING_FORMAT = "MissingFormat"


CHECK_MESSAGES = {
    ChunkCheck.EMPTY_DATA: "Audio data is empty",
    ChunkCheck.ZERO_DURATION: "Duration must be greater than 0",
    ChunkCheck.MISSING_FORMAT: "Format must be specified",
}


class ChunkValidationError(ValueError):
    def __init__(self, check: ChunkCheck) -> None:
        super().__init__(CHECK_MESSAGES[check])
        self.check = check


def validate_chunk(chunk: AudioChunk) -> bool:
    """Return True for well-formed chunk metadata.

    Checks run in a fixed order and the first failure is raised as a
    ChunkValidationError. The timestamp is not inspected.
    """
    if not chunk.data:
        raise ChunkValidationError(ChunkCheck.EMPTY_DATA)
    if chunk.duration <= 0:
        raise ChunkValidationError(ChunkCheck.ZERO_DURATION)
    if not chunk.format:
        raise ChunkValidationError(ChunkCheck.MISSING_FORMAT)
    return True
