"""Named operations exposed to the frontend."""

from __future__ import annotations

import inspect
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .config import ConfigStore
from .models import AudioChunk, ChunkPayloadError
from .validation import ChunkValidationError, validate_chunk

logger = logging.getLogger("creeper")

MicPermission = Callable[[], bool]


class CommandArgumentError(ValueError):
    """Raised when a command argument has the wrong type."""


def always_granted() -> bool:
    # The OS prompts on first microphone access; swap in a real check here.
    return True


@dataclass
class CommandResponse:
    ok: bool
    value: Any = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        if self.ok:
            return {"ok": True, "value": self.value}
        return {"ok": False, "error": self.error}


class CommandDispatcher:
    """Route frontend requests to the config store and chunk validator.

    Expected failures (bad chunks, bad arguments, unknown names) come back as
    a CommandResponse with an error string. Anything else is logged and
    re-raised.
    """

    def __init__(
        self,
        store: ConfigStore,
        mic_permission: MicPermission = always_granted,
        max_workers: int = 4,
    ) -> None:
        self.store = store
        self._mic_permission = mic_permission
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="creeper-cmd"
        )
        self._handlers: Dict[str, Callable[..., Any]] = {
            "get_config": self._get_config,
            "set_config": self._set_config,
            "request_mic_permission": self._request_mic_permission,
            "validate_audio_chunk": self._validate_audio_chunk,
        }

    @property
    def commands(self) -> list[str]:
        return sorted(self._handlers)

    def invoke(self, name: str, args: Optional[Dict[str, Any]] = None) -> CommandResponse:
        handler = self._handlers.get(name)
        if handler is None:
            logger.warning("Unknown command %r", name)
            return CommandResponse(ok=False, error=f"Unknown command: {name}")

        args = args or {}
        try:
            inspect.signature(handler).bind(**args)
        except TypeError as exc:
            logger.warning("Bad arguments for %s: %s", name, exc)
            return CommandResponse(ok=False, error=f"Invalid arguments for {name}: {exc}")

        try:
            value = handler(**args)
        except CommandArgumentError as exc:
            logger.warning("Bad arguments for %s: %s", name, exc)
            return CommandResponse(ok=False, error=f"Invalid arguments for {name}: {exc}")
        except (ChunkValidationError, ChunkPayloadError) as exc:
            logger.info("Command %s rejected: %s", name, exc)
            return CommandResponse(ok=False, error=str(exc))
        except Exception:
            logger.exception("Command %s failed", name)
            raise

        return CommandResponse(ok=True, value=value)

    def submit(self, name: str, args: Optional[Dict[str, Any]] = None) -> Future:
        return self._executor.submit(self.invoke, name, args)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "CommandDispatcher":
        return self

    def __exit__(self, *_exc) -> None:
        self.shutdown()

    def _get_config(self) -> dict:
        return self.store.get_config().to_dict()

    def _set_config(self, key: str, value: str) -> None:
        for field_name, field_value in (("key", key), ("value", value)):
            if not isinstance(field_value, str):
                raise CommandArgumentError(f"'{field_name}' must be a string")
        self.store.set_config(key, value)

    def _request_mic_permission(self) -> bool:
        return bool(self._mic_permission())

    def _validate_audio_chunk(self, chunk: Dict[str, Any]) -> bool:
        return validate_chunk(AudioChunk.from_dict(chunk))

