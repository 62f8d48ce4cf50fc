"""Tkinter window and tray shell."""

from __future__ import annotations

import logging
import os
import queue
import threading
from concurrent.futures import Future
from typing import Any, Callable

from .commands import CommandDispatcher, CommandResponse
from .config import ConfigStore, DEFAULT_CHUNK_DURATION
from .logging_utils import setup_logging
from .settings import AppSettings, DEFAULT_SETTINGS_PATH, load_settings
from .tray import TrayController, TrayEvent, TrayIcon, WindowUnavailableError

logger = logging.getLogger("creeper")


class TkWindow:
    """WindowHandle over a Tk root."""

    def __init__(self, root: Any) -> None:
        self._root = root

    def _call(self, method: str) -> None:
        import tkinter as tk

        try:
            getattr(self._root, method)()
        except tk.TclError as exc:
            raise WindowUnavailableError(f"Window {method} failed: {exc}") from exc

    def show(self) -> None:
        self._call("deiconify")
        self._call("lift")

    def focus(self) -> None:
        self._call("focus_force")

    def hide(self) -> None:
        self._call("withdraw")


class EventPump:
    """Queue tray and window events and handle them one at a time.

    ``post`` is safe from any thread; ``drain`` must run on the Tk thread.
    """

    def __init__(self, controller: TrayController) -> None:
        self.controller = controller
        self._queue: "queue.Queue[TrayEvent]" = queue.Queue()

    def post(self, event: TrayEvent) -> None:
        self._queue.put(event)

    def drain(self) -> int:
        handled = 0
        while True:
            try:
                event = self._queue.get_nowait()
            except queue.Empty:
                return handled
            handled += 1
            try:
                self.controller.handle(event)
            except Exception:
                logger.exception("Tray event %s aborted", event.value)


class ListeningState:
    def __init__(self) -> None:
        self._flag = threading.Event()

    def is_listening(self) -> bool:
        return self._flag.is_set()

    def set(self, listening: bool) -> None:
        if listening:
            self._flag.set()
        else:
            self._flag.clear()


def launch_gui(settings_path: str = DEFAULT_SETTINGS_PATH) -> None:
    import tkinter as tk
    from tkinter import ttk

    if os.path.exists(settings_path):
        try:
            settings = load_settings(settings_path)
        except Exception:
            logger.exception("Failed to load %s, using defaults", settings_path)
            settings = AppSettings()
    else:
        settings = AppSettings()

    _, log_path = setup_logging(
        log_dir=settings.log_dir,
        level=logging.DEBUG if settings.debug_logging else logging.INFO,
    )
    logger.info("GUI starting, log at %s", log_path)

    def _thread_excepthook(args) -> None:
        logger.exception(
            "Thread exception",
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        )

    threading.excepthook = _thread_excepthook

    store = ConfigStore()
    dispatcher = CommandDispatcher(store, max_workers=settings.worker_threads)
    listening = ListeningState()
    closing = threading.Event()

    root = tk.Tk()
    root.title(settings.window.title)
    root.resizable(False, False)

    frame = ttk.Frame(root, padding=12)
    frame.grid(row=0, column=0, sticky="nsew")

    duration_var = tk.IntVar(value=DEFAULT_CHUNK_DURATION)
    status_var = tk.StringVar(value="Ready")
    listening_var = tk.StringVar(value="Not listening")

    ttk.Label(frame, text="Chunk duration (seconds)").grid(row=0, column=0, sticky="w")
    ttk.Spinbox(frame, from_=1, to=3600, textvariable=duration_var, width=8).grid(
        row=0, column=1, sticky="w", padx=(8, 0)
    )

    def _when_done(future: Future, on_done: Callable[[CommandResponse], None]) -> None:
        if future.done():
            on_done(future.result())
        else:
            root.after(50, lambda: _when_done(future, on_done))

    def _apply_config(response: CommandResponse) -> None:
        if response.ok:
            duration_var.set(response.value["chunk_duration"])
        else:
            status_var.set(response.error)

    def _refresh_config() -> None:
        _when_done(dispatcher.submit("get_config"), _apply_config)

    def _save_duration() -> None:
        try:
            value = str(duration_var.get())
        except tk.TclError:
            status_var.set("Chunk duration must be a whole number")
            return

        def _saved(response: CommandResponse) -> None:
            if response.ok:
                status_var.set(f"Chunk duration set to {value}s")
                _refresh_config()
            else:
                status_var.set(response.error)

        _when_done(
            dispatcher.submit("set_config", {"key": "chunk_duration", "value": value}),
            _saved,
        )

    def _set_listening(active: bool) -> None:
        listening.set(active)
        listening_var.set("Listening" if active else "Not listening")
        tray.refresh()
        logger.info("Listening %s", "started" if active else "stopped")

    def _toggle_listening() -> None:
        if listening.is_listening():
            _set_listening(False)
            return

        def _permission(response: CommandResponse) -> None:
            if response.ok and response.value:
                _set_listening(True)
            else:
                status_var.set(response.error or "Microphone permission denied")

        _when_done(dispatcher.submit("request_mic_permission"), _permission)

    def _quit() -> None:
        if closing.is_set():
            return
        logger.info("GUI quitting")
        closing.set()
        tray.stop()
        dispatcher.shutdown(wait=False)
        root.destroy()

    ttk.Button(frame, text="Save", command=_save_duration).grid(
        row=0, column=2, padx=(8, 0)
    )
    ttk.Label(frame, textvariable=listening_var).grid(
        row=1, column=0, sticky="w", pady=(8, 0)
    )
    ttk.Button(frame, text="Toggle Listening", command=_toggle_listening).grid(
        row=1, column=1, columnspan=2, sticky="e", pady=(8, 0)
    )
    ttk.Label(frame, textvariable=status_var).grid(
        row=2, column=0, columnspan=3, sticky="w", pady=(8, 0)
    )

    controller = TrayController(TkWindow(root), on_exit=_quit, on_toggle=_toggle_listening)
    pump = EventPump(controller)
    tray = TrayIcon(settings.tray_title, post=pump.post, is_listening=listening.is_listening)

    def _poll_events() -> None:
        try:
            pump.drain()
        finally:
            if not closing.is_set():
                root.after(100, _poll_events)

    root.protocol("WM_DELETE_WINDOW", lambda: pump.post(TrayEvent.CLOSE_REQUESTED))
    if settings.window.start_hidden:
        root.withdraw()

    tray.run_detached()
    _refresh_config()
    _poll_events()
    root.mainloop()
