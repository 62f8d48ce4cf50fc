"""Tray and window event handling."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger("creeper")


class TrayEvent(Enum):
    ACTIVATE = "activate"
    MENU_SHOW = "show"
    MENU_TOGGLE = "toggle"
    MENU_QUIT = "quit"
    CLOSE_REQUESTED = "close_requested"


class TrayAction(Enum):
    SHOW_WINDOW = "show_window"
    HIDE_WINDOW = "hide_window"
    EXIT = "exit"


class WindowUnavailableError(RuntimeError):
    """Raised when the window handle has been destroyed or never existed."""


class WindowHandle(Protocol):
    def show(self) -> None: ...

    def focus(self) -> None: ...

    def hide(self) -> None: ...


_TRANSITIONS = {
    TrayEvent.ACTIVATE: TrayAction.SHOW_WINDOW,
    TrayEvent.MENU_SHOW: TrayAction.SHOW_WINDOW,
    TrayEvent.MENU_TOGGLE: TrayAction.SHOW_WINDOW,
    TrayEvent.MENU_QUIT: TrayAction.EXIT,
    TrayEvent.CLOSE_REQUESTED: TrayAction.HIDE_WINDOW,
}


class TrayController:
    """Turn tray, menu and window events into window and process actions.

    Closing the window only hides it; the process keeps running in the tray
    until MENU_QUIT. Toggling capture is the frontend's job, so the toggle
    event surfaces the window and then hands off to ``on_toggle``.
    Window errors propagate to the caller.
    """

    def __init__(
        self,
        window: WindowHandle,
        on_exit: Callable[[], None],
        on_toggle: Optional[Callable[[], None]] = None,
    ) -> None:
        self.window = window
        self._on_exit = on_exit
        self._on_toggle = on_toggle

    @staticmethod
    def resolve(event: TrayEvent) -> TrayAction:
        try:
            return _TRANSITIONS[TrayEvent(event)]
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown tray event: {event!r}") from exc

    def handle(self, event: TrayEvent) -> TrayAction:
        action = self.resolve(event)
        event = TrayEvent(event)
        logger.info("Tray event %s -> %s", event.value, action.value)

        if action is TrayAction.SHOW_WINDOW:
            self.window.show()
            self.window.focus()
            if event is TrayEvent.MENU_TOGGLE and self._on_toggle is not None:
                self._on_toggle()
        elif action is TrayAction.HIDE_WINDOW:
            self.window.hide()
        else:
            self._on_exit()
        return action


def create_icon_image(color: str = "#3FB950", size: int = 64) -> Any:
    try:
        from PIL import Image, ImageDraw
    except Exception as exc:  # pragma: no cover - environment-dependent
        raise RuntimeError("Pillow is required for the tray icon.") from exc

    image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    margin = size // 8
    draw.ellipse((margin, margin, size - margin, size - margin), fill=color)
    mic_w = size // 6
    center = size // 2
    draw.rounded_rectangle(
        (center - mic_w // 2, size // 4, center + mic_w // 2, center + mic_w),
        radius=mic_w // 2,
        fill="#0b0f14",
    )
    return image


class TrayIcon:
    """pystray icon whose menu posts TrayEvents to ``post``.

    pystray calls back on its own thread, so ``post`` must only enqueue.
    """

    def __init__(
        self,
        title: str,
        post: Callable[[TrayEvent], None],
        is_listening: Callable[[], bool],
    ) -> None:
        self._title = title
        self._post = post
        self._is_listening = is_listening
        self._icon = None

    def build_menu(self) -> Any:
        try:
            import pystray
        except Exception as exc:  # pragma: no cover - environment-dependent
            raise RuntimeError("pystray is required for the tray icon.") from exc

        return pystray.Menu(
            pystray.MenuItem(
                "Open",
                lambda _icon, _item: self._post(TrayEvent.ACTIVATE),
                default=True,
                visible=False,
            ),
            pystray.MenuItem(
                "Show",
                lambda _icon, _item: self._post(TrayEvent.MENU_SHOW),
            ),
            pystray.MenuItem(
                lambda _item: "Stop Listening" if self._is_listening() else "Start Listening",
                lambda _icon, _item: self._post(TrayEvent.MENU_TOGGLE),
            ),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem(
                "Quit",
                lambda _icon, _item: self._post(TrayEvent.MENU_QUIT),
            ),
        )

    def run_detached(self) -> None:
        menu = self.build_menu()
        import pystray

        self._icon = pystray.Icon(
            name="creeper",
            icon=create_icon_image(),
            title=self._title,
            menu=menu,
        )
        logger.info("Starting tray icon")
        self._icon.run_detached()

    def refresh(self) -> None:
        if self._icon is not None:
            self._icon.update_menu()

    def stop(self) -> None:
        icon = self._icon
        self._icon = None
        if icon is not None:
            icon.stop()
            logger.info("Tray icon stopped")
