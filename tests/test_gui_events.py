import pytest

from creeper.gui import EventPump, ListeningState, TkWindow
from creeper.tray import TrayController, TrayEvent, WindowUnavailableError


class RecordingWindow:
    def __init__(self) -> None:
        self.calls = []
        self.broken = False

    def show(self) -> None:
        if self.broken:
            raise WindowUnavailableError("gone")
        self.calls.append("show")

    def focus(self) -> None:
        self.calls.append("focus")

    def hide(self) -> None:
        self.calls.append("hide")


def test_pump_handles_events_in_delivery_order():
    window = RecordingWindow()
    exits = []
    pump = EventPump(TrayController(window, on_exit=lambda: exits.append(True)))

    pump.post(TrayEvent.CLOSE_REQUESTED)
    pump.post(TrayEvent.ACTIVATE)
    pump.post(TrayEvent.CLOSE_REQUESTED)

    assert pump.drain() == 3
    assert window.calls == ["hide", "show", "focus", "hide"]
    assert exits == []
    assert pump.drain() == 0


def test_pump_aborts_only_the_failing_event():
    window = RecordingWindow()
    window.broken = True
    pump = EventPump(TrayController(window, on_exit=lambda: None))

    pump.post(TrayEvent.MENU_SHOW)
    pump.post(TrayEvent.CLOSE_REQUESTED)

    assert pump.drain() == 2
    assert window.calls == ["hide"]


def test_listening_state_flag():
    state = ListeningState()
    assert not state.is_listening()
    state.set(True)
    assert state.is_listening()
    state.set(False)
    assert not state.is_listening()


def test_tk_window_maps_tcl_errors():
    tk = pytest.importorskip("tkinter")

    class DestroyedRoot:
        def deiconify(self):
            raise tk.TclError('can\'t invoke "wm" command: application has been destroyed')

        def withdraw(self):
            self.withdrawn = True

    root = DestroyedRoot()
    window = TkWindow(root)
    window.hide()
    assert root.withdrawn

    with pytest.raises(WindowUnavailableError):
        window.show()


def test_pump_keeps_going_after_a_failing_exit_callback():
    window = RecordingWindow()
    exits = []

    def _exit_twice() -> None:
        exits.append(True)
        if len(exits) > 1:
            raise RuntimeError("already destroyed")

    pump = EventPump(TrayController(window, on_exit=_exit_twice))
    pump.post(TrayEvent.MENU_QUIT)
    pump.post(TrayEvent.MENU_QUIT)
    pump.post(TrayEvent.CLOSE_REQUESTED)

    assert pump.drain() == 3
    assert exits == [True, True]
    assert window.calls == ["hide"]
