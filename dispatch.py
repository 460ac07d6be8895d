"""
Synthetic paste keystroke, fired when the double blink gesture is recognized.
"""

from dataclasses import dataclass
from typing import Optional

from config import Config


@dataclass(frozen=True)
class DispatchResult:
    ok: bool
    error: Optional[str] = None


class DispatchSink:
    """
    Capability invoked once per recognized gesture.

    Implementations never retry; a failure is returned to the caller.
    """

    def trigger(self) -> DispatchResult:
        raise NotImplementedError


class PasteHotkeySink(DispatchSink):
    """
    Sends the paste chord (Cmd+V on macOS, Ctrl+V elsewhere) with PyAutoGUI.

    On macOS the host application needs the Accessibility permission; without
    it (or without a display) the backend fails and the failure is reported in
    the DispatchResult.
    """

    def __init__(self, keys=None, backend=None):
        if backend is None:
            import pyautogui
            backend = pyautogui

        # Disable PyAutoGUI fail-safe and the delay between calls
        backend.FAILSAFE = False
        backend.PAUSE = 0

        self.keys = tuple(keys) if keys else Config.PASTE_HOTKEY
        self._backend = backend

    def trigger(self):
        try:
            self._backend.hotkey(*self.keys)
        except Exception as e:
            print(f"[Dispatch] Failed to send {'+'.join(self.keys)}: {e}")
            return DispatchResult(ok=False, error=str(e))

        print(f"[Dispatch] Sent {'+'.join(self.keys)}")
        return DispatchResult(ok=True)
