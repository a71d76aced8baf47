"""Screen capture suppression for the visible surface."""
from __future__ import annotations

import logging
import threading
from typing import Optional, Protocol

from posture.platform import NullWindow

_logger = logging.getLogger(__name__)


class WindowFlags(Protocol):
    def set_secure(self, enabled: bool) -> None:
        ...


class CaptureGuardState:
    """Owned capture-block flag shared with the display layer."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._blocked = False

    @property
    def blocked(self) -> bool:
        with self._lock:
            return self._blocked

    def set(self, blocked: bool) -> None:
        with self._lock:
            self._blocked = bool(blocked)

    def reset(self) -> None:
        self.set(False)


class ScreenCaptureGuard:
    """Toggle the secure-window flag and remember the requested state."""

    def __init__(self, window: Optional[WindowFlags] = None, state: Optional[CaptureGuardState] = None) -> None:
        self.window = window or NullWindow()
        self.state = state or CaptureGuardState()

    def _apply(self, enabled: bool) -> None:
        try:
            self.window.set_secure(enabled)
        except Exception as exc:
            _logger.debug("Could not update secure window flag: %s", exc)
            return
        _logger.info("Screen capture %s", "blocked" if enabled else "allowed")

    def set_capture_blocked(self, enabled: bool) -> None:
        """Set or clear the capture block; repeated calls are harmless."""

        self.state.set(enabled)
        self._apply(bool(enabled))

    def is_capture_blocked(self) -> bool:
        return self.state.blocked

    def attach(self, window: WindowFlags, *, reapply: bool = False) -> None:
        """Bind to a newly created surface.

        A fresh surface starts unprotected; pass ``reapply=True`` to carry the
        current state over to it.
        """

        self.window = window
        if reapply:
            self._apply(self.state.blocked)
        else:
            self.state.reset()

    def is_capture_event_detected(self) -> bool:
        """Not implemented: always ``False``.

        No screenshot or recording detection exists yet. A ``False`` here is
        not an assurance that no capture happened.
        """

        return False


__all__ = ["CaptureGuardState", "ScreenCaptureGuard", "WindowFlags"]
