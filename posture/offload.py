"""Run blocking probes off the UI thread."""
from __future__ import annotations

import threading
from typing import Callable, TypeVar

from posture.fallback import attempt

T = TypeVar("T")
Scheduler = Callable[[Callable[[], None]], None]


def kivy_scheduler() -> Scheduler:
    """Return a scheduler that posts callbacks to the Kivy main loop."""

    from kivy.clock import Clock

    return lambda fn: Clock.schedule_once(lambda *_: fn())


class BackgroundRunner:
    """Execute probes in worker threads and hand results to a scheduler."""

    def __init__(self, *, scheduler: Scheduler | None = None) -> None:
        self.scheduler = scheduler or (lambda fn: fn())

    def submit(
        self,
        func: Callable[[], T],
        on_result: Callable[[T], None],
        *,
        default: T,
        label: str = "background probe",
    ) -> threading.Thread:
        def _worker() -> None:
            value = attempt(func, default, label=label).value
            self.scheduler(lambda: on_result(value))

        thread = threading.Thread(target=_worker, name=label, daemon=True)
        thread.start()
        return thread


__all__ = ["BackgroundRunner", "Scheduler", "kivy_scheduler"]
