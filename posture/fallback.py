"""Fail-soft plumbing shared by every probe.

Probes never raise to their callers. Instead each read is routed through
:func:`attempt`, which returns an :class:`Outcome` holding either the real
value or the caller supplied default together with the fault that forced it.
Callers that only care about the answer read ``.value``; callers that need to
tell a genuine negative apart from a degraded one check ``.degraded``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a probe that may have fallen back to its default."""

    value: T
    error: Optional[BaseException] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None


def attempt(func: Callable[[], T], default: T, *, label: str) -> Outcome[T]:
    """Run *func* and fall back to *default* on any exception."""

    try:
        return Outcome(func())
    except Exception as exc:
        _logger.debug("%s failed, using %r: %s", label, default, exc)
        return Outcome(default, exc)


__all__ = ["Outcome", "attempt"]
