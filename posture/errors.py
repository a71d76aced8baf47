"""Exceptions raised inside the probes.

None of these reach callers of the public query methods; they are resolved to
defaults by :func:`posture.fallback.attempt`.
"""
from __future__ import annotations


class PlatformUnavailable(RuntimeError):
    """Raised when a platform binding or shell tool cannot be reached."""


class PackageNotFound(LookupError):
    """Raised when the package manager has no record of a package."""


__all__ = ["PackageNotFound", "PlatformUnavailable"]
