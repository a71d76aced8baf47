"""Injectable access to processes and the filesystem.

Heuristics never touch :mod:`subprocess` or :mod:`os.path` directly; they go
through these small interfaces so tests can substitute fakes.
"""
from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

_logger = logging.getLogger(__name__)

REAP_TIMEOUT = 1.0


@dataclass(frozen=True)
class ProcessResult:
    returncode: int
    stdout: str


class ProcessRunner(Protocol):
    def run(self, argv: Sequence[str], *, timeout: float) -> ProcessResult:
        """Run *argv* to completion and capture its standard output."""

    def launch(self, argv: Sequence[str], *, timeout: float) -> None:
        """Start *argv*; raise :class:`OSError` if it cannot be started."""


class FileSystem(Protocol):
    def exists(self, path: str) -> bool:
        ...


class SubprocessRunner:
    """Process runner backed by :mod:`subprocess` with bounded waits."""

    def run(self, argv: Sequence[str], *, timeout: float) -> ProcessResult:
        completed = subprocess.run(
            list(argv),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=timeout,
            check=False,
        )
        return ProcessResult(returncode=completed.returncode, stdout=completed.stdout or "")

    def launch(self, argv: Sequence[str], *, timeout: float) -> None:
        process = subprocess.Popen(
            list(argv),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        # The launch itself is the signal; failures while reaping do not undo it.
        try:
            process.wait(timeout=timeout)
            return
        except subprocess.TimeoutExpired:
            _logger.debug("%s still running after %.1fs, killing", argv[0], timeout)
        except OSError as exc:
            _logger.debug("Could not wait for %s: %s", argv[0], exc)
            return
        try:
            process.kill()
            process.wait(timeout=REAP_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as exc:
            _logger.debug("Could not reap %s: %s", argv[0], exc)


class LocalFileSystem:
    def exists(self, path: str) -> bool:
        return os.path.exists(path)


__all__ = [
    "FileSystem",
    "LocalFileSystem",
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
]
