"""Root / tamper heuristics.

Each heuristic is best-effort and independently fail-soft. By default a
heuristic that faults reports ``False`` (availability first); with
``ProbePolicy.fail_closed`` a fault counts as evidence of tampering instead.
A heuristic that runs and answers negatively, such as ``su`` not being on
the path, is never treated as a fault.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Sequence, Tuple

from posture.capabilities import FileSystem, LocalFileSystem, ProcessRunner, SubprocessRunner
from posture.fallback import attempt
from posture.packages import PackageInventory
from posture.platform import read_build_tags
from posture.policy import ProbePolicy
from posture.policy import policy as default_policy

_logger = logging.getLogger(__name__)

TEST_KEYS_MARKER = "test-keys"

ROOT_BINARY_PATHS: Tuple[str, ...] = (
    "/system/app/Superuser.apk",
    "/sbin/su",
    "/system/bin/su",
    "/system/xbin/su",
    "/data/local/xbin/su",
    "/data/local/bin/su",
    "/system/sd/xbin/su",
    "/system/bin/failsafe/su",
    "/data/local/su",
    "/su/bin/su",
)

ROOT_MANAGEMENT_PACKAGES: Tuple[str, ...] = (
    "com.noshufou.android.su",
    "com.noshufou.android.su.elite",
    "eu.chainfire.supersu",
    "com.koushikdutta.superuser",
    "com.thirdparty.superuser",
    "com.yellowes.su",
    "com.topjohnwu.magisk",
)

SU_COMMAND: Tuple[str, ...] = ("su",)


class TamperDetector:
    """Combine the build, filesystem and executable heuristics."""

    def __init__(
        self,
        inventory: PackageInventory,
        *,
        build_tags: Callable[[], Optional[str]] = read_build_tags,
        filesystem: FileSystem | None = None,
        runner: ProcessRunner | None = None,
        policy: ProbePolicy | None = None,
        root_paths: Sequence[str] = ROOT_BINARY_PATHS,
        root_packages: Sequence[str] = ROOT_MANAGEMENT_PACKAGES,
        su_command: Sequence[str] = SU_COMMAND,
    ) -> None:
        self.inventory = inventory
        self.build_tags = build_tags
        self.filesystem = filesystem or LocalFileSystem()
        self.runner = runner or SubprocessRunner()
        self.policy = policy or default_policy
        self.root_paths = tuple(root_paths)
        self.root_packages = tuple(root_packages)
        self.su_command = tuple(su_command)

    def _guarded(self, func: Callable[[], bool], label: str) -> bool:
        outcome = attempt(func, False, label=label)
        if outcome.degraded and self.policy.fail_closed:
            _logger.warning("%s could not run; counting as tampered (fail-closed)", label)
            return True
        return outcome.value

    def _build_signature(self) -> bool:
        tags = self.build_tags()
        return tags is not None and TEST_KEYS_MARKER in tags

    def _root_paths(self) -> bool:
        return any(self.filesystem.exists(path) for path in self.root_paths)

    def _su_launch(self) -> bool:
        try:
            self.runner.launch(self.su_command, timeout=self.policy.launch_timeout)
        except OSError as exc:
            _logger.debug("%s could not be launched: %s", self.su_command[0], exc)
            return False
        return True

    def check_build_signature(self) -> bool:
        """Build signed with test keys."""

        return self._guarded(self._build_signature, "build signature check")

    def check_root_paths(self) -> bool:
        """Any well-known su / Superuser path exists."""

        return self._guarded(self._root_paths, "root path check")

    def check_su_launch(self) -> bool:
        """The ``su`` helper can be started."""

        return self._guarded(self._su_launch, "su launch check")

    def heuristics(self) -> Dict[str, bool]:
        """Evaluate every heuristic without short-circuiting."""

        return {
            "build_signature": self.check_build_signature(),
            "root_paths": self.check_root_paths(),
            "su_launch": self.check_su_launch(),
        }

    def is_device_rooted(self) -> bool:
        checks = (self.check_build_signature, self.check_root_paths, self.check_su_launch)
        return any(check() for check in checks)

    def has_root_tools(self) -> bool:
        for package_name in self.root_packages:
            if self.inventory.is_installed(package_name):
                _logger.debug("Root management package installed: %s", package_name)
                return True
        return False


__all__ = [
    "ROOT_BINARY_PATHS",
    "ROOT_MANAGEMENT_PACKAGES",
    "SU_COMMAND",
    "TEST_KEYS_MARKER",
    "TamperDetector",
]
