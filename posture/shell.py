"""Backends built on the device shell tools (``pm``, ``dumpsys``, ``settings``).

Used when the process runs on a device without the pyjnius bridge, for
example from a terminal emulator or an instrumentation shell. Every call is
bounded by the policy's probe timeout.
"""
from __future__ import annotations

import re
from typing import List, Optional

from posture.capabilities import ProcessRunner, SubprocessRunner
from posture.errors import PackageNotFound, PlatformUnavailable
from posture.policy import ProbePolicy
from posture.policy import policy as default_policy

_VERSION_NAME_RE = re.compile(r"versionName=(\S+)")
_VERSION_CODE_RE = re.compile(r"versionCode=(\d+)")
_INSTALLER_RE = re.compile(r"installerPackageName=(\S+)")


class ShellPackageSource:
    """Package lookups through ``pm`` and ``dumpsys package``."""

    def __init__(self, runner: ProcessRunner | None = None, policy: ProbePolicy | None = None) -> None:
        self.runner = runner or SubprocessRunner()
        self.policy = policy or default_policy

    def _run(self, *argv: str) -> str:
        result = self.runner.run(argv, timeout=self.policy.probe_timeout)
        if result.returncode != 0:
            raise PlatformUnavailable(f"{argv[0]} exited with status {result.returncode}")
        return result.stdout

    def _dumpsys(self, name: str) -> str:
        output = self._run("dumpsys", "package", name)
        if "Unable to find package" in output or f"Package [{name}]" not in output:
            raise PackageNotFound(name)
        return output

    def list_packages(self) -> List[str]:
        output = self._run("pm", "list", "packages")
        return [
            line.strip()[len("package:"):]
            for line in output.splitlines()
            if line.strip().startswith("package:")
        ]

    def has_package(self, name: str) -> bool:
        if not name:
            return False
        result = self.runner.run(("pm", "path", name), timeout=self.policy.probe_timeout)
        if result.returncode != 0:
            return False
        return any(line.startswith("package:") for line in result.stdout.splitlines())

    def own_package(self) -> str:
        if not self.policy.app_package:
            raise PlatformUnavailable("POSTURE_APP_PACKAGE is not set")
        return self.policy.app_package

    def signature(self, name: str) -> Optional[str]:
        raise PlatformUnavailable("package signatures are not exposed by the shell")

    def version_name(self, name: str) -> Optional[str]:
        match = _VERSION_NAME_RE.search(self._dumpsys(name))
        return match.group(1) if match else None

    def version_code(self, name: str) -> Optional[int]:
        match = _VERSION_CODE_RE.search(self._dumpsys(name))
        return int(match.group(1)) if match else None

    def installer(self, name: str) -> Optional[str]:
        match = _INSTALLER_RE.search(self._dumpsys(name))
        if not match or match.group(1) == "null":
            return None
        return match.group(1)


class ShellSecureSettings:
    """Integer reads through ``settings get secure``."""

    def __init__(self, runner: ProcessRunner | None = None, policy: ProbePolicy | None = None) -> None:
        self.runner = runner or SubprocessRunner()
        self.policy = policy or default_policy

    def get_int(self, name: str, default: int) -> int:
        result = self.runner.run(("settings", "get", "secure", name), timeout=self.policy.probe_timeout)
        if result.returncode != 0:
            raise PlatformUnavailable(f"settings exited with status {result.returncode}")
        lines = result.stdout.strip().splitlines()
        value = lines[0].strip() if lines else ""
        if not value or value == "null":
            return default
        return int(value)


__all__ = ["ShellPackageSource", "ShellSecureSettings"]
