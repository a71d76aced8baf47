"""System property reads through ``getprop``."""
from __future__ import annotations

from typing import Dict, Tuple

from posture.capabilities import ProcessRunner, SubprocessRunner
from posture.fallback import attempt
from posture.policy import ProbePolicy
from posture.policy import policy as default_policy

# Conservative defaults: assume a production, secure build without adb root.
SECURITY_PROPERTIES: Tuple[Tuple[str, str], ...] = (
    ("ro.debuggable", "0"),
    ("ro.secure", "1"),
    ("service.adb.root", "0"),
)


class PropertyProbe:
    """Resolve named system configuration values with a default fallback."""

    def __init__(self, runner: ProcessRunner | None = None, policy: ProbePolicy | None = None) -> None:
        self.runner = runner or SubprocessRunner()
        self.policy = policy or default_policy

    def _read(self, key: str) -> str:
        result = self.runner.run(("getprop", key), timeout=self.policy.probe_timeout)
        if result.returncode != 0:
            return ""
        lines = result.stdout.splitlines()
        return lines[0].strip() if lines else ""

    def get_property(self, key: str, default: str) -> str:
        """Return the trimmed first line of ``getprop key`` or *default*.

        The default is used when the read is empty, exits non-zero, times out
        or cannot be launched at all.
        """

        value = attempt(lambda: self._read(key), "", label=f"getprop {key}").value
        return value or default

    def get_security_properties(self) -> Dict[str, str]:
        return {key: self.get_property(key, default) for key, default in SECURITY_PROPERTIES}


__all__ = ["PropertyProbe", "SECURITY_PROPERTIES"]
