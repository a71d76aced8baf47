"""Wire the probes together and aggregate a posture snapshot."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from posture.capabilities import ProcessRunner, SubprocessRunner
from posture.capture import ScreenCaptureGuard
from posture.lockscreen import LockScreenPolicyCheck
from posture.packages import PackageInventory
from posture.platform import (
    JniusPackageSource,
    JniusSecureSettings,
    JniusWindow,
    NullWindow,
    is_android,
)
from posture.policy import ProbePolicy
from posture.policy import policy as default_policy
from posture.properties import PropertyProbe
from posture.shell import ShellPackageSource, ShellSecureSettings
from posture.tamper import TamperDetector

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SecurityPosture:
    """Snapshot of the posture queries; not persisted anywhere."""

    rooted: bool
    has_root_tools: bool
    properties: Dict[str, str] = field(default_factory=dict)
    secure_lock_screen: bool = False

    def to_wire(self) -> Dict[str, Any]:
        return {
            "rooted": self.rooted,
            "hasRootTools": self.has_root_tools,
            "properties": dict(self.properties),
            "secureLockScreen": self.secure_lock_screen,
        }


class PostureEngine:
    """Hold one instance of every probe for the lifetime of the host."""

    def __init__(
        self,
        *,
        inventory: PackageInventory,
        tamper: TamperDetector,
        properties: PropertyProbe,
        lockscreen: LockScreenPolicyCheck,
        capture: ScreenCaptureGuard,
        policy: ProbePolicy | None = None,
    ) -> None:
        self.inventory = inventory
        self.tamper = tamper
        self.properties = properties
        self.lockscreen = lockscreen
        self.capture = capture
        self.policy = policy or default_policy

    @classmethod
    def create(
        cls,
        policy: ProbePolicy | None = None,
        *,
        runner: ProcessRunner | None = None,
        android: Optional[bool] = None,
    ) -> "PostureEngine":
        """Build an engine with the Android or shell backends."""

        policy = policy or default_policy
        runner = runner or SubprocessRunner()
        if android is None:
            android = is_android()
        if android:  # pragma: no cover - requires Android runtime
            source = JniusPackageSource()
            settings = JniusSecureSettings()
            window = JniusWindow()
        else:
            source = ShellPackageSource(runner, policy)
            settings = ShellSecureSettings(runner, policy)
            window = NullWindow()
        _logger.debug("Using %s backends", "Android" if android else "shell")
        inventory = PackageInventory(source, policy)
        return cls(
            inventory=inventory,
            tamper=TamperDetector(inventory, runner=runner, policy=policy),
            properties=PropertyProbe(runner, policy),
            lockscreen=LockScreenPolicyCheck(settings),
            capture=ScreenCaptureGuard(window),
            policy=policy,
        )

    def evaluate(self) -> SecurityPosture:
        """Run every posture query. Blocks on external processes."""

        return SecurityPosture(
            rooted=self.tamper.is_device_rooted(),
            has_root_tools=self.tamper.has_root_tools(),
            properties=self.properties.get_security_properties(),
            secure_lock_screen=self.lockscreen.has_secure_lock_screen(),
        )


__all__ = ["PostureEngine", "SecurityPosture"]
