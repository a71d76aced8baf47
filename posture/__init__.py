"""Device integrity and security posture probes."""
from __future__ import annotations

from posture.capture import CaptureGuardState, ScreenCaptureGuard
from posture.engine import PostureEngine, SecurityPosture
from posture.lockscreen import LockScreenPolicyCheck
from posture.packages import AppMetadata, PackageInventory
from posture.policy import ProbePolicy, load_policy
from posture.properties import PropertyProbe
from posture.tamper import TamperDetector

__version__ = "0.1.0"

__all__ = [
    "AppMetadata",
    "CaptureGuardState",
    "LockScreenPolicyCheck",
    "PackageInventory",
    "PostureEngine",
    "ProbePolicy",
    "PropertyProbe",
    "ScreenCaptureGuard",
    "SecurityPosture",
    "TamperDetector",
    "load_policy",
]
