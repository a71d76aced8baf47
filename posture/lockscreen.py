"""Lock-screen policy check based on secure settings."""
from __future__ import annotations

from typing import Protocol

from posture.fallback import attempt

# Value of Settings.Secure.LOCK_PATTERN_ENABLED.
LOCK_PATTERN_ENABLED = "lock_pattern_autolock"
LOCK_PASSWORD_TYPE = "lockscreen.password_type"


class SettingsReader(Protocol):
    def get_int(self, name: str, default: int) -> int:
        ...


class LockScreenPolicyCheck:
    """Report whether a pattern or password lock is configured.

    Newer OS versions may refuse these reads; each sub-check then reports
    ``False`` on its own while the other still counts.
    """

    def __init__(self, settings: SettingsReader) -> None:
        self.settings = settings

    def pattern_lock_enabled(self) -> bool:
        return attempt(
            lambda: self.settings.get_int(LOCK_PATTERN_ENABLED, 0) != 0,
            False,
            label="pattern lock setting",
        ).value

    def password_configured(self) -> bool:
        return attempt(
            lambda: self.settings.get_int(LOCK_PASSWORD_TYPE, 0) != 0,
            False,
            label="password type setting",
        ).value

    def has_secure_lock_screen(self) -> bool:
        return self.pattern_lock_enabled() or self.password_configured()


__all__ = ["LOCK_PASSWORD_TYPE", "LOCK_PATTERN_ENABLED", "LockScreenPolicyCheck", "SettingsReader"]
