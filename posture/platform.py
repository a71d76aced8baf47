"""Android bindings reached through pyjnius.

Everything here degrades when running on desktop where pyjnius or the Kivy
activity are not available: the helpers raise :class:`PlatformUnavailable`
and the probes fall back to the shell backends in :mod:`posture.shell`.
"""
from __future__ import annotations

import functools
import logging
from typing import Any, List, Optional

from posture.errors import PackageNotFound, PlatformUnavailable

_logger = logging.getLogger(__name__)

BUILD_PROP_PATH = "/system/build.prop"
GET_SIGNATURES = 0x40
SDK_PIE = 28


def _autoclass(name: str) -> Any:
    try:
        # Late import to avoid failing during desktop testing.
        from jnius import autoclass
    except Exception as exc:  # pragma: no cover - environment dependent
        raise PlatformUnavailable(f"pyjnius is not available: {exc}") from exc
    return autoclass(name)


def _activity() -> Any:
    activity = _autoclass("org.kivy.android.PythonActivity").mActivity
    if activity is None:  # pragma: no cover - requires Android runtime
        raise PlatformUnavailable("Android activity is not running")
    return activity


@functools.lru_cache(maxsize=None)
def is_android() -> bool:
    """Return ``True`` when the Android activity can be reached via pyjnius."""

    try:
        _activity()
    except Exception as exc:
        _logger.debug("Android bindings unavailable: %s", exc)
        return False
    return True


def read_build_tags(build_prop: str = BUILD_PROP_PATH) -> Optional[str]:
    """Return the build signing tags (``Build.TAGS``).

    Without the Android runtime the ``ro.build.tags`` line of *build_prop* is
    used instead; a missing file yields ``None``.
    """

    if is_android():  # pragma: no cover - requires Android runtime
        return _autoclass("android.os.Build").TAGS
    try:
        with open(build_prop, "r", encoding="utf-8", errors="ignore") as handle:
            for line in handle:
                if line.startswith("ro.build.tags="):
                    return line.split("=", 1)[1].strip()
    except FileNotFoundError:
        return None
    return None


def _is_name_not_found(exc: BaseException) -> bool:
    classname = getattr(exc, "classname", "") or ""
    return classname.endswith("NameNotFoundException") or "NameNotFoundException" in str(exc)


class JniusPackageSource:  # pragma: no cover - requires Android runtime
    """Package lookups through ``PackageManager``."""

    def _manager(self) -> Any:
        return _activity().getPackageManager()

    def _info(self, name: str, flags: int = 0) -> Any:
        try:
            return self._manager().getPackageInfo(name, flags)
        except Exception as exc:
            if _is_name_not_found(exc):
                raise PackageNotFound(name) from exc
            raise

    def list_packages(self) -> List[str]:
        packages = self._manager().getInstalledPackages(0)
        return [packages.get(index).packageName for index in range(packages.size())]

    def has_package(self, name: str) -> bool:
        try:
            self._info(name)
        except PackageNotFound:
            return False
        return True

    def own_package(self) -> str:
        return _activity().getPackageName()

    def signature(self, name: str) -> Optional[str]:
        signatures = self._info(name, GET_SIGNATURES).signatures
        if not signatures:
            return None
        return signatures[0].toCharsString()

    def version_name(self, name: str) -> Optional[str]:
        return self._info(name).versionName

    def version_code(self, name: str) -> Optional[int]:
        info = self._info(name)
        if _autoclass("android.os.Build$VERSION").SDK_INT >= SDK_PIE:
            return int(info.getLongVersionCode())
        return int(info.versionCode)

    def installer(self, name: str) -> Optional[str]:
        return self._manager().getInstallerPackageName(name)


class JniusSecureSettings:  # pragma: no cover - requires Android runtime
    """Integer reads from ``Settings.Secure``."""

    def get_int(self, name: str, default: int) -> int:
        secure = _autoclass("android.provider.Settings$Secure")
        return int(secure.getInt(_activity().getContentResolver(), name, default))


class JniusWindow:  # pragma: no cover - requires Android runtime
    """Toggle ``FLAG_SECURE`` on the activity window."""

    def set_secure(self, enabled: bool) -> None:
        layout_params = _autoclass("android.view.WindowManager$LayoutParams")
        window = _activity().getWindow()
        if enabled:
            window.setFlags(layout_params.FLAG_SECURE, layout_params.FLAG_SECURE)
        else:
            window.clearFlags(layout_params.FLAG_SECURE)


class NullWindow:
    """Window sink used where there is no Android surface."""

    def set_secure(self, enabled: bool) -> None:
        _logger.debug("No secure window surface; capture flag %s kept in state only", enabled)


__all__ = [
    "BUILD_PROP_PATH",
    "JniusPackageSource",
    "JniusSecureSettings",
    "JniusWindow",
    "NullWindow",
    "is_android",
    "read_build_tags",
]
