"""Centralised probe configuration.

The policy gathers the tunables shared by the probes: how long an external
read may block, whether faults should count against the device, and which
installers are trusted. Values can be overridden by environment variables so
that an embedding application can tighten them without code changes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_TRUSTED_INSTALLERS = ("com.android.vending",)


def _load_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _load_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return default


def _load_str(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


def _load_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.environ.get(name)
    if value is None:
        return default
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or default


@dataclass(frozen=True)
class ProbePolicy:
    """Holds runtime tunables for the posture probes."""

    probe_timeout: float = 5.0
    launch_timeout: float = 2.0
    fail_closed: bool = False
    app_package: Optional[str] = None
    trusted_installers: Tuple[str, ...] = DEFAULT_TRUSTED_INSTALLERS


def load_policy() -> ProbePolicy:
    """Load the probe policy considering environment overrides."""

    return ProbePolicy(
        probe_timeout=_load_float("POSTURE_PROBE_TIMEOUT", 5.0),
        launch_timeout=_load_float("POSTURE_LAUNCH_TIMEOUT", 2.0),
        fail_closed=_load_bool("POSTURE_FAIL_CLOSED", False),
        app_package=_load_str("POSTURE_APP_PACKAGE"),
        trusted_installers=_load_list("POSTURE_TRUSTED_INSTALLERS", DEFAULT_TRUSTED_INSTALLERS),
    )


policy = load_policy()


__all__ = ["ProbePolicy", "policy", "load_policy", "DEFAULT_TRUSTED_INSTALLERS"]
