"""Diagnostics placeholders.

Network, VPN and battery reporting are not implemented. The values below are
fixed and flagged with ``implemented=False`` so that nothing downstream
mistakes them for measurements.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

UNIMPLEMENTED = frozenset({"network_info", "is_vpn_active", "battery_info"})


@dataclass(frozen=True)
class NetworkInfo:
    type: str = "unknown"
    is_connected: bool = True
    implemented: bool = False

    def to_wire(self) -> Dict[str, Any]:
        return {"type": self.type, "isConnected": self.is_connected}


@dataclass(frozen=True)
class BatteryInfo:
    level: int = 100
    is_charging: bool = False
    implemented: bool = False

    def to_wire(self) -> Dict[str, Any]:
        return {"level": self.level, "isCharging": self.is_charging}


def network_info() -> NetworkInfo:
    return NetworkInfo()


def is_vpn_active() -> bool:
    """Always ``False``; VPN detection is out of scope."""

    return False


def battery_info() -> BatteryInfo:
    return BatteryInfo()


__all__ = [
    "BatteryInfo",
    "NetworkInfo",
    "UNIMPLEMENTED",
    "battery_info",
    "is_vpn_active",
    "network_info",
]
