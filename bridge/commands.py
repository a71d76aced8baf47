"""Named commands accepted from the host UI layer."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, Union


class Group(str, Enum):
    DIAGNOSTICS = "diagnostics"
    SECURITY = "security"


class DiagnosticsCommand(str, Enum):
    GET_APP_SIGNATURE = "getAppSignature"
    IS_INSTALLED_FROM_TRUSTED_STORE = "isInstalledFromTrustedStore"
    GET_NETWORK_INFO = "getNetworkInfo"
    IS_VPN_ACTIVE = "isVpnActive"
    GET_BATTERY_INFO = "getBatteryInfo"
    LIST_INSTALLED_PACKAGES = "listInstalledPackages"
    IS_APP_INSTALLED = "isAppInstalled"
    GET_APP_VERSION = "getAppVersion"
    GET_BUILD_NUMBER = "getBuildNumber"


class SecurityCommand(str, Enum):
    IS_ROOTED = "isRooted"
    HAS_ROOT_TOOLS = "hasRootTools"
    GET_SECURITY_PROPERTIES = "getSecurityProperties"
    HAS_SECURE_LOCK_SCREEN = "hasSecureLockScreen"
    IS_CAPTURE_EVENT_DETECTED = "isCaptureEventDetected"
    SET_CAPTURE_BLOCKED = "setCaptureBlocked"


Command = Union[DiagnosticsCommand, SecurityCommand]

GROUP_COMMANDS: Dict[Group, Type[Enum]] = {
    Group.DIAGNOSTICS: DiagnosticsCommand,
    Group.SECURITY: SecurityCommand,
}

# Method names still sent by older host builds.
LEGACY_ALIASES: Dict[Group, Dict[str, Command]] = {
    Group.DIAGNOSTICS: {
        "isInstalledFromPlayStore": DiagnosticsCommand.IS_INSTALLED_FROM_TRUSTED_STORE,
        "getInstalledApps": DiagnosticsCommand.LIST_INSTALLED_PACKAGES,
    },
    Group.SECURITY: {
        "hasRootApps": SecurityCommand.HAS_ROOT_TOOLS,
        "getSystemProperties": SecurityCommand.GET_SECURITY_PROPERTIES,
        "isScreenshotDetected": SecurityCommand.IS_CAPTURE_EVENT_DETECTED,
        "preventScreenshots": SecurityCommand.SET_CAPTURE_BLOCKED,
    },
}


@dataclass(frozen=True)
class Request:
    group: Group
    command: Command
    arguments: Mapping[str, Any] = field(default_factory=dict)

    def text_argument(self, name: str) -> str:
        value = self.arguments.get(name)
        return value if isinstance(value, str) else ""

    def flag_argument(self, name: str) -> bool:
        value = self.arguments.get(name)
        return value if isinstance(value, bool) else False


@dataclass(frozen=True)
class Success:
    value: Any = None


@dataclass(frozen=True)
class NotImplementedOutcome:
    """The group or method is not supported by this engine."""

    group: str
    method: str


Response = Union[Success, NotImplementedOutcome]


def parse_request(
    group: str,
    method: str,
    arguments: Optional[Mapping[str, Any]] = None,
) -> Union[Request, NotImplementedOutcome]:
    """Resolve a raw group/method pair into a :class:`Request`."""

    try:
        resolved_group = Group(group)
    except ValueError:
        return NotImplementedOutcome(group, method)
    commands = GROUP_COMMANDS[resolved_group]
    try:
        command = commands(method)
    except ValueError:
        command = LEGACY_ALIASES[resolved_group].get(method)
        if command is None:
            return NotImplementedOutcome(group, method)
    if not isinstance(arguments, Mapping):
        arguments = {}
    return Request(resolved_group, command, dict(arguments))


__all__ = [
    "Command",
    "DiagnosticsCommand",
    "GROUP_COMMANDS",
    "Group",
    "LEGACY_ALIASES",
    "NotImplementedOutcome",
    "Request",
    "Response",
    "SecurityCommand",
    "Success",
    "parse_request",
]
