"""Route named commands to the posture engine.

Errors never cross this boundary: each handler runs through
:func:`posture.fallback.attempt` with a per-command default, and unknown
commands come back as :class:`NotImplementedOutcome`.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from bridge.commands import (
    Command,
    DiagnosticsCommand,
    GROUP_COMMANDS,
    NotImplementedOutcome,
    Request,
    Response,
    SecurityCommand,
    Success,
    parse_request,
)
from posture import diagnostics
from posture.engine import PostureEngine
from posture.fallback import attempt
from posture.offload import BackgroundRunner

_logger = logging.getLogger(__name__)

Handler = Callable[[Request], Any]

# Commands answered from memory. Every other command may spawn and wait on a
# process (getprop, su, pm, dumpsys, settings) or cross the jnius bridge.
INLINE_COMMANDS = frozenset(
    {
        SecurityCommand.SET_CAPTURE_BLOCKED,
        SecurityCommand.IS_CAPTURE_EVENT_DETECTED,
        DiagnosticsCommand.GET_NETWORK_INFO,
        DiagnosticsCommand.IS_VPN_ACTIVE,
        DiagnosticsCommand.GET_BATTERY_INFO,
    }
)

DEFAULTS: Dict[Command, Any] = {
    DiagnosticsCommand.GET_APP_SIGNATURE: None,
    DiagnosticsCommand.IS_INSTALLED_FROM_TRUSTED_STORE: False,
    DiagnosticsCommand.GET_NETWORK_INFO: diagnostics.NetworkInfo().to_wire(),
    DiagnosticsCommand.IS_VPN_ACTIVE: False,
    DiagnosticsCommand.GET_BATTERY_INFO: diagnostics.BatteryInfo().to_wire(),
    DiagnosticsCommand.LIST_INSTALLED_PACKAGES: [],
    DiagnosticsCommand.IS_APP_INSTALLED: False,
    DiagnosticsCommand.GET_APP_VERSION: None,
    DiagnosticsCommand.GET_BUILD_NUMBER: None,
    SecurityCommand.IS_ROOTED: False,
    SecurityCommand.HAS_ROOT_TOOLS: False,
    SecurityCommand.GET_SECURITY_PROPERTIES: {},
    SecurityCommand.HAS_SECURE_LOCK_SCREEN: False,
    SecurityCommand.IS_CAPTURE_EVENT_DETECTED: False,
    SecurityCommand.SET_CAPTURE_BLOCKED: None,
}


class CommandDispatcher:
    """Map every command to a handler backed by :class:`PostureEngine`."""

    def __init__(self, engine: PostureEngine, *, runner: BackgroundRunner | None = None) -> None:
        self.engine = engine
        self.runner = runner or BackgroundRunner()
        self._handlers: Dict[Command, Handler] = self._build_handlers()
        missing = [
            command
            for commands in GROUP_COMMANDS.values()
            for command in commands
            if command not in self._handlers or command not in DEFAULTS
        ]
        if missing:
            raise RuntimeError(f"commands without handler: {', '.join(c.value for c in missing)}")

    def _build_handlers(self) -> Dict[Command, Handler]:
        engine = self.engine

        def set_capture_blocked(request: Request) -> None:
            engine.capture.set_capture_blocked(request.flag_argument("prevent"))

        return {
            DiagnosticsCommand.GET_APP_SIGNATURE: lambda _: engine.inventory.app_signature(),
            DiagnosticsCommand.IS_INSTALLED_FROM_TRUSTED_STORE: lambda _: engine.inventory.is_installed_from_trusted_store(),
            DiagnosticsCommand.GET_NETWORK_INFO: lambda _: diagnostics.network_info().to_wire(),
            DiagnosticsCommand.IS_VPN_ACTIVE: lambda _: diagnostics.is_vpn_active(),
            DiagnosticsCommand.GET_BATTERY_INFO: lambda _: diagnostics.battery_info().to_wire(),
            DiagnosticsCommand.LIST_INSTALLED_PACKAGES: lambda _: engine.inventory.list_installed_packages(),
            DiagnosticsCommand.IS_APP_INSTALLED: lambda r: engine.inventory.is_installed(r.text_argument("packageName")),
            DiagnosticsCommand.GET_APP_VERSION: lambda _: engine.inventory.app_version(),
            DiagnosticsCommand.GET_BUILD_NUMBER: lambda _: engine.inventory.build_number(),
            SecurityCommand.IS_ROOTED: lambda _: engine.tamper.is_device_rooted(),
            SecurityCommand.HAS_ROOT_TOOLS: lambda _: engine.tamper.has_root_tools(),
            SecurityCommand.GET_SECURITY_PROPERTIES: lambda _: engine.properties.get_security_properties(),
            SecurityCommand.HAS_SECURE_LOCK_SCREEN: lambda _: engine.lockscreen.has_secure_lock_screen(),
            SecurityCommand.IS_CAPTURE_EVENT_DETECTED: lambda _: engine.capture.is_capture_event_detected(),
            SecurityCommand.SET_CAPTURE_BLOCKED: set_capture_blocked,
        }

    def _execute(self, request: Request) -> Any:
        handler = self._handlers[request.command]
        return attempt(
            lambda: handler(request),
            DEFAULTS[request.command],
            label=f"{request.group.value}.{request.command.value}",
        ).value

    def dispatch(
        self,
        group: str,
        method: str,
        arguments: Optional[Mapping[str, Any]] = None,
    ) -> Response:
        """Run a command synchronously on the calling thread."""

        parsed = parse_request(group, method, arguments)
        if isinstance(parsed, NotImplementedOutcome):
            _logger.debug("Unsupported command %s.%s", group, method)
            return parsed
        return Success(self._execute(parsed))

    def dispatch_async(
        self,
        group: str,
        method: str,
        arguments: Optional[Mapping[str, Any]],
        callback: Callable[[Response], None],
    ) -> None:
        """Deliver the response to *callback*; non-inline commands run on a worker thread."""

        parsed = parse_request(group, method, arguments)
        if isinstance(parsed, NotImplementedOutcome):
            callback(parsed)
            return
        if parsed.command in INLINE_COMMANDS:
            callback(Success(self._execute(parsed)))
            return
        self.runner.submit(
            lambda: self._execute(parsed),
            lambda value: callback(Success(value)),
            default=DEFAULTS[parsed.command],
            label=f"{parsed.group.value}.{parsed.command.value}",
        )

    def supported(self) -> Dict[str, list]:
        return {
            group.value: [command.value for command in commands]
            for group, commands in GROUP_COMMANDS.items()
        }


__all__ = ["INLINE_COMMANDS", "CommandDispatcher", "DEFAULTS"]
