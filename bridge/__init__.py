"""Command routing between the host UI layer and the posture engine."""
from __future__ import annotations

from bridge.commands import NotImplementedOutcome, Success, parse_request
from bridge.dispatcher import CommandDispatcher

__all__ = ["CommandDispatcher", "NotImplementedOutcome", "Success", "parse_request"]
