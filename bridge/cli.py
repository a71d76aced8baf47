"""Command line entry point for posture-probe.

Commands:
    report    - Evaluate the full security posture and print it as JSON
    call      - Dispatch a single named command (e.g. ``call security isRooted``)
    commands  - List the supported command names per group
"""

from __future__ import annotations

__all__ = ["cli", "main"]

import json
import logging
import sys
from typing import Any, Dict, Tuple

import click

from bridge.commands import NotImplementedOutcome
from bridge.dispatcher import CommandDispatcher
from posture import __version__
from posture.engine import PostureEngine


def _parse_arguments(pairs: Tuple[str, ...]) -> Dict[str, Any]:
    """Turn ``key=value`` pairs into command arguments.

    ``true``/``false`` become booleans so flags such as ``prevent`` can be set
    from the shell; everything else stays a string.
    """
    arguments: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--arg")
        lowered = value.lower()
        if lowered in ("true", "false"):
            arguments[key] = lowered == "true"
        else:
            arguments[key] = value
    return arguments


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, sort_keys=True))


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="posture-probe")
@click.option("--verbose", "-v", is_flag=True, help="Log probe faults and decisions")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """posture-probe: device integrity and security posture checks."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    if "engine" not in ctx.obj:
        ctx.obj["engine"] = PostureEngine.create()


@cli.command()
@click.pass_context
def report(ctx: click.Context) -> None:
    """Evaluate every posture query."""
    engine: PostureEngine = ctx.obj["engine"]
    payload = engine.evaluate().to_wire()
    payload["heuristics"] = engine.tamper.heuristics()
    _echo_json(payload)


@cli.command()
@click.argument("group")
@click.argument("method")
@click.option("--arg", "pairs", multiple=True, metavar="KEY=VALUE", help="Command argument (repeatable)")
@click.pass_context
def call(ctx: click.Context, group: str, method: str, pairs: Tuple[str, ...]) -> None:
    """Dispatch METHOD in GROUP and print the result."""
    dispatcher = CommandDispatcher(ctx.obj["engine"])
    response = dispatcher.dispatch(group, method, _parse_arguments(pairs))
    if isinstance(response, NotImplementedOutcome):
        _echo_json({"ok": False, "error": "not_implemented", "group": group, "method": method})
        sys.exit(2)
    _echo_json({"ok": True, "value": response.value})


@cli.command()
@click.pass_context
def commands(ctx: click.Context) -> None:
    """List supported commands."""
    dispatcher = CommandDispatcher(ctx.obj["engine"])
    for group, names in dispatcher.supported().items():
        click.echo(f"{group}:")
        for name in names:
            click.echo(f"  {name}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
