"""
unitctl — CLI entrypoint.

Usage:
    unitctl --help
    unitctl resolve webserver
    unitctl resolve pkg/apt curl
    unitctl which pkg/apt
    unitctl selftest
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from unitctl import __version__
from unitctl.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="unitctl")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to unitctl.yml (default: auto-detect).",
)
@click.option(
    "--path",
    "-p",
    "paths",
    multiple=True,
    type=click.Path(file_okay=False),
    help="Extra unit search root, tried first (repeatable).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write raw output of external actions here.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    paths: tuple[str, ...],
    log_file: str | None,
) -> None:
    """unitctl — resolve trees of idempotent provisioning units."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["paths"] = paths

    # Config only feeds logging defaults here; resolve reports its errors
    from unitctl.core.config.loader import ConfigError, load_config

    try:
        config = load_config(ctx.obj["config_path"])
    except ConfigError:
        config = None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get(
            "UNITCTL_LOG_LEVEL", (config.log_level if config else None) or "WARNING"
        )

    setup_logging(
        level=level,
        log_file=os.environ.get("UNITCTL_DEBUG_LOG"),
        action_log=(
            log_file
            or os.environ.get("UNITCTL_LOG_FILE")
            or (config.log_file if config else None)
        ),
    )


@cli.command()
@click.argument("unit")
@click.argument("args", nargs=-1)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def resolve(ctx: click.Context, unit: str, args: tuple[str, ...], as_json: bool) -> None:
    """Resolve UNIT and everything it requires.

    Exits 0 when every unit in the tree holds, 1 on the first failure.

    Examples:

        unitctl resolve webserver

        unitctl resolve pkg/apt curl

        unitctl resolve selftest
    """
    _run_resolve(ctx, unit, args, as_json)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def selftest(ctx: click.Context, as_json: bool) -> None:
    """Run the built-in self-test units."""
    from unitctl.core.use_cases.resolve import SELFTEST_UNIT

    _run_resolve(ctx, SELFTEST_UNIT, (), as_json)


@cli.command()
@click.argument("unit")
@click.pass_context
def which(ctx: click.Context, unit: str) -> None:
    """Show which file UNIT would be loaded from."""
    from unitctl.core.config.loader import ConfigError
    from unitctl.core.engine.errors import UnitError
    from unitctl.core.use_cases.resolve import locate_unit

    try:
        path, roots = locate_unit(
            unit,
            config_path=ctx.obj.get("config_path"),
            extra_paths=ctx.obj.get("paths", ()),
        )
    except (ConfigError, UnitError) as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if path is None:
        click.secho(f"❌ unit '{unit}' not found", fg="red")
        if not ctx.obj.get("quiet"):
            for root in roots:
                click.echo(f"   searched: {root}")
        sys.exit(1)

    click.echo(str(path))


def _run_resolve(
    ctx: click.Context,
    unit: str,
    args: tuple[str, ...],
    as_json: bool,
) -> None:
    from unitctl.core.engine.reporter import Reporter
    from unitctl.core.use_cases.resolve import resolve_unit
    from unitctl.ui.cli.tree import TreeReporter

    reporter = Reporter() if as_json else TreeReporter()

    result = resolve_unit(
        unit,
        args=args,
        config_path=ctx.obj.get("config_path"),
        extra_paths=ctx.obj.get("paths", ()),
        reporter=reporter,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    outcome = result.outcome
    if result.error or outcome is None:
        click.secho(f"❌ {result.error or unit + ': no outcome'}", fg="red")
        sys.exit(1)

    if not ctx.obj.get("quiet"):
        stats = result.stats
        summary = (
            f"{stats.satisfied}/{stats.nodes} units ok, "
            f"{stats.remediated} remediated ({result.duration_ms}ms)"
        )
        click.echo()
        if outcome.ok:
            click.secho(f"✅ {unit}: {summary}", fg="green", bold=True)
        else:
            click.secho(f"❌ {unit}: failed at {outcome.unit} — {summary}", fg="red", bold=True)

    sys.exit(0 if outcome.ok else 1)


if __name__ == "__main__":
    cli()
