"""CLI entry point for healthy-sdk.

Invoked as::

    healthy [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m healthy.cli.main
"""
from __future__ import annotations

import json
import sys

import click
from rich.console import Console
from rich.table import Table

console = Console()
error_console = Console(stderr=True, style="bold red")


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="healthy-sdk")
def cli() -> None:
    """Wait for files, TCP ports and HTTP endpoints to become healthy."""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from healthy import __version__

    console.print(f"[bold]healthy-sdk[/bold] v{__version__}")
    console.print(f"Python {sys.version}")


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _load_config(config: str | None, **flags: str | None):  # noqa: ANN202
    from healthy.config.loader import ConfigLoader
    from healthy.schema.errors import ConfigurationError

    try:
        return ConfigLoader().resolve(config, **flags)
    except ConfigurationError as exc:
        if exc.context.get("source") == "flags":
            error_console.print(f"Invalid option: {exc}")
        else:
            error_console.print(f"Could not load config: {exc}")
        raise SystemExit(1) from exc


# ---------------------------------------------------------------------------
# wait
# ---------------------------------------------------------------------------


@cli.command(name="wait")
@click.option("--file", "files", multiple=True, metavar="PATH", help="Wait for PATH to exist.")
@click.option("--tcp", "addrs", multiple=True, metavar="HOST:PORT", help="Wait for a TCP port.")
@click.option("--http", "urls", multiple=True, metavar="URL", help="Wait for GET URL to succeed.")
@click.option("--expect", default=200, show_default=True, help="Expected HTTP status code.")
@click.option(
    "--check-timeout",
    default="1s",
    show_default=True,
    help="Timeout of a single TCP dial or HTTP request.",
)
@click.option("--timeout", default=None, help="Overall deadline, e.g. 30s (0 disables).")
@click.option("--delay", default=None, help="Delay between attempts, e.g. 1s.")
@click.option("--jitter", default=None, help="Maximum random extra delay, e.g. 100ms.")
@click.option("--config", "-c", default=None, help="Path to a healthy YAML/JSON config file.")
@click.option("--quiet", "-q", is_flag=True, help="Only report the final outcome.")
def wait_command(
    files: tuple[str, ...],
    addrs: tuple[str, ...],
    urls: tuple[str, ...],
    expect: int,
    check_timeout: str,
    timeout: str | None,
    delay: str | None,
    jitter: str | None,
    config: str | None,
    quiet: bool,
) -> None:
    """Wait until every given check is healthy."""
    from healthy.checks.base import Check
    from healthy.checks.file import FileCheck
    from healthy.checks.http import HTTPCheck
    from healthy.checks.tcp import TCPCheck
    from healthy.retry.loop import Result
    from healthy.schema.duration import parse_duration
    from healthy.schema.errors import ConfigurationError, HealthyError, is_fatal, is_timeout
    from healthy.waiter.waiter import Waiter

    try:
        per_check_timeout = parse_duration(check_timeout)
    except ConfigurationError as exc:
        raise click.BadParameter(str(exc), param_hint="--check-timeout") from exc

    checks: list[Check] = [FileCheck(path) for path in files]
    checks.extend(TCPCheck(addr, timeout=per_check_timeout) for addr in addrs)
    checks.extend(HTTPCheck(url, timeout=per_check_timeout, expect=expect) for url in urls)

    if not checks:
        console.print("[dim](No checks given; nothing to wait for)[/dim]")
        return

    cfg = _load_config(config, timeout=timeout, delay=delay, jitter=jitter)

    def report(ctx: object, result: Result) -> None:
        target = result.metadata.get("target", "?")
        kind = result.metadata.get("type", "check")
        if result.ok:
            console.print(f"[green]healthy[/green] {kind} {target} (attempt {result.attempt})")
        elif not quiet:
            console.print(
                f"[yellow]waiting[/yellow] {kind} {target} "
                f"(attempt {result.attempt}): {result.error}"
            )

    try:
        Waiter(*checks).wait_sync(cfg, callback=report)
    except HealthyError as exc:
        if is_fatal(exc):
            error_console.print(f"Fatal: {exc}")
        elif is_timeout(exc):
            error_console.print(f"Timed out: {exc}")
        else:
            error_console.print(f"Wait failed: {exc}")
        raise SystemExit(1) from exc

    console.print(f"[green]All {len(checks)} check(s) healthy.[/green]")


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


@cli.command(name="config")
@click.option("--show", is_flag=True, help="Show the resolved configuration as JSON.")
@click.option(
    "--config",
    "-c",
    default=None,
    help="Path to a healthy YAML/JSON config file.",
)
def config_command(show: bool, config: str | None) -> None:
    """Show the resolved wait configuration."""
    from healthy.schema.duration import format_duration

    cfg = _load_config(config)

    if show:
        console.print_json(json.dumps(cfg.summary()))
        return

    table = Table(title="healthy configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="dim")
    table.add_column("Value")
    table.add_row("timeout", format_duration(cfg.timeout))
    table.add_row("delay", format_duration(cfg.delay))
    table.add_row("jitter", format_duration(cfg.jitter))
    console.print(table)


if __name__ == "__main__":
    cli()
