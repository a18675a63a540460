"""keepalive-prober CLI - Main entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from keepalive import __version__
from keepalive.core.config import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_ENV_VAR,
    Settings,
    TargetSource,
    load_targets,
)
from keepalive.core.exceptions import ConfigurationError
from keepalive.core.logging import configure_logging
from keepalive.core.models import Target

app = typer.Typer(
    name="keepalive",
    help="Keep idle services awake by probing their endpoints",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        console.print(f"keepalive-prober v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """keepalive-prober - Periodic keep-alive requests with a pass/fail exit code."""
    pass


def _select_source(config: Optional[Path], from_env: bool, env_var: str) -> TargetSource:
    if config is not None and from_env:
        console.print("[red]Error: --config and --from-env are mutually exclusive[/red]")
        raise typer.Exit(1)
    if from_env:
        return TargetSource.env(env_var)
    return TargetSource.file(config or DEFAULT_CONFIG_FILE)


def _load_or_exit(source: TargetSource) -> list[Target]:
    try:
        return load_targets(source)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def run(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help=f"Projects file (YAML or JSON), default {DEFAULT_CONFIG_FILE}"
    ),
    from_env: bool = typer.Option(
        False, "--from-env", help="Read projects from an environment variable instead of a file"
    ),
    env_var: str = typer.Option(DEFAULT_ENV_VAR, help="Environment variable holding the projects"),
    settings_file: Optional[Path] = typer.Option(None, "--settings", help="Path to settings YAML file"),
    timeout: Optional[float] = typer.Option(None, help="Per-request timeout in seconds"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write a JSON report to this file"),
    json_logs: bool = typer.Option(False, "--json-logs/--console-logs", help="Emit JSON log lines"),
    log_level: Optional[str] = typer.Option(None, help="Log level (DEBUG, INFO, WARNING, ERROR)"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also append log lines to this file"),
    dry_run: bool = typer.Option(False, "--dry-run/--no-dry-run", help="Show what would be probed without executing"),
) -> None:
    """
    Probe every configured project once and report the results.

    Exits 0 when every project answered with a 2xx status and 1 otherwise,
    so schedulers can alert on failed runs.
    """
    from keepalive.core.orchestrator import run_targets
    from keepalive.prober import ProberEngine
    from keepalive.reports.console import render_targets

    settings = Settings.from_file_or_default(settings_file)
    if dry_run:
        settings.dry_run = True
    if timeout is not None:
        settings.prober.timeout = timeout
    if output is not None:
        settings.output.report_path = output
    if json_logs:
        settings.output.json_logs = True
    if log_file is not None:
        settings.output.log_file = log_file
    if log_level is not None:
        if log_level.upper() not in LOG_LEVELS:
            console.print(f"[red]Error: unknown log level '{log_level}'[/red]")
            raise typer.Exit(1)
        settings.output.log_level = log_level.upper()

    log_path = settings.output.log_file
    try:
        configure_logging(
            settings.output.log_level,
            json_format=settings.output.json_logs,
            log_file=str(log_path) if log_path else None,
        )
    except OSError as e:
        console.print(f"[red]Error: cannot open log file '{log_path}': {escape(str(e))}[/red]")
        raise typer.Exit(1)

    source = _select_source(config, from_env, env_var)
    targets = _load_or_exit(source)

    if settings.dry_run:
        console.print("[yellow]DRY RUN - Projects that would be probed:[/yellow]")
        console.print(render_targets(targets, ProberEngine(settings).resolve_url))
        return

    exit_code = run_targets(targets, settings, output=console)
    raise typer.Exit(exit_code)


@app.command()
def targets(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help=f"Projects file (YAML or JSON), default {DEFAULT_CONFIG_FILE}"
    ),
    from_env: bool = typer.Option(
        False, "--from-env", help="Read projects from an environment variable instead of a file"
    ),
    env_var: str = typer.Option(DEFAULT_ENV_VAR, help="Environment variable holding the projects"),
    settings_file: Optional[Path] = typer.Option(None, "--settings", help="Path to settings YAML file"),
) -> None:
    """
    Validate the configuration and list the projects it defines.

    API keys are masked. No requests are sent.
    """
    from keepalive.prober import ProberEngine
    from keepalive.reports.console import render_targets

    settings = Settings.from_file_or_default(settings_file)
    source = _select_source(config, from_env, env_var)
    loaded = _load_or_exit(source)

    console.print(Panel.fit(
        f"[bold cyan]Source:[/bold cyan] {source.describe()}\n"
        f"[bold cyan]Projects:[/bold cyan] {len(loaded)}\n"
        f"[bold cyan]Timeout:[/bold cyan] {settings.prober.timeout:g}s",
        title="Keep-Alive Configuration",
    ))
    console.print(render_targets(loaded, ProberEngine(settings).resolve_url))


if __name__ == "__main__":
    app()
