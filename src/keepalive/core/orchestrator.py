"""Run orchestrator: probe every target once and aggregate the results."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import httpx
from rich.console import Console
from rich.markup import escape

from keepalive.core.config import Settings
from keepalive.core.logging import get_logger
from keepalive.core.models import RunSummary, Target
from keepalive.prober.scanner import ProberEngine
from keepalive.reports.console import print_banner, print_summary

console = Console()
log = get_logger(__name__)


class RunOrchestrator:
    """Orchestrates one keep-alive run: fan out → await all → summarize."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.prober = ProberEngine(settings, transport=transport)

    async def run(self, targets: list[Target]) -> RunSummary:
        """Probe all targets concurrently and aggregate their outcomes.

        Args:
            targets: Targets in configuration order

        Returns:
            Summary holding exactly one outcome per target
        """
        log.debug("run_started", targets=len(targets))
        outcomes = await self.prober.probe_all(targets)
        summary = RunSummary(outcomes=tuple(outcomes))
        log.debug(
            "run_finished",
            total=summary.total,
            successful=summary.successful,
            failed=summary.failed,
        )
        return summary

    def write_report(self, summary: RunSummary, path: Path) -> None:
        """Write the run report as JSON."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(summary.to_dict(), f, indent=2, default=str)


def run_targets(
    targets: list[Target],
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    output: Console = console,
) -> int:
    """Execute a full run and return the process exit code.

    Returns 0 only if every target succeeded and the requested report,
    if any, was written. Unexpected errors raised before outcomes are
    collected are reported and yield 1.
    """
    orchestrator = RunOrchestrator(settings, transport=transport)
    print_banner(output)

    try:
        summary = asyncio.run(orchestrator.run(targets))
    except Exception as e:
        log.exception("run_crashed")
        output.print(f"[red]Fatal error: {escape(str(e))}[/red]")
        return 1

    print_summary(summary, output)

    report_path = settings.output.report_path
    if report_path:
        try:
            orchestrator.write_report(summary, report_path)
        except OSError as e:
            log.error("report_failed", path=str(report_path), error=str(e))
            output.print(f"[red]Could not write report to {escape(str(report_path))}: {escape(str(e))}[/red]")
            return 1
        output.print(f"[green]✓ Report written to {escape(str(report_path))}[/green]")

    return summary.exit_code
