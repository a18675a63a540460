"""Human-readable console report for a keep-alive run."""

from __future__ import annotations

from typing import Callable

from rich.console import Console
from rich.table import Table

from keepalive.core.models import RunSummary, Target

RULE_WIDTH = 50


def print_banner(console: Console) -> None:
    console.print("=" * RULE_WIDTH)
    console.print("[bold]Keep-Alive Prober[/bold]")
    console.print("=" * RULE_WIDTH)


def print_summary(summary: RunSummary, console: Console) -> None:
    """Print totals, then one line per failing target."""
    console.print()
    console.print("=" * RULE_WIDTH)
    console.print("Summary:")
    console.print("=" * RULE_WIDTH)

    console.print(f"Total projects: {summary.total}")
    console.print(f"Successful: {summary.successful}")
    console.print(f"Failed: {summary.failed}")

    if summary.failures:
        console.print()
        console.print("Failed projects:")
        for outcome in summary.failures:
            # Errors may contain brackets; keep rich from reading them as markup.
            console.print(f"  - {outcome.target}: {outcome.error}", markup=False)


def render_targets(
    targets: list[Target],
    resolve_url: Callable[[Target], str],
) -> Table:
    """Table of configured targets with credentials masked."""
    table = Table(title=f"Configured Targets ({len(targets)})")
    table.add_column("Name", style="cyan")
    table.add_column("Method")
    table.add_column("URL")
    table.add_column("API key")

    for target in targets:
        apikey = target.masked_apikey()
        if target.require_apikey and not target.apikey:
            apikey = "[red]missing[/red]"
        table.add_row(
            target.name,
            target.effective_method.value,
            resolve_url(target),
            apikey,
        )

    return table
