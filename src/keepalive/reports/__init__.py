"""Reports module - Console output for runs."""

from keepalive.reports.console import print_banner, print_summary, render_targets

__all__ = [
    "print_banner",
    "print_summary",
    "render_targets",
]
