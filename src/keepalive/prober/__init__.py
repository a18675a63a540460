"""Prober module - Keep-alive HTTP requests."""

from keepalive.prober.scanner import ProberEngine, describe_status

__all__ = [
    "ProberEngine",
    "describe_status",
]
