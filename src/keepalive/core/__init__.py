"""Core module - Configuration, models, and orchestration."""

from keepalive.core.config import Settings, TargetSource, load_targets
from keepalive.core.models import HTTPMethod, ProbeOutcome, RunSummary, Target

__all__ = [
    "Settings",
    "TargetSource",
    "load_targets",
    "HTTPMethod",
    "ProbeOutcome",
    "RunSummary",
    "Target",
]
