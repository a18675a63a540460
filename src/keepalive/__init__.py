"""keepalive-prober - Keep idle database-backed APIs awake."""

__version__ = "1.0.0"

from keepalive.core.config import Settings
from keepalive.core.models import ProbeOutcome, RunSummary, Target

__all__ = [
    "Settings",
    "Target",
    "ProbeOutcome",
    "RunSummary",
]
