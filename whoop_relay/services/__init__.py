"""Service layer helpers."""

from .health import HealthReport, run_checks
from .webhooks import WebhookSummary, process_events

__all__ = [
    "HealthReport",
    "WebhookSummary",
    "process_events",
    "run_checks",
]
