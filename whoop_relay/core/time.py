"""Time helpers shared by handlers."""

from __future__ import annotations

import time
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def iso_timestamp() -> str:
    """Current UTC time as ``2024-01-01T12:00:00.000Z``."""

    return utcnow().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def epoch_ms() -> int:
    return int(time.time() * 1000)


def elapsed_ms(started: float) -> str:
    """Format the time since a ``time.perf_counter()`` mark as ``"12ms"``."""

    return f"{round((time.perf_counter() - started) * 1000)}ms"


__all__ = ["elapsed_ms", "epoch_ms", "iso_timestamp", "utcnow"]
