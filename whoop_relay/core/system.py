"""Process metadata reported by the health and diagnostic endpoints."""

from __future__ import annotations

import platform
import resource
import sys
import time
from typing import Any, Dict

_STARTED_AT = time.monotonic()


def uptime_seconds() -> float:
    return time.monotonic() - _STARTED_AT


def memory_usage() -> Dict[str, str]:
    usage = resource.getrusage(resource.RUSAGE_SELF)
    # ru_maxrss is KiB on Linux, bytes on macOS
    divisor = 1024 * 1024 if sys.platform == "darwin" else 1024
    return {"maxRss": f"{round(usage.ru_maxrss / divisor)}MB"}


def system_info() -> Dict[str, Any]:
    return {
        "pythonVersion": platform.python_version(),
        "platform": sys.platform,
        "memoryUsage": memory_usage(),
        "uptime": f"{round(uptime_seconds())}s",
    }


__all__ = ["memory_usage", "system_info", "uptime_seconds"]
