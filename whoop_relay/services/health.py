"""Health checks behind ``/api/health``.

Each check yields ``healthy``, ``unhealthy`` or ``skipped``. The report is
``unhealthy`` as soon as one check is; skipped checks never count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import httpx
from starlette.concurrency import run_in_threadpool

from .. import whoop
from ..core import Datastore, DatastoreError, Settings, iso_timestamp, system_info
from ..models import WorkoutRecord

logger = logging.getLogger(__name__)

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"
SKIPPED = "skipped"
ERROR = "error"


@dataclass
class CheckResult:
    status: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "details": self.details}


@dataclass
class HealthReport:
    status: str = HEALTHY
    timestamp: str = field(default_factory=iso_timestamp)
    checks: Dict[str, CheckResult] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    response_time: Optional[str] = None

    def record(self, name: str, result: CheckResult, error: Optional[str] = None) -> None:
        self.checks[name] = result
        if error:
            self.errors.append(error)

    def finalize(self) -> None:
        self.status = overall_status(check.status for check in self.checks.values())

    @property
    def status_code(self) -> int:
        if self.status == HEALTHY:
            return 200
        if self.status == UNHEALTHY:
            return 503
        return 500

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "timestamp": self.timestamp,
            "checks": {name: check.to_dict() for name, check in self.checks.items()},
            "errors": list(self.errors),
            "responseTime": self.response_time,
        }


def overall_status(statuses: Iterable[str]) -> str:
    return UNHEALTHY if any(status == UNHEALTHY for status in statuses) else HEALTHY


def check_environment(settings: Settings) -> CheckResult:
    # presence only; a missing value shows up in the details, not the status
    return CheckResult(HEALTHY, settings.presence())


async def check_http(client: httpx.AsyncClient) -> tuple[CheckResult, Optional[str]]:
    try:
        response = await whoop.probe_echo(client)
    except httpx.HTTPError as exc:
        return (
            CheckResult(UNHEALTHY, {"error": str(exc) or type(exc).__name__}),
            f"Outbound HTTP test failed: {exc}",
        )
    return (
        CheckResult(
            HEALTHY,
            {
                "statusCode": response.status_code,
                "responseTime": response.headers.get("x-response-time", "unknown"),
            },
        ),
        None,
    )


async def check_datastore(datastore: Optional[Datastore]) -> tuple[CheckResult, Optional[str]]:
    if datastore is None:
        return CheckResult(SKIPPED, {"reason": "Missing datastore configuration"}), None
    try:
        await run_in_threadpool(datastore.select, WorkoutRecord, 1)
    except DatastoreError as exc:
        return (
            CheckResult(UNHEALTHY, {"error": str(exc)}),
            f"Datastore connection failed: {exc}",
        )
    return CheckResult(HEALTHY, {"canQuery": True}), None


async def check_provider_api(
    settings: Settings, client: httpx.AsyncClient
) -> tuple[CheckResult, Optional[str]]:
    if not settings.has_whoop_credentials:
        return CheckResult(SKIPPED, {"reason": "Missing WHOOP environment variables"}), None
    try:
        response = await whoop.probe_api(client)
    except httpx.RequestError as exc:
        return (
            CheckResult(UNHEALTHY, {"reachable": False, "error": str(exc) or type(exc).__name__}),
            f"WHOOP API test failed: {exc}",
        )
    return (
        CheckResult(
            HEALTHY,
            {
                "reachable": True,
                "statusCode": response.status_code,
                "note": "API is reachable (401 expected with invalid token)",
            },
        ),
        None,
    )


def check_system() -> CheckResult:
    return CheckResult(HEALTHY, system_info())


async def run_checks(
    report: HealthReport,
    settings: Settings,
    client: httpx.AsyncClient,
    datastore: Optional[Datastore],
) -> HealthReport:
    """Fill ``report`` with every check, in a fixed order."""

    logger.debug("Checking environment variables")
    report.record("environment", check_environment(settings))

    logger.debug("Testing outbound HTTP")
    report.record("http", *await check_http(client))

    logger.debug("Testing datastore connection")
    report.record("datastore", *await check_datastore(datastore))

    logger.debug("Testing WHOOP API connectivity")
    report.record("provider_api", *await check_provider_api(settings, client))

    report.record("system", check_system())

    report.finalize()
    return report


__all__ = [
    "ERROR",
    "HEALTHY",
    "SKIPPED",
    "UNHEALTHY",
    "CheckResult",
    "HealthReport",
    "check_datastore",
    "check_environment",
    "check_http",
    "check_provider_api",
    "check_system",
    "overall_status",
    "run_checks",
]
