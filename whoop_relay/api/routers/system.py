"""System-level API endpoints."""

from __future__ import annotations

import logging
import time
from typing import Dict, Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...core import Datastore, Settings, elapsed_ms, get_settings
from ...services.health import ERROR, HealthReport, run_checks
from ..deps import get_datastore, get_http_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/healthz")
def healthz() -> Dict[str, bool]:
    """Liveness probe; never calls out."""

    return {"ok": True}


@router.get("/api/health")
async def health(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
    datastore: Optional[Datastore] = Depends(get_datastore),
) -> JSONResponse:
    """Probe configuration, outbound HTTP, the datastore and the WHOOP API."""

    started = time.perf_counter()
    report = HealthReport()
    try:
        await run_checks(report, settings, client, datastore)
    except Exception as exc:
        logger.exception("Health check failed")
        report.status = ERROR
        report.errors.append(f"Health check failed: {exc}")
        report.response_time = elapsed_ms(started)
        return JSONResponse(report.to_dict(), status_code=500)

    report.response_time = elapsed_ms(started)
    logger.info(
        "Health check completed (status=%s, errors=%d, elapsed=%s)",
        report.status,
        len(report.errors),
        report.response_time,
    )
    return JSONResponse(report.to_dict(), status_code=report.status_code)


__all__ = ["router"]
