"""WHOOP webhook receiver."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ...core import Datastore
from ...services import process_events
from ..deps import get_datastore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["webhooks"])


@router.post("/webhook-handler")
async def webhook_handler(
    request: Request, datastore: Optional[Datastore] = Depends(get_datastore)
) -> JSONResponse:
    """Relay a batch of WHOOP events.

    WHOOP redelivers on non-2xx, so single failed inserts still answer 200.
    """

    try:
        body = await request.json()
        summary = await run_in_threadpool(process_events, body, datastore)
    except Exception as exc:
        logger.error("Error processing webhook: %s", exc)
        return JSONResponse({"status": "error"}, status_code=500)

    logger.info(
        "Webhook batch processed (received=%d, stored=%d, skipped=%d, failed=%d)",
        summary.received,
        summary.stored,
        summary.skipped,
        summary.failed,
    )
    return JSONResponse({"status": "received"})


@router.api_route(
    "/webhook-handler",
    methods=["GET", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    include_in_schema=False,
)
async def webhook_method_not_allowed() -> JSONResponse:
    return JSONResponse({"message": "Method Not Allowed"}, status_code=405)


__all__ = ["router"]
