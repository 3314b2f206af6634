"""Dispatch of WHOOP webhook batches to the datastore."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from ..core import Datastore, DatastoreError
from ..models import WORKOUT_EVENTS, EventType, WebhookEvent, WorkoutRecord

logger = logging.getLogger(__name__)


@dataclass
class WebhookSummary:
    received: int = 0
    stored: int = 0
    skipped: int = 0
    failed: int = 0


def store_workout(datastore: Optional[Datastore], event: WebhookEvent) -> WorkoutRecord:
    if datastore is None:
        raise DatastoreError("no datastore configured")
    return datastore.insert(WorkoutRecord, event.to_record())


def process_events(body: Any, datastore: Optional[Datastore]) -> WebhookSummary:
    """Handle every event of a webhook body in arrival order.

    Insert failures are logged and do not stop the batch. A body that is not
    a JSON array raises ``TypeError``.
    """

    if not isinstance(body, list):
        raise TypeError(f"webhook body must be a JSON array, got {type(body).__name__}")

    summary = WebhookSummary(received=len(body))
    for index, raw in enumerate(body):
        try:
            event = WebhookEvent.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Skipping malformed webhook event #%d: %s", index, exc)
            summary.skipped += 1
            continue

        kind = event.kind
        if kind is EventType.WEBHOOK_TEST:
            logger.info("Received WHOOP webhook test event.")
            continue

        if kind in WORKOUT_EVENTS:
            if event.payload is None:
                logger.warning(
                    "Workout event %s for user %s has no payload; skipping",
                    event.type,
                    event.user_id,
                )
                summary.skipped += 1
                continue

            logger.info("Workout event received for user %s", event.user_id)
            try:
                store_workout(datastore, event)
            except DatastoreError as exc:
                logger.error("Datastore insert error: %s", exc)
                summary.failed += 1
            else:
                logger.info("Logged workout %s to the datastore.", event.payload.id)
                summary.stored += 1
            continue

        logger.info("Unhandled webhook event type: %s", event.type)

    return summary


__all__ = ["WebhookSummary", "process_events", "store_workout"]
