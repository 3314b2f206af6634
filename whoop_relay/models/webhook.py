"""Schemas for events pushed by the WHOOP webhook."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class EventType(str, Enum):
    WEBHOOK_TEST = "webhook.test"
    WORKOUT_CREATED = "workout.created"
    WORKOUT_UPDATED = "workout.updated"
    OTHER = "other"

    @classmethod
    def classify(cls, raw: Optional[str]) -> "EventType":
        try:
            return cls(raw)
        except ValueError:
            return cls.OTHER


WORKOUT_EVENTS = frozenset({EventType.WORKOUT_CREATED, EventType.WORKOUT_UPDATED})


class WorkoutScore(BaseModel):
    model_config = ConfigDict(extra="allow")

    strain: Optional[float] = None


class WorkoutPayload(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    score: Optional[WorkoutScore] = None

    @property
    def strain(self) -> float:
        """Workout strain, ``0.0`` when WHOOP has not scored the workout."""

        if self.score is None or self.score.strain is None:
            return 0.0
        return self.score.strain


class WebhookEvent(BaseModel):
    """A single element of the webhook body array."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    type: Optional[str] = None
    user_id: Optional[str] = None
    payload: Optional[WorkoutPayload] = None

    @property
    def kind(self) -> EventType:
        return EventType.classify(self.type)

    def to_record(self) -> Dict[str, Any]:
        """Row values for ``WorkoutRecord``; requires a payload."""

        if self.payload is None:
            raise ValueError("workout event has no payload")
        return {
            "user_id": self.user_id,
            "workout_id": self.payload.id,
            "strain": self.payload.strain,
            "event_type": self.type,
        }


__all__ = [
    "EventType",
    "WORKOUT_EVENTS",
    "WebhookEvent",
    "WorkoutPayload",
    "WorkoutScore",
]
