"""Database model and schema exports."""

from .token import TokenResponse
from .webhook import WORKOUT_EVENTS, EventType, WebhookEvent, WorkoutPayload, WorkoutScore
from .workout import WorkoutRecord

__all__ = [
    "EventType",
    "TokenResponse",
    "WORKOUT_EVENTS",
    "WebhookEvent",
    "WorkoutPayload",
    "WorkoutRecord",
    "WorkoutScore",
]
