"""Database model for relayed WHOOP workouts."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class WorkoutRecord(SQLModel, table=True):
    """One row per workout webhook event; repeated deliveries are not merged."""

    __tablename__ = "workouts"

    id: Optional[int] = ORMField(default=None, primary_key=True)
    user_id: str = ORMField(index=True)
    workout_id: str
    strain: float = 0.0
    event_type: str
    created_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["WorkoutRecord"]
