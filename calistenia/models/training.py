"""
Pydantic models for training progress: per-user aggregates and sessions.
"""
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


StreakTransition = Literal["first", "same_day", "consecutive", "reset", "backdated"]


class UserTrainingContext(BaseModel):
    """Per-user streak and lifetime totals. Mutated only by the streak tracker."""

    currentStreak: int = Field(0, ge=0)
    longestStreak: int = Field(0, ge=0)
    lastWorkoutDate: Optional[date] = None
    totalWorkouts: int = Field(0, ge=0)
    totalMinutes: int = Field(0, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "currentStreak": 5,
                "longestStreak": 5,
                "lastWorkoutDate": "2025-01-10",
                "totalWorkouts": 23,
                "totalMinutes": 1040,
            }
        }


class CompletionResult(BaseModel):
    """Updated context after one completed session."""

    context: UserTrainingContext
    isNewRecord: bool
    transition: StreakTransition


class CompletionEvent(BaseModel):
    """A finished session as seen by the streak tracker."""

    completionDate: date
    sessionMinutes: int = 0


class TrainingSession(BaseModel):
    """Lifecycle of one training session of a routine."""

    id: str
    routineId: Optional[str] = None
    startTime: datetime
    endTime: Optional[datetime] = None
    completed: bool = False
    totalDurationMinutes: int = Field(0, ge=0)
