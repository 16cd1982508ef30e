"""
Pydantic models for request/response validation.
"""
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from calistenia.models.routine import CircuitExercise
from calistenia.models.training import CompletionResult, TrainingSession, UserTrainingContext
from calistenia.services.suggestions import FocusSuggestion


# --- Routine Models ---

class NormalizeRequest(BaseModel):
    """Request model for routine normalization."""
    payload: Any = Field(..., description="Routine object or raw completion text")
    muscleFocusHint: Optional[str] = None
    allowEmpty: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "payload": "```json\n{\"name\": \"Push Day\", \"exercises\": [{\"name\": \"HIIT\", \"exercise_type\": \"hiit\"}]}\n```",
                "muscleFocusHint": "push",
                "allowEmpty": False
            }
        }


class EstimateRequest(BaseModel):
    """Request model for duration estimation of raw exercise entries."""
    exercises: list[Any] = []


class EstimateResponse(BaseModel):
    """Estimated minutes plus the per-block seconds behind them."""
    minutes: int
    blockSeconds: list[int]


class CircuitResponse(BaseModel):
    """Default circuit for a muscle-focus category."""
    category: str
    catalogVersion: str
    exercises: list[CircuitExercise]


class GenerateRequest(BaseModel):
    """Request model for AI routine generation."""
    muscleGroup: str = Field(default="fullbody", examples=["push", "pull", "legs", "core", "fullbody"])
    duration: int = Field(default=45, ge=10, le=180, description="Target duration in minutes")
    intensity: str = Field(default="high")
    level: Optional[str] = Field(None, description="User's experience level")
    customPrompt: Optional[str] = Field(None, max_length=1000)


# --- Training Models ---

class CompleteRequest(BaseModel):
    """Request model for applying one completed session to a user's context."""
    context: Optional[UserTrainingContext] = None
    completionDate: date | datetime
    sessionMinutes: int = 0

    class Config:
        json_schema_extra = {
            "example": {
                "context": {"currentStreak": 5, "longestStreak": 5, "lastWorkoutDate": "2025-01-10",
                            "totalWorkouts": 23, "totalMinutes": 1040},
                "completionDate": "2025-01-11",
                "sessionMinutes": 42
            }
        }


class FinishRequest(BaseModel):
    """Request model for finishing a training session."""
    session: TrainingSession
    context: Optional[UserTrainingContext] = None
    finishedAt: Optional[datetime] = None
    timezone: Optional[str] = None


class FinishResponse(BaseModel):
    """Finished session and the updated training context."""
    session: TrainingSession
    result: CompletionResult


class SuggestionsRequest(BaseModel):
    """Request model for focus suggestions."""
    recentExercises: list[str] = []
    limit: int = Field(default=4, ge=1, le=10)


class SuggestionsResponse(BaseModel):
    """Suggested workout focuses."""
    suggestions: list[FocusSuggestion]
