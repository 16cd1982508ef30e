"""
Pydantic models for routines and exercise blocks.

Canonical models (Routine, ExerciseBlock, CircuitExercise) hold normalized
data with all invariants satisfied. Raw models accept whatever the AI
generator or a manual-entry client sends: every field optional, loosely
typed, under either the canonical or the generator's field names.
"""
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from calistenia.core.errors import EmptyRoutineError


class BlockKind(str, Enum):
    """Exercise block kinds. Each kind has its own time semantics."""

    STANDARD = "standard"
    HIIT = "hiit"
    AMRAP = "amrap"
    EMOM = "emom"
    REST = "rest"


INTENSITY_KINDS = frozenset({BlockKind.HIIT, BlockKind.AMRAP, BlockKind.EMOM})

DIFFICULTY_LEVELS = ("beginner", "intermediate", "advanced")


# --- Canonical Models ---

class CircuitExercise(BaseModel):
    """Single movement performed inside a HIIT/AMRAP/EMOM block."""

    model_config = ConfigDict(frozen=True)

    name: str
    reps: Optional[int] = None
    durationSeconds: Optional[int] = None
    description: str = ""
    tip: str = ""


class ExerciseBlock(BaseModel):
    """One timed unit of a routine. Only the fields relevant to `kind` are set."""

    kind: BlockKind = BlockKind.STANDARD
    name: str
    description: str = ""
    notes: str = ""
    orderIndex: int = Field(..., ge=1)

    sets: Optional[int] = Field(None, ge=1)
    repCount: Optional[int] = Field(None, ge=1)
    restSeconds: Optional[int] = Field(None, ge=0)
    workSeconds: Optional[int] = Field(None, ge=1)
    rounds: Optional[int] = Field(None, ge=1)
    durationSeconds: Optional[int] = Field(None, ge=1)

    circuitExercises: list[CircuitExercise] = Field(default_factory=list)


class Routine(BaseModel):
    """Canonical routine, ready to be persisted by the caller."""

    name: str
    description: str = ""
    difficulty: str = "intermediate"
    muscleFocus: str = "fullbody"
    spotifyMood: str = "energetic"
    estimatedDurationMinutes: int = Field(..., ge=0)
    exercises: list[ExerciseBlock] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Push Day Inferno",
                "description": "Upper body push with a HIIT finisher",
                "difficulty": "intermediate",
                "muscleFocus": "push",
                "spotifyMood": "energetic",
                "estimatedDurationMinutes": 14,
                "exercises": [
                    {"kind": "standard", "name": "Push-ups", "orderIndex": 1,
                     "sets": 3, "repCount": 12, "restSeconds": 60},
                    {"kind": "rest", "name": "Recovery", "orderIndex": 2, "restSeconds": 120},
                ],
            }
        }


# --- Raw (untrusted) Models ---

class RawCircuitExercise(BaseModel):
    """Circuit entry as sent by the generator."""

    model_config = ConfigDict(extra="ignore")

    name: Any = None
    reps: Any = Field(None, validation_alias=AliasChoices("reps", "repCount"))
    durationSeconds: Any = Field(
        None, validation_alias=AliasChoices("durationSeconds", "duration", "duration_seconds")
    )
    description: Any = None
    tip: Any = Field(None, validation_alias=AliasChoices("tip", "tips"))


class RawExercise(BaseModel):
    """Exercise entry as sent by the generator or a manual-entry client."""

    model_config = ConfigDict(extra="ignore")

    kind: Any = Field(None, validation_alias=AliasChoices("kind", "exercise_type", "type"))
    name: Any = None
    description: Any = None
    notes: Any = None

    sets: Any = None
    repCount: Any = Field(None, validation_alias=AliasChoices("repCount", "reps"))
    restSeconds: Any = None
    # Rest after a standard set or a rest block; never the rest between HIIT intervals
    restTime: Any = Field(None, validation_alias=AliasChoices("rest_time", "restTime"))
    hiitRestSeconds: Any = Field(None, validation_alias=AliasChoices("hiit_rest_time", "hiitRestSeconds"))
    workSeconds: Any = Field(None, validation_alias=AliasChoices("workSeconds", "hiit_work_time"))
    rounds: Any = Field(None, validation_alias=AliasChoices("rounds", "hiit_rounds"))
    durationSeconds: Any = None
    amrapDuration: Any = Field(None, validation_alias=AliasChoices("amrap_duration", "amrapDuration"))
    emomDuration: Any = Field(None, validation_alias=AliasChoices("emom_duration", "emomDuration"))

    circuitExercises: Any = Field(
        None, validation_alias=AliasChoices("circuitExercises", "circuit_exercises")
    )


class RawRoutinePayload(BaseModel):
    """Routine payload with every field optional."""

    model_config = ConfigDict(extra="ignore")

    name: Any = None
    description: Any = None
    difficulty: Any = Field(None, validation_alias=AliasChoices("difficulty", "difficulty_level"))
    muscleFocus: Any = Field(None, validation_alias=AliasChoices("muscleFocus", "muscle_focus"))
    spotifyMood: Any = Field(None, validation_alias=AliasChoices("spotifyMood", "spotify_mood"))
    estimatedDurationMinutes: Any = Field(
        None, validation_alias=AliasChoices("estimatedDurationMinutes", "estimated_duration")
    )
    exercises: list[RawExercise] = Field(default_factory=list)

    @field_validator("exercises", mode="before")
    @classmethod
    def coerce_exercise_entries(cls, value: Any) -> list:
        """Keep every entry: strings become names, other scalars become empty entries."""
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("exercises must be a list")
        entries = []
        for item in value:
            if isinstance(item, dict):
                entries.append(item)
            elif isinstance(item, str):
                entries.append({"name": item})
            else:
                entries.append({})
        return entries


# --- Normalization Result ---

class NormalizationResult(BaseModel):
    """Outcome of normalizing one raw payload."""

    routine: Routine
    isEmpty: bool = False
    repairedBlocks: list[int] = Field(default_factory=list, description="orderIndex of repaired blocks")
    durationEstimated: bool = False

    def raise_if_empty(self) -> "NormalizationResult":
        """Escalate an empty routine into EmptyRoutineError for callers that reject it."""
        if self.isEmpty:
            raise EmptyRoutineError("Routine has no exercise blocks")
        return self
