"""
Default circuit catalog.

A fixed, versioned lookup of bodyweight circuits keyed by muscle-focus
category. Used to repair HIIT/AMRAP/EMOM blocks that arrive without a usable
circuit. The catalog is immutable; the normalizer receives it as a parameter.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from calistenia.core.config import settings
from calistenia.models.routine import CircuitExercise


def _circuit(*entries: dict) -> tuple[CircuitExercise, ...]:
    return tuple(CircuitExercise(**entry) for entry in entries)


_DEFAULT_CIRCUITS = {
    "push": _circuit(
        {"name": "Push-ups", "reps": 15, "description": "Strict push-ups", "tip": "Elbows at 45 degrees"},
        {"name": "Diamond Push-ups", "reps": 12, "description": "Hands together under the chest", "tip": "Keep hands touching"},
        {"name": "Pike Push-ups", "reps": 10, "description": "Hips high, head towards the floor", "tip": "Load the shoulders"},
        {"name": "Archer Push-ups", "reps": 8, "description": "Shift weight to one arm", "tip": "Alternate sides"},
    ),
    "pull": _circuit(
        {"name": "Pull-ups", "reps": 8, "description": "Overhand grip pull-ups", "tip": "Full range of motion"},
        {"name": "Chin-ups", "reps": 8, "description": "Underhand grip pull-ups", "tip": "Drive with the biceps"},
        {"name": "Australian Rows", "reps": 12, "description": "Inverted rows under a low bar", "tip": "Chest to the bar"},
        {"name": "Negative Pull-ups", "reps": 5, "description": "Slow eccentric pull-ups", "tip": "5 seconds on the way down"},
    ),
    "legs": _circuit(
        {"name": "Jump Squats", "reps": 15, "description": "Explosive squat jumps", "tip": "Drive through the floor"},
        {"name": "Lunges", "reps": 20, "description": "Alternating forward lunges", "tip": "10 per leg"},
        {"name": "Bulgarian Split Squats", "reps": 12, "description": "Rear foot elevated split squats", "tip": "6 per leg"},
        {"name": "Box Jumps", "reps": 10, "description": "Jumps onto a box or bench", "tip": "Land softly"},
    ),
    "core": _circuit(
        {"name": "V-ups", "reps": 15, "description": "Hands meet feet at the top", "tip": "Touch your toes"},
        {"name": "Leg Raises", "reps": 12, "description": "Lying straight-leg raises", "tip": "Controlled tempo"},
        {"name": "Plank", "durationSeconds": 60, "description": "Forearm plank hold", "tip": "Squeeze the glutes"},
        {"name": "Mountain Climbers", "reps": 30, "description": "Knees to chest from a plank", "tip": "Keep the pace high"},
    ),
    "fullbody": _circuit(
        {"name": "Burpees", "durationSeconds": 40, "description": "Chest to floor, jump at the top", "tip": "Be explosive"},
        {"name": "Mountain Climbers", "durationSeconds": 40, "description": "Knees to chest from a plank", "tip": "Speed"},
        {"name": "Jump Squats", "durationSeconds": 40, "description": "Explosive squat jumps", "tip": "Land softly"},
        {"name": "Push-ups", "durationSeconds": 40, "description": "Strict push-ups", "tip": "Full range"},
        {"name": "High Knees", "durationSeconds": 40, "description": "Running in place, knees high", "tip": "Speed"},
    ),
}


@dataclass(frozen=True)
class CircuitCatalog:
    """Immutable category -> circuit mapping with a fallback category."""

    version: str
    circuits: Mapping[str, tuple[CircuitExercise, ...]]
    fallback: str = field(default=settings.DEFAULT_MUSCLE_FOCUS)

    def __post_init__(self):
        if self.fallback not in self.circuits:
            raise ValueError(f"Fallback category '{self.fallback}' is not in the catalog")
        object.__setattr__(self, "circuits", MappingProxyType(dict(self.circuits)))

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(self.circuits)

    def knows(self, category: Optional[str]) -> bool:
        return isinstance(category, str) and category.strip().lower() in self.circuits

    def resolve(self, hint: Optional[str]) -> str:
        """Map a free-form hint to a catalog category; unknown hints use the fallback."""
        if self.knows(hint):
            return hint.strip().lower()
        return self.fallback

    def circuit_for(self, hint: Optional[str]) -> list[CircuitExercise]:
        """Return a fresh list with the default circuit for `hint`."""
        return list(self.circuits[self.resolve(hint)])


DEFAULT_CIRCUIT_CATALOG = CircuitCatalog(version="1", circuits=_DEFAULT_CIRCUITS)
