"""
Next-workout focus suggestions based on recently trained movements.
"""
from typing import Iterable

from pydantic import BaseModel


class FocusSuggestion(BaseModel):
    """One suggested workout focus."""
    type: str
    label: str
    description: str


# Name fragments (English and Spanish) that mark a movement pattern
_PATTERN_KEYWORDS = {
    "push": ("push", "flexion", "pecho", "dip", "fondo"),
    "pull": ("pull", "chin", "dominad", "row", "remo"),
    "legs": ("squat", "sentadilla", "lunge", "zancada", "pierna", "jump"),
}

_MUSCLE_SUGGESTIONS = (
    FocusSuggestion(type="push", label="Push Day", description="Chest, shoulders and triceps"),
    FocusSuggestion(type="pull", label="Pull Day", description="Back and biceps"),
    FocusSuggestion(type="legs", label="Leg Day", description="Quads, hamstrings and glutes"),
)

_INTENSITY_SUGGESTIONS = (
    FocusSuggestion(type="amrap", label="AMRAP 20 min", description="As many rounds as possible"),
    FocusSuggestion(type="hiit", label="HIIT Tabata", description="20s work / 10s rest"),
    FocusSuggestion(type="fullbody", label="Full Body", description="Complete full body session"),
)


def trained_patterns(exercise_names: Iterable[str]) -> set[str]:
    """Movement patterns (push/pull/legs) hit by the given exercise names."""
    patterns = set()
    for name in exercise_names:
        lowered = (name or "").lower()
        for pattern, keywords in _PATTERN_KEYWORDS.items():
            if any(keyword in lowered for keyword in keywords):
                patterns.add(pattern)
    return patterns


def suggest_focus(recent_exercise_names: Iterable[str], limit: int = 4) -> list[FocusSuggestion]:
    """
    Suggest workout focuses: untrained muscle patterns first, then intensity formats.

    Args:
        recent_exercise_names: Names of exercises logged recently
        limit: Maximum number of suggestions

    Returns:
        Ordered list of suggestions
    """
    recent = trained_patterns(recent_exercise_names)
    suggestions = [s for s in _MUSCLE_SUGGESTIONS if s.type not in recent]
    suggestions.extend(_INTENSITY_SUGGESTIONS)
    return suggestions[:max(0, limit)]
