"""
Pytest fixtures for the CalistenIA training service tests.
"""
import os
from datetime import date

import pytest

# Mock environment variables before importing app
os.environ.setdefault("OPENAI_API_KEY", "test-api-key")
os.environ.setdefault("INTERNAL_API_SECRET", "test-internal-secret")
os.environ.setdefault("BUSINESS_TIMEZONE", "UTC")
os.environ["RATE_LIMIT_ENABLED"] = "false"

from fastapi.testclient import TestClient  # noqa: E402

from calistenia.main import app  # noqa: E402
from calistenia.models.training import UserTrainingContext  # noqa: E402


@pytest.fixture
def client():
    """Test client that sends the internal secret header."""
    return TestClient(app, headers={"X-Internal-Secret": os.environ["INTERNAL_API_SECRET"]})


@pytest.fixture
def anonymous_client():
    """Test client without the internal secret header."""
    return TestClient(app)


@pytest.fixture
def streak_context():
    """Five-day streak ending Jan 10."""
    return UserTrainingContext(
        currentStreak=5,
        longestStreak=5,
        lastWorkoutDate=date(2025, 1, 10),
        totalWorkouts=20,
        totalMinutes=900,
    )


@pytest.fixture
def ai_routine_payload():
    """Routine as the AI generator returns it (snake_case, partial circuits)."""
    return {
        "name": "Navy SEAL Push",
        "description": "Push-focused calisthenics",
        "difficulty_level": "advanced",
        "estimated_duration": 40,
        "muscle_focus": "push",
        "spotify_mood": "aggressive",
        "exercises": [
            {"name": "Warm-up", "exercise_type": "standard", "sets": 1, "reps": 10, "rest_time": 0},
            {"name": "HIIT Block", "exercise_type": "hiit", "hiit_work_time": 30, "hiit_rest_time": 15,
             "hiit_rounds": 6, "circuit_exercises": [{"name": "Burpees", "reps": None, "duration": 30}]},
            {"name": "AMRAP Block", "exercise_type": "AMRAP", "amrap_duration": 720, "circuit_exercises": [
                {"name": "Push-ups", "reps": 10, "tips": "Chest to floor"},
                {"name": "Dips", "reps": "8-10"},
                {"name": "Pike Push-ups", "reps": 6, "description": "Hips high"},
            ]},
            {"name": "Strength", "exercise_type": "standard", "sets": 3, "reps": 10, "rest_time": 60},
            {"name": "Recovery", "exercise_type": "rest", "rest_time": 120},
        ],
    }


@pytest.fixture
def fenced_ai_response(ai_routine_payload):
    """AI completion text wrapping the routine in a ```json fence."""
    import json
    return "Here is your routine:\n```json\n" + json.dumps(ai_routine_payload) + "\n```\nGood luck!"
