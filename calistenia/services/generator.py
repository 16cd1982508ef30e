"""
AI routine generation.

Asks the chat model for a routine and hands the raw completion text to the
normalizer, which owns every structural guarantee. The model output is never
trusted as-is.
"""
import logging

import openai
from openai import AsyncOpenAI
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from calistenia.core.config import settings
from calistenia.core.errors import MalformedPayloadError
from calistenia.core.logger import log_ai_call, log_error
from calistenia.models.routine import NormalizationResult
from calistenia.services.normalizer import normalize_routine


# Initialize OpenAI client
client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)

OPENAI_TIMEOUT = openai.Timeout(settings.AI_TIMEOUT_SECONDS, connect=10.0)

# Tenacity retry policy: 3 total attempts, exponential backoff 2s→10s
# Only retries transient errors: rate limits and connection failures
_openai_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type((openai.RateLimitError, openai.APIConnectionError)),
    before_sleep=before_sleep_log(logging.getLogger(__name__), logging.WARNING),
    reraise=True,
)


ROUTINE_SYSTEM_PROMPT = """
You design bodyweight (calisthenics) routines.

Output JSON ONLY with this structure:
{
  "name": "Routine name",
  "description": "Short description",
  "difficulty_level": "beginner" | "intermediate" | "advanced",
  "estimated_duration": Minutes,
  "muscle_focus": "push" | "pull" | "legs" | "core" | "fullbody",
  "spotify_mood": "energetic" | "focused" | "calm",
  "exercises": [
    {"name": "Warm-up", "exercise_type": "standard", "sets": 1, "reps": 10, "rest_time": 0},
    {"name": "HIIT Block", "exercise_type": "hiit", "hiit_work_time": 40, "hiit_rest_time": 20, "hiit_rounds": 8,
     "circuit_exercises": [{"name": "Burpees", "reps": null, "duration": 40, "description": "...", "tips": "..."}]},
    {"name": "AMRAP Block", "exercise_type": "amrap", "amrap_duration": 720, "circuit_exercises": [...]},
    {"name": "Strength", "exercise_type": "standard", "sets": 3, "reps": 10, "rest_time": 60},
    {"name": "Recovery", "exercise_type": "rest", "rest_time": 120}
  ]
}

RULES:
1. Combine 4-5 different blocks (standard, hiit, amrap, emom, rest).
2. Every hiit/amrap/emom block has 4-6 circuit_exercises.
"""


@_openai_retry
async def call_chat_api(
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.8
) -> str:
    """
    Call OpenAI Chat API and return the raw completion text.

    Retries automatically on RateLimitError / APIConnectionError
    (up to 3 attempts with exponential backoff).

    Raises:
        MalformedPayloadError: If the completion is empty
        openai.RateLimitError: If all retries exhausted
    """
    log_ai_call("Routine generation", settings.OPENAI_MODEL)

    messages = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt}
    ]

    response = await client.chat.completions.create(
        model=settings.OPENAI_MODEL,
        messages=messages,
        temperature=temperature,
        timeout=OPENAI_TIMEOUT,
    )

    content = response.choices[0].message.content
    if not content or not content.strip():
        raise MalformedPayloadError("AI returned an empty completion")
    return content


async def generate_routine(
    muscle_group: str = "fullbody",
    duration: int = 45,
    intensity: str = "high",
    level: str = None,
    custom_prompt: str = None
) -> NormalizationResult:
    """
    Generate a routine with the chat model and normalize it.

    Args:
        muscle_group: Focus category, also the circuit repair hint
        duration: Target length in minutes
        intensity: Free-form intensity label
        level: User experience level
        custom_prompt: User's own request, replaces the default prompt

    Returns:
        NormalizationResult for the generated routine

    Raises:
        MalformedPayloadError: If the model output cannot be parsed
    """
    user_prompt = custom_prompt or f"Create a {muscle_group} routine of {duration} minutes."
    user_prompt += f"\nIntensity: {intensity}\nApproximate duration: {duration} minutes\n"
    if level:
        user_prompt += f"Experience level: {level}\n"

    text = await call_chat_api(
        ROUTINE_SYSTEM_PROMPT,
        user_prompt,
        temperature=settings.TEMPERATURE_CREATIVE
    )

    try:
        return normalize_routine(text, muscle_group)
    except MalformedPayloadError as e:
        log_error("Routine generation parsing", e)
        raise
