"""
Training session lifecycle.
"""
import math
from datetime import datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

from calistenia.core.errors import SessionAlreadyFinishedError
from calistenia.core.logger import logger
from calistenia.models.training import CompletionResult, TrainingSession, UserTrainingContext
from calistenia.services.streaks import record_completion, to_business_date


def _aware(instant: datetime) -> datetime:
    return instant if instant.tzinfo else instant.replace(tzinfo=timezone.utc)


def finish_session(session: TrainingSession, now: Optional[datetime] = None) -> TrainingSession:
    """
    Mark a session as completed and compute its duration in whole minutes.

    Raises:
        SessionAlreadyFinishedError: If the session was already finished
    """
    if session.completed:
        raise SessionAlreadyFinishedError(session.id)

    end = _aware(now or datetime.now(timezone.utc))
    elapsed = (end - _aware(session.startTime)).total_seconds()
    minutes = math.ceil(elapsed / 60) if elapsed > 0 else 0

    return session.model_copy(update={
        "endTime": end,
        "completed": True,
        "totalDurationMinutes": minutes,
    })


def complete_session(
    session: TrainingSession,
    ctx: Optional[UserTrainingContext],
    now: Optional[datetime] = None,
    tz: Union[str, ZoneInfo, None] = None,
) -> tuple[TrainingSession, CompletionResult]:
    """
    Finish a session and apply it to the user's training context.

    The already-finished check runs before the streak update, so a session
    can only ever be counted once through this path.

    Returns:
        (finished session, completion result)
    """
    finished = finish_session(session, now)
    completion_date = to_business_date(finished.endTime, tz)
    result = record_completion(ctx, completion_date, finished.totalDurationMinutes)
    logger.info(
        f"Session {session.id} finished: {finished.totalDurationMinutes} min, "
        f"streak {result.context.currentStreak} ({result.transition})"
    )
    return finished, result
