"""
Training streak and lifetime totals.

`record_completion` is a pure transformation of a user's aggregate context.
Callers persist the result and guarantee at most one call per finished
session (see services.sessions.complete_session).
"""
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Union
from zoneinfo import ZoneInfo

from calistenia.core.config import settings
from calistenia.core.logger import logger
from calistenia.models.training import (
    CompletionEvent,
    CompletionResult,
    StreakTransition,
    UserTrainingContext,
)


def to_business_date(instant: Union[date, datetime], tz: Union[str, ZoneInfo, None] = None) -> date:
    """
    Calendar date of an instant in the business timezone.

    Naive datetimes are taken as UTC. Plain dates pass through.
    """
    if not isinstance(instant, datetime):
        return instant
    zone = tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz or settings.BUSINESS_TIMEZONE)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(zone).date()


def _next_streak(ctx: UserTrainingContext, completion_date: date) -> tuple[int, StreakTransition]:
    if ctx.lastWorkoutDate is None:
        return 1, "first"

    days = (completion_date - ctx.lastWorkoutDate).days
    if days == 0:
        return ctx.currentStreak, "same_day"
    if days == 1:
        return ctx.currentStreak + 1, "consecutive"
    if days > 1:
        return 1, "reset"
    # Out-of-order event (clock skew or backfill): leave the streak alone
    return ctx.currentStreak, "backdated"


def record_completion(
    ctx: Optional[UserTrainingContext],
    completion_date: Union[date, datetime],
    session_minutes: int,
) -> CompletionResult:
    """
    Apply one completed session to a user's training context.

    Args:
        ctx: Previous context, or None for a user's first completion
        completion_date: Day the session was completed (datetimes are
            reduced to the business-timezone date)
        session_minutes: Session length; negative values count as 0

    Returns:
        CompletionResult with a new context, record flag and transition
    """
    ctx = ctx or UserTrainingContext()
    completion_date = to_business_date(completion_date)

    current, transition = _next_streak(ctx, completion_date)

    updated = UserTrainingContext(
        currentStreak=current,
        longestStreak=max(ctx.longestStreak, current),
        lastWorkoutDate=completion_date,
        totalWorkouts=ctx.totalWorkouts + 1,
        totalMinutes=ctx.totalMinutes + max(0, session_minutes or 0),
    )
    is_new_record = current > ctx.longestStreak

    logger.debug(
        f"Streak {transition}: {ctx.currentStreak} -> {current} "
        f"(longest {updated.longestStreak}{', new record' if is_new_record else ''})"
    )
    return CompletionResult(context=updated, isNewRecord=is_new_record, transition=transition)


def rebuild_context(events: Iterable[CompletionEvent]) -> UserTrainingContext:
    """Fold completion events, in the given order, starting from an empty context."""
    ctx = UserTrainingContext()
    for event in events:
        ctx = record_completion(ctx, event.completionDate, event.sessionMinutes).context
    return ctx
