"""
Tests for streak tracking and session completion.
"""
import random
from datetime import date, datetime, timedelta, timezone

import pytest

from calistenia.core.errors import SessionAlreadyFinishedError
from calistenia.models.training import CompletionEvent, TrainingSession, UserTrainingContext
from calistenia.services.sessions import complete_session, finish_session
from calistenia.services.streaks import rebuild_context, record_completion, to_business_date


class TestRecordCompletion:
    """Tests for the streak state machine."""

    def test_first_completion_starts_streak(self):
        """A user with no context starts at 1."""
        result = record_completion(None, date(2025, 1, 1), 30)
        assert result.context.currentStreak == 1
        assert result.context.longestStreak == 1
        assert result.context.totalWorkouts == 1
        assert result.context.totalMinutes == 30
        assert result.context.lastWorkoutDate == date(2025, 1, 1)
        assert result.transition == "first"
        assert result.isNewRecord is True

    def test_consecutive_day_extends_streak(self, streak_context):
        """Jan 10 -> Jan 11 extends a 5-day streak to a new record of 6."""
        result = record_completion(streak_context, date(2025, 1, 11), 40)
        assert result.context.currentStreak == 6
        assert result.context.longestStreak == 6
        assert result.isNewRecord is True
        assert result.transition == "consecutive"

    def test_gap_resets_streak(self, streak_context):
        """Jan 10 -> Jan 14 resets to 1 and keeps the longest streak."""
        result = record_completion(streak_context, date(2025, 1, 14), 40)
        assert result.context.currentStreak == 1
        assert result.context.longestStreak == 5
        assert result.isNewRecord is False
        assert result.transition == "reset"

    def test_same_day_repeat_keeps_streak_but_counts_workout(self, streak_context):
        """Two completions on Jan 10: streak unchanged, totals still increment."""
        first = record_completion(streak_context, date(2025, 1, 10), 30)
        second = record_completion(first.context, date(2025, 1, 10), 20)
        assert second.context.currentStreak == 5
        assert second.context.totalWorkouts == streak_context.totalWorkouts + 2
        assert second.context.totalMinutes == streak_context.totalMinutes + 50
        assert second.transition == "same_day"
        assert second.isNewRecord is False

    def test_backdated_completion_leaves_streak_alone(self, streak_context):
        """An event dated before the last workout does not change the streak."""
        result = record_completion(streak_context, date(2025, 1, 3), 25)
        assert result.context.currentStreak == 5
        assert result.context.longestStreak == 5
        assert result.context.totalWorkouts == streak_context.totalWorkouts + 1
        assert result.context.lastWorkoutDate == date(2025, 1, 3)
        assert result.transition == "backdated"

    def test_input_context_is_not_mutated(self, streak_context):
        """The tracker returns a new context."""
        before = streak_context.model_copy()
        record_completion(streak_context, date(2025, 1, 11), 40)
        assert streak_context == before

    def test_negative_minutes_count_as_zero(self, streak_context):
        """Totals never decrease."""
        result = record_completion(streak_context, date(2025, 1, 11), -15)
        assert result.context.totalMinutes == streak_context.totalMinutes

    def test_streak_below_record_is_not_a_record(self):
        """Growing a streak that is still below the longest is not a record."""
        ctx = UserTrainingContext(currentStreak=2, longestStreak=10, lastWorkoutDate=date(2025, 3, 1))
        result = record_completion(ctx, date(2025, 3, 2), 30)
        assert result.context.currentStreak == 3
        assert result.context.longestStreak == 10
        assert result.isNewRecord is False

    @pytest.mark.parametrize("gap", [2, 3, 10, 365])
    def test_any_gap_over_one_day_resets(self, gap):
        """Every gap larger than one day resets to 1."""
        ctx = UserTrainingContext(currentStreak=7, longestStreak=9, lastWorkoutDate=date(2025, 6, 1))
        result = record_completion(ctx, date(2025, 6, 1) + timedelta(days=gap), 30)
        assert result.context.currentStreak == 1

    def test_longest_never_below_current(self):
        """longestStreak >= currentStreak after every call on a random history."""
        rng = random.Random(1234)
        ctx = None
        day = date(2024, 1, 1)
        for _ in range(500):
            day += timedelta(days=rng.choice([-2, 0, 0, 1, 1, 1, 1, 2, 5]))
            ctx = record_completion(ctx, day, rng.randint(0, 90)).context
            assert ctx.longestStreak >= ctx.currentStreak
        assert ctx.totalWorkouts == 500

    def test_datetime_is_reduced_to_business_date(self):
        """Datetimes are compared at day granularity."""
        ctx = UserTrainingContext(currentStreak=1, longestStreak=1, lastWorkoutDate=date(2025, 1, 10))
        result = record_completion(ctx, datetime(2025, 1, 11, 23, 59, tzinfo=timezone.utc), 30)
        assert result.context.currentStreak == 2
        assert result.context.lastWorkoutDate == date(2025, 1, 11)


class TestBusinessDate:
    """Tests for instant -> calendar date conversion."""

    def test_converts_to_timezone(self):
        """Late UTC evening is the next day in Madrid."""
        instant = datetime(2025, 1, 10, 23, 30, tzinfo=timezone.utc)
        assert to_business_date(instant, "Europe/Madrid") == date(2025, 1, 11)

    def test_naive_datetime_is_utc(self):
        """Naive datetimes are treated as UTC."""
        assert to_business_date(datetime(2025, 1, 10, 23, 30), "America/New_York") == date(2025, 1, 10)

    def test_date_passes_through(self):
        """Plain dates are unchanged."""
        assert to_business_date(date(2025, 1, 10), "Asia/Tokyo") == date(2025, 1, 10)


class TestRebuildContext:
    """Tests for folding completion history."""

    def test_rebuild_from_events(self):
        """Three consecutive days, a gap, then two more."""
        days = [1, 2, 3, 6, 7]
        events = [CompletionEvent(completionDate=date(2025, 2, d), sessionMinutes=30) for d in days]
        ctx = rebuild_context(events)
        assert ctx.currentStreak == 2
        assert ctx.longestStreak == 3
        assert ctx.totalWorkouts == 5
        assert ctx.totalMinutes == 150
        assert ctx.lastWorkoutDate == date(2025, 2, 7)

    def test_rebuild_empty_history(self):
        """No events leaves a zeroed context."""
        assert rebuild_context([]) == UserTrainingContext()


class TestSessions:
    """Tests for finishing sessions."""

    def make_session(self, **overrides):
        fields = {"id": "s-1", "routineId": "r-1", "startTime": datetime(2025, 1, 11, 18, 0, tzinfo=timezone.utc)}
        fields.update(overrides)
        return TrainingSession(**fields)

    def test_finish_computes_minutes(self):
        """42m10s rounds up to 43 minutes."""
        now = datetime(2025, 1, 11, 18, 42, 10, tzinfo=timezone.utc)
        finished = finish_session(self.make_session(), now)
        assert finished.completed is True
        assert finished.endTime == now
        assert finished.totalDurationMinutes == 43

    def test_finish_before_start_is_zero_minutes(self):
        """Clock skew never produces negative durations."""
        now = datetime(2025, 1, 11, 17, 0, tzinfo=timezone.utc)
        assert finish_session(self.make_session(), now).totalDurationMinutes == 0

    def test_finish_twice_raises(self):
        """A finished session cannot be finished again."""
        with pytest.raises(SessionAlreadyFinishedError):
            finish_session(self.make_session(completed=True))

    def test_complete_session_updates_context(self, streak_context):
        """Finishing on Jan 11 extends the Jan 10 streak."""
        now = datetime(2025, 1, 11, 18, 30, tzinfo=timezone.utc)
        session, result = complete_session(self.make_session(), streak_context, now, "UTC")
        assert session.totalDurationMinutes == 30
        assert result.context.currentStreak == 6
        assert result.context.totalMinutes == streak_context.totalMinutes + 30

    def test_complete_session_cannot_double_count(self, streak_context):
        """The second finish is rejected before totals change."""
        now = datetime(2025, 1, 11, 18, 30, tzinfo=timezone.utc)
        session, result = complete_session(self.make_session(), streak_context, now)
        with pytest.raises(SessionAlreadyFinishedError):
            complete_session(session, result.context, now)

    def test_complete_session_uses_business_timezone(self):
        """A late-evening UTC finish counts for the next day in Tokyo."""
        ctx = UserTrainingContext(currentStreak=3, longestStreak=3, lastWorkoutDate=date(2025, 1, 11))
        start = datetime(2025, 1, 11, 15, 0, tzinfo=timezone.utc)
        now = datetime(2025, 1, 11, 15, 45, tzinfo=timezone.utc)  # 00:45 Jan 12 in Tokyo
        _, result = complete_session(self.make_session(startTime=start), ctx, now, "Asia/Tokyo")
        assert result.context.currentStreak == 4
        assert result.context.lastWorkoutDate == date(2025, 1, 12)
