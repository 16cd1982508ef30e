"""
Tests for routine duration estimation.
"""
from unittest.mock import patch

import pytest

from calistenia.core.config import Settings
from calistenia.models.routine import BlockKind, ExerciseBlock
from calistenia.services.duration import block_seconds, estimate_minutes


def block(kind, index=1, **fields):
    return ExerciseBlock(kind=kind, name=f"{kind.value} block", orderIndex=index, **fields)


class TestBlockSeconds:
    """Tests for per-kind time semantics."""

    def test_standard_block(self):
        """Standard blocks count 45s per set plus rest per set."""
        assert block_seconds(block(BlockKind.STANDARD, sets=4, restSeconds=90)) == 4 * 45 + 4 * 90

    def test_hiit_block(self):
        """HIIT blocks are (work + rest) times rounds."""
        assert block_seconds(block(BlockKind.HIIT, workSeconds=20, restSeconds=10, rounds=8)) == 240

    def test_amrap_and_emom_use_duration(self):
        """AMRAP and EMOM blocks last their duration."""
        assert block_seconds(block(BlockKind.AMRAP, durationSeconds=720)) == 720
        assert block_seconds(block(BlockKind.EMOM, durationSeconds=300)) == 300

    def test_rest_block(self):
        """Rest blocks last their rest time."""
        assert block_seconds(block(BlockKind.REST, restSeconds=90)) == 90

    @pytest.mark.parametrize("kind,expected", [
        (BlockKind.STANDARD, 3 * 45 + 3 * 60),
        (BlockKind.HIIT, (40 + 20) * 8),
        (BlockKind.AMRAP, 1200),
        (BlockKind.EMOM, 600),
        (BlockKind.REST, 120),
    ])
    def test_missing_fields_take_defaults(self, kind, expected):
        """Blocks without timing fields use the per-kind defaults."""
        assert block_seconds(block(kind)) == expected


class TestEstimateMinutes:
    """Tests for total routine estimation."""

    def test_empty_routine_is_zero(self):
        """No blocks means zero minutes."""
        assert estimate_minutes([]) == 0

    def test_standard_plus_rest_rounds_up(self):
        """3x(45+60) + 120 = 435s rounds up to 8 minutes."""
        blocks = [
            block(BlockKind.STANDARD, 1, sets=3, restSeconds=60),
            block(BlockKind.REST, 2, restSeconds=120),
        ]
        assert estimate_minutes(blocks) == 8

    def test_exact_minutes_are_not_rounded(self):
        """A whole number of minutes stays as is."""
        assert estimate_minutes([block(BlockKind.EMOM, durationSeconds=600)]) == 10

    @pytest.mark.parametrize("field,kind,low,high", [
        ("rounds", BlockKind.HIIT, 4, 12),
        ("sets", BlockKind.STANDARD, 1, 6),
        ("durationSeconds", BlockKind.AMRAP, 300, 1500),
        ("durationSeconds", BlockKind.EMOM, 61, 62),
    ])
    def test_more_volume_never_decreases_estimate(self, field, kind, low, high):
        """Raising rounds, sets or duration never lowers the estimate."""
        rest = block(BlockKind.REST, 2, restSeconds=30)
        smaller = estimate_minutes([block(kind, **{field: low}), rest])
        larger = estimate_minutes([block(kind, **{field: high}), rest])
        assert larger >= smaller


class TestConfiguredSetLength:
    """Tests for the configurable seconds-per-set."""

    def test_standard_block_follows_setting(self):
        """STANDARD_SECONDS_PER_SET drives the standard-block estimate."""
        with patch.object(Settings, "STANDARD_SECONDS_PER_SET", 30):
            assert block_seconds(block(BlockKind.STANDARD, sets=4, restSeconds=60)) == 4 * 30 + 4 * 60
