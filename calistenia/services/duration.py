"""
Routine duration estimation.
"""
import math
from typing import Iterable

from calistenia.core.config import settings
from calistenia.models.routine import BlockKind, ExerciseBlock


# Per-kind defaults applied when a timing field is missing
BLOCK_DEFAULTS = {
    BlockKind.STANDARD: {"sets": 3, "repCount": 10, "restSeconds": 60},
    BlockKind.HIIT: {"workSeconds": 40, "restSeconds": 20, "rounds": 8},
    BlockKind.AMRAP: {"durationSeconds": 1200},
    BlockKind.EMOM: {"durationSeconds": 600},
    BlockKind.REST: {"restSeconds": 120},
}


def _field(block: ExerciseBlock, name: str) -> int:
    value = getattr(block, name)
    if value is None:
        return BLOCK_DEFAULTS[block.kind][name]
    return value


def block_seconds(block: ExerciseBlock) -> int:
    """
    Estimated wall-clock seconds for one block.

    Args:
        block: Exercise block; missing timing fields take the kind's defaults

    Returns:
        Seconds spent on the block
    """
    kind = block.kind
    if kind == BlockKind.HIIT:
        return (_field(block, "workSeconds") + _field(block, "restSeconds")) * _field(block, "rounds")
    if kind in (BlockKind.AMRAP, BlockKind.EMOM):
        return _field(block, "durationSeconds")
    if kind == BlockKind.REST:
        return _field(block, "restSeconds")
    sets = _field(block, "sets")
    return sets * settings.STANDARD_SECONDS_PER_SET + sets * _field(block, "restSeconds")


def estimate_minutes(blocks: Iterable[ExerciseBlock]) -> int:
    """Total estimated minutes for a sequence of blocks, rounded up. Empty -> 0."""
    total_seconds = sum(block_seconds(block) for block in blocks)
    return math.ceil(total_seconds / 60)
