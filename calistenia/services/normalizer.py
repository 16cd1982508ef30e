"""
Routine normalization.

Single choke point that turns an untrusted routine payload (AI output or
manual entry) into a canonical Routine:

1. strip any text envelope and parse JSON
2. map each raw entry to an ExerciseBlock, coercing kinds and numbers
3. give every HIIT/AMRAP/EMOM block a circuit of at least 3 exercises
4. fill in the estimated duration when the payload has none

Structural defects are repaired, never rejected. The only failures are an
unparseable payload (MalformedPayloadError) and, at the caller's option, an
empty routine (NormalizationResult.raise_if_empty).
"""
import json
import math
import re
from typing import Any, Optional, Union

from pydantic import ValidationError

from calistenia.core.config import settings
from calistenia.core.errors import MalformedPayloadError
from calistenia.core.logger import logger, log_repair
from calistenia.models.routine import (
    DIFFICULTY_LEVELS,
    INTENSITY_KINDS,
    BlockKind,
    CircuitExercise,
    ExerciseBlock,
    NormalizationResult,
    RawCircuitExercise,
    RawExercise,
    RawRoutinePayload,
    Routine,
)
from calistenia.services.circuits import DEFAULT_CIRCUIT_CATALOG, CircuitCatalog
from calistenia.services.duration import BLOCK_DEFAULTS, estimate_minutes


RawPayload = Union[str, bytes, dict, RawRoutinePayload]

_FENCE_RE = re.compile(r"```[ \t]*(?:json|JSON)?[ \t]*\r?\n?(.*?)\r?\n?[ \t]*```", re.DOTALL)
_LEADING_INT_RE = re.compile(r"-?\d+(?:\.\d+)?")

# Lower bound for each timing field; anything below takes the kind's default
_MINIMUMS = {
    "sets": 1,
    "repCount": 1,
    "restSeconds": 0,
    "workSeconds": 1,
    "rounds": 1,
    "durationSeconds": 1,
}

_DEFAULT_NAMES = {
    BlockKind.STANDARD: "Exercise",
    BlockKind.HIIT: "HIIT Block",
    BlockKind.AMRAP: "AMRAP Block",
    BlockKind.EMOM: "EMOM Block",
    BlockKind.REST: "Recovery",
}


# --- Parsing ---

def strip_envelope(text: str) -> str:
    """
    Remove decorative wrapping around a JSON object.

    Handles ```json fenced blocks (with or without surrounding prose) and
    bare prose before/after a single top-level object.

    Args:
        text: Raw completion or request text

    Returns:
        The candidate JSON text
    """
    text = text.strip()
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    if text.startswith("{"):
        return text
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text


def _scan_for_object(text: str) -> Optional[dict]:
    """
    Decode the object that closes the text, trying each `{` in turn.

    Handles prose with stray braces before the routine ("Sure {name}! {...}").
    Only an object running to the end of the text counts, so a nested entry
    of a broken routine is never mistaken for the routine itself.
    """
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            value, end = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, dict) and not text[end:].strip():
                return value
        start = text.find("{", start + 1)
    return None


def parse_payload(raw: RawPayload) -> RawRoutinePayload:
    """
    Parse raw input into a RawRoutinePayload.

    Raises:
        MalformedPayloadError: If the input is not a JSON object or its
            `exercises` field is present but not a list
    """
    if isinstance(raw, RawRoutinePayload):
        return raw

    data: Any = raw
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedPayloadError(f"Payload is not UTF-8 text: {e}")
    if isinstance(raw, str):
        candidate = strip_envelope(raw)
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError as e:
            data = _scan_for_object(candidate)
            if data is None:
                logger.warning(f"Unparseable routine payload: {e.msg} (line {e.lineno}, col {e.colno})")
                raise MalformedPayloadError("Routine payload is not valid JSON")

    if not isinstance(data, dict):
        raise MalformedPayloadError(f"Routine payload must be a JSON object, got {type(data).__name__}")

    try:
        return RawRoutinePayload.model_validate(data)
    except ValidationError as e:
        raise MalformedPayloadError(f"Routine payload has an invalid structure: {e.errors()[0]['msg']}")


# --- Coercion helpers ---

def coerce_int(value: Any) -> Optional[int]:
    """Best-effort integer: ints, floats and numeric strings ("10-12" -> 10). None otherwise."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return round(value)
    if isinstance(value, str):
        match = _LEADING_INT_RE.search(value)
        if match:
            return round(float(match.group(0)))
    return None


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        value = value.strip()
        return value or default
    return str(value)


def coerce_kind(value: Any) -> BlockKind:
    """Case-insensitive kind lookup; anything unrecognized is a standard block."""
    if isinstance(value, BlockKind):
        return value
    if isinstance(value, str):
        try:
            return BlockKind(value.strip().lower())
        except ValueError:
            pass
    return BlockKind.STANDARD


def _timing(kind: BlockKind, name: str, *candidates: Any) -> int:
    for candidate in candidates:
        number = coerce_int(candidate)
        if number is not None and number >= _MINIMUMS[name]:
            return number
    return BLOCK_DEFAULTS[kind][name]


def _circuit_entry(item: Any, position: int) -> Optional[CircuitExercise]:
    if isinstance(item, str):
        name = item.strip()
        return CircuitExercise(name=name) if name else None
    if not isinstance(item, dict):
        return None
    raw = RawCircuitExercise.model_validate(item)
    reps = coerce_int(raw.reps)
    duration = coerce_int(raw.durationSeconds)
    return CircuitExercise(
        name=_text(raw.name, f"Exercise {position}"),
        reps=reps if reps is not None and reps > 0 else None,
        durationSeconds=duration if duration is not None and duration > 0 else None,
        description=_text(raw.description),
        tip=_text(raw.tip),
    )


def _circuit(value: Any) -> list[CircuitExercise]:
    if not isinstance(value, list):
        return []
    entries = (_circuit_entry(item, i) for i, item in enumerate(value, start=1))
    return [entry for entry in entries if entry is not None]


# --- Block mapping ---

def build_block(raw: RawExercise, order_index: int) -> ExerciseBlock:
    """
    Map one raw entry to an ExerciseBlock without circuit repair.

    Only the timing fields meaningful for the block's kind are set; the
    rest stay None.
    """
    kind = coerce_kind(raw.kind)
    fields: dict[str, Any] = {}

    if kind == BlockKind.STANDARD:
        fields["sets"] = _timing(kind, "sets", raw.sets)
        fields["repCount"] = _timing(kind, "repCount", raw.repCount)
        fields["restSeconds"] = _timing(kind, "restSeconds", raw.restSeconds, raw.restTime)
    elif kind == BlockKind.HIIT:
        fields["workSeconds"] = _timing(kind, "workSeconds", raw.workSeconds)
        fields["restSeconds"] = _timing(kind, "restSeconds", raw.hiitRestSeconds, raw.restSeconds)
        fields["rounds"] = _timing(kind, "rounds", raw.rounds)
    elif kind == BlockKind.AMRAP:
        fields["durationSeconds"] = _timing(kind, "durationSeconds", raw.amrapDuration, raw.durationSeconds)
    elif kind == BlockKind.EMOM:
        fields["durationSeconds"] = _timing(kind, "durationSeconds", raw.emomDuration, raw.durationSeconds)
    else:
        fields["restSeconds"] = _timing(kind, "restSeconds", raw.restSeconds, raw.restTime)

    return ExerciseBlock(
        kind=kind,
        name=_text(raw.name, _DEFAULT_NAMES[kind]),
        description=_text(raw.description),
        notes=_text(raw.notes),
        orderIndex=order_index,
        circuitExercises=_circuit(raw.circuitExercises),
        **fields,
    )


def build_blocks(raw_exercises: list[RawExercise]) -> list[ExerciseBlock]:
    """Map raw entries in input order; orderIndex is the 1-based position."""
    return [build_block(raw, i) for i, raw in enumerate(raw_exercises, start=1)]


def repair_circuits(
    blocks: list[ExerciseBlock],
    category: str,
    catalog: CircuitCatalog = DEFAULT_CIRCUIT_CATALOG,
) -> list[int]:
    """
    Replace missing or short circuits on intensity blocks, in place.

    Returns:
        orderIndex of every repaired block
    """
    repaired = []
    for block in blocks:
        if block.kind not in INTENSITY_KINDS:
            continue
        if len(block.circuitExercises) >= settings.MIN_CIRCUIT_EXERCISES:
            continue
        block.circuitExercises = catalog.circuit_for(category)
        repaired.append(block.orderIndex)
        log_repair(block.orderIndex, block.kind.value, category)
    return repaired


# --- Entry point ---

def normalize_routine(
    raw: RawPayload,
    muscle_focus_hint: Optional[str] = None,
    catalog: CircuitCatalog = DEFAULT_CIRCUIT_CATALOG,
) -> NormalizationResult:
    """
    Validate and repair a raw routine payload.

    Args:
        raw: JSON text (optionally fenced), decoded dict or parsed payload
        muscle_focus_hint: Category used to pick default circuits
            (push, pull, legs, core, fullbody). When empty or unknown the
            payload's own muscle focus is tried, then the catalog fallback.
        catalog: Default circuit catalog

    Returns:
        NormalizationResult with the canonical routine

    Raises:
        MalformedPayloadError: If the payload cannot be parsed
    """
    payload = parse_payload(raw)

    if catalog.knows(muscle_focus_hint):
        category = catalog.resolve(muscle_focus_hint)
    else:
        category = catalog.resolve(payload.muscleFocus)

    blocks = build_blocks(payload.exercises)
    repaired = repair_circuits(blocks, category, catalog)

    payload_estimate = coerce_int(payload.estimatedDurationMinutes)
    duration_estimated = payload_estimate is None or payload_estimate <= 0
    minutes = estimate_minutes(blocks) if duration_estimated else payload_estimate

    difficulty = _text(payload.difficulty).lower()
    if difficulty not in DIFFICULTY_LEVELS:
        difficulty = "intermediate"

    routine = Routine(
        name=_text(payload.name, "Custom Routine"),
        description=_text(payload.description),
        difficulty=difficulty,
        muscleFocus=category,
        spotifyMood=_text(payload.spotifyMood, "energetic"),
        estimatedDurationMinutes=minutes,
        exercises=blocks,
    )

    if not blocks:
        logger.warning("Normalized routine has no exercise blocks")
    logger.info(
        f"Normalized routine '{routine.name}': {len(blocks)} blocks, "
        f"{len(repaired)} circuits repaired, {minutes} min"
        f"{' (estimated)' if duration_estimated else ''}"
    )

    return NormalizationResult(
        routine=routine,
        isEmpty=not blocks,
        repairedBlocks=repaired,
        durationEstimated=duration_estimated,
    )
