"""
Routine normalization, estimation and generation routes.
"""
from fastapi import APIRouter, HTTPException, Depends, Request
from pydantic import ValidationError

from calistenia.core.auth import verify_internal_secret
from calistenia.core.config import settings
from calistenia.core.errors import EmptyRoutineError, MalformedPayloadError
from calistenia.core.limiter import limiter
from calistenia.core.logger import log_request, log_error
from calistenia.models.routine import NormalizationResult, RawRoutinePayload
from calistenia.models.schemas import (
    CircuitResponse,
    EstimateRequest,
    EstimateResponse,
    GenerateRequest,
    NormalizeRequest,
)
from calistenia.services import generator
from calistenia.services.circuits import DEFAULT_CIRCUIT_CATALOG
from calistenia.services.duration import block_seconds, estimate_minutes
from calistenia.services.normalizer import build_blocks, normalize_routine

router = APIRouter(prefix="/routines", dependencies=[Depends(verify_internal_secret)])


@router.post("/normalize", response_model=NormalizationResult)
@limiter.limit("60/minute")
async def normalize(request: Request, req: NormalizeRequest):
    """
    Validate and repair a raw routine payload.

    Returns 400 when the payload cannot be parsed and 422 when it has no
    exercise blocks, unless `allowEmpty` is set.
    """
    log_request("/routines/normalize")

    try:
        result = normalize_routine(req.payload, req.muscleFocusHint)
        if not req.allowEmpty:
            result.raise_if_empty()
        return result
    except MalformedPayloadError as e:
        log_error("Routine normalization", e)
        raise HTTPException(status_code=400, detail=str(e))
    except EmptyRoutineError as e:
        log_error("Routine normalization", e)
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/estimate-duration", response_model=EstimateResponse)
@limiter.limit("120/minute")
async def estimate_duration(request: Request, req: EstimateRequest):
    """Estimate session minutes for raw exercise entries, applying per-kind defaults."""
    log_request("/routines/estimate-duration")

    try:
        payload = RawRoutinePayload.model_validate({"exercises": req.exercises})
    except ValidationError as e:
        log_error("Duration estimation", e)
        raise HTTPException(status_code=400, detail="exercises must be a list")

    blocks = build_blocks(payload.exercises)
    return EstimateResponse(
        minutes=estimate_minutes(blocks),
        blockSeconds=[block_seconds(block) for block in blocks],
    )


@router.get("/circuits/{category}", response_model=CircuitResponse)
async def default_circuit(category: str):
    """Default circuit for a muscle-focus category (unknown categories get the fallback)."""
    resolved = DEFAULT_CIRCUIT_CATALOG.resolve(category)
    return CircuitResponse(
        category=resolved,
        catalogVersion=DEFAULT_CIRCUIT_CATALOG.version,
        exercises=DEFAULT_CIRCUIT_CATALOG.circuit_for(resolved),
    )


@router.post("/generate", response_model=NormalizationResult)
@limiter.limit("10/minute")
async def generate(request: Request, req: GenerateRequest):
    """
    Generate a routine with the AI model and return it normalized.

    Rate limited to 10 requests/minute since each call hits the OpenAI API.
    """
    log_request("/routines/generate")

    if not settings.generation_enabled():
        raise HTTPException(status_code=503, detail="Routine generation not configured (OPENAI_API_KEY not set)")

    try:
        result = await generator.generate_routine(
            muscle_group=req.muscleGroup,
            duration=req.duration,
            intensity=req.intensity,
            level=req.level,
            custom_prompt=req.customPrompt
        )
        return result.raise_if_empty()
    except MalformedPayloadError as e:
        log_error("Routine generation", e)
        raise HTTPException(status_code=502, detail="AI generation failed to produce a valid routine")
    except EmptyRoutineError as e:
        log_error("Routine generation", e)
        raise HTTPException(status_code=502, detail="AI generation produced an empty routine")
    except Exception as e:
        log_error("Routine generation", e)
        raise HTTPException(status_code=500, detail="Routine generation failed")
