"""
Training progress routes: streak updates, session finishing, suggestions.
"""
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, HTTPException, Depends, Request

from calistenia.core.auth import verify_internal_secret
from calistenia.core.errors import SessionAlreadyFinishedError
from calistenia.core.limiter import limiter
from calistenia.core.logger import log_request, log_error
from calistenia.models.schemas import (
    CompleteRequest,
    FinishRequest,
    FinishResponse,
    SuggestionsRequest,
    SuggestionsResponse,
)
from calistenia.models.training import CompletionResult
from calistenia.services.sessions import complete_session
from calistenia.services.streaks import record_completion
from calistenia.services.suggestions import suggest_focus

router = APIRouter(prefix="/training", dependencies=[Depends(verify_internal_secret)])


@router.post("/complete", response_model=CompletionResult)
@limiter.limit("120/minute")
async def complete(request: Request, req: CompleteRequest):
    """
    Apply one completed session to a user's training context.

    The caller must invoke this at most once per finished session.
    """
    log_request("/training/complete")
    return record_completion(req.context, req.completionDate, req.sessionMinutes)


@router.post("/finish", response_model=FinishResponse)
@limiter.limit("120/minute")
async def finish(request: Request, req: FinishRequest):
    """
    Finish a session and update the training context in one step.

    Returns 409 when the session is already finished, so a retried request
    can never count the same session twice.
    """
    log_request("/training/finish")

    tz = None
    if req.timezone:
        try:
            tz = ZoneInfo(req.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            log_error("Session finish", e)
            raise HTTPException(status_code=400, detail=f"Unknown timezone: {req.timezone}")

    try:
        session, result = complete_session(req.session, req.context, req.finishedAt, tz)
    except SessionAlreadyFinishedError as e:
        log_error("Session finish", e)
        raise HTTPException(status_code=409, detail=str(e))

    return FinishResponse(session=session, result=result)


@router.post("/suggestions", response_model=SuggestionsResponse)
@limiter.limit("60/minute")
async def suggestions(request: Request, req: SuggestionsRequest):
    """Suggest the next workout focus from recently logged exercise names."""
    log_request("/training/suggestions")
    return SuggestionsResponse(suggestions=suggest_focus(req.recentExercises, req.limit))
