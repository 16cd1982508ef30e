"""
CalistenIA Training Service - Main Entry Point

Routine normalization, duration estimation and streak tracking for the
fitness backend.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from calistenia.core.config import settings
from calistenia.core.logger import logger
from calistenia.core.limiter import limiter
from calistenia.routes import routines, training


SERVICE_NAME = "calistenia-training"
VERSION = "1.0.0"


# Validate configuration on startup
try:
    settings.validate()
    logger.info("Configuration validated successfully")
except ValueError as e:
    logger.error(f"Configuration error: {e}")
    raise

if not settings.generation_enabled():
    logger.warning("OPENAI_API_KEY not set: /routines/generate is disabled")


# Create FastAPI app
app = FastAPI(
    title="CalistenIA Training Service",
    description="Routine normalization, duration estimation and training streaks",
    version=VERSION
)

# Attach rate limiter, its error handler and default limits
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


app.include_router(routines.router, tags=["Routines"])
app.include_router(training.router, tags=["Training"])


@app.get("/")
@limiter.limit("60/minute")
def root(request: Request):
    """Health check endpoint."""
    return {"message": "CalistenIA training service running"}


@app.get("/health")
@limiter.exempt
def health():
    """
    Detailed health status.
    Returns 'degraded' if optional integrations are not configured.
    """
    missing = [] if settings.generation_enabled() else ["OPENAI_API_KEY"]

    if missing:
        return JSONResponse(
            status_code=200,
            content={
                "status": "degraded",
                "service": SERVICE_NAME,
                "version": VERSION,
                "missing_config": missing,
                "message": f"Missing optional environment variables: {', '.join(missing)}"
            }
        )

    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": VERSION
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "calistenia.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False
    )
