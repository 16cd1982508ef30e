"""
Internal API authentication dependency.

The training endpoints are internal: only the main backend (which owns
users, persistence and JWT auth) may call them.

How it works:
  - Backend sends header: X-Internal-Secret: <INTERNAL_API_SECRET>
  - This service checks it matches the configured secret
  - Returns 403 if missing or wrong, 503 if no secret is configured
"""
import hmac
from typing import Annotated

from fastapi import Header, HTTPException

from calistenia.core.config import settings


def verify_internal_secret(x_internal_secret: Annotated[str, Header()] = "") -> None:
    """FastAPI dependency: validates the shared internal secret header."""
    secret = settings.INTERNAL_API_SECRET
    if not secret:
        raise HTTPException(
            status_code=503,
            detail="Service not configured (INTERNAL_API_SECRET not set)"
        )
    if not hmac.compare_digest(x_internal_secret.encode(), secret.encode()):
        raise HTTPException(
            status_code=403,
            detail="Forbidden: invalid or missing internal secret"
        )
