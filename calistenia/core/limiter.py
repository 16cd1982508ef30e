"""
Rate limiter configuration.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from calistenia.core.config import settings

# Keyed by client IP; every caller is the backend, so limits are generous
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.RATE_LIMIT_ENABLED,
)
