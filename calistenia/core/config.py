"""
Configuration and constants for the CalistenIA training service.
"""
import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    # OpenAI Configuration (routine generation only)
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4.1-mini")
    TEMPERATURE_CREATIVE: float = float(os.getenv("TEMPERATURE_CREATIVE", 0.8))
    AI_TIMEOUT_SECONDS: float = float(os.getenv("AI_TIMEOUT_SECONDS", 90))

    # Server Configuration
    PORT: int = int(os.getenv("PORT", 10000))
    HOST: str = os.getenv("HOST", "0.0.0.0")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    INTERNAL_API_SECRET: str = os.getenv("INTERNAL_API_SECRET", "")

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = _env_flag("RATE_LIMIT_ENABLED", True)
    RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "120/minute")

    # Streaks are counted in calendar days of this timezone
    BUSINESS_TIMEZONE: str = os.getenv("BUSINESS_TIMEZONE", "UTC")

    # Routine normalization
    STANDARD_SECONDS_PER_SET: int = int(os.getenv("STANDARD_SECONDS_PER_SET", 45))  # Average time under tension per set
    MIN_CIRCUIT_EXERCISES: int = int(os.getenv("MIN_CIRCUIT_EXERCISES", 3))
    DEFAULT_MUSCLE_FOCUS: str = os.getenv("DEFAULT_MUSCLE_FOCUS", "fullbody").strip().lower()

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration on startup."""
        missing = []

        if not cls.INTERNAL_API_SECRET:
            missing.append("INTERNAL_API_SECRET")

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Please check your .env file."
            )

        try:
            ZoneInfo(cls.BUSINESS_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown BUSINESS_TIMEZONE: {cls.BUSINESS_TIMEZONE!r}")

    @classmethod
    def generation_enabled(cls) -> bool:
        return bool(cls.OPENAI_API_KEY)


settings = Settings()
