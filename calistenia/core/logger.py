"""
Structured logging for the CalistenIA training service.
"""
import logging
import sys

from calistenia.core.config import settings


def setup_logger(name: str = "calistenia") -> logging.Logger:
    """
    Create a configured logger instance.

    Args:
        name: Logger name for identification

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)

    # Console handler with formatting
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


# Global logger instance
logger = setup_logger()


def log_request(endpoint: str, method: str = "POST") -> None:
    """Log incoming API request."""
    logger.info(f"Request: {method} {endpoint}")


def log_response(endpoint: str, status: str, duration_ms: float = None) -> None:
    """Log API response with optional duration."""
    msg = f"Response: {endpoint} -> {status}"
    if duration_ms:
        msg += f" ({duration_ms:.0f}ms)"
    logger.info(msg)


def log_error(context: str, error: Exception) -> None:
    """Log error with context."""
    logger.error(f"Error in {context}: {type(error).__name__}: {str(error)}")


def log_ai_call(operation: str, model: str) -> None:
    """Log OpenAI API call."""
    logger.info(f"AI Call: {operation} using {model}")


def log_repair(order_index: int, kind: str, category: str) -> None:
    """Log a synthesized default circuit."""
    logger.info(f"Repair: block #{order_index} ({kind}) got default '{category}' circuit")
