"""Logging for the savings API.

Everything goes through the ``hybrid_savings_api`` logger as one line of
``key=value`` pairs so request, store and calculator events can be grepped
together.
"""

import logging
import sys
from typing import Any

LOGGER_NAME = "hybrid_savings_api"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Return the service logger at ``level``, attaching a stdout handler once."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)

    return logger


# app.main re-applies the configured level on startup
logger = setup_logging()


def _fields(**kwargs: Any) -> str:
    return " ".join(f"{k}={v}" for k, v in kwargs.items() if v is not None)


def log_request(method: str, path: str, **kwargs: Any) -> None:
    logger.info(f"REQUEST {method} {path} {_fields(**kwargs)}".strip())


def log_response(method: str, path: str, status: int, duration_ms: float) -> None:
    logger.info(f"RESPONSE {method} {path} status={status} duration_ms={duration_ms:.2f}")


def log_error(message: str, exc: Exception | None = None, **kwargs: Any) -> None:
    """Log an error; ``exc`` adds the traceback."""
    logger.error(f"ERROR {message} {_fields(**kwargs)}".strip(), exc_info=exc)


def log_db_query(operation: str, table: str, duration_ms: float | None = None) -> None:
    """Debug-level timing for one reference-data lookup."""
    duration = f"{duration_ms:.2f}" if duration_ms else None
    logger.debug(f"DB {operation} {_fields(table=table, duration_ms=duration)}")


def log_calculation(model_id: int, monthly_spend: float, candidates: int) -> None:
    """Record a finished savings comparison."""
    logger.info(
        "CALC "
        + _fields(model_id=model_id, monthly_spend=f"{monthly_spend:.2f}", candidates=candidates)
    )


def log_selection(candidate_id: int, annual_savings: float) -> None:
    """Record the hybrid a user picked and what it saves per year."""
    logger.info(
        "SELECT " + _fields(candidate_id=candidate_id, annual_savings=f"{annual_savings:.2f}")
    )
