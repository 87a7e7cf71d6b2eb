# Centralized logging configuration for the payment_demo package.

import logging
import sys
from datetime import UTC, datetime
from typing import Any, Dict, Optional

from payment_demo.settings import Settings

# Recommended format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Default level if LOG_LEVEL env var is not set
DEFAULT_LOG_LEVEL = "INFO"

# Valid log levels
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Libraries known to be noisy that we might want to quiet down
NOISY_LIBRARIES = ["asyncio"]

TRANSITION_LOGGER_NAME = "payment_demo.session.transition"


def setup_logging():
    """
    Configures logging for the application.

    Reads the desired log level from the LOG_LEVEL environment variable.
    Defaults to INFO if not set or invalid.
    Sets a standard format and directs logs to stderr.
    Sets louder libraries to WARNING level.
    """
    settings = Settings()
    log_level_name = settings.get_log_level(default=DEFAULT_LOG_LEVEL)

    if log_level_name not in VALID_LOG_LEVELS:
        print(
            f"WARNING: Invalid LOG_LEVEL '{log_level_name}'. "
            f"Defaulting to {DEFAULT_LOG_LEVEL}. "
            f"Valid levels are: {', '.join(VALID_LOG_LEVELS)}",
            file=sys.stderr,
        )
        log_level_name = DEFAULT_LOG_LEVEL

    log_level = logging.getLevelName(log_level_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    for lib_name in NOISY_LIBRARIES:
        logging.getLogger(lib_name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging configured with level {log_level_name}.")


def log_stage_transition(
    transaction_id: str,
    old_stage: str,
    new_stage: str,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """Log a session moving from one stage to the next."""
    logger = logging.getLogger(TRANSITION_LOGGER_NAME)
    logger.debug(
        f"[{transaction_id}] Stage {old_stage} -> {new_stage}",
        extra={
            "transaction_id": transaction_id,
            "old_stage": old_stage,
            "new_stage": new_stage,
            "timestamp": datetime.now(UTC).isoformat(),
            **(details or {}),
        },
    )
