"""Logging configuration for the application."""

import logging


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Setup basic logging and return the package logger."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Suppress noisy library logs
    logging.getLogger("pydantic").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.CRITICAL)
    return logging.getLogger("schema_debugger")
