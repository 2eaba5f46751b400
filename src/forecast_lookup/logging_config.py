"""Centralized logging configuration."""

import logging

from forecast_lookup.config import DETAILED_LOGGING


def configure_logging(detailed: bool = DETAILED_LOGGING):
    """
    Configure a consistent logging format for the entire application.

    Args:
        detailed: Log at DEBUG level instead of INFO
    """
    level = logging.DEBUG if detailed else logging.INFO

    # Define the standard formatter
    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Configure the root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Configure specific third-party loggers to use the same format
    loggers_to_configure = [
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "httpx",
        "fastapi",
    ]

    for logger_name in loggers_to_configure:
        logger = logging.getLogger(logger_name)
        # httpx logs every request URL, which includes the API key
        logger.setLevel(logging.WARNING if logger_name == "httpx" else logging.INFO)

        # Remove existing handlers to avoid duplicate logs
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        # Don't propagate to avoid duplicate messages
        logger.propagate = False

        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)


def log_failure(logger: logging.Logger, message: str, exc: BaseException, detailed: bool = DETAILED_LOGGING):
    """Log a caught failure, with traceback when detailed logging is on."""
    logger.error(f"{message} - {exc.__class__.__name__}: {exc}", exc_info=exc if detailed else None)
