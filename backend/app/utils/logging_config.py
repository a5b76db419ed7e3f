"""
Structured Logging Configuration for Mermaid Studio

Uses loguru with:
- Colored console output for development
- Daily file rotation with compression
- A separate error log
- Interception of stdlib logging (uvicorn, sqlalchemy, httpx)
"""

import sys
import logging
from pathlib import Path

from loguru import logger as loguru_logger

from app.config import settings


LOG_DIR = Path(settings.LOG_DIR)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}:{function}:{line} | {message}"

# Records logged through the plain loguru logger have no bound name
loguru_logger.configure(extra={"name": "app"})


class InterceptHandler(logging.Handler):
    """
    Intercept standard logging messages and redirect to Loguru.
    This allows compatibility with third-party libraries using standard logging.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        loguru_logger.bind(name=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging() -> None:
    """
    Configure Loguru sinks.
    Call this once at application startup.
    """
    loguru_logger.remove()
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    log_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    loguru_logger.add(
        sys.stdout,
        format=log_format,
        level=settings.LOG_LEVEL,
        colorize=True,
        backtrace=True,
        diagnose=settings.DEBUG,
    )

    # All logs (INFO and above)
    loguru_logger.add(
        LOG_DIR / "app.log",
        format=FILE_FORMAT,
        level="INFO",
        rotation="00:00",
        retention="30 days",
        compression="zip",
        backtrace=True,
        diagnose=settings.DEBUG,
        encoding="utf-8",
    )

    # Error logs only
    loguru_logger.add(
        LOG_DIR / "error.log",
        format=FILE_FORMAT,
        level="ERROR",
        rotation="00:00",
        retention="90 days",
        compression="zip",
        backtrace=True,
        diagnose=True,
        encoding="utf-8",
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


def get_logger(name: str):
    """
    Get a logger for a specific module.

    Usage:
        from app.utils.logging_config import get_logger
        logger = get_logger(__name__)
    """
    return loguru_logger.bind(name=name)


fastapi_logger = loguru_logger.bind(name="fastapi")
database_logger = loguru_logger.bind(name="database")
auth_logger = loguru_logger.bind(name="auth")
diagram_logger = loguru_logger.bind(name="diagram")
generation_logger = loguru_logger.bind(name="generation")
editor_logger = loguru_logger.bind(name="editor")


__all__ = [
    "setup_logging",
    "get_logger",
    "loguru_logger",
    "fastapi_logger",
    "database_logger",
    "auth_logger",
    "diagram_logger",
    "generation_logger",
    "editor_logger",
]
