"""
Loguru logging configuration.

- Colored console output in development
- JSON lines in staging/production
- Rotating file sink outside of tests
- Correlation ID on every record
"""

import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from core.correlation import get_correlation_id

if TYPE_CHECKING:
    from loguru import Record

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[correlation_id]}</cyan> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def correlation_filter(record: "Record") -> bool:
    """Attach the request correlation ID to the record. Never drops records."""
    record["extra"]["correlation_id"] = get_correlation_id() or "-"
    return True


def configure_logging(environment: str = "development") -> None:
    """
    Configure Loguru for the application.

    Args:
        environment: "development" for colored console output, "test" for
            warnings only and no file sink, anything else for JSON.
    """
    logger.remove()

    if environment == "development":
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level="DEBUG",
            filter=correlation_filter,
            colorize=True,
        )
    elif environment == "test":
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level="WARNING",
            filter=correlation_filter,
        )
        return
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level="INFO",
            filter=correlation_filter,
            serialize=True,
        )

    logs_dir = Path(os.getenv("LOG_DIR", "logs"))
    logs_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        logs_dir / "app.log",
        format=CONSOLE_FORMAT if environment == "development" else "{message}",
        level="INFO",
        filter=correlation_filter,
        rotation="10 MB",
        retention="7 days",
        serialize=(environment != "development"),
    )
