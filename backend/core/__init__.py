"""Core infrastructure modules for request correlation, logging and Sentry."""

from core.correlation import (
    correlation_id_var,
    generate_correlation_id,
    get_correlation_id,
    resolve_correlation_id,
    set_correlation_id,
)
from core.logging_config import configure_logging
from core.sentry_config import init_sentry

__all__ = [
    "init_sentry",
    "configure_logging",
    "generate_correlation_id",
    "get_correlation_id",
    "resolve_correlation_id",
    "set_correlation_id",
    "correlation_id_var",
]
