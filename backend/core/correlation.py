"""
Correlation ID generation and context management.

Every request gets a short ID that is attached to its log lines, Sentry
events and error responses, so a user can quote it in a bug report.
"""

import re
import uuid
from contextvars import ContextVar

# Request-scoped correlation ID
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

# Incoming IDs are echoed into logs and headers, keep them boring
_VALID_INCOMING_ID = re.compile(r"[A-Za-z0-9-]{1,64}")


def generate_correlation_id() -> str:
    """
    Generate a short, unique correlation ID.

    Returns:
        8-character hexadecimal string (e.g. "abc123de").
    """
    return uuid.uuid4().hex[:8]


def resolve_correlation_id(incoming: str | None) -> str:
    """
    Reuse a client-supplied correlation ID when it is well formed.

    Args:
        incoming: Value of the X-Correlation-ID request header, if any.

    Returns:
        The incoming ID, or a freshly generated one.
    """
    if incoming and _VALID_INCOMING_ID.fullmatch(incoming):
        return incoming
    return generate_correlation_id()


def get_correlation_id() -> str:
    """Correlation ID of the current request, or empty string outside one."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID for the current request context."""
    correlation_id_var.set(correlation_id)
