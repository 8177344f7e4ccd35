"""Correlation ID for tracing one calendar request through the logs."""

import uuid
from contextvars import ContextVar, Token

# Set per request by the API middleware; read by JsonFormatter
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

CORRELATION_ID_HEADER = "X-Correlation-ID"


def generate_correlation_id() -> str:
    """New random ID for a request that arrived without one."""
    return str(uuid.uuid4())


def get_correlation_id() -> str:
    """ID of the request being handled, or "" outside a request."""
    return correlation_id_var.get()


def set_correlation_id(cid: str) -> Token[str]:
    """Bind cid to the current context; keep the token to reset it."""
    return correlation_id_var.set(cid)


def reset_correlation_id(token: Token[str]) -> None:
    """Restore the ID that was bound before set_correlation_id()."""
    correlation_id_var.reset(token)
