"""
Structured logging configuration for the open banking mock API.

All logs are JSON-formatted with these standard fields:
- timestamp: ISO 8601 timestamp
- event: The log event name (first positional argument)
- request_id: UUID for tracing requests end-to-end
- persona: Persona bound to the verified access token (when available)
- duration_ms: Operation duration in milliseconds

Access tokens are never logged; only the item_id derived from them is.
"""
import logging
import uuid
from contextvars import ContextVar
from typing import Any, Optional

import structlog

# Context variables for request-scoped data
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")
persona_ctx: ContextVar[str] = ContextVar("persona", default="")


def add_context_vars(
    logger: structlog.typing.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor that adds context variables to log entries."""
    request_id = request_id_ctx.get()
    persona = persona_ctx.get()

    if request_id:
        event_dict["request_id"] = request_id
    if persona:
        event_dict["persona"] = persona

    return event_dict


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog with JSON output and context processors."""
    logging.basicConfig(format="%(message)s", level=level.upper())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
            add_context_vars,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


def set_request_context(request_id: str, persona: Optional[str] = None) -> None:
    """Set the request context for logging."""
    request_id_ctx.set(request_id)
    if persona:
        persona_ctx.set(persona)


def bind_persona(persona: str) -> None:
    """Attach the authenticated persona to the current request's log context."""
    persona_ctx.set(persona)


def clear_request_context() -> None:
    """Clear the request context after request completion."""
    request_id_ctx.set("")
    persona_ctx.set("")


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())
