"""Context propagation for structured logging.

Fields pushed here (``run_id`` for a backfill run, ``actor_id`` and ``job_id``
for a service call) are injected into every log record emitted inside the
scope by ``ContextualFilter``. Backed by contextvars, so each thread and task
sees its own context.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the current logging context."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs: Any) -> Token:
    """Merge fields into the logging context.

    Returns:
        Token for ``pop_log_context`` to restore the previous context

    Example:
        >>> token = push_log_context(run_id="abc123", job_id=42)
        >>> pop_log_context(token)
    """
    return LogContextVar.set({**LogContextVar.get(), **kwargs})


def pop_log_context(token: Token) -> None:
    """Restore the logging context saved by ``push_log_context``."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Clear all logging context fields (used by tests)."""
    LogContextVar.set({})


class log_context:
    """Context manager for scoped logging context.

    Example:
        >>> with log_context(run_id="abc123"):
        ...     logger.info("Converting salary", extra={"job_id": 42})
    """

    def __init__(self, **kwargs: Any):
        self.kwargs = kwargs
        self.token: Optional[Token] = None

    def __enter__(self) -> "log_context":
        self.token = push_log_context(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if self.token is not None:
            pop_log_context(self.token)
            self.token = None
        return False
