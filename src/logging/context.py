# src/logging/context.py — v1
"""Contextual logging support — attach the current source and step to records."""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

_source: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "source", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    source: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(source=_source.get(), step=_step.get())


def set_step(step: str | None) -> None:
    """Set the consolidation step (load, resolve, extract, matrix, render)."""
    _step.set(step)


@contextmanager
def source_context(source: str) -> Iterator[None]:
    """Tag log records emitted while handling ``source``."""
    token = _source.set(source)
    try:
        yield
    finally:
        _source.reset(token)


def clear_context() -> None:
    """Reset all context variables."""
    _source.set(None)
    _step.set(None)
