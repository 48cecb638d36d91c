"""Instruction tracing for builders.

A builder reports every emitted construct to its tracer. The base class
drops everything; ``LoggingTracer`` forwards to the ``logging`` module.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class Tracer:
    """No-op tracer."""

    enabled = False

    def instr(self, fmt: str, *args) -> None:
        pass


class LoggingTracer(Tracer):

    enabled = True

    def __init__(self, log: logging.Logger | None = None, level: int = logging.DEBUG):
        self.log = log or logger
        self.level = level

    def instr(self, fmt: str, *args) -> None:
        self.log.log(self.level, fmt, *args)


def format_call(op: str, fn, args) -> str:
    """Render ``op fn(arg, ...)`` the way call-like traces are printed."""
    return f"{op} {fn.impl.name}({', '.join(a.impl.get_reference() for a in args)})"
