"""Typed values flowing between emission operations."""

from __future__ import annotations

from dataclasses import dataclass

from llvmlite import ir

from ssalower.types import Type


@dataclass(frozen=True)
class Expr:
    """A backend value paired with its source type."""

    impl: ir.Value
    type: Type | None

    def __str__(self) -> str:
        return self.impl.get_reference()
