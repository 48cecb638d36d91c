"""Phi nodes for SSA merge points."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Sequence

from ssalower.block import BasicBlock, check_same_func
from ssalower.errors import InvariantError
from ssalower.expr import Expr

if TYPE_CHECKING:
    from ssalower.builder import Builder


class Phi(Expr):
    """A phi node; a typed value whose incoming edges are wired later."""

    def add_incoming(
        self,
        b: Builder,
        preds: Sequence[BasicBlock],
        value_of: Callable[[int, BasicBlock], Expr],
    ) -> None:
        """Add one incoming edge per predecessor.

        Each edge leaves from the predecessor's last physical fragment, which
        is where its terminating branch lives. ``preds`` must match the
        predecessors in the CFG; a mismatch is left for IR verification.
        """
        if b.disposed:
            raise InvariantError("add_incoming used after dispose")
        check_same_func(b.func, *preds)
        vals = [value_of(i, blk) for i, blk in enumerate(preds)]
        for val, blk in zip(vals, preds):
            self.impl.add_incoming(val.impl, blk.last)
