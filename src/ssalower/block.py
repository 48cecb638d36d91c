"""Logical basic blocks and insertion-point resolution.

A logical block is one node of the source CFG. Emission may realize it as
a chain of llvmlite blocks: branches always enter at ``first`` and phi
edges always leave from ``last``, so external references hold the logical
block and never a physical fragment.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from llvmlite import ir

from ssalower.errors import InvariantError
from ssalower.utils.ir_helpers import first_instruction, is_init_call, last_instruction, next_instruction

if TYPE_CHECKING:
    from ssalower.program import Function


class BasicBlock:
    """A basic block of a function, identified by (parent, index)."""

    __slots__ = ("_fn", "_idx", "first", "last")

    def __init__(self, fn: Function, idx: int, first: ir.Block):
        self._fn = fn
        self._idx = idx
        self.first = first
        self.last = first

    @property
    def parent(self) -> Function:
        return self._fn

    @property
    def index(self) -> int:
        return self._idx

    @property
    def name(self) -> str:
        return self.first.name

    def __repr__(self) -> str:
        return f"<BasicBlock {self._fn.name}#{self._idx}>"


class InsertPoint(enum.Enum):
    AT_END = "at_end"
    AT_START = "at_start"
    BEFORE_LAST = "before_last"
    AFTER_INIT = "after_init"


def check_same_func(fn: Function, *blocks: BasicBlock) -> None:
    for blk in blocks:
        if blk.parent is not fn:
            raise InvariantError(
                f"mismatched function: block {blk!r} used while emitting {fn.name}")


def position(impl: ir.IRBuilder, blk: BasicBlock, pos: InsertPoint, init_suffix: str) -> None:
    """Move ``impl`` to the physical location ``pos`` selects inside ``blk``."""
    if pos is InsertPoint.AT_END:
        impl.position_at_end(blk.last)
    elif pos is InsertPoint.AT_START:
        impl.position_at_start(blk.first)
    elif pos is InsertPoint.BEFORE_LAST:
        last = last_instruction(blk.last)
        if last is None:
            raise InvariantError(f"position before last: {blk!r} is empty")
        impl.position_before(last)
    elif pos is InsertPoint.AFTER_INIT:
        inst = instr_after_init(blk.first, init_suffix)
        if inst is None:
            impl.position_at_end(blk.first)
        else:
            impl.position_before(inst)
    else:
        raise InvariantError(f"set_block_ex: invalid pos {pos!r}")


def instr_after_init(bb: ir.Block, suffix: str) -> ir.Instruction | None:
    """Return the first instruction not part of the initializer prologue."""
    inst = first_instruction(bb)
    while inst is not None and is_init_call(inst, suffix):
        inst = next_instruction(inst)
    return inst
