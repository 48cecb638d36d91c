"""IR helper functions: instruction introspection and collectors."""

from __future__ import annotations

from llvmlite import ir


def first_instruction(bb: ir.Block) -> ir.Instruction | None:
    return bb.instructions[0] if bb.instructions else None


def last_instruction(bb: ir.Block) -> ir.Instruction | None:
    return bb.instructions[-1] if bb.instructions else None


def next_instruction(inst: ir.Instruction) -> ir.Instruction | None:
    """Return the instruction after ``inst`` in its block, or None at the end."""
    insts = inst.parent.instructions
    idx = insts.index(inst) + 1
    return insts[idx] if idx < len(insts) else None


def is_init_call(inst: ir.Instruction, suffix: str) -> bool:
    """True for an argument-less call whose callee name ends with ``suffix``.

    The callee is the only operand of such a call.
    """
    if inst.opname != "call" or len(inst.operands) != 1:
        return False
    return getattr(inst.operands[0], "name", "").endswith(suffix)


def collect_calls(bb: ir.Block) -> list[ir.Instruction]:
    """Collect all call instructions in a basic block."""
    return [inst for inst in bb.instructions if inst.opname == "call"]


def phi_incomings(phi: ir.PhiInstr) -> set[tuple[ir.Value, ir.Block]]:
    """Return the (value, block) incoming edges of a phi as a set."""
    return {(val, blk) for val, blk in phi.incomings}
