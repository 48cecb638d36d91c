"""The emission cursor.

A ``Builder`` is bound to one function for its whole life and tracks the
logical block that instructions currently go into. Every operation that
takes a block checks that the block belongs to the builder's function;
a mismatch means the driving SSA pass is broken and raises
``InvariantError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from llvmlite import ir

from ssalower.block import BasicBlock, InsertPoint, check_same_func, position
from ssalower.coerce import check_expr
from ssalower.errors import InvariantError
from ssalower.expr import Expr
from ssalower.phi import Phi
from ssalower.trace import Tracer, format_call
from ssalower.types import Kind, Signature, Tuple, Type

if TYPE_CHECKING:
    from ssalower.program import Function


class Builder:
    """Emission cursor over the blocks of a single function."""

    def __init__(self, fn: Function, tracer: Tracer | None = None):
        self.func = fn
        self.pkg = fn.pkg
        self.tracer = tracer or Tracer()
        self._impl: ir.IRBuilder | None = ir.IRBuilder()
        self._blk: BasicBlock | None = None
        self._at_end = False

    def __enter__(self) -> Builder:
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()

    @property
    def impl(self) -> ir.IRBuilder:
        if self._impl is None:
            raise InvariantError("builder used after dispose")
        return self._impl

    def dispose(self) -> None:
        if self._impl is None:
            raise InvariantError("builder disposed twice")
        self._impl = None
        self._blk = None

    @property
    def disposed(self) -> bool:
        return self._impl is None

    def block(self) -> BasicBlock | None:
        """Return the current logical block."""
        return self._blk

    # -- positioning --------------------------------------------------------

    def set_block(self, blk: BasicBlock) -> Builder:
        """Same as ``set_block_ex(blk, InsertPoint.AT_END, True)``."""
        self.tracer.instr("Block %s:", blk.name)
        return self.set_block_ex(blk, InsertPoint.AT_END, True)

    def set_block_ex(self, blk: BasicBlock, pos: InsertPoint, set_blk: bool) -> Builder:
        """Move the insertion point to ``pos`` inside ``blk``.

        With ``set_blk`` the current logical block becomes ``blk``; without
        it, instructions land in ``blk`` while the current block is kept.
        """
        check_same_func(self.func, blk)
        position(self.impl, blk, pos, self.pkg.config.init_suffix)
        self._at_end = pos is InsertPoint.AT_END
        if set_blk:
            self._blk = blk
        return self

    # -- calls --------------------------------------------------------------

    def call(self, fn: Expr, *args: Expr) -> Expr | None:
        """Emit a call, coercing each argument to its parameter type."""
        sig = fn.type
        if not isinstance(sig, Signature):
            raise InvariantError(f"call of non-function {fn}: {sig}")
        if len(args) != len(sig.params):
            raise InvariantError(
                f"call of {fn.impl.name}: want {len(sig.params)} args, got {len(args)}")
        if self.tracer.enabled:
            self.tracer.instr("%s", format_call("Call", fn, args))
        params = [check_expr(self, arg, t).impl for arg, t in zip(args, sig.params)]
        ret = self.impl.call(fn.impl, params)
        if sig.result_type is None:
            return None
        return Expr(ret, sig.result_type)

    def go(self, fn: Expr, *args: Expr) -> None:
        """Launch ``fn(args...)`` as an independent task.

        ``fn`` is the launcher symbol prepared by the caller, so launching is
        emitted as a plain call.
        """
        if self.tracer.enabled:
            self.tracer.instr("%s", format_call("Go", fn, args))
        self.call(fn, *args)

    # -- terminators --------------------------------------------------------

    def jump(self, target: BasicBlock) -> None:
        check_same_func(self.func, target)
        self.tracer.instr("Jump %s", target.name)
        self.impl.branch(target.first)

    def if_(self, cond: Expr, thenb: BasicBlock, elseb: BasicBlock) -> None:
        check_same_func(self.func, thenb, elseb)
        if cond.type is None or cond.type.kind is not Kind.BOOL:
            raise InvariantError(f"if: condition {cond} is {cond.type}, not bool")
        self.tracer.instr("If %s, %s, %s", cond, thenb.name, elseb.name)
        self.impl.cbranch(cond.impl, thenb.first, elseb.first)

    def return_(self, *results: Expr) -> None:
        """Emit a return of ``results`` coerced to the declared result types.

        Several results are packed into one aggregate in declared order.
        """
        if self.tracer.enabled:
            self.tracer.instr("Return %s", ", ".join(str(r) for r in results))
        want = self.func.sig.results
        if len(results) != len(want):
            raise InvariantError(
                f"return in {self.func.name}: want {len(want)} results, got {len(results)}")
        if not results:
            self.impl.ret_void()
        elif len(results) == 1:
            ret = check_expr(self, results[0], want[0])
            self.impl.ret(ret.impl)
        else:
            self.impl.ret(self._aggregate(results, Tuple(*want)).impl)

    def _aggregate(self, vals, t: Tuple) -> Expr:
        elems = [check_expr(self, v, et) for v, et in zip(vals, t.elems)]
        agg = ir.Constant(t.ll, ir.Undefined)
        for i, elem in enumerate(elems):
            agg = self.impl.insert_value(agg, elem.impl, i)
        return Expr(agg, t)

    def unreachable(self) -> None:
        self.impl.unreachable()

    def panic(self, v: Expr) -> None:
        """Hand ``v`` to the runtime panic dispatcher; control never returns."""
        self.tracer.instr("Panic %s", v)
        self.call(self.pkg.rt_func(self.pkg.config.panic_func), v)
        self.unreachable()

    # -- multi-value --------------------------------------------------------

    def extract(self, x: Expr, i: int) -> Expr:
        """Yield component ``i`` of the multi-result value ``x``.

        ``x`` comes from an instruction with several results, such as a
        multi-result call, a comma-ok type assertion, receive or map lookup.
        """
        self.tracer.instr("Extract %s, %d", x, i)
        if not isinstance(x.type, Tuple):
            raise InvariantError(f"extract from non-tuple {x}: {x.type}")
        if not 0 <= i < len(x.type):
            raise InvariantError(f"extract index {i} out of range for {x.type}")
        return Expr(self.impl.extract_value(x.impl, i), x.type[i])

    def phi(self, t: Type) -> Phi:
        return Phi(self.impl.phi(t.ll), t)

    # -- block splitting ----------------------------------------------------

    def if_then(self, cond: Expr, then: Callable[[], None]) -> None:
        """Emit ``if cond { then() }`` inside the block the cursor is in.

        The cursor must sit at the end of the unterminated last fragment of
        a logical block. That block grows by two physical fragments;
        emission continues in the second one, which becomes its new last
        fragment.
        """
        blk = self._split_target()
        if cond.type is None or cond.type.kind is not Kind.BOOL:
            raise InvariantError(f"if_then: condition {cond} is {cond.type}, not bool")
        fn = self.func.ll
        then_bb = fn.append_basic_block(f"{blk.name}.then")
        done_bb = fn.append_basic_block(f"{blk.name}.done")
        self.impl.cbranch(cond.impl, then_bb, done_bb)
        self.impl.position_at_end(then_bb)
        self._at_end = True
        blk.last = then_bb
        then()
        if not self.impl.block.is_terminated:
            self.impl.branch(done_bb)
        blk.last = done_bb
        self.impl.position_at_end(done_bb)
        self._at_end = True

    def _split_target(self) -> BasicBlock:
        cur = self.impl.block
        owner = next((blk for blk in self.func.blocks if blk.last is cur), None)
        if owner is None:
            raise InvariantError("if_then: cursor is not in the last fragment of a block")
        if not self._at_end or cur.is_terminated:
            raise InvariantError(f"if_then: cursor is not at the end of unterminated {owner!r}")
        return owner
