"""Packages and functions that emission targets.

A ``Package`` wraps one llvmlite module. A ``Function`` owns the arena of
logical blocks that its builders position into.
"""

from __future__ import annotations

from llvmlite import ir

from ssalower.block import BasicBlock
from ssalower.builder import Builder
from ssalower.config import EmitConfig
from ssalower.errors import InvariantError
from ssalower.expr import Expr
from ssalower.runtime import RuntimeRegistry
from ssalower.trace import LoggingTracer, Tracer
from ssalower.types import Signature, Type


class Package:
    """An llvmlite module with its functions, declarations and runtime symbols."""

    def __init__(self, name: str, config: EmitConfig | None = None):
        self.name = name
        self.config = config or EmitConfig()
        self.module = ir.Module(name=name)
        self._funcs: dict[str, Function] = {}
        self._type_descs: dict[Type, ir.GlobalVariable] = {}

    def new_func(self, name: str, sig: Signature) -> Function:
        """Define a function with a body."""
        if name in self._funcs:
            raise InvariantError(f"function {name} already defined")
        fn = Function(self, name, sig)
        self._funcs[name] = fn
        return fn

    def func_decl(self, name: str, sig: Signature) -> Expr:
        """Declare an external function, reusing an earlier declaration."""
        try:
            ll = self.module.get_global(name)
        except KeyError:
            ll = ir.Function(self.module, sig.ll, name=name)
        return Expr(ll, sig)

    def rt_func(self, name: str) -> Expr:
        """Return a callable for the runtime support function ``name``."""
        sig = RuntimeRegistry.get(name)
        if sig is None:
            raise InvariantError(f"unknown runtime function {name}")
        return self.func_decl(self.config.runtime_prefix + name, sig)

    def type_descriptor(self, t: Type) -> ir.GlobalVariable:
        """Return the external global describing ``t`` for interface boxing."""
        gv = self._type_descs.get(t)
        if gv is None:
            name = f"{self.config.runtime_prefix}type.{t}"
            gv = ir.GlobalVariable(self.module, ir.IntType(8), name=name)
            self._type_descs[t] = gv
        return gv

    def __str__(self) -> str:
        return str(self.module)


class Function:
    """A function definition owning the arena of its logical blocks."""

    def __init__(self, pkg: Package, name: str, sig: Signature):
        self.pkg = pkg
        self.name = name
        self.sig = sig
        self.ll = ir.Function(pkg.module, sig.ll, name=name)
        self.params = [Expr(arg, t) for arg, t in zip(self.ll.args, sig.params)]
        self._blocks: list[BasicBlock] = []

    def expr(self) -> Expr:
        return Expr(self.ll, self.sig)

    @property
    def blocks(self) -> list[BasicBlock]:
        return list(self._blocks)

    def block(self, idx: int) -> BasicBlock:
        return self._blocks[idx]

    def make_block(self) -> BasicBlock:
        idx = len(self._blocks)
        first = self.ll.append_basic_block(f"{self.pkg.config.block_prefix}{idx}")
        blk = BasicBlock(self, idx, first)
        self._blocks.append(blk)
        return blk

    def make_blocks(self, n: int) -> list[BasicBlock]:
        return [self.make_block() for _ in range(n)]

    def new_builder(self, tracer: Tracer | None = None) -> Builder:
        if tracer is None:
            tracer = LoggingTracer() if self.pkg.config.debug_instr else Tracer()
        return Builder(self, tracer)

    def __repr__(self) -> str:
        return f"<Function {self.name} {self.sig}>"
