"""Instruction emission for lowering SSA functions into LLVM IR."""

from ssalower.block import BasicBlock, InsertPoint
from ssalower.builder import Builder
from ssalower.config import EmitConfig
from ssalower.errors import CoercionError, EmitError, InvariantError
from ssalower.expr import Expr
from ssalower.phi import Phi
from ssalower.program import Function, Package
from ssalower.trace import LoggingTracer, Tracer

__all__ = [
    "BasicBlock",
    "Builder",
    "CoercionError",
    "EmitConfig",
    "EmitError",
    "Expr",
    "Function",
    "InsertPoint",
    "InvariantError",
    "LoggingTracer",
    "Package",
    "Phi",
    "Tracer",
]
