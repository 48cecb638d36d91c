"""Shared test fixtures."""

import pytest

from ssalower import types
from ssalower.config import EmitConfig
from ssalower.program import Function, Package
from ssalower.types import Signature


@pytest.fixture
def pkg():
    """Provide a fresh package with the default configuration."""
    return Package("main", EmitConfig())


def make_void_function(pkg: Package, name: str = "f") -> Function:
    """Create: func f()"""
    return pkg.new_func(name, Signature([], []))


def make_int_function(pkg: Package, name: str = "f") -> Function:
    """Create: func f(a int32, b int32) int64"""
    return pkg.new_func(name, Signature([types.Int32, types.Int32], [types.Int64]))


def make_pair_function(pkg: Package, name: str = "pair") -> Function:
    """Create: func pair(a int32, p *int) (int64, any)"""
    sig = Signature([types.Int32, types.Pointer(types.Int)], [types.Int64, types.ANY])
    return pkg.new_func(name, sig)


def make_init_decls(pkg: Package, *names: str):
    """Declare argument-less initializer functions, e.g. ``fmt.init``."""
    return [pkg.func_decl(name, Signature([], [])) for name in names]


def make_diamond(pkg: Package, name: str = "diamond"):
    """Create a diamond-shaped function over ``(c bool, a, b int64) int64``.

    Returns (fn, builder, [entry, then, else, merge]); the builder is
    positioned at the end of the merge block with nothing emitted there.
    """
    sig = Signature([types.Bool, types.Int64, types.Int64], [types.Int64])
    fn = pkg.new_func(name, sig)
    entry, thenb, elseb, merge = fn.make_blocks(4)
    c = fn.params[0]

    b = fn.new_builder()
    b.set_block(entry)
    b.if_(c, thenb, elseb)
    b.set_block(thenb)
    b.jump(merge)
    b.set_block(elseb)
    b.jump(merge)
    b.set_block(merge)
    return fn, b, [entry, thenb, elseb, merge]
