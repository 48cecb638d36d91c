"""Tests for the builder lifecycle, tracing and configuration."""

import logging

import pytest

from conftest import make_diamond, make_void_function
from ssalower import types
from ssalower.block import InsertPoint
from ssalower.config import EmitConfig
from ssalower.errors import InvariantError
from ssalower.program import Package
from ssalower.runtime import RuntimeRegistry
from ssalower.trace import LoggingTracer, Tracer
from ssalower.types import Signature


def test_dispose_once(pkg):
    fn = make_void_function(pkg)
    b = fn.new_builder()
    b.dispose()
    assert b.disposed
    with pytest.raises(InvariantError, match="disposed twice"):
        b.dispose()


def test_use_after_dispose(pkg):
    fn = make_void_function(pkg)
    entry = fn.make_block()
    with fn.new_builder() as b:
        b.set_block(entry)
    with pytest.raises(InvariantError, match="after dispose"):
        b.set_block(entry)
    with pytest.raises(InvariantError, match="after dispose"):
        b.return_()


def test_add_incoming_after_dispose(pkg):
    fn, b, (entry, thenb, elseb, merge) = make_diamond(pkg)
    phi = b.phi(types.Int64)
    b.dispose()

    with pytest.raises(InvariantError, match="after dispose"):
        phi.add_incoming(b, [thenb, elseb], lambda i, blk: fn.params[1])
    assert phi.impl.incomings == []


def test_if_then_grows_last_fragment(pkg):
    """Code emitted by the callback lands in a fragment of the same block."""
    fn, b, (entry, thenb, elseb, merge) = make_diamond(pkg)
    hook = pkg.func_decl("hook", Signature([], []))
    frags = []

    def then():
        frags.append(merge.last)
        b.call(hook)

    b.if_then(fn.params[0], then)

    then_bb = frags[0]
    assert then_bb is not merge.first
    assert [i.opname for i in then_bb.instructions] == ["call", "br"]
    assert then_bb.terminator.operands == [merge.last]
    assert merge.first.terminator.operands[1:] == [then_bb, merge.last]
    assert merge.last.instructions == []
    assert b.block() is merge


def test_if_then_callback_may_terminate(pkg):
    """A then-fragment ending in a terminator gets no fall-through branch."""
    fn, b, (entry, thenb, elseb, merge) = make_diamond(pkg)
    err = pkg.func_decl("err", Signature([], [types.ANY]))
    frags = []

    def then():
        frags.append(merge.last)
        b.panic(b.call(err))

    b.if_then(fn.params[0], then)
    b.return_(fn.params[1])

    assert [i.opname for i in frags[0].instructions] == ["call", "call", "unreachable"]
    assert merge.last.terminator.opname == "ret"


def test_if_then_requires_block(pkg):
    fn = pkg.new_func("f", Signature([types.Bool], []))
    b = fn.new_builder()
    with pytest.raises(InvariantError):
        b.if_then(fn.params[0], lambda: None)


def test_default_tracer_is_silent(pkg, caplog):
    fn = make_void_function(pkg)
    entry = fn.make_block()
    b = fn.new_builder()
    assert type(b.tracer) is Tracer
    with caplog.at_level(logging.DEBUG, logger="ssalower.trace"):
        b.set_block(entry)
        b.return_()
    assert caplog.records == []


def test_logging_tracer(pkg, caplog):
    fn = pkg.new_func("f", Signature([types.ANY], []))
    entry, other = fn.make_blocks(2)
    b = fn.new_builder(LoggingTracer())
    with caplog.at_level(logging.DEBUG, logger="ssalower.trace"):
        b.set_block(entry)
        b.jump(other)
        b.set_block(other)
        b.panic(fn.params[0])

    messages = [r.getMessage() for r in caplog.records]
    assert messages[0] == "Block _llgo_0:"
    assert messages[1] == "Jump _llgo_1"
    assert messages[2] == "Block _llgo_1:"
    assert messages[3].startswith("Panic ")
    assert messages[4].startswith("Call runtime.TracePanic(")


def test_debug_instr_config_selects_logging_tracer():
    pkg = Package("main", EmitConfig(debug_instr=True))
    fn = make_void_function(pkg)
    assert isinstance(fn.new_builder().tracer, LoggingTracer)


def test_config_from_env():
    cfg = EmitConfig.from_env({"SSALOWER_DEBUG_INSTR": "1", "SSALOWER_INIT_SUFFIX": "$init"})
    assert cfg.debug_instr
    assert cfg.init_suffix == "$init"
    assert EmitConfig.from_env({}) == EmitConfig()


def test_runtime_lookup(pkg):
    assert "TracePanic" in RuntimeRegistry.all_funcs()
    fn = pkg.rt_func("TracePanic")
    assert fn.impl.name == "runtime.TracePanic"
    assert pkg.rt_func("TracePanic").impl is fn.impl
    with pytest.raises(InvariantError):
        pkg.rt_func("NoSuchThing")


def test_duplicate_function(pkg):
    make_void_function(pkg, "f")
    with pytest.raises(InvariantError):
        make_void_function(pkg, "f")


def test_if_then_splits_block_under_cursor(pkg):
    """The split belongs to the block the cursor is in, not the current one."""
    fn = pkg.new_func("f", Signature([types.Bool], []))
    a, c = fn.make_blocks(2)
    b = fn.new_builder()
    b.set_block(a)
    b.set_block_ex(c, InsertPoint.AT_END, False)

    b.if_then(fn.params[0], lambda: None)

    assert a.last is a.first
    assert c.last is not c.first
    assert c.first.terminator.operands[2] is c.last
    assert b.block() is a


@pytest.mark.parametrize("pos", [InsertPoint.AT_START, InsertPoint.BEFORE_LAST, InsertPoint.AFTER_INIT])
def test_if_then_requires_cursor_at_end(pkg, pos):
    fn = pkg.new_func("f", Signature([types.Bool], []))
    entry = fn.make_block()
    b = fn.new_builder()
    b.set_block(entry)
    b.return_()
    b.set_block_ex(entry, pos, True)

    with pytest.raises(InvariantError, match="if_then"):
        b.if_then(fn.params[0], lambda: None)
    assert entry.last is entry.first
    assert len(fn.ll.blocks) == 1


def test_if_then_on_terminated_block(pkg):
    fn = pkg.new_func("f", Signature([types.Bool], []))
    entry = fn.make_block()
    b = fn.new_builder()
    b.set_block(entry)
    b.return_()

    with pytest.raises(InvariantError, match="unterminated"):
        b.if_then(fn.params[0], lambda: None)
