"""Type-directed conversion of values crossing a typed boundary.

Used for call arguments and return values. Only conversions that cannot
lose information are performed; anything else raises ``CoercionError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from llvmlite import ir

from ssalower.errors import CoercionError
from ssalower.expr import Expr
from ssalower.types import IFACE_LL, Kind, Type

if TYPE_CHECKING:
    from ssalower.builder import Builder


def check_expr(b: Builder, x: Expr, t: Type) -> Expr:
    """Return ``x`` converted to type ``t``, emitting conversions at the cursor."""
    src = x.type
    if src == t:
        return x
    if src is None:
        raise CoercionError(f"cannot use void value as {t}")
    if src.kind in (Kind.INT, Kind.UINT) and t.kind in (Kind.INT, Kind.UINT):
        return _int_to_int(b, x, t)
    if src.kind in (Kind.INT, Kind.UINT) and t.kind is Kind.FLOAT:
        if src.kind is Kind.INT:
            return Expr(b.impl.sitofp(x.impl, t.ll), t)
        return Expr(b.impl.uitofp(x.impl, t.ll), t)
    if src.kind is Kind.FLOAT and t.kind is Kind.FLOAT:
        if src.bits < t.bits:
            return Expr(b.impl.fpext(x.impl, t.ll), t)
        raise CoercionError(f"cannot narrow {src} to {t}")
    if src.kind is Kind.POINTER and t.kind is Kind.POINTER:
        return Expr(x.impl, t)
    if src.kind is Kind.POINTER and t.kind is Kind.INTERFACE:
        return make_interface(b, x, t)
    if src.kind is Kind.INTERFACE and t.kind is Kind.INTERFACE:
        return Expr(x.impl, t)
    raise CoercionError(f"cannot use {src} as {t}")


def _int_to_int(b: Builder, x: Expr, t: Type) -> Expr:
    src = x.type
    if src.bits == t.bits:
        return Expr(x.impl, t)
    if src.bits > t.bits:
        raise CoercionError(f"cannot narrow {src} to {t}")
    if src.kind is Kind.INT:
        return Expr(b.impl.sext(x.impl, t.ll), t)
    return Expr(b.impl.zext(x.impl, t.ll), t)


def make_interface(b: Builder, x: Expr, t: Type) -> Expr:
    """Box pointer ``x`` into interface ``t`` as {type descriptor, data}."""
    desc = b.pkg.type_descriptor(x.type)
    iface = ir.Constant(IFACE_LL, ir.Undefined)
    iface = b.impl.insert_value(iface, desc, 0)
    iface = b.impl.insert_value(iface, x.impl, 1)
    return Expr(iface, t)
