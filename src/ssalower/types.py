"""Source-level types and their llvmlite representations."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from llvmlite import ir

VOID_PTR = ir.IntType(8).as_pointer()
IFACE_LL = ir.LiteralStructType([VOID_PTR, VOID_PTR])


class Kind(enum.Enum):
    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    POINTER = "pointer"
    INTERFACE = "interface"
    TUPLE = "tuple"
    SIGNATURE = "signature"


class Type:
    """Base for source types. ``ll`` is the backend representation."""

    kind: Kind

    @property
    def ll(self) -> ir.Type:
        raise NotImplementedError


@dataclass(frozen=True)
class Basic(Type):
    name: str
    kind: Kind
    bits: int

    @property
    def ll(self) -> ir.Type:
        if self.kind is Kind.FLOAT:
            return ir.FloatType() if self.bits == 32 else ir.DoubleType()
        return ir.IntType(self.bits)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Pointer(Type):
    elem: Type

    kind = Kind.POINTER

    @property
    def ll(self) -> ir.Type:
        return VOID_PTR

    def __str__(self) -> str:
        return f"*{self.elem}"


@dataclass(frozen=True)
class Interface(Type):
    name: str = "any"

    kind = Kind.INTERFACE

    @property
    def ll(self) -> ir.Type:
        return IFACE_LL

    def __str__(self) -> str:
        return self.name


class Tuple(Type):
    """Result type of an instruction producing several values."""

    kind = Kind.TUPLE

    def __init__(self, *elems: Type):
        self.elems = tuple(elems)

    def __len__(self) -> int:
        return len(self.elems)

    def __getitem__(self, i: int) -> Type:
        return self.elems[i]

    def __eq__(self, other) -> bool:
        return isinstance(other, Tuple) and self.elems == other.elems

    def __hash__(self) -> int:
        return hash(("tuple", self.elems))

    @property
    def ll(self) -> ir.Type:
        return ir.LiteralStructType([t.ll for t in self.elems])

    def __str__(self) -> str:
        return "(" + ", ".join(str(t) for t in self.elems) + ")"


class Signature(Type):

    kind = Kind.SIGNATURE

    def __init__(self, params=(), results=()):
        self.params = tuple(params)
        self.results = tuple(results)

    def __eq__(self, other) -> bool:
        return (isinstance(other, Signature) and self.params == other.params
                and self.results == other.results)

    def __hash__(self) -> int:
        return hash(("func", self.params, self.results))

    @property
    def result_type(self) -> Type | None:
        """None for no results, the type itself for one, a Tuple otherwise."""
        if not self.results:
            return None
        if len(self.results) == 1:
            return self.results[0]
        return Tuple(*self.results)

    @property
    def ll_ret(self) -> ir.Type:
        ret = self.result_type
        return ir.VoidType() if ret is None else ret.ll

    @property
    def ll(self) -> ir.FunctionType:
        return ir.FunctionType(self.ll_ret, [p.ll for p in self.params])

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.params)
        if not self.results:
            return f"func({params})"
        if len(self.results) == 1:
            return f"func({params}) {self.results[0]}"
        return f"func({params}) {Tuple(*self.results)}"


Bool = Basic("bool", Kind.BOOL, 1)
Int8 = Basic("int8", Kind.INT, 8)
Int16 = Basic("int16", Kind.INT, 16)
Int32 = Basic("int32", Kind.INT, 32)
Int64 = Basic("int64", Kind.INT, 64)
Int = Basic("int", Kind.INT, 64)
Uint8 = Basic("uint8", Kind.UINT, 8)
Uint16 = Basic("uint16", Kind.UINT, 16)
Uint32 = Basic("uint32", Kind.UINT, 32)
Uint64 = Basic("uint64", Kind.UINT, 64)
Uintptr = Basic("uintptr", Kind.UINT, 64)
Float32 = Basic("float32", Kind.FLOAT, 32)
Float64 = Basic("float64", Kind.FLOAT, 64)

ANY = Interface()
