"""Registry of runtime support functions callable from emitted code."""

from __future__ import annotations

from ssalower import types
from ssalower.types import Signature


class RuntimeRegistry:
    """Logical name to signature map for runtime support functions.

    Populated at import time and only read during emission.
    """

    _funcs: dict[str, Signature] = {}

    @classmethod
    def register(cls, name: str, sig: Signature) -> Signature:
        cls._funcs[name] = sig
        return sig

    @classmethod
    def get(cls, name: str) -> Signature | None:
        return cls._funcs.get(name)

    @classmethod
    def all_funcs(cls) -> dict[str, Signature]:
        return dict(cls._funcs)


# Records the panic value and unwinds; never returns.
RuntimeRegistry.register("TracePanic", Signature([types.ANY], []))
