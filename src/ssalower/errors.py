"""Exceptions raised while emitting instructions."""


class EmitError(Exception):
    """Base class for emission failures."""


class InvariantError(EmitError):
    """A compiler-internal invariant was broken by the driving SSA pass.

    Never raised for well-formed input; callers are not expected to recover.
    """


class CoercionError(EmitError, TypeError):
    """A value cannot be converted to the type required at a boundary."""
