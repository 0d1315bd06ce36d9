"""
Error Kinds for parametric-tb
=============================

All errors surface synchronously to the caller of the triggering
operation. Each class also derives from the builtin exception a caller
would naturally catch (ValueError, TypeError, RuntimeError).
"""


class ParametricError(Exception):
    """Base class for parametric Hamiltonian errors."""


class StructuralConsistencyError(ParametricError, RuntimeError):
    """
    Working and original Hamiltonians have diverged structurally.

    Fatal: the ParametricHamiltonian must be rebuilt.
    """


class SelectorResolutionError(ParametricError, ValueError):
    """A selector references sublattices, sites or translations that do not exist."""


class MissingParameterError(ParametricError, TypeError):
    """A modifier was evaluated without one of its required parameters."""

    def __init__(self, missing, modifier=None):
        self.missing = tuple(missing)
        self.modifier = modifier
        names = ", ".join(self.missing)
        where = f" of {modifier!r}" if modifier is not None else ""
        super().__init__(f"Missing required parameter(s) {names}{where}")


class MissingStoredEntryError(ParametricError, ValueError):
    """A modifier needs a matrix slot that is not stored in the sparse structure."""
