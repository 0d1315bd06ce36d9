"""
Consistency Guard
=================

Checks that the working Hamiltonian of a ParametricHamiltonian still has
the sparsity of the frozen original, so that precompiled pointers remain
valid.

Modes:
  - cheap: harmonic counts only, O(1); run before every evaluation
  - full:  also stored counts, rowval, colptr and translations, O(nnz);
           opt-in

Any mismatch is fatal: the object is flagged inconsistent and every later
evaluation raises StructuralConsistencyError.
"""

import numpy as np

from .errors import StructuralConsistencyError


_MESSAGE = ("ParametricHamiltonian is not internally consistent, it may have "
            "been modified after creation")


def is_consistent(originalh, h, full: bool = True) -> bool:
    """
    Compare the structure of two Hamiltonians.

    Args:
        originalh: Frozen base Hamiltonian
        h: Working Hamiltonian
        full: Compare sparsity patterns, not just harmonic counts

    Returns:
        True if structurally identical at the requested depth
    """
    if len(originalh.harmonics) != len(h.harmonics):
        return False
    if not full:
        return True
    for ohar, har in zip(originalh.harmonics, h.harmonics):
        if ohar.dn != har.dn:
            return False
        if ohar.h.shape != har.h.shape:
            return False
        if ohar.nnz != har.nnz or len(har.nonzeros) != len(ohar.nonzeros):
            return False
        if not np.array_equal(ohar.rowval, har.rowval):
            return False
        if not np.array_equal(ohar.colptr, har.colptr):
            return False
    return True


def check_consistency(ph, full: bool = True) -> None:
    """
    Raise if a ParametricHamiltonian has drifted structurally.

    Args:
        ph: ParametricHamiltonian
        full: Run the full (O(nnz)) check instead of the cheap one

    Raises:
        StructuralConsistencyError: On any mismatch, or if the object was
            already flagged inconsistent by an earlier check
    """
    if not ph.is_consistent:
        raise StructuralConsistencyError(_MESSAGE)
    if not is_consistent(ph.originalh, ph.h, full=full):
        ph._mark_inconsistent()
        raise StructuralConsistencyError(_MESSAGE)
