"""
Sparse Harmonic Store
=====================

One compressed-sparse-column matrix per lattice translation ("harmonic").

A Harmonic couples the home cell to the cell at translation dn: the
stored entry (row, col) is the amplitude from site col in cell 0 to site
row in cell dn.

Invariants kept by every helper in this module:
  - canonical CSC (rows sorted inside each column, no duplicates)
  - explicit zeros are never eliminated, so a stored slot stays a valid
    pointer target for the lifetime of the matrix
"""

import numpy as np
import scipy.sparse as sp
from typing import Tuple, Sequence, Optional
from dataclasses import dataclass


def csc_from_triplets(rows, cols, vals, shape: Tuple[int, int],
                      dtype=complex) -> sp.csc_matrix:
    """
    Build a canonical CSC matrix from (row, col, value) triplets.

    Duplicates are summed, explicit zeros are kept (scipy's converters may
    prune them, so the index arrays are assembled here directly).

    Args:
        rows, cols, vals: Triplet arrays of equal length
        shape: (n_rows, n_cols)
        dtype: Element type

    Returns:
        csc_matrix with sorted indices
    """
    n_rows, n_cols = shape
    rows = np.asarray(rows, dtype=np.int64)
    cols = np.asarray(cols, dtype=np.int64)
    vals = np.asarray(vals, dtype=dtype)

    if rows.size == 0:
        return sp.csc_matrix((np.zeros(0, dtype=dtype),
                              np.zeros(0, dtype=np.int32),
                              np.zeros(n_cols + 1, dtype=np.int32)),
                             shape=shape)

    if rows.min() < 0 or rows.max() >= n_rows or cols.min() < 0 or cols.max() >= n_cols:
        raise ValueError(f"Triplet indices out of bounds for shape {shape}")

    keys = cols * n_rows + rows
    unique_keys, inverse = np.unique(keys, return_inverse=True)
    data = np.zeros(unique_keys.size, dtype=dtype)
    np.add.at(data, inverse, vals)

    indices = (unique_keys % n_rows).astype(np.int32)
    counts = np.bincount(unique_keys // n_rows, minlength=n_cols)
    indptr = np.concatenate(([0], np.cumsum(counts))).astype(np.int32)

    return sp.csc_matrix((data, indices, indptr), shape=shape)


def structurally_equal(a: sp.csc_matrix, b: sp.csc_matrix) -> bool:
    """True if both matrices have identical colptr and rowval."""
    return (a.shape == b.shape
            and np.array_equal(a.indptr, b.indptr)
            and np.array_equal(a.indices, b.indices))


@dataclass
class Harmonic:
    """
    Block of a Hamiltonian for one lattice translation.

    Attributes:
        dn: Translation index (tuple of L ints)
        h: Sparse block, scipy csc_matrix
    """
    dn: Tuple[int, ...]
    h: sp.csc_matrix

    def __post_init__(self):
        self.dn = tuple(int(n) for n in self.dn)
        if not sp.isspmatrix_csc(self.h):
            self.h = sp.csc_matrix(self.h)

    # =========================================================================
    # CSC accessors
    # =========================================================================

    @property
    def ncols(self) -> int:
        return self.h.shape[1]

    @property
    def colptr(self) -> np.ndarray:
        return self.h.indptr

    @property
    def rowval(self) -> np.ndarray:
        return self.h.indices

    @property
    def nonzeros(self) -> np.ndarray:
        return self.h.data

    @property
    def nnz(self) -> int:
        """Number of stored entries (explicit zeros included)"""
        return int(self.h.indptr[-1])

    def nzrange(self, col: int) -> range:
        """Pointers of the stored entries in column col."""
        return range(int(self.h.indptr[col]), int(self.h.indptr[col + 1]))

    def pointer(self, row: int, col: int) -> Optional[int]:
        """
        Pointer of the stored entry (row, col), or None if not stored.

        Rows are sorted inside each column, so this is a binary search.
        """
        start, stop = int(self.h.indptr[col]), int(self.h.indptr[col + 1])
        k = start + int(np.searchsorted(self.h.indices[start:stop], row))
        if k < stop and self.h.indices[k] == row:
            return k
        return None

    def is_zero_cell(self) -> bool:
        return not any(self.dn)

    # =========================================================================
    # Normalization and cloning
    # =========================================================================

    def copy(self) -> 'Harmonic':
        """Structural clone with independently owned arrays."""
        h = sp.csc_matrix((self.h.data.copy(), self.h.indices.copy(), self.h.indptr.copy()),
                          shape=self.h.shape)
        return Harmonic(self.dn, h)

    def canonicalize(self):
        """Sort rows and merge duplicates in place, keeping explicit zeros."""
        if not self.h.has_canonical_format:
            coo = self.h.tocoo()
            self.h = csc_from_triplets(coo.row, coo.col, coo.data, self.h.shape,
                                       dtype=self.h.dtype)
        return self

    def add_structural_diagonal(self):
        """
        Store an explicit (possibly zero) diagonal entry in every column.

        Matrix values are unchanged; only the stored count may grow.
        """
        n = min(self.h.shape)
        coo = self.h.tocoo()
        diag = np.arange(n)
        rows = np.concatenate([coo.row, diag])
        cols = np.concatenate([coo.col, diag])
        vals = np.concatenate([coo.data, np.zeros(n, dtype=self.h.dtype)])
        self.h = csc_from_triplets(rows, cols, vals, self.h.shape, dtype=self.h.dtype)
        return self

    def __repr__(self) -> str:
        return f"Harmonic(dn={self.dn}, shape={self.h.shape}, nnz={self.nnz})"


def flip(dn: Sequence[int]) -> Tuple[int, ...]:
    """Opposite translation -dn."""
    return tuple(-int(n) for n in dn)
