"""
Pointer-Data Compiler
=====================

One-time pass recording, for each modifier and each harmonic, which
stored slots the modifier rewrites and the geometry it needs there.

Pointer data are a tagged union, one variant per ModifierKind:

    UniformDatum(pointer)          -> f(v)
    OnsiteDatum(pointer, r)        -> f(v, r)
    HoppingDatum(pointer, r, dr)   -> f(v, r, dr)

with pointer = Pointer(location, is_adjoint). An adjoint pointer marks a
slot holding the Hermitian conjugate of a selected element: the modifier
sees the conjugated original value and its result is conjugated back
before being written.

Cost: O(nnz) selector calls per modifier, paid once at construction.
"""

import numpy as np
from typing import List, NamedTuple, Sequence, Union

from .hamiltonian import Hamiltonian
from .harmonics import flip
from .modifiers import ElementModifier, ModifierKind
from .selectors import pair_geometry
from .errors import MissingStoredEntryError


class Pointer(NamedTuple):
    """Slot in the nonzeros array and adjoint flag"""
    location: int
    is_adjoint: bool = False

    def read(self, values: np.ndarray):
        v = values[self.location]
        return np.conj(v) if self.is_adjoint else v

    def write(self, values: np.ndarray, v):
        values[self.location] = np.conj(v) if self.is_adjoint else v


class UniformDatum(NamedTuple):
    pointer: Pointer

    def args(self, values: np.ndarray) -> tuple:
        return (self.pointer.read(values),)


class OnsiteDatum(NamedTuple):
    pointer: Pointer
    r: np.ndarray

    def args(self, values: np.ndarray) -> tuple:
        return (self.pointer.read(values), self.r)


class HoppingDatum(NamedTuple):
    pointer: Pointer
    r: np.ndarray
    dr: np.ndarray

    def args(self, values: np.ndarray) -> tuple:
        return (self.pointer.read(values), self.r, self.dr)


PointerDatum = Union[UniformDatum, OnsiteDatum, HoppingDatum]


def make_datum(kind: ModifierKind, lattice, location: int, is_adjoint: bool,
               pair, cells) -> PointerDatum:
    """
    Build the datum variant of a modifier kind.

    Args:
        kind: Modifier kind
        lattice: Lattice for positions
        location: Pointer into the nonzeros array
        is_adjoint: Slot holds the adjoint of the selected element
        pair: (row, col) of the selected element
        cells: (dn, dn0) of the selected element
    """
    pointer = Pointer(int(location), bool(is_adjoint))
    if kind is ModifierKind.UNIFORM:
        return UniformDatum(pointer)
    row, col = pair
    if kind is ModifierKind.ONSITE:
        return OnsiteDatum(pointer, lattice.position(col))
    r, dr = pair_geometry(lattice, row, col, *cells)
    return HoppingDatum(pointer, r, dr)


def compile_pointer_data(hamiltonian: Hamiltonian,
                         modifier: ElementModifier,
                         check_hermitian_partners: bool = True) -> List[List[PointerDatum]]:
    """
    Scan every stored slot of every harmonic against a resolved modifier.

    For a stored pointer p at (row, col) in harmonic dn:
      1. if selector(row, col, (dn, 0)) holds, record Pointer(p)
      2. if forcehermitian and selector(col, row, (0, dn)) holds, record
         Pointer(p, is_adjoint=True) with the geometry of the reversed pair

    The Hamiltonian must already be normalized (Hamiltonian.optimize).

    Args:
        hamiltonian: Base Hamiltonian
        modifier: Resolved ElementModifier
        check_hermitian_partners: For forcehermitian modifiers, require a
            stored slot (col, row, -dn) for every selected (row, col, dn)

    Returns:
        One list of pointer data per harmonic, in harmonic order

    Raises:
        MissingStoredEntryError: A selected hop has no stored Hermitian partner
    """
    if not modifier.is_resolved:
        raise ValueError(f"Modifier {modifier!r} must be resolved before compilation")

    lat = hamiltonian.lattice
    selector = modifier.selector
    mirror = bool(selector.forcehermitian)
    kind = modifier.kind
    zero = lat.zero_cell()

    all_data = []
    for har in hamiltonian.harmonics:
        data: List[PointerDatum] = []
        dn = har.dn
        rows = har.rowval
        primaries = []
        for col in range(har.ncols):
            for ptr in har.nzrange(col):
                row = int(rows[ptr])
                selected = selector.matches(lat, (row, col), (dn, zero))
                selected_adj = mirror and selector.matches(lat, (col, row), (zero, dn))
                if selected:
                    data.append(make_datum(kind, lat, ptr, False, (row, col), (dn, zero)))
                    primaries.append((row, col))
                if selected_adj:
                    data.append(make_datum(kind, lat, ptr, True, (col, row), (zero, dn)))
        if mirror and check_hermitian_partners and primaries:
            _check_partners(hamiltonian, dn, primaries, modifier)
        all_data.append(data)
    return all_data


def _check_partners(hamiltonian: Hamiltonian, dn, primaries, modifier):
    partner = hamiltonian.harmonic(flip(dn))
    for row, col in primaries:
        if partner is None or partner.pointer(col, row) is None:
            raise MissingStoredEntryError(
                f"{modifier!r} selects hop ({row}, {col}) in harmonic {dn}, but its "
                f"Hermitian partner ({col}, {row}) in harmonic {flip(dn)} is not stored. "
                f"Store an explicit (zero) entry there or use forcehermitian=False."
            )


def count_pointer_data(ptrdata: Sequence[Sequence[PointerDatum]]) -> int:
    """Total number of data over all harmonics."""
    return sum(len(data) for data in ptrdata)
