"""
Selectors
=========

Predicates deciding which stored matrix entries a modifier may touch.

A selector is tested on a pair of sites and a pair of cells:

    matches(lattice, (row, col), (dn, dn0))

meaning "the amplitude from site col in cell dn0 to site row in cell dn".
Only the relative translation dn - dn0 enters, so the geometry is
expressed with the source in the home cell:

    r_src = r_col
    r_dst = r_row + A @ (dn - dn0)
    dr    = r_dst - r_src
    r     = (r_dst + r_src) / 2

Unresolved selectors (SiteSelector, HopSelector) name sublattices by
name; resolve(lattice) checks every reference and returns an immutable
resolved selector. Resolution fails fast with SelectorResolutionError.
"""

import numpy as np
from typing import Optional, Tuple, Callable, Sequence, Union, FrozenSet
from dataclasses import dataclass

from .lattice import Lattice
from .errors import SelectorResolutionError


Translation = Tuple[int, ...]


def pair_geometry(lattice: Lattice, row: int, col: int,
                  dn: Sequence[int], dn0: Sequence[int]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Bond midpoint r and displacement dr of the pair (row, dn) <- (col, dn0).

    Returns:
        (r, dr) with dr = r_dst - r_src
    """
    rel = tuple(int(a) - int(b) for a, b in zip(dn, dn0))
    r_src = lattice.position(col)
    r_dst = lattice.position(row, rel)
    return (r_dst + r_src) / 2, r_dst - r_src


def _relative(dn: Sequence[int], dn0: Sequence[int]) -> Translation:
    return tuple(int(a) - int(b) for a, b in zip(dn, dn0))


def _as_tuple(value) -> Optional[tuple]:
    if value is None:
        return None
    if isinstance(value, (str, int, np.integer)):
        return (value,)
    return tuple(value)


# =============================================================================
# Site selectors
# =============================================================================

@dataclass(frozen=True)
class SiteSelector:
    """
    Onsite selector (unresolved).

    Attributes:
        region: Predicate region(r) on the site position
        sublats: Sublattice names/indices to include
        indices: Explicit site indices to include
    """
    region: Optional[Callable] = None
    sublats: Optional[Tuple] = None
    indices: Optional[Tuple[int, ...]] = None

    forcehermitian = False

    def resolve(self, lattice: Lattice) -> 'ResolvedSiteSelector':
        sublats = None
        if self.sublats is not None:
            try:
                sublats = frozenset(lattice.sublat_index(s) for s in _as_tuple(self.sublats))
            except KeyError as e:
                raise SelectorResolutionError(f"Site selector: {e.args[0]}") from None

        indices = None
        if self.indices is not None:
            indices = frozenset(int(i) for i in _as_tuple(self.indices))
            bad = sorted(i for i in indices if not 0 <= i < lattice.n_sites)
            if bad:
                raise SelectorResolutionError(
                    f"Site selector references sites {bad} but the lattice has "
                    f"{lattice.n_sites} sites"
                )

        return ResolvedSiteSelector(lattice, self.region, sublats, indices)


@dataclass(frozen=True)
class ResolvedSiteSelector:
    """SiteSelector bound to a lattice."""
    lattice: Lattice
    region: Optional[Callable]
    sublats: Optional[FrozenSet[int]]
    indices: Optional[FrozenSet[int]]

    forcehermitian = False

    def matches(self, lattice: Lattice, pair: Tuple[int, int],
                cells: Tuple[Sequence[int], Sequence[int]]) -> bool:
        row, col = pair
        dn, dn0 = cells
        if row != col or any(_relative(dn, dn0)):
            return False
        if self.indices is not None and col not in self.indices:
            return False
        if self.sublats is not None and int(lattice.sublat_of_site[col]) not in self.sublats:
            return False
        if self.region is not None and not self.region(lattice.position(col)):
            return False
        return True

    __call__ = matches


# =============================================================================
# Hopping selectors
# =============================================================================

@dataclass(frozen=True)
class HopSelector:
    """
    Hopping selector (unresolved).

    Attributes:
        region: Predicate region(r, dr) on bond midpoint and displacement
        sublats: (source, target) sublattice pairs to include
        dns: Relative translations dn - dn0 to include
        range: Maximum hopping distance, or a (min, max) window
        forcehermitian: Also update the adjoint of every selected hop
    """
    region: Optional[Callable] = None
    sublats: Optional[Tuple] = None
    dns: Optional[Tuple] = None
    range: Optional[Union[float, Tuple[float, float]]] = None
    forcehermitian: bool = True

    def resolve(self, lattice: Lattice) -> 'ResolvedHopSelector':
        sublats = None
        if self.sublats is not None:
            pairs = self.sublats
            if len(pairs) == 2 and not isinstance(pairs[0], (tuple, list)):
                pairs = (tuple(pairs),)
            try:
                sublats = frozenset((lattice.sublat_index(src), lattice.sublat_index(dst))
                                    for src, dst in pairs)
            except KeyError as e:
                raise SelectorResolutionError(f"Hopping selector: {e.args[0]}") from None
            except (TypeError, ValueError):
                raise SelectorResolutionError(
                    f"Hopping selector sublats must be (source, target) pairs, got {self.sublats}"
                ) from None

        dns = None
        if self.dns is not None:
            raw = self.dns
            if len(raw) and not isinstance(raw[0], (tuple, list, np.ndarray)):
                raw = (raw,)
            dns = frozenset(tuple(int(n) for n in dn) for dn in raw)
            bad = [dn for dn in dns if len(dn) != lattice.lattice_dim]
            if bad:
                raise SelectorResolutionError(
                    f"Hopping selector translations {bad} do not match lattice "
                    f"dimension {lattice.lattice_dim}"
                )

        rmin, rmax = 0.0, np.inf
        if self.range is not None:
            if np.ndim(self.range) == 0:
                rmax = float(self.range)
            else:
                rmin, rmax = (float(x) for x in self.range)
            if rmin < 0 or rmax < rmin:
                raise SelectorResolutionError(f"Invalid hopping range {self.range}")

        return ResolvedHopSelector(lattice, self.region, sublats, dns, rmin, rmax,
                                   self.forcehermitian)


@dataclass(frozen=True)
class ResolvedHopSelector:
    """HopSelector bound to a lattice."""
    lattice: Lattice
    region: Optional[Callable]
    sublats: Optional[FrozenSet[Tuple[int, int]]]
    dns: Optional[FrozenSet[Translation]]
    rmin: float
    rmax: float
    forcehermitian: bool
    tol: float = 1e-8

    def matches(self, lattice: Lattice, pair: Tuple[int, int],
                cells: Tuple[Sequence[int], Sequence[int]]) -> bool:
        row, col = pair
        dn, dn0 = cells
        rel = _relative(dn, dn0)
        if row == col and not any(rel):
            return False
        if self.dns is not None and rel not in self.dns:
            return False
        if self.sublats is not None:
            key = (int(lattice.sublat_of_site[col]), int(lattice.sublat_of_site[row]))
            if key not in self.sublats:
                return False
        if self.region is None and self.rmin == 0 and not np.isfinite(self.rmax):
            return True
        r, dr = pair_geometry(lattice, row, col, dn, dn0)
        dist = float(np.linalg.norm(dr))
        if dist < self.rmin - self.tol or dist > self.rmax + self.tol:
            return False
        if self.region is not None and not self.region(r, dr):
            return False
        return True

    __call__ = matches


def siteselector(region=None, sublats=None, indices=None) -> SiteSelector:
    """Convenience constructor normalizing sequences to tuples."""
    return SiteSelector(region, _as_tuple(sublats), _as_tuple(indices))


def hopselector(region=None, sublats=None, dns=None, range=None,
                forcehermitian: bool = True) -> HopSelector:
    """Convenience constructor normalizing sequences to tuples."""
    if sublats is not None:
        sublats = tuple(tuple(p) if isinstance(p, (list, tuple)) else p for p in sublats)
    if dns is not None:
        dns = tuple(tuple(d) if isinstance(d, (list, tuple, np.ndarray)) else d for d in dns)
    if range is not None and np.ndim(range) > 0:
        range = tuple(range)
    return HopSelector(region, sublats, dns, range, forcehermitian)
