"""
Tight-Binding Hamiltonians for parametric-tb
============================================

Sparse Hamiltonians on Bravais lattices, stored as one harmonic per
translation.

    H(φ) = Σ_dn h_dn exp(i φ·dn)

Key Features:
  - Harmonic store with CSC blocks (see harmonics.py)
  - Onsite/hopping builder with a KD-tree neighbour search
  - Sparsity normalization (optimize) for pointer-based updates
  - Element counts (onsites, hoppings, coordination) and text summary
  - Bloch sums H(φ)
"""

import itertools
import numpy as np
from typing import List, Tuple, Optional, Union, Callable, Sequence
from dataclasses import dataclass
from scipy.spatial import cKDTree

from .lattice import Lattice
from .harmonics import Harmonic, csc_from_triplets, flip


# =============================================================================
# Hamiltonian
# =============================================================================

class Hamiltonian:
    """
    Tight-binding Hamiltonian on a lattice.

    Attributes:
        lattice: Lattice the Hamiltonian lives on
        harmonics: Ordered list of Harmonic blocks; the zero harmonic
            (intra-cell block) is kept first

    Example:
        >>> lat = create_chain(4)
        >>> h = build_hamiltonian(lat, onsite=0.0, hopping=1.0)
        >>> h.size
        (4, 4)
    """

    def __init__(self, lattice: Lattice, harmonics: Sequence[Harmonic]):
        self.lattice = lattice
        self.harmonics: List[Harmonic] = list(harmonics)
        n = lattice.n_sites
        for har in self.harmonics:
            if har.h.shape != (n, n):
                raise ValueError(
                    f"Harmonic {har.dn} has shape {har.h.shape}, expected {(n, n)}"
                )
            if len(har.dn) != lattice.lattice_dim:
                raise ValueError(
                    f"Harmonic translation {har.dn} does not match lattice dimension "
                    f"{lattice.lattice_dim}"
                )
        # Zero harmonic first
        self.harmonics.sort(key=lambda har: not har.is_zero_cell())

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def size(self) -> Tuple[int, int]:
        n = self.lattice.n_sites
        return (n, n)

    @property
    def eltype(self) -> np.dtype:
        if self.harmonics:
            return self.harmonics[0].h.dtype
        return np.dtype(complex)

    @property
    def bravais(self) -> np.ndarray:
        return self.lattice.bravais

    def harmonic(self, dn: Sequence[int]) -> Optional[Harmonic]:
        """Harmonic with translation dn, or None."""
        dn = tuple(int(n) for n in dn)
        for har in self.harmonics:
            if har.dn == dn:
                return har
        return None

    def matrix(self, dn: Sequence[int] = None):
        """Sparse block of translation dn (default: zero harmonic)."""
        if dn is None:
            dn = self.lattice.zero_cell()
        har = self.harmonic(dn)
        if har is None:
            raise KeyError(f"No harmonic with dn={tuple(dn)}")
        return har.h

    def bloch(self, phi: Sequence[float] = None):
        """
        Bloch matrix H(φ) = Σ_dn h_dn exp(i φ·dn).

        Args:
            phi: Bloch phases, one per Bravais vector (default: Γ)

        Returns:
            Sparse csc_matrix of size n × n
        """
        L = self.lattice.lattice_dim
        phi = np.zeros(L) if phi is None else np.asarray(phi, dtype=float).ravel()
        if phi.size != L:
            raise ValueError(f"Expected {L} Bloch phases, got {phi.size}")
        total = None
        for har in self.harmonics:
            term = har.h * np.exp(1j * float(phi @ np.asarray(har.dn, dtype=float)))
            total = term if total is None else total + term
        if total is None:
            n = self.lattice.n_sites
            return csc_from_triplets([], [], [], (n, n), dtype=self.eltype)
        return total.tocsc()

    def count_onsites(self) -> int:
        """Stored diagonal entries of the zero harmonic."""
        har = self.harmonic(self.lattice.zero_cell())
        if har is None:
            return 0
        h = har.h
        cols = np.repeat(np.arange(h.shape[1]), np.diff(h.indptr))
        return int(np.count_nonzero(h.indices == cols))

    def count_hoppings(self) -> int:
        """Stored entries that are not onsites."""
        total = sum(har.nnz for har in self.harmonics)
        return total - self.count_onsites()

    def coordination(self) -> float:
        n = self.lattice.n_sites
        return self.count_hoppings() / n if n else 0.0

    # =========================================================================
    # Structure
    # =========================================================================

    def optimize(self) -> 'Hamiltonian':
        """
        Normalize sparsity before pointer compilation (in place).

        Canonicalizes every harmonic and stores an explicit (possibly zero)
        diagonal in the zero harmonic, creating it if needed. Values are
        unchanged; the stored count may grow.
        """
        for har in self.harmonics:
            har.canonicalize()
        zero = self.lattice.zero_cell()
        har0 = self.harmonic(zero)
        if har0 is None:
            n = self.lattice.n_sites
            har0 = Harmonic(zero, csc_from_triplets([], [], [], (n, n), dtype=self.eltype))
            self.harmonics.insert(0, har0)
        har0.add_structural_diagonal()
        return self

    def copy(self) -> 'Hamiltonian':
        """Structural clone; the lattice is shared."""
        return Hamiltonian(self.lattice, [har.copy() for har in self.harmonics])

    def is_structurally_hermitian(self) -> bool:
        """True if every stored (i, j, dn) has a stored partner (j, i, -dn)."""
        for har in self.harmonics:
            partner = self.harmonic(flip(har.dn))
            if partner is None:
                return False
            coo = har.h.tocoo()
            for i, j in zip(coo.row, coo.col):
                if partner.pointer(int(j), int(i)) is None:
                    return False
        return True

    # =========================================================================
    # Display
    # =========================================================================

    def summary_lines(self) -> List[str]:
        lat = self.lattice
        n = lat.n_sites
        dtype = self.eltype
        orbitals = tuple((name,) for name in lat.sublat_names)
        return [
            f"Hamiltonian on a {lat.lattice_dim}D Lattice in {lat.dim}D space",
            f"  Bloch harmonics  : {len(self.harmonics)} (csc_matrix, sparse)",
            f"  Harmonic size    : {n} × {n}",
            f"  Orbitals         : {orbitals}",
            f"  Element type     : scalar ({dtype})",
            f"  Onsites          : {self.count_onsites()}",
            f"  Hoppings         : {self.count_hoppings()}",
            f"  Coordination     : {self.coordination():.4g}",
        ]

    def summary(self) -> str:
        return "\n".join(self.summary_lines())

    def __str__(self) -> str:
        return self.summary()

    def __repr__(self) -> str:
        n = self.lattice.n_sites
        return f"Hamiltonian({n}×{n}, harmonics={len(self.harmonics)})"


# =============================================================================
# Builder
# =============================================================================

@dataclass
class BuilderConfig:
    """Settings for HamiltonianBuilder"""
    onsite: Union[complex, Callable] = 0.0
    hopping: Union[complex, Callable] = 1.0
    hop_range: Optional[float] = None  # default: nearest-neighbour distance
    dtype: type = complex
    tol: float = 1e-8
    verbose: bool = False


class HamiltonianBuilder:
    """
    Build a tight-binding Hamiltonian from an onsite/hopping model.

    Onsite and hopping terms are constants or callables:
        onsite(r) -> value
        hopping(r, dr) -> value
    with r the site position (onsite) or the bond midpoint (hopping) and
    dr = r_target - r_source.

    Neighbours within hop_range are found with a KD-tree per Bravais
    translation, so the cost is O(N log N) per harmonic.
    """

    def __init__(self, lattice: Lattice, config: Optional[BuilderConfig] = None):
        self.lattice = lattice
        self.config = config or BuilderConfig()

    def nearest_neighbour_distance(self) -> float:
        """Smallest non-zero site separation (including neighbour cells)."""
        lat = self.lattice
        tol = self.config.tol
        best = np.inf
        tree = cKDTree(lat.sites)
        for dn in self._translations(1):
            shifted = lat.sites + (lat.bravais @ np.asarray(dn, dtype=float)
                                   if lat.lattice_dim else 0.0)
            k = min(2, lat.n_sites)
            dists, _ = tree.query(shifted, k=k)
            dists = np.asarray(dists).reshape(len(shifted), -1)
            valid = dists[dists > tol]
            if valid.size:
                best = min(best, float(valid.min()))
        if not np.isfinite(best):
            raise ValueError("Lattice has no pair of distinct sites to define a hopping range")
        return best

    def _translations(self, ncells: int):
        L = self.lattice.lattice_dim
        return itertools.product(range(-ncells, ncells + 1), repeat=L)

    def _cells_needed(self, hop_range: float) -> int:
        lat = self.lattice
        if lat.lattice_dim == 0:
            return 0
        lengths = np.linalg.norm(lat.bravais, axis=0)
        extent = np.ptp(lat.sites, axis=0).max() if lat.n_sites > 1 else 0.0
        return int(np.ceil((hop_range + extent) / lengths.min())) + 1

    def build(self) -> Hamiltonian:
        """
        Assemble all harmonics.

        Returns:
            Hamiltonian with one CSC harmonic per translation that carries
            at least one entry
        """
        cfg = self.config
        lat = self.lattice
        n = lat.n_sites
        hop_range = cfg.hop_range if cfg.hop_range is not None else self.nearest_neighbour_distance()

        if cfg.verbose:
            print(f"🔨 Building Hamiltonian: {n} sites, range={hop_range:.4g}")

        tree = cKDTree(lat.sites)
        harmonics = []
        for dn in self._translations(self._cells_needed(hop_range)):
            rows, cols, vals = [], [], []
            is_zero = not any(dn)
            shift = lat.bravais @ np.asarray(dn, dtype=float) if lat.lattice_dim else 0.0
            targets = lat.sites + shift

            if is_zero:
                for i in range(n):
                    v = cfg.onsite(lat.sites[i]) if callable(cfg.onsite) else cfg.onsite
                    if v != 0:
                        rows.append(i); cols.append(i); vals.append(v)

            neighbours = tree.query_ball_point(targets, r=hop_range + cfg.tol)
            for i, sources in enumerate(neighbours):
                for j in sources:
                    if is_zero and i == j:
                        continue
                    r_src, r_dst = lat.sites[j], targets[i]
                    v = (cfg.hopping((r_src + r_dst) / 2, r_dst - r_src)
                         if callable(cfg.hopping) else cfg.hopping)
                    if v != 0:
                        rows.append(i); cols.append(j); vals.append(v)

            if rows or is_zero:
                h = csc_from_triplets(rows, cols, vals, (n, n), dtype=cfg.dtype)
                harmonics.append(Harmonic(dn, h))

        ham = Hamiltonian(lat, harmonics)
        if cfg.verbose:
            print(f"   ✅ Built: {len(ham.harmonics)} harmonics, "
                  f"nnz={sum(har.nnz for har in ham.harmonics):,}")
        return ham


def build_hamiltonian(lattice: Lattice,
                      onsite: Union[complex, Callable] = 0.0,
                      hopping: Union[complex, Callable] = 1.0,
                      hop_range: Optional[float] = None,
                      dtype: type = complex,
                      verbose: bool = False) -> Hamiltonian:
    """
    Factory function for tight-binding Hamiltonians.

    Args:
        lattice: Lattice geometry
        onsite: Onsite energy, constant or f(r)
        hopping: Hopping amplitude, constant or f(r, dr)
        hop_range: Maximum hopping distance (default: nearest neighbours)
        dtype: Element type
        verbose: Print progress

    Returns:
        Hamiltonian

    Example:
        >>> h = build_hamiltonian(create_chain(10), onsite=0.0, hopping=1.0)
    """
    config = BuilderConfig(onsite=onsite, hopping=hopping, hop_range=hop_range,
                           dtype=dtype, verbose=verbose)
    return HamiltonianBuilder(lattice, config).build()
