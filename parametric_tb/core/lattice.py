"""
Lattice Geometry for parametric-tb
==================================

Bravais lattices with named sublattices.

Features:
  - Arbitrary embedding dimension E and lattice dimension L (L = 0 for
    finite clusters)
  - Named sublattices, resolved to site index sets
  - Site positions in any unit cell: r_i + A @ dn
  - Supercells along the Bravais directions

The lattice is referenced, never owned, by the Hamiltonians and
modifiers built on top of it.
"""

import numpy as np
from typing import List, Tuple, Optional, Sequence, Union


class Lattice:
    """
    Bravais lattice with a multi-site unit cell.

    Attributes:
        bravais: (E, L) matrix whose columns are the Bravais vectors
        sites: (N, E) site positions inside the unit cell
        sublat_of_site: (N,) sublattice index of each site
        sublat_names: Tuple of sublattice names

    Example:
        >>> lat = create_honeycomb()
        >>> print(lat.n_sites, lat.dim, lat.lattice_dim)
        2 2 2
        >>> lat.sublat_index('B')
        1
    """

    def __init__(self,
                 bravais,
                 sites,
                 sublats: Optional[Sequence[int]] = None,
                 names: Optional[Sequence[str]] = None):
        """
        Initialize a lattice.

        Args:
            bravais: Bravais vectors as columns, shape (E, L); an empty
                sequence gives a finite (L = 0) lattice
            sites: Site positions, shape (N, E)
            sublats: Sublattice index per site (default: all sites in 0)
            names: Sublattice names (default: 'A', 'B', ...)
        """
        self.sites = np.atleast_2d(np.asarray(sites, dtype=float))
        n_sites, dim = self.sites.shape

        bravais = np.asarray(bravais, dtype=float)
        if bravais.size == 0:
            bravais = np.zeros((dim, 0))
        elif bravais.ndim == 1:
            bravais = bravais.reshape(dim, -1)
        if bravais.shape[0] != dim:
            raise ValueError(
                f"Bravais vectors have dimension {bravais.shape[0]} but "
                f"sites live in {dim}D space"
            )
        self.bravais = bravais

        if sublats is None:
            sublats = np.zeros(n_sites, dtype=int)
        self.sublat_of_site = np.asarray(sublats, dtype=int)
        if self.sublat_of_site.shape != (n_sites,):
            raise ValueError(
                f"Expected {n_sites} sublattice indices, got {self.sublat_of_site.shape}"
            )

        n_sublats = int(self.sublat_of_site.max()) + 1 if n_sites else 0
        if names is None:
            names = [chr(ord('A') + s) for s in range(n_sublats)]
        self.sublat_names = tuple(str(name) for name in names)
        if len(self.sublat_names) < n_sublats:
            raise ValueError(
                f"{n_sublats} sublattices used but only {len(self.sublat_names)} names given"
            )

    # =========================================================================
    # Dimensions
    # =========================================================================

    @property
    def n_sites(self) -> int:
        """Number of sites in the unit cell"""
        return self.sites.shape[0]

    @property
    def dim(self) -> int:
        """Embedding (space) dimension E"""
        return self.sites.shape[1]

    @property
    def lattice_dim(self) -> int:
        """Number of Bravais vectors L"""
        return self.bravais.shape[1]

    @property
    def n_sublats(self) -> int:
        return len(self.sublat_names)

    def zero_cell(self) -> Tuple[int, ...]:
        """Translation index of the home unit cell."""
        return (0,) * self.lattice_dim

    # =========================================================================
    # Sites and sublattices
    # =========================================================================

    def position(self, i: int, dn: Optional[Sequence[int]] = None) -> np.ndarray:
        """
        Position of site i in unit cell dn.

        Args:
            i: Site index within the unit cell
            dn: Cell translation (length L, default: home cell)

        Returns:
            r_i + A @ dn
        """
        r = self.sites[i]
        if dn is None or len(dn) == 0 or self.lattice_dim == 0:
            return r.copy()
        return r + self.bravais @ np.asarray(dn, dtype=float)

    def sublat_index(self, name: Union[str, int]) -> int:
        """
        Resolve a sublattice name (or index) to its index.

        Raises:
            KeyError: If the sublattice does not exist
        """
        if isinstance(name, (int, np.integer)):
            if not 0 <= name < self.n_sublats:
                raise KeyError(f"Sublattice index {name} out of range 0..{self.n_sublats - 1}")
            return int(name)
        try:
            return self.sublat_names.index(str(name))
        except ValueError:
            raise KeyError(
                f"Unknown sublattice '{name}'. Available: {self.sublat_names}"
            ) from None

    def sublat_sites(self, name: Union[str, int]) -> np.ndarray:
        """Indices of the sites belonging to a sublattice."""
        s = self.sublat_index(name)
        return np.flatnonzero(self.sublat_of_site == s)

    # =========================================================================
    # Supercells
    # =========================================================================

    def supercell(self, *factors: int) -> 'Lattice':
        """
        Diagonal supercell, repeating the unit cell factors[i] times along
        Bravais vector i.

        A single factor is applied to every direction. Sites keep their
        sublattices; site order runs over cells first, then over the
        original sites.

        Args:
            factors: Repetitions per Bravais direction

        Returns:
            New Lattice with scaled Bravais vectors
        """
        L = self.lattice_dim
        if L == 0:
            raise ValueError("Cannot build a supercell of a finite (L = 0) lattice")
        if len(factors) == 1:
            factors = factors * L
        if len(factors) != L:
            raise ValueError(f"Expected {L} supercell factors, got {len(factors)}")
        if any(int(f) < 1 for f in factors):
            raise ValueError(f"Supercell factors must be positive, got {factors}")

        cells = np.array(np.meshgrid(*[np.arange(int(f)) for f in factors],
                                     indexing='ij')).reshape(L, -1).T
        positions = []
        sublats = []
        for cell in cells:
            shift = self.bravais @ cell
            positions.append(self.sites + shift)
            sublats.append(self.sublat_of_site)

        bravais = self.bravais * np.asarray(factors, dtype=float)[None, :]
        return Lattice(bravais, np.vstack(positions),
                       np.concatenate(sublats), self.sublat_names)

    def __repr__(self) -> str:
        return (f"Lattice({self.lattice_dim}D lattice in {self.dim}D space, "
                f"sites={self.n_sites}, sublats={self.sublat_names})")


# =============================================================================
# Factory Functions
# =============================================================================

def linear_chain(a: float = 1.0) -> Lattice:
    """
    Create a 1D Bravais chain with a single site per cell.

    Args:
        a: Lattice constant
    """
    return Lattice([[a]], [[0.0]])


def create_chain(L: int, a: float = 1.0, periodic: bool = False) -> Lattice:
    """
    Create a 1D chain of L sites.

    Args:
        L: Number of sites
        a: Lattice constant
        periodic: Periodic chain (one Bravais vector of length L * a) instead
            of a finite cluster

    Returns:
        Lattice with L sites in the unit cell
    """
    if L < 1:
        raise ValueError(f"Chain needs at least one site, got L={L}")
    if periodic:
        return linear_chain(a).supercell(L)
    sites = [[a * i] for i in range(L)]
    return Lattice([], sites)


def create_square_lattice(Lx: int, Ly: int,
                          a: float = 1.0,
                          periodic_x: bool = False,
                          periodic_y: bool = False) -> Lattice:
    """
    Create an Lx x Ly square patch.

    Periodic directions become Bravais vectors of the patch.

    Site ordering: row-major (y * Lx + x)

    Args:
        Lx, Ly: Patch dimensions
        a: Lattice constant
        periodic_x, periodic_y: Boundary conditions

    Returns:
        Lattice with Lx * Ly sites in the unit cell
    """
    if Lx < 1 or Ly < 1:
        raise ValueError(f"Square lattice needs Lx, Ly >= 1, got {Lx}x{Ly}")
    sites = [[a * x, a * y] for y in range(Ly) for x in range(Lx)]
    vectors: List[List[float]] = []
    if periodic_x:
        vectors.append([a * Lx, 0.0])
    if periodic_y:
        vectors.append([0.0, a * Ly])
    bravais = np.array(vectors).T if vectors else []
    return Lattice(bravais, sites)


def create_honeycomb(a0: float = 1.0) -> Lattice:
    """
    Create the honeycomb lattice with sublattices A and B.

    Args:
        a0: Nearest-neighbour distance

    Returns:
        2D Lattice with two sites per unit cell
    """
    a = a0 * np.sqrt(3.0)
    bravais = np.array([[a, 0.5 * a],
                        [0.0, 0.5 * np.sqrt(3.0) * a]])
    sites = [[0.0, -0.5 * a0], [0.0, 0.5 * a0]]
    return Lattice(bravais, sites, [0, 1], ('A', 'B'))
